from __future__ import annotations

"""
FileSystem Infrastructure Layer.

Resolves the per-user data directory that holds the settings file and
the diagnostic log, and writes fetched content to disk.
"""

import os

# -----------------------------------------------------------------------------
# GLOBAL CONSTANTS
# -----------------------------------------------------------------------------

APP_DIR_NAME = "ContexterClient"
UNIX_APP_DIR_NAME = ".contexter-client"

# -----------------------------------------------------------------------------
# PATH RESOLUTION API
# -----------------------------------------------------------------------------

def get_user_data_dir() -> str:
    """
    Resolve the OS-specific directory for persistent client data.

    Creates the directory if needed.
    - Windows: %LOCALAPPDATA%/ContexterClient
    - Linux/Mac: ~/.contexter-client

    Returns:
        str: Absolute path to the data directory.
    """
    path = ""

    if os.name == "nt":
        base = os.environ.get("LOCALAPPDATA") or os.environ.get("APPDATA")
        if base:
            path = os.path.join(base, APP_DIR_NAME)

    if not path:
        path = os.path.join(os.path.expanduser("~"), UNIX_APP_DIR_NAME)

    try:
        os.makedirs(path, exist_ok=True)
    except OSError:
        pass

    return os.path.abspath(path)


def write_text_file(dest_path: str, content: str) -> str:
    """
    Write text to disk as UTF-8, creating parent directories.

    Args:
        dest_path: Target file path.
        content: Text to write.

    Returns:
        str: Absolute path of the written file.
    """
    dest = os.path.abspath(os.path.expanduser(dest_path))
    parent = os.path.dirname(dest)
    if parent:
        os.makedirs(parent, exist_ok=True)
    with open(dest, "w", encoding="utf-8") as f:
        f.write(content)
    return dest
