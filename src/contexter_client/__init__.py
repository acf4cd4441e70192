"""Browse remote contexter projects and fetch the content of selected files."""

__version__ = "0.1.0"
