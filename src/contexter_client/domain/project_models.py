from __future__ import annotations

"""
Remote Project Data Models.

Typed views over the JSON documents returned by the project catalog
endpoints, plus the request body of a content fetch.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple


@dataclass(frozen=True)
class ProjectSummary:
    """
    Entry of the project listing.

    Attributes:
        name: Project identifier used in every project-scoped URL.
        path: Root directory of the project on the server, when reported.
    """
    name: str
    path: Optional[str] = None

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ProjectSummary":
        path = data.get("path")
        return cls(name=str(data["name"]), path=str(path) if path is not None else None)


@dataclass(frozen=True)
class ProjectMetadata:
    """
    Project details used to build the selection tree.

    Attributes:
        name: Project identifier.
        path: Root directory of the project on the server.
        files: Flat list of '/'-delimited paths relative to the root.
    """
    name: str
    path: str
    files: Tuple[str, ...] = ()

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ProjectMetadata":
        files = data.get("files") or []
        if not isinstance(files, list):
            raise ValueError("'files' must be a list")
        bad = [f for f in files if not isinstance(f, str)]
        if bad:
            raise ValueError(f"'files' entries must be strings, got {bad[0]!r}")
        return cls(
            name=str(data["name"]),
            path=str(data.get("path", "")),
            files=tuple(files),
        )


@dataclass(frozen=True)
class ContentRequest:
    """
    Body of a content fetch. An empty path list means the whole project.
    """
    paths: List[str] = field(default_factory=list)

    @property
    def is_whole_project(self) -> bool:
        return not self.paths

    def to_dict(self) -> Dict[str, Any]:
        return {"paths": list(self.paths)}
