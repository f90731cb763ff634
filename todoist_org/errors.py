"""Error taxonomy for a single project's export."""
from __future__ import annotations

from typing import Iterable, Optional


class ExportError(Exception):
    """Base class; carries the id of the project it belongs to, when known."""

    kind = "export_error"

    def __init__(self, message: str, *, project_id: Optional[str] = None):
        super().__init__(message)
        self.project_id = project_id

    def for_project(self, project_id: str) -> "ExportError":
        if self.project_id is None:
            self.project_id = project_id
        return self


class CyclicHierarchy(ExportError):
    kind = "cyclic_hierarchy"

    def __init__(self, task_id: str, *, project_id: Optional[str] = None):
        super().__init__(f"task {task_id} is its own ancestor", project_id=project_id)
        self.task_id = task_id


class DuplicateIdentifier(ExportError):
    kind = "duplicate_identifier"

    def __init__(self, task_ids: Iterable[str], *, project_id: Optional[str] = None):
        self.task_ids = sorted(set(task_ids))
        super().__init__(f"duplicate task id(s): {', '.join(self.task_ids)}", project_id=project_id)


class UnresolvedWriterTarget(ExportError):
    kind = "unresolved_writer_target"

    def __init__(self, path: str, reason: str, *, project_id: Optional[str] = None):
        super().__init__(f"cannot write {path}: {reason}", project_id=project_id)
        self.path = path


class ExternalError(ExportError):
    """Fetch-side failure (HTTP status, transport, bad payload)."""

    kind = "external"
