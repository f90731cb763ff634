"""Export Todoist projects as nested org-mode outlines."""
from __future__ import annotations

from .errors import (
    CyclicHierarchy,
    DuplicateIdentifier,
    ExportError,
    ExternalError,
    UnresolvedWriterTarget,
)
from .models import Project, Task
from .render import project_filename, render_project, render_task
from .tree import build_forest

__version__ = "0.1.0"

__all__ = [
    "CyclicHierarchy",
    "DuplicateIdentifier",
    "ExportError",
    "ExternalError",
    "Project",
    "Task",
    "UnresolvedWriterTarget",
    "build_forest",
    "project_filename",
    "render_project",
    "render_task",
]
