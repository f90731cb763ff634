"""
Org-mode rendering. Heading depth is the number of leading '*' and nothing else
structural is written out.
"""
from __future__ import annotations

import re
from typing import Optional

from .models import Project, Task

MARKER = "*"
PROJECT_WORD = "Project"
EXTENSION = ".org"


def normalize_content(content: str) -> str:
    # Content pasted from another outline already carries a heading prefix.
    prefix = MARKER + " "
    if content.startswith(prefix):
        return content[len(prefix):]
    return content


def render_task(task: Task, base_depth: int, *, todo_keyword: Optional[str] = None) -> str:
    keyword = f"{todo_keyword} " if todo_keyword else ""
    lines: list[str] = []
    for node in task.walk():
        stars = MARKER * (base_depth + node.depth + 1)
        lines.append(f"{stars} {keyword}{normalize_content(node.content)}")
        lines.append(node.description)
    return "\n".join(lines)


def render_project(project: Project, *, todo_keyword: Optional[str] = None) -> str:
    """One complete document: the project heading, then every root subtree."""
    parts = [f"{MARKER} {PROJECT_WORD} {project.name.strip()}"]
    parts.extend(render_task(root, 1, todo_keyword=todo_keyword) for root in project.tasks)
    return "\n".join(parts) + "\n"


def project_filename(name: str) -> str:
    return re.sub(r"[\s/\\]", "_", name.lower().strip()) + EXTENSION
