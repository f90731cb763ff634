from __future__ import annotations

import dataclasses as dc
from typing import Any, Optional

# ---------- pass-through time fields ----------

@dc.dataclass
class Due:
    date: str
    is_recurring: bool = False
    datetime: Optional[str] = None
    string: str = ""
    timezone: Optional[str] = None
    lang: Optional[str] = None

    @classmethod
    def from_api(cls, d: Optional[dict[str, Any]]) -> Optional["Due"]:
        if not d:
            return None
        return cls(
            date=str(d.get("date", "")),
            is_recurring=bool(d.get("is_recurring")),
            datetime=d.get("datetime"),
            string=d.get("string") or "",
            timezone=d.get("timezone"),
            lang=d.get("lang"),
        )

@dc.dataclass
class Deadline:
    date: str
    lang: Optional[str] = None

    @classmethod
    def from_api(cls, d: Optional[dict[str, Any]]) -> Optional["Deadline"]:
        if not d:
            return None
        return cls(date=str(d.get("date", "")), lang=d.get("lang"))

@dc.dataclass
class Duration:
    amount: int
    unit: str

    @classmethod
    def from_api(cls, d: Optional[dict[str, Any]]) -> Optional["Duration"]:
        if not d:
            return None
        return cls(amount=int(d.get("amount", 0)), unit=str(d.get("unit", "")))

# ---------- tasks / projects ----------

def _opt_id(x: Any) -> Optional[str]:
    return None if x is None or x == "" else str(x)

@dc.dataclass
class Task:
    id: str
    content: str = ""
    description: str = ""
    parent_id: Optional[str] = None
    # Derived by tree.build_forest; any depth the API reports is ignored.
    depth: int = 0
    children: list["Task"] = dc.field(default_factory=list)

    # Carried along, never rendered.
    project_id: Optional[str] = None
    section_id: Optional[str] = None
    labels: list[str] = dc.field(default_factory=list)
    priority: int = 1
    order: int = 0
    is_completed: bool = False
    url: str = ""
    created_at: Optional[str] = None
    assignee_id: Optional[str] = None
    due: Optional[Due] = None
    deadline: Optional[Deadline] = None
    duration: Optional[Duration] = None

    @classmethod
    def from_api(cls, d: dict[str, Any]) -> "Task":
        return cls(
            id=str(d["id"]),
            content=d.get("content") or "",
            description=d.get("description") or "",
            parent_id=_opt_id(d.get("parent_id")),
            project_id=_opt_id(d.get("project_id")),
            section_id=_opt_id(d.get("section_id")),
            labels=list(d.get("labels") or []),
            priority=int(d.get("priority") or 1),
            order=int(d.get("order") or 0),
            is_completed=bool(d.get("is_completed")),
            url=d.get("url") or "",
            created_at=d.get("created_at"),
            assignee_id=_opt_id(d.get("assignee_id")),
            due=Due.from_api(d.get("due")),
            deadline=Deadline.from_api(d.get("deadline")),
            duration=Duration.from_api(d.get("duration")),
        )

    def walk(self):
        """Yield this task and every descendant, preorder."""
        stack = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

@dc.dataclass
class Project:
    id: str
    name: str
    tasks: list[Task] = dc.field(default_factory=list)  # forest, set after build_forest

    color: str = ""
    parent_id: Optional[str] = None
    order: int = 0
    is_inbox_project: bool = False
    is_favorite: bool = False
    view_style: str = "list"
    url: str = ""

    @classmethod
    def from_api(cls, d: dict[str, Any]) -> "Project":
        return cls(
            id=str(d["id"]),
            name=d.get("name") or "",
            color=d.get("color") or "",
            parent_id=_opt_id(d.get("parent_id")),
            order=int(d.get("order") or 0),
            is_inbox_project=bool(d.get("is_inbox_project")),
            is_favorite=bool(d.get("is_favorite")),
            view_style=d.get("view_style") or "list",
            url=d.get("url") or "",
        )
