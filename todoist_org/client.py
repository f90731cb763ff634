"""Todoist REST v2 reads: projects and the flat task list of each project."""
from __future__ import annotations

import dataclasses as dc
import time
from typing import Any, Literal, Optional

import httpx
import structlog

from .errors import ExternalError
from .models import Project, Task

log = structlog.get_logger("todoist_org")

DEFAULT_BASE_URL = "https://api.todoist.com/rest/v2"
RETRY_STATUSES = (429, 500, 502, 503, 504)

# ---------- task filters ----------

FilterKind = Literal["project_id", "section_id", "label", "filter"]

@dc.dataclass(frozen=True)
class TaskFilter:
    kind: FilterKind
    value: str

    @classmethod
    def project(cls, project_id: str) -> "TaskFilter":
        return cls("project_id", project_id)

    @classmethod
    def section(cls, section_id: str) -> "TaskFilter":
        return cls("section_id", section_id)

    @classmethod
    def label(cls, name: str) -> "TaskFilter":
        return cls("label", name)

    @classmethod
    def query(cls, expr: str) -> "TaskFilter":
        return cls("filter", expr)

def build_query(filters: list[TaskFilter]) -> list[tuple[str, str]]:
    return [(f.kind, f.value) for f in filters]

# ---------- client ----------

def _decode(cls, d: Any, path: str):
    try:
        return cls.from_api(d)
    except (KeyError, TypeError, ValueError, AttributeError) as e:
        raise ExternalError(f"GET {path} returned a malformed record: {e!r}") from e

class Todoist:
    def __init__(
        self,
        token: str,
        base_url: str = DEFAULT_BASE_URL,
        *,
        retries: int = 3,
        backoff: float = 1.0,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.base = base_url.rstrip("/")
        self.h = {"Authorization": f"Bearer {token}"}
        self.retries = max(1, retries)
        self.backoff = backoff
        self.cli = httpx.Client(timeout=30, transport=transport)

    def close(self) -> None:
        self.cli.close()

    def __enter__(self) -> "Todoist":
        return self

    def __exit__(self, *exc) -> None:
        self.close()

    def _get_json(self, path: str, *, params: Optional[list[tuple[str, str]]] = None) -> Any:
        url = f"{self.base}{path}"
        delay = self.backoff
        for attempt in range(self.retries):
            try:
                r = self.cli.get(url, headers=self.h, params=params)
            except httpx.TransportError as e:
                if attempt == self.retries - 1:
                    raise ExternalError(f"GET {path} failed: {e}") from e
                log.warning("request_retry", path=path, error=str(e), attempt=attempt + 1)
            else:
                if r.status_code in RETRY_STATUSES and attempt < self.retries - 1:
                    log.warning("request_retry", path=path, status=r.status_code, attempt=attempt + 1)
                else:
                    if r.is_error:
                        raise ExternalError(f"GET {path} returned {r.status_code}: {r.text[:200]}")
                    try:
                        return r.json()
                    except ValueError as e:
                        raise ExternalError(f"GET {path} returned invalid JSON") from e
            time.sleep(delay)
            delay = min(delay * 2.0, 10.0)
        raise ExternalError(f"GET {path} failed after {self.retries} attempts")

    def get_projects(self) -> list[Project]:
        data = self._get_json("/projects")
        if not isinstance(data, list):
            raise ExternalError("GET /projects did not return a list")
        return [_decode(Project, p, "/projects") for p in data]

    def get_project(self, project_id: str) -> Project:
        data = self._get_json(f"/projects/{project_id}")
        if not isinstance(data, dict):
            raise ExternalError(f"GET /projects/{project_id} did not return an object", project_id=project_id)
        return _decode(Project, data, f"/projects/{project_id}")

    def get_tasks(self, filters: Optional[list[TaskFilter]] = None) -> list[Task]:
        data = self._get_json("/tasks", params=build_query(filters or []))
        if not isinstance(data, list):
            raise ExternalError("GET /tasks did not return a list")
        return [_decode(Task, t, "/tasks") for t in data]

    def get_project_tasks(self, project_id: str) -> list[Task]:
        try:
            return self.get_tasks([TaskFilter.project(project_id)])
        except ExternalError as e:
            raise e.for_project(project_id)

def resolve_projects(projects: list[Project], wanted: list[str]) -> list[Project]:
    """Keep projects whose id or (case-insensitive) name is in ``wanted``."""
    if not wanted:
        return projects
    keys = {w.strip().casefold() for w in wanted}
    return [p for p in projects if p.id in keys or p.name.strip().casefold() in keys]

def select_projects(td: Todoist, wanted: list[str]) -> list[Project]:
    """All projects, or only ``wanted`` ones; numeric-only selections are fetched one by one."""
    wanted = [w.strip() for w in wanted if w.strip()]
    if wanted and all(w.isdigit() for w in wanted):
        return [td.get_project(w) for w in dict.fromkeys(wanted)]
    return resolve_projects(td.get_projects(), wanted)
