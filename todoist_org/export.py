"""
Fetch → build → render → write, one project at a time.

A failing project is reported in its ProjectResult and never stops the others.
"""
from __future__ import annotations

import dataclasses as dc
from collections import Counter
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Optional

import structlog

from .client import Todoist, select_projects
from .errors import ExportError, UnresolvedWriterTarget
from .models import Project, Task
from .render import EXTENSION, project_filename, render_project
from .tree import build_forest, count_nodes
from .writer import write_document

log = structlog.get_logger("todoist_org")

COMBINED_FILENAME = "todoist.org"

@dc.dataclass
class ExportConfig:
    out_dir: Path = Path("org")
    projects: list[str] = dc.field(default_factory=list)
    single_file: bool = False
    todo_keyword: Optional[str] = None
    workers: int = 4
    dry_run: bool = False

@dc.dataclass
class ProjectResult:
    project_id: str
    name: str
    filename: str
    document: Optional[str] = None
    error: Optional[ExportError] = None
    path: Optional[Path] = None

    @property
    def ok(self) -> bool:
        return self.error is None

# ---------- core per project ----------

def export_project(project: Project, tasks: list[Task], *, todo_keyword: Optional[str] = None) -> ProjectResult:
    result = ProjectResult(project_id=project.id, name=project.name, filename=project_filename(project.name))
    try:
        project.tasks = build_forest(tasks)
    except ExportError as e:
        result.error = e.for_project(project.id)
        log.error("project_failed", project_id=project.id, project=project.name, kind=e.kind, error=str(e))
        return result
    result.document = render_project(project, todo_keyword=todo_keyword)
    log.debug("project_rendered", project_id=project.id, nodes=count_nodes(project.tasks))
    project.tasks = []
    return result

# ---------- batch ----------

def fetch_tasks(td: Todoist, projects: list[Project], workers: int = 4) -> dict[str, list[Task] | ExportError]:
    """Fetch each project's tasks in parallel; failures are returned, not raised."""
    def one(p: Project) -> list[Task] | ExportError:
        try:
            return td.get_project_tasks(p.id)
        except ExportError as e:
            log.error("project_fetch_failed", project_id=p.id, project=p.name, error=str(e))
            return e

    with ThreadPoolExecutor(max_workers=max(1, workers)) as pool:
        fetched = list(pool.map(one, projects))
    return {p.id: r for p, r in zip(projects, fetched)}

def export_all(projects: list[Project], fetched: dict[str, list[Task] | ExportError], cfg: ExportConfig) -> list[ProjectResult]:
    results: list[ProjectResult] = []
    for p in projects:
        got = fetched.get(p.id, [])
        if isinstance(got, ExportError):
            results.append(ProjectResult(p.id, p.name, project_filename(p.name), error=got.for_project(p.id)))
            continue
        results.append(export_project(p, got, todo_keyword=cfg.todo_keyword))
    return results

def assign_filenames(results: list[ProjectResult], single_file: bool = False) -> None:
    """Point every result at the file it will land in; clashing names get the project id appended."""
    if single_file:
        for r in results:
            r.filename = COMBINED_FILENAME
        return
    seen = Counter(r.filename for r in results)
    for r in results:
        if seen[r.filename] > 1:
            r.filename = f"{r.filename.removesuffix(EXTENSION)}_{r.project_id}{EXTENSION}"

def write_results(results: list[ProjectResult], cfg: ExportConfig) -> None:
    assign_filenames(results, cfg.single_file)
    if cfg.dry_run:
        for r in results:
            if r.ok:
                log.info("write_dryrun", project_id=r.project_id, filename=r.filename)
        return

    if cfg.single_file:
        docs = [r.document for r in results if r.ok and r.document is not None]
        try:
            path = write_document(cfg.out_dir, COMBINED_FILENAME, "\n".join(docs))
        except UnresolvedWriterTarget as e:
            for r in results:
                if r.ok:
                    r.error = e
            return
        for r in results:
            if r.ok:
                r.path = path
        return

    for r in results:
        if not r.ok or r.document is None:
            continue
        try:
            r.path = write_document(cfg.out_dir, r.filename, r.document, project_id=r.project_id)
        except UnresolvedWriterTarget as e:
            r.error = e

def run_export(td: Todoist, cfg: ExportConfig) -> list[ProjectResult]:
    projects = select_projects(td, cfg.projects)
    log.info("projects_fetched", count=len(projects))
    fetched = fetch_tasks(td, projects, workers=cfg.workers)
    results = export_all(projects, fetched, cfg)
    write_results(results, cfg)
    return results
