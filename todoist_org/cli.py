"""
Export every Todoist project as an org-mode outline.

Env:
  TODOIST_API_TOKEN  (or TODOIST_TOKEN; or --token / --token-file)

Example:
  todoist-org --out ~/org/todoist --todo-keyword TODO -v
"""
from __future__ import annotations

import json
import logging
import os
import sys
from datetime import UTC, datetime
from pathlib import Path
from typing import Optional

import structlog
import typer

from .client import DEFAULT_BASE_URL, Todoist
from .errors import ExportError
from .export import ExportConfig, run_export

app = typer.Typer(add_completion=False)
log = structlog.get_logger("todoist_org")

# ---------- config ----------

def resolve_token(token: Optional[str], token_file: Optional[Path]) -> Optional[str]:
    token = token or os.environ.get("TODOIST_API_TOKEN") or os.environ.get("TODOIST_TOKEN")
    if token:
        return token.strip()
    if token_file and token_file.is_file():
        lines = token_file.read_text(encoding="utf-8").splitlines()
        return lines[0].strip() if lines and lines[0].strip() else None
    return None

# ---------- logging setup ----------

def configure_logging(verbosity: int) -> None:
    structlog.configure(
        processors=[
            structlog.processors.TimeStamper(fmt="iso", utc=True),
            structlog.processors.add_log_level,
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            {0: logging.INFO, 1: logging.DEBUG}.get(verbosity, logging.DEBUG)
        ),
    )

# ---------- CLI ----------

@app.command()
def export(
    out: Path = typer.Option(Path("org"), "--out", "-o", help="Directory for the .org files"),
    project: Optional[list[str]] = typer.Option(None, "--project", "-p", help="Project name or id (repeatable; default: all)"),
    single_file: bool = typer.Option(False, "--single-file", help="Write everything into one todoist.org"),
    todo_keyword: Optional[str] = typer.Option(None, "--todo-keyword", help="Keyword after the stars, e.g. TODO"),
    token: Optional[str] = typer.Option(None, "--token", help="API token; defaults to $TODOIST_API_TOKEN or $TODOIST_TOKEN"),
    token_file: Optional[Path] = typer.Option(None, "--token-file", help="File whose first line is the API token"),
    base_url: str = typer.Option(DEFAULT_BASE_URL, "--base-url", help="Todoist REST base URL"),
    workers: int = typer.Option(4, "--workers", min=1, help="Parallel project fetches"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Render but write nothing"),
    verbose: int = typer.Option(0, "-v", count=True, help="-v for debug logs"),
):
    """Write one org outline per Todoist project."""
    configure_logging(verbose)

    api_token = resolve_token(token, token_file)
    if not api_token:
        typer.echo("ERROR: TODOIST_API_TOKEN is not set", err=True)
        raise typer.Exit(2)

    cfg = ExportConfig(
        out_dir=out,
        projects=list(project or []),
        single_file=single_file,
        todo_keyword=todo_keyword,
        workers=workers,
        dry_run=dry_run,
    )
    log.info("starting", out=str(out), projects=cfg.projects or None, dry_run=dry_run)

    with Todoist(api_token, base_url) as td:
        try:
            results = run_export(td, cfg)
        except ExportError as e:
            log.error("project_list_failed", kind=e.kind, error=str(e))
            raise typer.Exit(1)

    failed = [r for r in results if not r.ok]
    for r in failed:
        log.error("project_not_exported", project_id=r.project_id, project=r.name, kind=r.error.kind, error=str(r.error))
    log.info("done", exported=len(results) - len(failed), failed=len(failed), dry_run=dry_run)
    if failed:
        raise typer.Exit(1)

# ---------- entry ----------

def main() -> None:
    try:
        app()
    except Exception as e:
        # last-ditch log (cron visibility)
        print(json.dumps({
            "ts": datetime.now(UTC).isoformat(),
            "level": "error",
            "event": "fatal",
            "error": str(e),
        }), file=sys.stderr)
        sys.exit(1)
