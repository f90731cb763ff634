from __future__ import annotations

from pathlib import Path
from typing import Optional

import structlog

from .errors import UnresolvedWriterTarget

log = structlog.get_logger("todoist_org")


def write_document(out_dir: Path, filename: str, text: str, *, project_id: Optional[str] = None) -> Path:
    """Create or overwrite ``out_dir/filename`` with ``text``; the file must stay inside ``out_dir``."""
    path = out_dir / filename
    if not path.resolve().is_relative_to(out_dir.resolve()) or path.resolve() == out_dir.resolve():
        log.error("document_target_rejected", path=str(path), project_id=project_id)
        raise UnresolvedWriterTarget(str(path), "outside the output directory", project_id=project_id)
    try:
        out_dir.mkdir(parents=True, exist_ok=True)
        path.write_text(text, encoding="utf-8")
    except OSError as e:
        log.error("document_write_failed", path=str(path), project_id=project_id, error=str(e))
        raise UnresolvedWriterTarget(str(path), e.strerror or str(e), project_id=project_id) from e
    log.info("document_written", path=str(path), project_id=project_id, bytes=len(text.encode("utf-8")))
    return path
