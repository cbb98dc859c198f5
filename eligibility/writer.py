"""
Output persistence for rendered documents.
"""

from __future__ import annotations

from pathlib import Path

from eligibility.errors import OutputError
from eligibility.utils.logging import get_logger

log = get_logger(__name__)


def output_path_for(output_dir: Path | str, template_name: str, extension: str = ".html") -> Path:
    """Documents are named after their template; one file per report."""
    return Path(output_dir) / f"{template_name}{extension}"


def write_document(
    output_dir: Path | str,
    template_name: str,
    text: str,
    extension: str = ".html",
) -> Path:
    """
    Write `text` to ``<output_dir>/<template_name><extension>``, overwriting
    any existing file.

    Raises
    ------
    OutputError
        If the directory cannot be created or the file cannot be written.
    """
    path = output_path_for(output_dir, template_name, extension)
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open("w", encoding="utf-8") as f:
            f.write(text)
    except OSError as exc:
        raise OutputError(f"cannot write {path}: {exc}") from exc

    log.info("Document written", extra={"path": str(path), "bytes": len(text.encode("utf-8"))})
    return path


__all__ = ["output_path_for", "write_document"]
