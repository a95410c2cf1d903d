from __future__ import annotations

from pathlib import Path
from typing import List

from pypdf import PdfReader

from ..infrastructure.logging import get_logger

logger = get_logger("docvec.ingestion.pdf")


def document_id_for(path: Path) -> str:
    """Document ids are the uploaded file's name."""
    return Path(path).name


def extract_pdf_text(path: Path) -> str:
    """Extract the text of every page, joined by newlines. Pages without text contribute nothing."""
    reader = PdfReader(str(path))
    pages = []
    for page in reader.pages:
        text = page.extract_text() or ""
        if text:
            pages.append(text)
    logger.debug("Extracted %d/%d pages from %s", len(pages), len(reader.pages), path)
    return "\n".join(pages)


def pdf_paths(path: Path) -> List[Path]:
    """A single file as given, or every *.pdf directly under a directory, sorted by name."""
    path = Path(path)
    if path.is_dir():
        return sorted(path.glob("*.pdf"))
    return [path]
