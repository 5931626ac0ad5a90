from __future__ import annotations

from pathlib import Path

import fitz  # PyMuPDF

from ..storage import artifact_path

PREVIEW_MIN_PX = 1600


def _render_page_to_png(doc: fitz.Document, page_index: int, out_path: Path, min_px: int = PREVIEW_MIN_PX) -> None:
    page = doc.load_page(page_index)

    # scale so the longer side of the PNG is at least min_px; native pages are small
    rect = page.rect
    long_side = max(rect.width, rect.height)
    zoom = max(1.0, min_px / float(long_side))
    mat = fitz.Matrix(zoom, zoom)

    pix = page.get_pixmap(matrix=mat, alpha=False)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    pix.save(str(out_path))


def render_preview(
    slug: str,
    pdf_path: Path,
    base_dir: Path | None = None,
    include_slug: bool = True,
) -> Path:
    out_path = artifact_path(slug, "preview", base_dir=base_dir, include_slug=include_slug)
    with fitz.open(str(pdf_path)) as doc:
        _render_page_to_png(doc, 0, out_path)
    return out_path
