from __future__ import annotations

import hashlib
import re
from pathlib import Path
from typing import Iterable

from slugify import slugify

from . import config
from .models import Artifact, CalendarRender, get_session


# one directory per calendar: out/<slug>/<file>
ARTIFACT_NAMES = {
    "pdf_native": "native.pdf",
    "pdf_a4": "a4.pdf",
    "pdf_usletter": "letter.pdf",
    "preview": "preview.png",
    "layout": "layout.json",
    "error": "error.log",
}


def slug_from_name(name: str) -> str:
    slug = slugify(name)
    slug = re.sub(r"[^a-z0-9-]+", "-", slug.lower()).strip("-")
    if not slug:
        # names made only of punctuation still get a stable directory
        slug = hashlib.md5(name.encode("utf-8")).hexdigest()[:12]
    if ".." in slug or "/" in slug or "\\" in slug:
        raise ValueError("Invalid slug generated from name")
    return slug


def calendar_dir(slug: str, base_dir: Path | None = None, include_slug: bool = True) -> Path:
    target = (base_dir or config.OUT_DIR) / slug if include_slug else (base_dir or config.OUT_DIR)
    target.mkdir(parents=True, exist_ok=True)
    return target


def artifact_path(
    slug: str,
    artifact_type: str,
    base_dir: Path | None = None,
    include_slug: bool = True,
) -> Path:
    if artifact_type not in ARTIFACT_NAMES:
        raise ValueError(f"Unknown artifact type: {artifact_type}")
    return calendar_dir(slug, base_dir=base_dir, include_slug=include_slug) / ARTIFACT_NAMES[artifact_type]


def record_artifacts(render: CalendarRender, artifacts: Iterable[tuple[str, Path]]) -> int:
    """Store one Artifact row per file; paths are kept relative to OUT_DIR."""
    rows = [
        Artifact(
            render_id=render.id,
            type=kind,
            path=str(file_path.relative_to(config.OUT_DIR)),
            size_bytes=file_path.stat().st_size,
        )
        for kind, file_path in artifacts
    ]
    with get_session() as session:
        session.add_all(rows)
        session.commit()
    return len(rows)
