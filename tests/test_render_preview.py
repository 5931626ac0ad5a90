from __future__ import annotations

import tempfile
from pathlib import Path

from lifecal import config
from lifecal.pipeline.render_preview import render_preview


class DummyRect:
    width = 400.0
    height = 800.0


class DummyPixmap:
    def save(self, path: str) -> None:
        Path(path).write_text("preview", encoding="utf-8")


class DummyPage:
    rect = DummyRect()

    def __init__(self) -> None:
        self.zoom = None

    def get_pixmap(self, matrix=None, alpha=True) -> DummyPixmap:  # noqa: ARG002 - signature matches fitz
        self.zoom = matrix.a
        return DummyPixmap()


class DummyDoc:
    def __init__(self) -> None:
        self.page_count = 1
        self.closed = False
        self.page = DummyPage()

    def __enter__(self) -> "DummyDoc":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:  # noqa: ANN001 - test helper
        self.closed = True

    def load_page(self, index: int) -> DummyPage:  # noqa: ARG002 - test helper
        return self.page


def test_render_preview_closes_document(monkeypatch) -> None:
    doc = DummyDoc()

    def fake_open(path: str) -> DummyDoc:  # noqa: ARG001 - test helper
        return doc

    with tempfile.TemporaryDirectory() as temp_dir:
        config.set_out_dir(Path(temp_dir))
        monkeypatch.setattr("lifecal.pipeline.render_preview.fitz.open", fake_open)
        preview = render_preview("sample", Path("sample.pdf"), base_dir=Path(temp_dir))
        assert doc.closed is True
        assert preview == Path(temp_dir) / "sample" / "preview.png"
        assert preview.exists()
        # long side scaled up to 1600 px
        assert doc.page.zoom == 2.0
