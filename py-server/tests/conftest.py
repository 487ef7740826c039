from __future__ import annotations

import sys
import zlib
from pathlib import Path
from typing import List, Sequence, Tuple

import pytest


# Ensure py-server is importable when running `pytest` from the repo root
_SERVER_ROOT = Path(__file__).resolve().parents[1]
if str(_SERVER_ROOT) not in sys.path:
    sys.path.insert(0, str(_SERVER_ROOT))


PAGE_HEIGHT = 792
PAGE_WIDTH = 612

# (x, y, text) in PDF points, y measured from the bottom of the page
PlacedText = Tuple[float, float, str]


def _escape_literal(text: str) -> str:
    return text.replace('\\', '\\\\').replace('(', '\\(').replace(')', '\\)')


def build_pdf(
    pages: Sequence[Sequence[PlacedText]],
    font_size: float = 12,
    base_font: str = 'Helvetica',
    compress: bool = False,
) -> bytes:
    """Assemble a minimal single-font PDF with one BT/ET block per placed string."""
    objects = {}
    page_ids: List[int] = []
    next_id = 4

    for placed in pages:
        page_id, content_id = next_id, next_id + 1
        next_id += 2
        page_ids.append(page_id)

        operations = [
            f"BT /F1 {font_size} Tf {x} {y} Td ({_escape_literal(text)}) Tj ET"
            for x, y, text in placed
        ]
        stream = "\n".join(operations).encode('latin-1')
        if compress:
            data = zlib.compress(stream)
            header = f"<< /Length {len(data)} /Filter /FlateDecode >>"
        else:
            data = stream
            header = f"<< /Length {len(data)} >>"

        objects[content_id] = header.encode('ascii') + b"\nstream\n" + data + b"\nendstream"
        objects[page_id] = (
            f"<< /Type /Page /Parent 2 0 R /MediaBox [0 0 {PAGE_WIDTH} {PAGE_HEIGHT}] "
            f"/Resources << /Font << /F1 3 0 R >> >> /Contents {content_id} 0 R >>"
        ).encode('ascii')

    kids = " ".join(f"{page_id} 0 R" for page_id in page_ids)
    objects[1] = b"<< /Type /Catalog /Pages 2 0 R >>"
    objects[2] = f"<< /Type /Pages /Kids [{kids}] /Count {len(page_ids)} >>".encode('ascii')
    objects[3] = f"<< /Type /Font /Subtype /Type1 /BaseFont /{base_font} >>".encode('ascii')

    out = bytearray(b"%PDF-1.4\n")
    offsets = {}
    for obj_id in sorted(objects):
        offsets[obj_id] = len(out)
        out += f"{obj_id} 0 obj\n".encode('ascii') + objects[obj_id] + b"\nendobj\n"

    xref_position = len(out)
    size = max(objects) + 1
    out += f"xref\n0 {size}\n".encode('ascii')
    out += b"0000000000 65535 f \n"
    for obj_id in range(1, size):
        out += f"{offsets[obj_id]:010d} 00000 n \n".encode('ascii')
    out += (
        f"trailer\n<< /Size {size} /Root 1 0 R >>\n"
        f"startxref\n{xref_position}\n%%EOF\n"
    ).encode('ascii')
    return bytes(out)


@pytest.fixture
def make_pdf(tmp_path):
    """Write a generated PDF under tmp_path and return its path as a string."""
    counter = {'n': 0}

    def _make(pages: Sequence[Sequence[PlacedText]], **kwargs) -> str:
        counter['n'] += 1
        path = tmp_path / f"document_{counter['n']}.pdf"
        path.write_bytes(build_pdf(pages, **kwargs))
        return str(path)

    return _make


@pytest.fixture
def write_bytes(tmp_path):
    """Write raw bytes to a named file under tmp_path."""
    def _write(name: str, content: bytes) -> str:
        path = tmp_path / name
        path.write_bytes(content)
        return str(path)

    return _write


@pytest.fixture
def pdf_bytes():
    """The build_pdf helper, for tests that need bytes rather than a path."""
    return build_pdf
