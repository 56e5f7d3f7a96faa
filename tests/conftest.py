import pytest
import sys
from pathlib import Path

import fitz
import numpy as np
from PIL import Image

# Add src to sys.path so we can import cv_toolkit
SRC_PATH = Path(__file__).resolve().parent.parent / "src"
if SRC_PATH.as_posix() not in sys.path:
    sys.path.insert(0, SRC_PATH.as_posix())

from cv_toolkit.core.models import Surface


def row_coded_array(width: int, height: int) -> np.ndarray:
    """RGB array whose pixel colour encodes its row: (y % 256, y // 256, 0)."""
    rows = np.arange(height, dtype=np.int64)
    arr = np.zeros((height, width, 3), dtype=np.uint8)
    arr[:, :, 0] = (rows % 256)[:, None]
    arr[:, :, 1] = (rows // 256)[:, None]
    return arr


def decode_row(pixel) -> int:
    """Inverse of row_coded_array for one RGB pixel."""
    return pixel[0] + 256 * pixel[1]


@pytest.fixture
def surface_factory():
    """Factory creating row-coded surfaces of a given size."""
    def _create(width: int, height: int) -> Surface:
        return Surface.from_array(row_coded_array(width, height))
    return _create


@pytest.fixture
def sample_image(tmp_path: Path):
    """Create a tall test image on disk."""
    img = Image.new("RGB", (200, 900), color="white")
    img_path = tmp_path / "sample.png"
    img.save(img_path)
    return img_path


def ink_bottom_mm(pdf_page, zoom: float = 2.0) -> float:
    """Distance in mm from the page top to the lowest dark row of a PDF page."""
    pix = pdf_page.get_pixmap(matrix=fitz.Matrix(zoom, zoom), alpha=False)
    arr = np.frombuffer(pix.samples, dtype=np.uint8).reshape(pix.height, pix.width, pix.n)
    dark_rows = np.nonzero(arr[:, :, :3].min(axis=(1, 2)) < 128)[0]
    if dark_rows.size == 0:
        return 0.0
    return (dark_rows[-1] + 1) / zoom * 25.4 / 72


@pytest.fixture
def row_of():
    """Decode the source row a row-coded pixel came from."""
    return decode_row


@pytest.fixture
def ink_bottom():
    """Measure where the dark content of a rendered PDF page ends (mm)."""
    return ink_bottom_mm
