"""
Tests for the cv-export command line entry point.
"""

import fitz
import pytest
from PIL import Image

from cv_toolkit.cli import main


@pytest.fixture
def tall_png(tmp_path):
    path = tmp_path / "cv.png"
    Image.new("RGB", (100, 450), "white").save(path)
    return path


def test_cli_writes_named_pdf(tall_png, tmp_path, capsys):
    # Act
    code = main([str(tall_png), "--subject", "Jane Q. Public", "--output-dir", str(tmp_path / "out")])

    # Assert
    assert code == 0
    output = tmp_path / "out" / "Jane_Q._Public_CV.pdf"
    assert output.exists()
    assert "4 pages" in capsys.readouterr().out
    with fitz.open(output) as doc:
        assert doc.page_count == 4


def test_cli_custom_page_size(tall_png, tmp_path):
    code = main([str(tall_png), "--page-width", "100", "--page-height", "450",
                 "--output-dir", str(tmp_path)])
    assert code == 0
    with fitz.open(tmp_path / "CV.pdf") as doc:
        assert doc.page_count == 1


def test_cli_missing_input_reports_generic_failure(tmp_path, capsys):
    code = main([str(tmp_path / "missing.png"), "--output-dir", str(tmp_path)])
    assert code == 1
    assert "Error generating PDF" in capsys.readouterr().err


def test_cli_page_width_without_height_is_usage_error(tall_png):
    with pytest.raises(SystemExit) as excinfo:
        main([str(tall_png), "--page-width", "100"])
    assert excinfo.value.code == 2


def test_cli_unwritable_output_dir_reports_error(tall_png, tmp_path, capsys):
    # Arrange
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("occupied")

    # Act
    code = main([str(tall_png), "--output-dir", str(blocker)])

    # Assert
    assert code == 1
    assert "Could not save CV.pdf" in capsys.readouterr().err
