from pathlib import Path

import pytest

from safeinput.components.uploads import UploadedFile
from safeinput.rules.loader import load_rules
from safeinput.rules.models import Rules

PNG_HEADER = b"\x89PNG\r\n\x1a\n"
JPEG_HEADER = b"\xff\xd8\xff\xe0"
PDF_HEADER = b"%PDF-1.7\n"


@pytest.fixture
def rules_path() -> Path:
    # Load REAL rules from project root; tests run from project root.
    path = Path("rules.yaml").resolve()
    if not path.exists():
        raise FileNotFoundError(f"Rules not found at {path}")
    return path


@pytest.fixture
def rules(rules_path: Path) -> Rules:
    return load_rules(rules_path)


@pytest.fixture
def png_file() -> UploadedFile:
    """Small, clean PNG upload."""
    return UploadedFile(
        filename="photo.png",
        content_type="image/png",
        data=PNG_HEADER + b"\x00" * 64,
    )


@pytest.fixture
def pdf_file() -> UploadedFile:
    return UploadedFile(
        filename="report.pdf",
        content_type="application/pdf",
        data=PDF_HEADER + b"1 0 obj\nendobj\n",
    )
