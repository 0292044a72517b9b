import logging
import os
import sys
from pathlib import Path

import pytest

# Ensure the project root is on sys.path for package imports during tests.
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))


@pytest.fixture(autouse=True)
def _clear_fileinfo_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in list(os.environ):
        if key.startswith("FILEINFO_"):
            monkeypatch.delenv(key, raising=False)


@pytest.fixture(autouse=True)
def _reset_logging():
    yield
    logger = logging.getLogger("fileinfo")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)


@pytest.fixture
def sample_file(tmp_path: Path) -> Path:
    target = tmp_path / "evidence.txt"
    target.write_bytes(b"abc")
    return target


@pytest.fixture
def docx_file(tmp_path: Path) -> Path:
    from tests.utils import build_docx

    return build_docx(tmp_path / "report.docx")
