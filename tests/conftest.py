from __future__ import annotations

import os
from typing import TYPE_CHECKING

import pytest

from tests.support.datasets import write_datasets
from travelref.adapters.memory_store import InMemoryDocumentStore

os.environ.setdefault("DATABASE_URI", "sqlite+aiosqlite:///:memory:")

if TYPE_CHECKING:
    from pathlib import Path


@pytest.fixture
def memory_store() -> InMemoryDocumentStore:
    return InMemoryDocumentStore()


@pytest.fixture
def datasets_dir(tmp_path: Path) -> Path:
    return write_datasets(tmp_path / "datasets")


@pytest.fixture
def database_path(tmp_path: Path) -> Path:
    return tmp_path / "travelref.db"
