from __future__ import annotations

from pathlib import Path
from typing import Iterator

import pytest

from cassettes.catalog import CatalogRepository, FilterProjection
from cassettes.db import TapeStore


@pytest.fixture
def store(tmp_path: Path) -> Iterator[TapeStore]:
    tape_store = TapeStore(tmp_path / "tapes.db")
    yield tape_store
    tape_store.close()


@pytest.fixture
def catalog(store: TapeStore) -> CatalogRepository:
    repository = CatalogRepository(store)
    repository.reload()
    return repository


@pytest.fixture
def projection(catalog: CatalogRepository) -> FilterProjection:
    return FilterProjection(catalog)
