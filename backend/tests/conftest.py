"""
MedAI Backend — Test Configuration & Fixtures
===============================================

What:  Shared pytest fixtures for backend tests.
Why:   Every test gets its own copy of the content store, so a test that
       breaks a file never leaks into another test.
How:   The shipped sample collections (backend/data) are copied into a
       tmp_path; loaders, caches and the app are pointed at that copy.

Fixtures:
    data_root:    Path to a private copy of the sample content store
    write_json:   Helper that overwrites one collection file under data_root
    loader:       ContentLoader bound to data_root
    search_cache: SearchIndexCache bound to `loader`, TTL 300s
    test_client:  httpx AsyncClient against a fresh app using data_root
"""

import json
import os
import shutil
from pathlib import Path

import pytest
import pytest_asyncio

SAMPLE_DATA_ROOT = Path(__file__).resolve().parent.parent / "data"

# Set before any app import so the settings singleton sees them
os.environ["DATA_ROOT"] = str(SAMPLE_DATA_ROOT)
os.environ["LOG_LEVEL"] = "WARNING"

from httpx import ASGITransport, AsyncClient  # noqa: E402

from app.config import settings  # noqa: E402
from app.services.data_loader import ContentLoader  # noqa: E402
from app.services.search_index import SearchIndexCache, search_index_cache  # noqa: E402


@pytest.fixture
def data_root(tmp_path: Path) -> Path:
    """Private copy of the sample content store."""
    root = tmp_path / "data"
    shutil.copytree(SAMPLE_DATA_ROOT, root)
    return root


@pytest.fixture
def write_json(data_root: Path):
    """Overwrite (or create) a file relative to data_root with raw JSON or text."""

    def _write(relative_path: str, content) -> Path:
        path = data_root / relative_path
        path.parent.mkdir(parents=True, exist_ok=True)
        if isinstance(content, str):
            path.write_text(content, encoding="utf-8")
        else:
            path.write_text(json.dumps(content), encoding="utf-8")
        return path

    return _write


@pytest.fixture
def read_sample():
    """Load one of the shipped sample files as plain Python data."""

    def _read(relative_path: str):
        return json.loads((SAMPLE_DATA_ROOT / relative_path).read_text(encoding="utf-8"))

    return _read


@pytest.fixture
def loader(data_root: Path) -> ContentLoader:
    return ContentLoader(data_root)


@pytest.fixture
def search_cache(loader: ContentLoader) -> SearchIndexCache:
    return SearchIndexCache(loader=loader, ttl=300)


@pytest_asyncio.fixture
async def test_client(data_root: Path, monkeypatch):
    """
    Async HTTP client for the API, backed by `data_root`.

    A new app is built per test so the in-memory rate limit windows start
    empty; the shared search index is dropped before and after.
    """
    from app.main import create_app

    monkeypatch.setattr(settings, "data_root", str(data_root))
    search_index_cache.invalidate()

    app = create_app()
    async with AsyncClient(
        transport=ASGITransport(app=app),
        base_url="http://test",
    ) as client:
        yield client

    search_index_cache.invalidate()
