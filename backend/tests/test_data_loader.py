"""
MedAI Backend — Content Loader Unit Tests
===========================================

What:  Tests for ContentLoader: file reading, parsing, validation and the
       envelope it returns for each failure.
Why:   Every route depends on the loader never raising and on the ErrorKind
       it attaches (which later decides 404 vs 500).
How:   Each test gets its own copy of the sample store (see conftest) and
       corrupts exactly one file.

Test Strategy:
    ✅ Every collection loads from the sample store
    ✅ Missing file / missing data root → store_missing
    ✅ Invalid JSON, non-array top level → parse_error
    ✅ Invalid record anywhere → validation_error, data is None
    ✅ Repeated loads are identical
"""

import pytest

from app.exceptions import ParseError
from app.schemas.envelope import ErrorKind
from app.services.data_loader import COLLECTION_PATHS, Collection, ContentLoader


class TestLoadCollections:
    """Happy path against the shipped sample data."""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("collection", list(Collection))
    async def test_every_collection_loads(self, loader, read_sample, collection):
        envelope = await loader.load(collection)
        assert envelope.success is True
        assert envelope.error is None
        expected = read_sample(COLLECTION_PATHS[collection])
        assert [item.id for item in envelope.data] == [r["id"] for r in expected]

    @pytest.mark.asyncio
    async def test_shortcuts_match_load(self, loader):
        faculty = await loader.load_faculty()
        research = await loader.load_research()
        programs = await loader.load_programs()
        applications = await loader.load_applications()
        news = await loader.load_news()
        events = await loader.load_events()
        for envelope in (faculty, research, programs, applications, news, events):
            assert envelope.success is True
        assert faculty.data[0].id == "sarah-chen"
        assert applications.data[0].program_id == "ms-medical-ai"

    @pytest.mark.asyncio
    async def test_accepts_collection_name_string(self, loader):
        envelope = await loader.load("news")
        assert envelope.success is True
        assert len(envelope.data) == 3

    @pytest.mark.asyncio
    async def test_empty_array_is_success(self, loader, write_json):
        write_json("events/sample.json", [])
        envelope = await loader.load_events()
        assert envelope.success is True
        assert envelope.data == []

    @pytest.mark.asyncio
    async def test_load_is_idempotent(self, loader):
        first = await loader.load_research()
        second = await loader.load_research()
        assert first.data == second.data

    def test_path_for(self, loader, data_root):
        assert loader.path_for(Collection.APPLICATIONS) == data_root / "programs" / "applications.json"


class TestLoadFailures:
    """Each failure folds into an envelope with the right kind; nothing raises."""

    @pytest.mark.asyncio
    async def test_missing_file(self, loader, data_root):
        (data_root / "faculty" / "sample.json").unlink()
        envelope = await loader.load_faculty()
        assert envelope.success is False
        assert envelope.data is None
        assert envelope.kind == ErrorKind.STORE_MISSING
        assert envelope.status_code == 500

    @pytest.mark.asyncio
    async def test_missing_data_root(self, tmp_path):
        loader = ContentLoader(tmp_path / "does-not-exist")
        envelope = await loader.load_news()
        assert envelope.success is False
        assert envelope.kind == ErrorKind.STORE_MISSING

    @pytest.mark.asyncio
    async def test_invalid_json(self, loader, write_json):
        write_json("news/sample.json", '[{"id": "news-1",')
        envelope = await loader.load_news()
        assert envelope.success is False
        assert envelope.kind == ErrorKind.PARSE_ERROR
        assert "Invalid JSON" in envelope.error

    @pytest.mark.asyncio
    async def test_top_level_object_rejected(self, loader, write_json):
        write_json("events/sample.json", {"events": []})
        envelope = await loader.load_events()
        assert envelope.kind == ErrorKind.PARSE_ERROR
        assert "JSON array" in envelope.error

    @pytest.mark.asyncio
    async def test_one_invalid_record_fails_whole_collection(self, loader, write_json, read_sample):
        programs = read_sample("programs/sample.json")
        del programs[1]["type"]
        write_json("programs/sample.json", programs)

        envelope = await loader.load_programs()
        assert envelope.success is False
        assert envelope.data is None
        assert envelope.kind == ErrorKind.VALIDATION_ERROR
        assert "cert-clinical-data-science" in envelope.error
        assert "type" in envelope.error

    @pytest.mark.asyncio
    async def test_failed_envelope_never_carries_partial_data(self, loader, write_json, read_sample):
        faculty = read_sample("faculty/sample.json")
        faculty[2]["isActive"] = "yes"
        write_json("faculty/sample.json", faculty)
        envelope = await loader.load_faculty()
        assert envelope.data is None


class TestReadRecords:
    """Direct tests of the raw reader used by the health check."""

    @pytest.mark.asyncio
    async def test_returns_raw_dicts(self, loader, data_root):
        records = await loader.read_records(data_root / "news" / "sample.json")
        assert isinstance(records[0], dict)
        assert records[0]["slug"] == "ai-diagnostics-breakthrough"

    @pytest.mark.asyncio
    async def test_reports_line_number(self, loader, write_json):
        path = write_json("news/broken.json", '[\n  {"id": 1},\n  oops\n]')
        with pytest.raises(ParseError, match="line 3"):
            await loader.read_records(path)
