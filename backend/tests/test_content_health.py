"""
MedAI Backend — Content Health Check Unit Tests
=================================================

What:  Tests for ContentHealthChecker's per-file report.
Why:   Editors rely on it to spot a broken content file; one bad file must
       show up in the report without failing the whole check.
"""

import pytest

from app.exceptions import ContentStoreMissingError
from app.services.content_health import ContentHealthChecker


class TestContentHealthChecker:
    @pytest.mark.asyncio
    async def test_clean_store(self, data_root):
        report = await ContentHealthChecker(data_root).run()
        assert report.total_files == 6
        assert report.valid_files == 6
        assert report.invalid_files == 0
        assert report.warnings == 0
        assert report.errors == []

    @pytest.mark.asyncio
    async def test_empty_array_is_warning(self, data_root, write_json):
        write_json("events/sample.json", [])
        report = await ContentHealthChecker(data_root).run()
        assert report.valid_files == 6
        assert report.warnings == 1
        assert report.errors[0].file == "events/sample.json"
        assert report.errors[0].type == "warning"

    @pytest.mark.asyncio
    async def test_invalid_json_is_error(self, data_root, write_json):
        write_json("news/sample.json", "{not json")
        report = await ContentHealthChecker(data_root).run()
        assert report.invalid_files == 1
        assert report.valid_files == 5
        [issue] = report.errors
        assert issue.file == "news/sample.json"
        assert issue.type == "error"

    @pytest.mark.asyncio
    async def test_duplicate_ids(self, data_root, write_json, read_sample):
        articles = read_sample("news/sample.json")
        articles[2]["id"] = "news-1"
        write_json("news/sample.json", articles)
        report = await ContentHealthChecker(data_root).run()
        assert report.invalid_files == 1
        assert report.errors[0].message == "Duplicate IDs found: news-1"

    @pytest.mark.asyncio
    async def test_schema_failure_is_error(self, data_root, write_json, read_sample):
        programs = read_sample("programs/sample.json")
        del programs[0]["format"]
        write_json("programs/sample.json", programs)
        report = await ContentHealthChecker(data_root).run()
        assert report.invalid_files == 1
        assert "format" in report.errors[0].message

    @pytest.mark.asyncio
    async def test_unknown_files_checked_for_shape_only(self, data_root, write_json):
        write_json("misc/notes.json", [{"anything": True}])
        report = await ContentHealthChecker(data_root).run()
        assert report.total_files == 7
        assert report.invalid_files == 0

    @pytest.mark.asyncio
    async def test_missing_root_raises(self, tmp_path):
        with pytest.raises(ContentStoreMissingError):
            await ContentHealthChecker(tmp_path / "missing").run()

    @pytest.mark.asyncio
    async def test_check_wraps_report(self, data_root):
        envelope = await ContentHealthChecker(data_root).check()
        assert envelope.success is True
        assert envelope.data["totalFiles"] == 6
        assert envelope.data["validFiles"] == 6

    @pytest.mark.asyncio
    async def test_check_never_raises(self, tmp_path):
        envelope = await ContentHealthChecker(tmp_path / "missing").check()
        assert envelope.success is False
        assert envelope.status_code == 500
