"""
MedAI Backend — Route Adapter Unit Tests
==========================================

What:  Tests for the transport-independent route handlers and their status
       rules (200 / 400 / 404 / 500).
Why:   A missing entity is the client's problem (404); broken content is
       ours (500). Getting that wrong hides data corruption behind 404s.
How:   Adapters are called directly with a loader bound to a private copy
       of the sample store.
"""

import logging
from datetime import datetime, timezone
from unittest.mock import AsyncMock, patch

import pytest

from app.exceptions import UpstreamError
from app.middleware.request_id import request_id_var
from app.routes import adapters
from app.services.content_health import ContentHealthChecker


class TestEnvelopeMapping:
    def test_parse_flag(self):
        assert adapters.parse_flag("true") is True
        assert adapters.parse_flag("FALSE") is False
        assert adapters.parse_flag("maybe") is None
        assert adapters.parse_flag(None) is None

    def test_split_csv(self):
        assert adapters.split_csv("ai, ethics,,") == ["ai", "ethics"]
        assert adapters.split_csv(None) == []

    def test_server_error_body_shape(self):
        result = adapters.server_error("Failed to fetch programs", "boom")
        assert result.status_code == 500
        assert result.body == {
            "success": False,
            "error": "Failed to fetch programs",
            "data": None,
            "details": "boom",
        }

    @pytest.mark.asyncio
    async def test_guard_converts_exceptions(self):
        @adapters._guard("Something failed")
        async def explode():
            raise RuntimeError("kaboom")

        result = await explode()
        assert result.status_code == 500
        assert result.body["error"] == "Something failed"
        assert result.body["details"] == "kaboom"

    @pytest.mark.asyncio
    async def test_guard_logs_request_id(self, caplog):
        @adapters._guard("Something failed")
        async def explode():
            raise RuntimeError("kaboom")

        token = request_id_var.set("req-42")
        try:
            with caplog.at_level(logging.ERROR, logger="app.routes.adapters"):
                await explode()
        finally:
            request_id_var.reset(token)
        assert "explode [req-42]: RuntimeError: kaboom" in caplog.text


class TestDetailAdapters:
    @pytest.mark.asyncio
    async def test_faculty_found(self, loader):
        result = await adapters.faculty_detail("marcus-webb", loader)
        assert result.status_code == 200
        assert result.body["success"] is True
        assert result.body["data"]["researchAreas"][0] == "Natural Language Processing"

    @pytest.mark.asyncio
    async def test_faculty_not_found(self, loader):
        result = await adapters.faculty_detail("nobody", loader)
        assert result.status_code == 404
        assert result.body == {"success": False, "error": "Faculty member not found", "data": None}

    @pytest.mark.asyncio
    async def test_faculty_broken_store_is_500(self, loader, write_json):
        write_json("faculty/sample.json", "[")
        result = await adapters.faculty_detail("marcus-webb", loader)
        assert result.status_code == 500
        assert result.body["error"] == "Failed to load faculty member"
        assert result.body["data"] is None

    @pytest.mark.asyncio
    @pytest.mark.parametrize("project_id", ["", "   ", None])
    async def test_research_requires_id(self, loader, project_id):
        result = await adapters.research_detail(project_id, loader)
        assert result.status_code == 400
        assert result.body["error"] == "Research project ID is required"

    @pytest.mark.asyncio
    async def test_research_not_found(self, loader):
        result = await adapters.research_detail("unknown", loader)
        assert result.status_code == 404
        assert result.body["error"] == "Research project not found"

    @pytest.mark.asyncio
    async def test_program_found(self, loader):
        result = await adapters.program_detail("ms-medical-ai", loader)
        assert result.status_code == 200
        assert result.body["data"]["tuition"]["amount"] == 24500

    @pytest.mark.asyncio
    async def test_program_with_invalid_sibling_is_500(self, loader, write_json, read_sample):
        """A record missing a required field poisons the whole collection."""
        programs = read_sample("programs/sample.json")
        del programs[1]["level"]
        write_json("programs/sample.json", programs)

        result = await adapters.program_detail("ms-medical-ai", loader)
        assert result.status_code == 500
        assert result.body["error"] == "Failed to fetch program"
        assert "level" in result.body["details"]

    @pytest.mark.asyncio
    async def test_program_missing_store_is_500(self, loader, data_root):
        (data_root / "programs" / "sample.json").unlink()
        result = await adapters.program_detail("ms-medical-ai", loader)
        assert result.status_code == 500

    @pytest.mark.asyncio
    async def test_applications_filtered_by_program(self, loader):
        result = await adapters.program_applications("cert-clinical-data-science", loader)
        assert result.status_code == 200
        assert [a["id"] for a in result.body["data"]] == ["app-cert-clinical-data-science"]

    @pytest.mark.asyncio
    async def test_applications_unfiltered(self, loader):
        result = await adapters.program_applications(None, loader)
        assert len(result.body["data"]) == 2

    @pytest.mark.asyncio
    async def test_news_detail_with_related(self, loader):
        result = await adapters.news_detail("ai-diagnostics-breakthrough", loader)
        assert result.status_code == 200
        data = result.body["data"]
        assert data["article"]["id"] == "news-1"
        assert [a["id"] for a in data["relatedArticles"]] == ["news-2"]

    @pytest.mark.asyncio
    async def test_news_detail_not_found(self, loader):
        result = await adapters.news_detail("no-such-article", loader)
        assert result.status_code == 404
        assert result.body["error"] == "Article not found"

    @pytest.mark.asyncio
    async def test_news_detail_reads_store_once(self, loader):
        with patch.object(loader, "load", wraps=loader.load) as load:
            result = await adapters.news_detail("ai-diagnostics-breakthrough", loader)
        assert result.status_code == 200
        assert load.call_count == 1

    @pytest.mark.asyncio
    async def test_news_detail_zero_related_limit(self, loader):
        result = await adapters.news_detail("ai-diagnostics-breakthrough", loader, related_limit=0)
        assert result.status_code == 200
        assert result.body["data"]["relatedArticles"] == []

    @pytest.mark.asyncio
    async def test_news_detail_broken_store_is_500(self, loader, write_json):
        write_json("news/sample.json", "[")
        result = await adapters.news_detail("ai-diagnostics-breakthrough", loader)
        assert result.status_code == 500
        assert result.body["error"] == "Failed to fetch article"


class TestListAdapters:
    @pytest.mark.asyncio
    async def test_faculty_default_returns_full_list(self, loader):
        result = await adapters.faculty_list(loader=loader)
        assert [m["id"] for m in result.body["data"]] == ["sarah-chen", "marcus-webb", "amara-okafor"]

    @pytest.mark.asyncio
    async def test_faculty_query_is_paginated(self, loader):
        result = await adapters.faculty_list(query="dr.", limit=2, loader=loader)
        data = result.body["data"]
        assert [m["id"] for m in data["items"]] == ["amara-okafor", "marcus-webb"]
        assert data["pagination"] == {"page": 1, "limit": 2, "total": 3, "totalPages": 2}

    @pytest.mark.asyncio
    async def test_research_status_filter(self, loader):
        result = await adapters.research_list(status="active", loader=loader)
        assert [p["id"] for p in result.body["data"]["items"]] == ["early-lung-cancer-detection"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("adapter", [adapters.faculty_list, adapters.research_list])
    async def test_default_params_return_bare_list(self, loader, adapter):
        result = await adapter(loader=loader)
        assert isinstance(result.body["data"], list)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("adapter", [adapters.faculty_list, adapters.research_list])
    async def test_second_page_is_paginated(self, loader, adapter):
        result = await adapter(page=2, loader=loader)
        data = result.body["data"]
        assert data["items"] == []
        assert data["pagination"]["page"] == 2

    @pytest.mark.asyncio
    async def test_programs_invalid_enum_is_400(self, loader):
        result = await adapters.programs_list(program_type="bootcamp", loader=loader)
        assert result.status_code == 400
        assert result.body["error"] == "Invalid query parameters"
        assert result.body["details"][0]["field"] == "type"

    @pytest.mark.asyncio
    async def test_programs_filters(self, loader):
        result = await adapters.programs_list(featured="true", loader=loader)
        assert [p["id"] for p in result.body["data"]["items"]] == ["ms-medical-ai"]

    @pytest.mark.asyncio
    async def test_news_count(self, loader):
        result = await adapters.news_list(tag="ai", loader=loader)
        assert result.body["count"] == 2
        assert [a["slug"] for a in result.body["data"]] == [
            "ai-diagnostics-breakthrough",
            "ai-ethics-seminar-series",
        ]

    @pytest.mark.asyncio
    async def test_news_broken_store(self, loader, write_json):
        write_json("news/sample.json", {"not": "a list"})
        result = await adapters.news_list(loader=loader)
        assert result.status_code == 500
        assert result.body["error"] == "Failed to fetch news articles"

    @pytest.mark.asyncio
    async def test_events_invalid_month(self, loader):
        result = await adapters.events_list(month="2024-13", loader=loader)
        assert result.status_code == 400

    @pytest.mark.asyncio
    async def test_events_upcoming(self, loader):
        now = datetime(2025, 1, 1, tzinfo=timezone.utc)
        result = await adapters.events_list(upcoming="true", loader=loader, now=now)
        assert [e["id"] for e in result.body["data"]] == ["event-ethics-seminar"]
        assert result.body["count"] == 1

    @pytest.mark.asyncio
    async def test_events_unknown_type_ignored(self, loader):
        result = await adapters.events_list(event_type="gala", loader=loader)
        assert result.body["count"] == 2


class TestDiagnosticsAndSearch:
    @pytest.mark.asyncio
    async def test_content_health(self, data_root):
        result = await adapters.content_health(ContentHealthChecker(data_root))
        assert result.status_code == 200
        assert result.body["message"] == "Content health check completed"
        assert result.body["data"]["totalFiles"] == 6

    @pytest.mark.asyncio
    async def test_content_health_missing_root(self, tmp_path):
        result = await adapters.content_health(ContentHealthChecker(tmp_path / "gone"))
        assert result.status_code == 500
        assert result.body["error"] == "Failed to perform content health check"

    @pytest.mark.asyncio
    async def test_rebuild(self, search_cache):
        result = await adapters.rebuild_search_index(search_cache)
        assert result.status_code == 200
        assert result.body["message"] == "Search index rebuild completed"
        assert result.body["data"] == {"entries": 13}
        assert "timestamp" in result.body

    @pytest.mark.asyncio
    async def test_rebuild_upstream_failure(self, search_cache):
        with patch.object(search_cache, "rebuild", new_callable=AsyncMock) as rebuild:
            rebuild.side_effect = UpstreamError("faculty unavailable")
            result = await adapters.rebuild_search_index(search_cache)
        assert result.status_code == 500
        assert result.body["error"] == "Failed to rebuild search index"
        assert result.body["details"] == "faculty unavailable"

    @pytest.mark.asyncio
    async def test_failed_rebuild_keeps_previous_index(self, search_cache, data_root):
        previous = await search_cache.rebuild()
        (data_root / "events" / "sample.json").unlink()

        result = await adapters.rebuild_search_index(search_cache)
        assert result.status_code == 500
        assert not search_cache.is_stale()
        assert await search_cache.get() is previous

    @pytest.mark.asyncio
    async def test_search_short_query(self, search_cache):
        result = await adapters.search(q="a", cache=search_cache)
        assert result.status_code == 400
        assert result.body["error"] == "Query must be at least 2 characters long"

    @pytest.mark.asyncio
    async def test_search_empty_query(self, search_cache):
        result = await adapters.search(q="", cache=search_cache)
        assert result.status_code == 200
        assert result.body["results"] == []
        assert result.body["total"] == 0

    @pytest.mark.asyncio
    async def test_search_results_camel_case(self, search_cache):
        result = await adapters.search(q="sepsis", cache=search_cache)
        first = result.body["results"][0]
        assert first["id"] == "federated-sepsis"
        assert "relevanceScore" in first

    @pytest.mark.asyncio
    async def test_suggestions_never_fail(self, search_cache):
        assert (await adapters.search_suggestions(None, search_cache)).body == {"suggestions": []}
        assert (await adapters.search_suggestions({"query": "a"}, search_cache)).body == {"suggestions": []}
        result = await adapters.search_suggestions({"query": "learn", "limit": 2}, search_cache)
        assert result.status_code == 200
        assert len(result.body["suggestions"]) == 2


class TestContactAdapter:
    @pytest.mark.asyncio
    async def test_invalid_form(self):
        result = await adapters.submit_contact({"name": "x"})
        assert result.status_code == 400
        assert result.body["error"] == "Invalid form data"
        assert {d["field"] for d in result.body["details"]} >= {"email", "subject", "message"}

    @pytest.mark.asyncio
    async def test_unexpected_failure(self):
        with patch(
            "app.routes.adapters.contact_service.submit",
            new_callable=AsyncMock,
            side_effect=RuntimeError("smtp down"),
        ):
            result = await adapters.submit_contact({}, client_ip="198.51.100.7")
        assert result.status_code == 500
        assert result.body["error"] == "Internal server error"
