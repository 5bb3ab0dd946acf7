"""
MedAI Backend — Search Index Cache
====================================

What:  Owns the materialized site-wide search index (faculty, research, news,
       events, programs) and scores queries against it.
Why:   Building the index reads every collection from disk; caching it for a
       few minutes keeps /api/search cheap while edits still surface quickly.
How:   `get()` returns the cached entries, rebuilding lazily when empty or
       older than `settings.search_cache_ttl`. `rebuild()` loads every indexed
       collection concurrently and swaps the new entries in only if ALL loads
       succeeded. `invalidate()` drops the cache so the next `get()` rebuilds.
Who:   GET /api/search, POST /api/search/suggestions, POST /api/search/rebuild.

Scoring (per query term, then averaged over terms):
    title contains term          +3   (title equals term: +3 more)
    each occurrence in the text  +1
    any tag contains term        +2
"""

import asyncio
import logging
import re
import time
from collections import Counter
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional, Sequence

from pydantic import BaseModel, Field

from app.config import settings
from app.exceptions import UpstreamError
from app.schemas.envelope import (
    SearchFacets,
    SearchResponse,
    SearchResult,
    TagFacet,
    TypeFacet,
)
from app.services.data_loader import Collection, ContentLoader, content_loader

logger = logging.getLogger(__name__)

TITLE_WEIGHT = 3
CONTENT_WEIGHT = 1
TAG_WEIGHT = 2

MAX_HIGHLIGHTS = 3
HIGHLIGHT_CONTEXT = 100
MAX_TAG_FACETS = 20
MAX_INLINE_SUGGESTIONS = 5
MAX_QUERY_LENGTH = 100


class SearchEntry(BaseModel):
    """One searchable document; `searchable_text` and `tags` are lower-cased."""

    id: str
    type: str
    title: str
    content: str
    searchable_text: str
    tags: List[str] = Field(default_factory=list)
    metadata: Dict[str, Any] = Field(default_factory=dict)


# ══════════════════════════════════════════════════════════════════════════
# Index builders (validated records → SearchEntry)
# ══════════════════════════════════════════════════════════════════════════


def _join(*parts: Any) -> str:
    return " ".join(str(p) for p in parts if p).lower()


def index_faculty(members: Sequence[Any]) -> List[SearchEntry]:
    return [
        SearchEntry(
            id=m.id,
            type="faculty",
            title=m.name,
            content=m.bio,
            searchable_text=_join(
                m.name, m.title, m.department, m.bio,
                *m.research_areas,
                *(f"{e.degree} {e.institution} {e.field or ''}" for e in m.education),
                *(f"{p.title} {p.journal}" for p in m.publications),
            ),
            tags=[area.lower() for area in m.research_areas],
            metadata={
                "title": m.title,
                "department": m.department,
                "email": m.email,
                "profileImage": m.profile_image,
                "isActive": m.is_active,
            },
        )
        for m in members
    ]


def index_research(projects: Sequence[Any]) -> List[SearchEntry]:
    return [
        SearchEntry(
            id=p.id,
            type="research",
            title=p.title,
            content=p.description,
            searchable_text=_join(
                p.title, p.description, p.principal_investigator,
                *p.collaborators, p.funding_source, *p.tags,
                *(f"{pub.title} {pub.journal}" for pub in p.publications or []),
            ),
            tags=[t.lower() for t in p.tags],
            metadata={
                "status": p.status,
                "principalInvestigator": p.principal_investigator,
                "collaborators": list(p.collaborators),
                "startDate": p.start_date.isoformat(),
                "endDate": p.end_date.isoformat() if p.end_date else None,
                "featured": p.featured,
                "images": list(p.images),
            },
        )
        for p in projects
    ]


def index_news(articles: Sequence[Any]) -> List[SearchEntry]:
    return [
        SearchEntry(
            id=a.id,
            type="news",
            title=a.title,
            content=a.excerpt,
            searchable_text=_join(a.title, a.excerpt, a.content, a.author, *a.tags),
            tags=[t.lower() for t in a.tags],
            metadata={
                "slug": a.slug,
                "author": a.author,
                "publishDate": a.publish_date.isoformat(),
                "featuredImage": a.featured_image,
                "featured": a.featured,
            },
        )
        for a in articles
    ]


def index_events(events: Sequence[Any]) -> List[SearchEntry]:
    return [
        SearchEntry(
            id=e.id,
            type="event",
            title=e.title,
            content=e.description,
            searchable_text=_join(
                e.title, e.description, e.location, e.event_type,
                *(e.speakers or []), *e.tags,
            ),
            tags=[t.lower() for t in e.tags],
            metadata={
                "startDate": e.start_date.isoformat(),
                "endDate": e.end_date.isoformat() if e.end_date else None,
                "location": e.location,
                "eventType": e.event_type,
                "registrationUrl": e.registration_url,
                "capacity": e.capacity,
                "speakers": list(e.speakers) if e.speakers else None,
            },
        )
        for e in events
    ]


def index_programs(programs: Sequence[Any]) -> List[SearchEntry]:
    return [
        SearchEntry(
            id=p.id,
            type="program",
            title=p.title,
            content=p.description,
            searchable_text=_join(
                p.title, p.description, p.type, p.level, p.format,
                *(f"{c.code} {c.title}" for c in p.courses),
            ),
            tags=[p.type, p.level, p.format],
            metadata={
                "type": p.type,
                "level": p.level,
                "format": p.format,
                "duration": p.duration,
                "featured": p.featured,
                "isActive": p.is_active,
            },
        )
        for p in programs
    ]


INDEXED_COLLECTIONS: Dict[Collection, Callable[[Sequence[Any]], List[SearchEntry]]] = {
    Collection.FACULTY: index_faculty,
    Collection.RESEARCH: index_research,
    Collection.NEWS: index_news,
    Collection.EVENTS: index_events,
    Collection.PROGRAMS: index_programs,
}


# ══════════════════════════════════════════════════════════════════════════
# Query helpers
# ══════════════════════════════════════════════════════════════════════════


def sanitize_query(query: str) -> str:
    """Strips markup and punctuation, collapses whitespace, caps the length."""
    cleaned = query.strip().replace("<", "").replace(">", "")
    cleaned = re.sub(r"[^\w\s-]", " ", cleaned)
    cleaned = re.sub(r"\s+", " ", cleaned).strip()
    return cleaned[:MAX_QUERY_LENGTH]


def score_entry(entry: SearchEntry, terms: Sequence[str]) -> float:
    if not terms:
        return 0.0
    score = 0
    title = entry.title.lower()
    for term in terms:
        if term in title:
            score += TITLE_WEIGHT
            if title == term:
                score += TITLE_WEIGHT
        score += len(re.findall(re.escape(term), entry.searchable_text)) * CONTENT_WEIGHT
        if any(term in tag for tag in entry.tags):
            score += TAG_WEIGHT
    return score / len(terms)


def highlight_entry(entry: SearchEntry, terms: Sequence[str]) -> List[str]:
    highlights: List[str] = []
    for term in terms:
        escaped = re.escape(term)
        pattern = re.compile(
            rf"(.{{0,{HIGHLIGHT_CONTEXT}}})({escaped})(.{{0,{HIGHLIGHT_CONTEXT}}})",
            re.IGNORECASE,
        )
        for match in pattern.finditer(entry.searchable_text):
            snippet = re.sub(f"({escaped})", r"<mark>\1</mark>", match.group(0), flags=re.IGNORECASE)
            highlights.append(f"...{snippet}...")
            if len(highlights) >= MAX_HIGHLIGHTS:
                return highlights
    return highlights


def result_url(entry: SearchEntry) -> str:
    if entry.type == "faculty":
        return f"/faculty/{entry.id}"
    if entry.type == "research":
        return f"/research/{entry.id}"
    if entry.type == "news":
        return f"/news/{entry.metadata.get('slug') or entry.id}"
    if entry.type == "event":
        return f"/events#{entry.id}"
    if entry.type == "program":
        return f"/programs/{entry.id}"
    return "/"


def suggest(entries: Sequence[SearchEntry], query: str, limit: int = MAX_INLINE_SUGGESTIONS) -> List[str]:
    """
    Titles and tags containing `query` (but not equal to it).

    Candidates are ordered by where the match starts, then by length.
    """
    needle = query.lower()
    candidates: List[str] = []
    seen = set()
    for entry in entries:
        options = [entry.title, *entry.tags]
        for option in options:
            lowered = option.lower()
            if needle in lowered and lowered != needle and option not in seen:
                seen.add(option)
                candidates.append(option)
        if len(candidates) >= limit * 2:
            break
    candidates.sort(key=lambda c: (c.lower().index(needle), len(c)))
    return candidates[:limit]


# ══════════════════════════════════════════════════════════════════════════
# Cache
# ══════════════════════════════════════════════════════════════════════════


class SearchIndexCache:
    """
    Explicit owner of the search index and its build timestamp.

    State:
        _entries:  materialized index, or None when never built / invalidated
        _built_at: time.time() of the last successful rebuild
    """

    def __init__(self, loader: Optional[ContentLoader] = None, ttl: Optional[int] = None):
        self._loader = loader
        self._ttl = ttl
        self._entries: Optional[List[SearchEntry]] = None
        self._built_at: float = 0.0

    @property
    def loader(self) -> ContentLoader:
        return self._loader or content_loader

    @property
    def ttl(self) -> int:
        return settings.search_cache_ttl if self._ttl is None else self._ttl

    @property
    def built_at(self) -> Optional[datetime]:
        if self._entries is None:
            return None
        return datetime.fromtimestamp(self._built_at, tz=timezone.utc)

    def is_stale(self) -> bool:
        return self._entries is None or (time.time() - self._built_at) > self.ttl

    def invalidate(self) -> None:
        self._entries = None
        self._built_at = 0.0
        logger.info("Search index invalidated")

    async def rebuild(self) -> List[SearchEntry]:
        """
        Load every indexed collection concurrently and replace the index.

        Raises:
            UpstreamError: A collection failed to load; the previous index
                (if any) is left untouched.
        """
        collections = list(INDEXED_COLLECTIONS)
        envelopes = await asyncio.gather(*(self.loader.load(c) for c in collections))

        entries: List[SearchEntry] = []
        for collection, envelope in zip(collections, envelopes):
            if not envelope.success:
                raise UpstreamError(
                    message=f"Could not load '{collection.value}' for the search index: {envelope.error}",
                    context={"collection": collection.value, "kind": envelope.kind},
                )
            entries.extend(INDEXED_COLLECTIONS[collection](envelope.data))

        self._entries = entries
        self._built_at = time.time()
        logger.info("Search index rebuilt with %d entries", len(entries))
        return entries

    async def get(self) -> List[SearchEntry]:
        if self.is_stale():
            return await self.rebuild()
        return self._entries

    async def search(
        self,
        query: str,
        types: Optional[List[str]] = None,
        tags: Optional[List[str]] = None,
        limit: int = 10,
        offset: int = 0,
        min_score: float = 0.1,
    ) -> SearchResponse:
        """
        Score `query` against the index.

        `query` is expected to be sanitized already. `total` and the facets
        cover every result above `min_score`, not just the returned page.
        """
        if not query.strip():
            return SearchResponse(query=query)

        entries = await self.get()
        terms = [t for t in query.lower().split() if t]

        candidates = entries
        if types:
            candidates = [e for e in candidates if e.type in types]
        if tags:
            wanted = {t.lower() for t in tags}
            candidates = [e for e in candidates if wanted.intersection(e.tags)]

        scored = [(score_entry(e, terms), e) for e in candidates]
        relevant = [(s, e) for s, e in scored if s >= min_score]
        relevant.sort(key=lambda pair: pair[0], reverse=True)

        results = [
            SearchResult(
                id=e.id,
                type=e.type,
                title=e.title,
                description=e.content,
                url=result_url(e),
                relevance_score=score,
                highlights=highlight_entry(e, terms),
                metadata=e.metadata,
            )
            for score, e in relevant[offset:offset + limit]
        ]

        type_counts = Counter(e.type for _, e in relevant)
        tag_counts = Counter(tag for _, e in relevant for tag in e.tags)

        return SearchResponse(
            results=results,
            total=len(relevant),
            query=query,
            suggestions=suggest(entries, query),
            facets=SearchFacets(
                types=[TypeFacet(type=t, count=c) for t, c in type_counts.most_common()],
                tags=[TagFacet(tag=t, count=c) for t, c in tag_counts.most_common(MAX_TAG_FACETS)],
            ),
        )

    async def suggestions(self, query: str, limit: int = MAX_INLINE_SUGGESTIONS) -> List[str]:
        entries = await self.get()
        return suggest(entries, query, limit)


# Singleton instance
search_index_cache = SearchIndexCache()
