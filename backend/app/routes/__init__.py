# Routes package init
"""
MedAI Backend — API Routes Package
====================================

What:  HTTP route handlers that accept requests and return responses.
Why:   Routes are the entry point for all API calls from the website.
How:   Each route module handles one resource; adapters.py holds the
       transport-independent logic they all delegate to.

Route Inventory:
    - faculty.py:   GET  /api/faculty, /api/faculty/{id}
    - research.py:  GET  /api/research, /api/research/{id}
    - programs.py:  GET  /api/programs, /api/programs/applications, /api/programs/{id}
    - news.py:      GET  /api/news, /api/news/{slug}
    - events.py:    GET  /api/events
    - content.py:   GET  /api/content/health
    - search.py:    GET  /api/search, POST /api/search/suggestions, POST /api/search/rebuild
    - contact.py:   POST /api/contact
    - health.py:    GET  /health

Design Principle:
    Routes should be THIN: extract values from the request, call an adapter,
    return its RouteResult. Status code rules live in adapters.py.
"""
