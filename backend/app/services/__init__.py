# Services package init
"""
MedAI Backend — Services Layer
================================

What:  Content retrieval, validation and query logic, independent of HTTP.
How:   Loaders and lookups return Envelopes instead of raising; the route
       adapters decide status codes.

Service Inventory:
    - validators:      per-entity schema validation, first offending field reported
    - data_loader:     ContentLoader, collection → validated list envelope
    - lookup:          get-by-id / slug, related items, filters, sorting, pagination
    - search_index:    SearchIndexCache, the cached site-wide search index
    - content_health:  per-file report over the backing store
    - contact_service: contact form validation, sanitizing and logging
"""
