# Middleware package init
"""
Catalogue Service — HTTP Middleware Package
=============================================

What:  Concerns applied around the whole ASGI app, outside routing.

    Request → [Request Observability] → Router → Endpoint → Service chain

Service-level concerns (per-method logging and metrics) live in
catalogue.services as CatalogueService wrappers instead.
"""
