"""
Catalogue Service — Application Package
=========================================

What:  Read-only product catalogue ("socks") served over HTTP.
How:   Requests flow through five layers, each depending only on the one below
       through a small contract:

    ┌─────────────────────────────────────┐
    │      Routes (HTTP transport)        │  ← decode query, encode JSON/errors
    ├─────────────────────────────────────┤
    │      Endpoints                      │  ← request/response shape translation
    ├─────────────────────────────────────┤
    │      Service middleware chain       │  ← logging, metrics (same contract)
    ├─────────────────────────────────────┤
    │      CatalogueService               │  ← validation, error classification
    ├─────────────────────────────────────┤
    │      SockRepository                 │  ← SQL against the relational store
    └─────────────────────────────────────┘

    The request observability middleware sits outside the router and times
    every non-health request.
"""

__version__ = "1.0.0"
