# Routes package init
"""
Catalogue Service — HTTP Routes Package
=========================================

Route Inventory:
    - catalogue.py:  GET /catalogue            (filtered, ordered, paginated list)
                     GET /catalogue/size       (count for a tag filter)
                     GET /catalogue/{id}       (single sock)
                     GET /tags                 (distinct tags)
    - health.py:     GET /health, GET /healthz (liveness and store status)

Routers are built from an Endpoints bundle rather than importing services,
so the app factory decides what sits behind each route.
"""
