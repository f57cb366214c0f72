# Routes package init
"""
Prerender Gate - Routes Package
================================

Route Inventory:
    - health.py:  GET /health  (liveness and configured rendering service)

Every other path belongs to the host application; PrerenderMiddleware sits
in front of all of them.
"""
