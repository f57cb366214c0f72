# Middleware package init
"""
Prerender Gate - Middleware Package
====================================

What:  Starlette adapters around the snapshot pipeline.

Middleware Chain:
    Request → [Logging] → [Prerender] → Route Handler

    1. Logging outermost: times and logs every response, snapshot or not
    2. Prerender: answers crawlers with a snapshot or calls the route handler
"""
