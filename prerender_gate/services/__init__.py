# Services package init
"""
Prerender Gate - Services Layer
================================

What:  The snapshot pipeline, independent of any web framework.

Service Inventory:
    - RequestClassifier: Snapshot eligibility rules
    - upstream: Rendering backend URL, headers and options
    - SnapshotRetriever: HTTP call to the rendering backend
    - SnapshotCache (abstract): Read/write hooks for a snapshot store
    - NullSnapshotCache / InMemorySnapshotCache: Bundled stores
    - PrerenderService: Orchestrates the services above per request
"""
