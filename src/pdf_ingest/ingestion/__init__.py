"""
Ingestion — the four pipeline stages: fetch, extract, chunk, embed + upload.

Each stage is a small class with a synchronous method and an ``a``-prefixed
coroutine twin, so the pipeline can run blocking collaborators off the
event loop while tests call the plain methods directly.
"""
