"""
Kanban board backend package.

- ``src.kanban.main``: FastAPI application factory and ASGI ``app``
- ``src.kanban.service``: authoritative board store
- ``src.kanban.client``: client-side board cache with optimistic moves
"""
