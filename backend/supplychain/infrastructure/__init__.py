"""Infrastructure Layer — external service clients and cross-cutting concerns.

Invariants:
    - Infrastructure never imports from services/ or api/
    - External failures are mapped to core.errors types at this boundary

Design Decisions:
    - Thin wrappers over httpx: isolate wire formats from dispatch logic
"""
