"""Services Layer — orchestration around the core: resolution, remote calls, dispatch.

Invariants:
    - Exactly one outbound call (ledger or HTTP) per dispatched operation
"""
