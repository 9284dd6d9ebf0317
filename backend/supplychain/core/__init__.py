"""Core Layer — pure dispatch logic: operation table, envelope parsing, classification.

Invariants:
    - No module in core/ imports from services/, api/ or infrastructure/
    - All functions are pure and deterministic; IO only through boundary_protocols

Design Decisions:
    - Functional core separated from imperative shell
"""
