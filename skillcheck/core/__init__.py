"""Core Layer — pure rule evaluation, no IO, no logging, no environment.

Invariants:
    - No module in core/ imports from services/ or infrastructure/
    - Calculations are deterministic given the injected RandomSource

Design Decisions:
    - Functional core separated from imperative shell (services/ + infrastructure/)
"""
