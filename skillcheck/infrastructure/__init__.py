"""Infrastructure Layer — port adapters and cross-cutting concerns (logging).

Invariants:
    - Adapters satisfy core/port_protocols.py structurally; none subclass engine types
    - Adapters with mutable state guard it with a lock

Design Decisions:
    - Bundled adapters are in-memory or file based; durable storage belongs to the caller
"""
