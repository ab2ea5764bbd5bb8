"""Services Layer — use cases that drive the core through injected ports.

Invariants:
    - Services depend on core/ and on Protocol ports only, never on concrete adapters
    - Every failure leaving a service is a SkillCheckError
"""
