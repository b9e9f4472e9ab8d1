"""Domain models and values.

Why:
- Plain, strict data structures (Pydantic v2) and version values live here.
- The domain knows nothing about HTTP, shell or CLI: only GoCD concepts.
"""
