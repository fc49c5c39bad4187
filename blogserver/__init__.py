"""blogserver — single-process blog with an in-memory entry store.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)
"""
