"""Infrastructure Layer — file IO, template compilation, logging.

Invariants:
    - Infrastructure failures are mapped to BlogError subclasses (core/errors.py)
"""
