"""Schemas — Pydantic models at the file and form boundaries."""
