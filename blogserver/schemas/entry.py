"""Entry Schemas — Pydantic models for the persisted document and the submission form.

Invariants:
    - EntryRecord.id is positive; StoreDocument ids are unique
    - EntryRecord.date is always timezone-aware (naive input is read as UTC)
    - SubmissionForm strips title and content; blank after strip means invalid

Design Decisions:
    - Pydantic at the file boundary: schema violations surface as one
      ValidationError that persistence maps to StoreDecodeError
    - Form validation returns a bool instead of raising: an invalid submission
      is a silent redirect, not an error response
"""

from datetime import datetime, timezone

from pydantic import BaseModel, Field, field_validator, model_validator

from blogserver.core.entry import Entry


class EntryRecord(BaseModel):
    """On-disk representation of one entry."""
    id: int = Field(gt=0)
    title: str
    content: str
    date: datetime

    @field_validator("date")
    @classmethod
    def assume_utc(cls, v: datetime) -> datetime:
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v

    @classmethod
    def from_entry(cls, entry: Entry) -> "EntryRecord":
        return cls(
            id=entry.id, title=entry.title,
            content=entry.content, date=entry.date,
        )

    def to_entry(self) -> Entry:
        return Entry(
            id=self.id, title=self.title,
            content=self.content, date=self.date,
        )


class StoreDocument(BaseModel):
    """The whole persisted file: newest-first list of entries."""
    entries: list[EntryRecord] = Field(default_factory=list)

    @model_validator(mode="after")
    def unique_ids(self) -> "StoreDocument":
        ids = [e.id for e in self.entries]
        if len(ids) != len(set(ids)):
            raise ValueError("entry ids must be unique")
        return self


class SubmissionForm(BaseModel):
    """POST /submit/ form fields."""
    title: str = ""
    content: str = ""

    @field_validator("title", "content")
    @classmethod
    def strip(cls, v: str) -> str:
        return v.strip()

    @property
    def is_complete(self) -> bool:
        return bool(self.title and self.content)
