"""Authority model persisted in a case's authorities file."""

from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field


def _now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class Authority(BaseModel):
    """A citation the practitioner has chosen to rely on.

    Attributes:
        id: Caller-assigned identifier; saving an existing id replaces the record
        citation: Citation text as written (e.g. '[2020] UKSC 42')
        case_name: Optional case name
        url: Judgment URL the practitioner verified
        source: Provider identifier (bailii, find_case_law, ...)
        title: Optional judgment title
        date_added: ISO-8601 timestamp, defaults to now (UTC)
        notes: Free-text notes
    """

    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(..., min_length=1)
    citation: str
    case_name: str | None = Field(default=None, alias="caseName")
    url: str
    source: str
    title: str | None = None
    date_added: str = Field(default_factory=_now_iso, alias="dateAdded")
    notes: str | None = None
