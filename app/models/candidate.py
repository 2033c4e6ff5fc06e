"""Pydantic models for the ``candidates`` and
``application_status_history`` tables.

``data`` maps form field ids to the submitted answer: a string for
single-value fields, a list of strings for checkbox groups.
"""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field

from app.core.constants import MAX_RATING, MIN_RATING
from app.models.enums import CandidateStatus

AnswerValue = str | list[str]


class CandidateCreate(BaseModel):
    """Application payload posted by the public submission page.

    Required keys are checked by the route so that a missing one yields
    the same static message regardless of which is absent.
    """
    campaign_id: str | None = None
    form_id: str | None = None
    data: dict[str, AnswerValue] = Field(default_factory=dict)
    email: str | None = None
    name: str | None = None
    phone: str | None = None
    resume_url: str | None = None
    cover_letter: str | None = None


class CandidateUpdate(BaseModel):
    """Reviewer edits to a candidate (rating and notes)."""
    rating: int | None = Field(default=None, ge=MIN_RATING, le=MAX_RATING)
    notes: str | None = None


class StatusChange(BaseModel):
    """Body of PUT /candidates/{id}/status."""
    status: CandidateStatus
    notes: str | None = None
    reviewed_by: str | None = None


class Candidate(BaseModel):
    """Full candidate record returned from the database."""
    model_config = ConfigDict(from_attributes=True)

    id: str
    campaign_id: str
    form_id: str
    data: dict[str, AnswerValue] = Field(default_factory=dict)
    status: CandidateStatus = CandidateStatus.pending
    email: str
    name: str
    phone: str | None = None
    resume_url: str | None = None
    cover_letter: str | None = None
    rating: int | None = None
    notes: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class StatusHistoryEntry(BaseModel):
    """One immutable row of the status audit trail."""
    model_config = ConfigDict(from_attributes=True)

    id: str | None = None
    candidate_id: str
    status: CandidateStatus
    notes: str = ""
    reviewed_by: str | None = None
    created_at: datetime | None = None
