"""Pydantic models for the ``campaigns`` table and candidate statistics."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from app.models.enums import CampaignStatus


class CampaignCreate(BaseModel):
    """Payload for creating a campaign."""
    title: str = Field(min_length=1)
    description: str | None = None
    status: CampaignStatus = CampaignStatus.draft
    form_id: str | None = None


class CampaignUpdate(BaseModel):
    """Partial update; only the keys present in the body are written."""
    title: str | None = Field(default=None, min_length=1)
    description: str | None = None
    status: CampaignStatus | None = None
    form_id: str | None = None

    @field_validator("title", "status")
    @classmethod
    def _not_null(cls, value: object) -> object:
        # Omit the key to leave it unchanged
        if value is None:
            raise ValueError("may not be null")
        return value


class Campaign(BaseModel):
    """Full campaign record returned from the database."""
    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    description: str | None = None
    status: CampaignStatus = CampaignStatus.draft
    form_id: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class StatusCounts(BaseModel):
    """Candidate counts by review status."""
    total: int = 0
    pending: int = 0
    reviewing: int = 0
    accepted: int = 0
    rejected: int = 0
