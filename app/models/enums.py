"""Enum types mirroring the PostgreSQL enums of the CRM schema."""

from enum import Enum


class FieldType(str, Enum):
    """Closed set of form field type tags."""
    text = "text"
    email = "email"
    tel = "tel"
    textarea = "textarea"
    select = "select"
    radio = "radio"
    checkbox = "checkbox"
    file = "file"
    date = "date"


class FieldRole(str, Enum):
    """Applicant attribute a form field supplies."""
    name = "name"
    email = "email"


class CampaignStatus(str, Enum):
    """Lifecycle status of a recruitment campaign."""
    draft = "draft"
    active = "active"
    paused = "paused"
    closed = "closed"


class CandidateStatus(str, Enum):
    """Review status of a candidate application."""
    pending = "pending"
    reviewing = "reviewing"
    accepted = "accepted"
    rejected = "rejected"


class WidgetKind(str, Enum):
    """Input control used to render a field on the public page."""
    input = "input"
    textarea = "textarea"
    select = "select"
    radio_group = "radio_group"
    checkbox_group = "checkbox_group"
    file = "file"
