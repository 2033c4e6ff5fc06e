"""Pydantic models for the ``forms`` table and its field definitions.

A form's ``fields`` column is a JSON array of field definitions.  On the
write path every entry is validated as a tagged union keyed on ``type``:
text-like fields, choice fields (which must carry options) and file
fields.  Unknown tags are rejected before anything reaches the database.
"""

from datetime import datetime
from typing import Annotated, Any, Literal, Union

from pydantic import AfterValidator, BaseModel, ConfigDict, Field, TypeAdapter

from app.core.constants import DEFAULT_FORM_TITLE
from app.models.enums import FieldRole, WidgetKind


# --- Field definitions ---

class _FieldBase(BaseModel):
    """Attributes shared by every field type."""
    model_config = ConfigDict(extra="ignore")

    id: str = Field(min_length=1)
    label: str
    required: bool = False
    placeholder: str | None = None
    help_text: str | None = None


class TextField(_FieldBase):
    """Single-value free-text input (text, email, tel, textarea, date)."""
    type: Literal["text", "email", "tel", "textarea", "date"]
    role: FieldRole | None = None


class ChoiceField(_FieldBase):
    """Field answered from a fixed list of options."""
    type: Literal["select", "radio", "checkbox"]
    options: list[str] = Field(min_length=1)


class FileField(_FieldBase):
    """File picker; ``file_types`` lists accepted extensions."""
    type: Literal["file"]
    file_types: list[str] = Field(default_factory=list)


FieldDefinition = Annotated[
    Union[TextField, ChoiceField, FileField],
    Field(discriminator="type"),
]

field_adapter: TypeAdapter[Any] = TypeAdapter(FieldDefinition)


def dump_fields(fields: list[Any]) -> list[dict[str, Any]]:
    """Serialize field definitions into the JSON stored in ``forms.fields``."""
    return [f.model_dump(mode="json", exclude_none=True) for f in fields]


def _unique_ids(fields: list[Any]) -> list[Any]:
    seen: set[str] = set()
    for f in fields:
        if f.id in seen:
            raise ValueError(f"Duplicate field id: {f.id}")
        seen.add(f.id)
    return fields


FieldList = Annotated[list[FieldDefinition], AfterValidator(_unique_ids)]


# --- Forms ---

class FormCreate(BaseModel):
    """Payload for creating a form (starts as a draft by default)."""
    title: str = Field(default=DEFAULT_FORM_TITLE, min_length=1)
    description: str | None = None
    fields: FieldList = Field(default_factory=list)
    is_published: bool = False


class FormUpdate(BaseModel):
    """Full replacement of a form's mutable attributes."""
    title: str = Field(min_length=1)
    description: str | None = None
    fields: FieldList
    is_published: bool


class FormPublish(BaseModel):
    """Body of PATCH /forms/{id}/publish."""
    is_published: bool


class FormSchema(BaseModel):
    """A form as read back from the database, with typed fields."""
    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    description: str | None = None
    fields: list[FieldDefinition] = Field(default_factory=list)
    is_published: bool = False
    created_at: datetime | None = None
    updated_at: datetime | None = None


# --- Public rendering ---

class Widget(BaseModel):
    """Render instruction for one field of a public application page."""
    field_id: str
    label: str
    kind: WidgetKind
    required: bool = False
    input_type: str | None = None
    options: list[str] = Field(default_factory=list)
    accept: str | None = None
    placeholder: str | None = None
    help_text: str | None = None
