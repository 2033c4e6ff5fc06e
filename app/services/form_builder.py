"""Form builder: edit a form's field list and save it through the API.

The builder keeps a local draft.  Field edits never touch the network;
``save()`` sends the complete field list, creating the form on first save
and replacing it wholesale afterwards.  Field order is the list order.
"""

from __future__ import annotations

import logging
import threading
import time
from typing import Any

import httpx
from pydantic import ValidationError

from app.core.constants import DEFAULT_CHOICE_OPTIONS, DEFAULT_FORM_TITLE
from app.models.enums import FieldType
from app.models.form import dump_fields, field_adapter

logger = logging.getLogger(__name__)

_CHOICE_TYPES = {FieldType.select.value, FieldType.radio.value, FieldType.checkbox.value}

_id_lock = threading.Lock()
_last_field_id = 0


class FormBuilderError(ValueError):
    """A builder operation cannot be applied to the current draft."""


def new_field_id() -> str:
    """Return a millisecond-timestamp token unique within this process."""
    global _last_field_id
    with _id_lock:
        candidate = time.time_ns() // 1_000_000
        if candidate <= _last_field_id:
            candidate = _last_field_id + 1
        _last_field_id = candidate
        return str(candidate)


def default_field(field_type: FieldType | str) -> Any:
    """Return a freshly created field of *field_type* with default attributes."""
    type_value = FieldType(field_type).value
    data: dict[str, Any] = {
        "id": new_field_id(),
        "type": type_value,
        "label": f"New {type_value} field",
        "placeholder": "",
        "required": False,
    }
    if type_value in _CHOICE_TYPES:
        data["options"] = list(DEFAULT_CHOICE_OPTIONS)
    return field_adapter.validate_python(data)


class FormBuilder:
    """Local draft of a form plus the calls that persist it."""

    def __init__(
        self,
        http: httpx.Client,
        form_id: str | None = None,
        title: str = DEFAULT_FORM_TITLE,
        description: str = "",
        fields: list[Any] | None = None,
        is_published: bool = False,
        api_prefix: str = "/api",
    ) -> None:
        self.http = http
        self.form_id = form_id
        self.title = title
        self.description = description
        self.fields: list[Any] = list(fields or [])
        self.is_published = is_published
        self.api_prefix = api_prefix.rstrip("/")

    @classmethod
    def load(cls, http: httpx.Client, form_id: str, api_prefix: str = "/api") -> FormBuilder:
        """Open an existing form for editing."""
        response = http.get(f"{api_prefix.rstrip('/')}/forms/{form_id}")
        response.raise_for_status()
        row = response.json()
        fields: list[Any] = []
        for index, raw in enumerate(row.get("fields") or []):
            try:
                fields.append(field_adapter.validate_python(raw))
            except ValidationError as exc:
                problem = exc.errors()[0]
                location = ".".join(str(part) for part in problem["loc"])
                raise FormBuilderError(
                    f"Field {index + 1} of form {form_id} is invalid ({location}: {problem['msg']})"
                ) from exc
        return cls(
            http,
            form_id=row["id"],
            title=row.get("title") or "",
            description=row.get("description") or "",
            fields=fields,
            is_published=bool(row.get("is_published")),
            api_prefix=api_prefix,
        )

    # -- field editing ------------------------------------------------------

    def _index(self, field_id: str) -> int:
        for index, field in enumerate(self.fields):
            if field.id == field_id:
                return index
        raise FormBuilderError(f"No field with id {field_id}")

    def get_field(self, field_id: str) -> Any:
        return self.fields[self._index(field_id)]

    def add_field(self, field_type: FieldType | str) -> Any:
        """Append a new field of *field_type* and return it."""
        field = default_field(field_type)
        self.fields.append(field)
        return field

    def update_field(self, field_id: str, **changes: Any) -> Any:
        """Replace attributes of one field; the result is re-validated.

        Switching to a choice type without options seeds the placeholder
        options.  Renaming the id is refused: stored answers are keyed by it.
        """
        index = self._index(field_id)
        if changes.get("id", field_id) != field_id:
            raise FormBuilderError("Field ids cannot be changed")

        data = self.fields[index].model_dump()
        data.update(changes)
        if data["type"] in _CHOICE_TYPES and not data.get("options"):
            data["options"] = list(DEFAULT_CHOICE_OPTIONS)

        field = field_adapter.validate_python(data)
        self.fields[index] = field
        return field

    def delete_field(self, field_id: str) -> None:
        del self.fields[self._index(field_id)]

    def move_field(self, field_id: str, new_index: int) -> None:
        """Move a field to *new_index* (clamped to the list bounds)."""
        field = self.fields.pop(self._index(field_id))
        new_index = max(0, min(new_index, len(self.fields)))
        self.fields.insert(new_index, field)

    # -- persistence --------------------------------------------------------

    def to_payload(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "description": self.description,
            "fields": dump_fields(self.fields),
            "is_published": self.is_published,
        }

    def save(self) -> dict[str, Any]:
        """Create or replace the form and return the stored row."""
        if not self.title.strip():
            raise FormBuilderError("Please enter a form title")

        if self.form_id is None:
            response = self.http.post(f"{self.api_prefix}/forms", json=self.to_payload())
        else:
            response = self.http.put(
                f"{self.api_prefix}/forms/{self.form_id}", json=self.to_payload()
            )
        response.raise_for_status()
        row = response.json()
        self.form_id = row["id"]
        logger.info(
            "form_saved",
            extra={"form_id": self.form_id, "field_count": len(self.fields)},
        )
        return row

    def publish(self, is_published: bool = True) -> dict[str, Any] | None:
        """Set the publish flag; saved forms are updated immediately."""
        self.is_published = is_published
        if self.form_id is None:
            return None
        response = self.http.patch(
            f"{self.api_prefix}/forms/{self.form_id}/publish",
            json={"is_published": is_published},
        )
        response.raise_for_status()
        return response.json()
