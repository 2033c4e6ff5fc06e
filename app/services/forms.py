"""Form schema persistence.

CRUD over the ``forms`` table.  Field definitions arrive already validated
(see ``app.models.form``) and are stored as a JSON array; reads return the
raw rows so that forms saved before field validation existed still load.
"""

from __future__ import annotations

import logging
from typing import Any

from app.core.constants import DUPLICATE_TITLE_SUFFIX
from app.core.exceptions import NotFoundError
from app.models.form import FormCreate, FormUpdate, dump_fields

logger = logging.getLogger(__name__)

PUBLIC_COLUMNS = "id, title, description, fields, is_published"


def list_forms(client: Any, is_published: bool | None = None) -> list[dict[str, Any]]:
    """Return all forms, newest first, optionally filtered by publish flag."""
    query = client.table("forms").select("*").order("created_at", desc=True)
    if is_published is not None:
        query = query.eq("is_published", is_published)
    return query.execute().data or []


def get_form(client: Any, form_id: str) -> dict[str, Any]:
    """Return one form row or raise ``NotFoundError``."""
    result = client.table("forms").select("*").eq("id", form_id).limit(1).execute()
    if not result.data:
        raise NotFoundError("Form not found")
    return result.data[0]


def get_published_form(client: Any, form_id: str) -> dict[str, Any]:
    """Return the public projection of a form, only if it is published."""
    result = (
        client.table("forms")
        .select(PUBLIC_COLUMNS)
        .eq("id", form_id)
        .eq("is_published", True)
        .limit(1)
        .execute()
    )
    if not result.data:
        raise NotFoundError("Form not found or not published")
    return result.data[0]


def create_form(client: Any, payload: FormCreate) -> dict[str, Any]:
    """Insert a new form (draft unless ``is_published`` was given)."""
    row = {
        "title": payload.title,
        "description": payload.description,
        "fields": dump_fields(payload.fields),
        "is_published": payload.is_published,
    }
    result = client.table("forms").insert(row).execute()
    form = result.data[0]
    logger.info(
        "form_created",
        extra={"form_id": form.get("id"), "field_count": len(row["fields"])},
    )
    return form


def _update(client: Any, form_id: str, values: dict[str, Any]) -> dict[str, Any]:
    result = client.table("forms").update(values).eq("id", form_id).execute()
    if not result.data:
        raise NotFoundError("Form not found")
    return result.data[0]


def update_form(client: Any, form_id: str, payload: FormUpdate) -> dict[str, Any]:
    """Replace title, description, fields and publish flag wholesale."""
    return _update(
        client,
        form_id,
        {
            "title": payload.title,
            "description": payload.description,
            "fields": dump_fields(payload.fields),
            "is_published": payload.is_published,
        },
    )


def set_published(client: Any, form_id: str, is_published: bool) -> dict[str, Any]:
    """Flip the publish flag and nothing else."""
    form = _update(client, form_id, {"is_published": is_published})
    logger.info(
        "form_publish_changed",
        extra={"form_id": form_id, "is_published": is_published},
    )
    return form


def delete_form(client: Any, form_id: str) -> None:
    client.table("forms").delete().eq("id", form_id).execute()


def duplicate_form(client: Any, form_id: str) -> dict[str, Any]:
    """Clone a form under a fresh id as an unpublished copy.

    Fields are copied verbatim from the stored row, without re-validation.
    """
    original = get_form(client, form_id)
    result = (
        client.table("forms")
        .insert(
            {
                "title": f"{original['title']}{DUPLICATE_TITLE_SUFFIX}",
                "description": original.get("description"),
                "fields": original.get("fields") or [],
                "is_published": False,
            }
        )
        .execute()
    )
    return result.data[0]
