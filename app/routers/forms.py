"""Form schema endpoints.

CRUD for the form builder plus the published-only field fetch used by the
public application page.
"""

from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query, Response

from app.core.exceptions import NotFoundError
from app.db.supabase import SupabaseBackend, get_supabase
from app.models.form import FormCreate, FormPublish, FormUpdate
from app.services import forms as forms_service

logger = logging.getLogger(__name__)

router = APIRouter()


def _fail(event: str, message: str, exc: Exception, **context: Any) -> HTTPException:
    logger.error(event, extra={**context, "error_message": str(exc)})
    return HTTPException(status_code=500, detail=message)


@router.get("", status_code=200)
async def list_forms(
    is_published: bool | None = Query(default=None, description="Filter by publish flag"),
    client: SupabaseBackend = Depends(get_supabase),
) -> list[dict[str, Any]]:
    """Return all forms, newest first."""
    try:
        return forms_service.list_forms(client, is_published)
    except Exception as exc:
        raise _fail("list_forms_failed", "Failed to fetch forms", exc) from exc


@router.get("/{form_id}", status_code=200)
async def get_form(
    form_id: str,
    client: SupabaseBackend = Depends(get_supabase),
) -> dict[str, Any]:
    try:
        return forms_service.get_form(client, form_id)
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except Exception as exc:
        raise _fail("get_form_failed", "Failed to fetch form", exc, form_id=form_id) from exc


@router.post("", status_code=201)
async def create_form(
    body: FormCreate,
    client: SupabaseBackend = Depends(get_supabase),
) -> dict[str, Any]:
    """Create a form; field definitions are validated by type."""
    try:
        return forms_service.create_form(client, body)
    except Exception as exc:
        raise _fail("create_form_failed", "Failed to create form", exc) from exc


@router.put("/{form_id}", status_code=200)
async def update_form(
    form_id: str,
    body: FormUpdate,
    client: SupabaseBackend = Depends(get_supabase),
) -> dict[str, Any]:
    """Replace the form's title, description, fields and publish flag."""
    try:
        return forms_service.update_form(client, form_id, body)
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except Exception as exc:
        raise _fail("update_form_failed", "Failed to update form", exc, form_id=form_id) from exc


@router.delete("/{form_id}", status_code=204)
async def delete_form(
    form_id: str,
    client: SupabaseBackend = Depends(get_supabase),
) -> Response:
    try:
        forms_service.delete_form(client, form_id)
    except Exception as exc:
        raise _fail("delete_form_failed", "Failed to delete form", exc, form_id=form_id) from exc
    return Response(status_code=204)


@router.patch("/{form_id}/publish", status_code=200)
async def publish_form(
    form_id: str,
    body: FormPublish,
    client: SupabaseBackend = Depends(get_supabase),
) -> dict[str, Any]:
    try:
        return forms_service.set_published(client, form_id, body.is_published)
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except Exception as exc:
        raise _fail(
            "publish_form_failed",
            "Failed to update form publish status",
            exc,
            form_id=form_id,
        ) from exc


@router.post("/{form_id}/duplicate", status_code=201)
async def duplicate_form(
    form_id: str,
    client: SupabaseBackend = Depends(get_supabase),
) -> dict[str, Any]:
    """Clone a form as an unpublished copy with the same fields."""
    try:
        return forms_service.duplicate_form(client, form_id)
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except Exception as exc:
        raise _fail(
            "duplicate_form_failed", "Failed to duplicate form", exc, form_id=form_id
        ) from exc


@router.get("/{form_id}/fields", status_code=200)
async def get_public_form(
    form_id: str,
    client: SupabaseBackend = Depends(get_supabase),
) -> dict[str, Any]:
    """Return a published form's fields; unpublished forms are 404."""
    try:
        return forms_service.get_published_form(client, form_id)
    except NotFoundError as exc:
        raise HTTPException(status_code=404, detail=str(exc)) from exc
    except Exception as exc:
        raise _fail(
            "get_form_fields_failed", "Failed to fetch form fields", exc, form_id=form_id
        ) from exc
