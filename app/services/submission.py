"""Public application flow: render, validate and submit a published form.

This is the applicant-facing side of the API.  ``render_form`` turns a
form schema into widget instructions, ``collect_submission`` and
``validate_submission`` turn raw input into an answer mapping, and
``ApplicationSubmitter`` drives the HTTP API:

1. validate required fields and resolve the applicant's name and email
   (nothing is sent until both succeed);
2. upload each selected file on its own (``POST /api/upload``); an upload
   that fails is logged and its field is left out of the payload;
3. create the candidate (``POST /api/candidates``).
"""

from __future__ import annotations

import logging
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

import httpx
from pydantic import ValidationError

from app.models.candidate import AnswerValue
from app.models.enums import FieldRole, FieldType, WidgetKind
from app.models.form import FormSchema, Widget

logger = logging.getLogger(__name__)


class SubmissionError(ValueError):
    """An application cannot be submitted as entered."""

    def __init__(self, message: str, field_id: str | None = None) -> None:
        super().__init__(message)
        self.field_id = field_id


class SubmissionRejected(SubmissionError):
    """The API refused the application."""

    def __init__(self, message: str, status_code: int) -> None:
        super().__init__(message)
        self.status_code = status_code


@dataclass
class FileUpload:
    """A file chosen for a ``file`` field, not yet uploaded."""
    filename: str
    content: bytes
    content_type: str | None = None


@dataclass
class PublicApplication:
    """A published form and the campaign it currently collects for."""
    form: FormSchema
    campaign: dict[str, Any] | None = None

    @property
    def campaign_id(self) -> str | None:
        return self.campaign.get("id") if self.campaign else None


# ---------------------------------------------------------------------------
# Rendering
# ---------------------------------------------------------------------------

_TEXT_INPUT_TYPES = {
    FieldType.text.value,
    FieldType.email.value,
    FieldType.tel.value,
    FieldType.date.value,
}

_CHOICE_WIDGETS = {
    FieldType.select.value: WidgetKind.select,
    FieldType.radio.value: WidgetKind.radio_group,
    FieldType.checkbox.value: WidgetKind.checkbox_group,
}


def render_field(field: Any) -> Widget:
    """Return the widget instruction for a single field."""
    widget = Widget(
        field_id=field.id,
        label=field.label,
        kind=WidgetKind.input,
        required=field.required,
        placeholder=field.placeholder,
        help_text=field.help_text,
    )
    if field.type in _TEXT_INPUT_TYPES:
        widget.input_type = field.type
    elif field.type == FieldType.textarea.value:
        widget.kind = WidgetKind.textarea
    elif field.type in _CHOICE_WIDGETS:
        widget.kind = _CHOICE_WIDGETS[field.type]
        widget.options = list(field.options)
    else:
        widget.kind = WidgetKind.file
        widget.accept = ",".join(field.file_types) or None
    return widget


def render_form(form: FormSchema) -> list[Widget]:
    """Return one widget per field, in field order."""
    return [render_field(field) for field in form.fields]


# ---------------------------------------------------------------------------
# Collection & validation
# ---------------------------------------------------------------------------

def _stringify(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (list, tuple, set)):
        return ",".join(str(v) for v in value)
    return str(value)


def collect_submission(
    form: FormSchema,
    raw: Mapping[str, Any],
) -> tuple[dict[str, AnswerValue], dict[str, FileUpload]]:
    """Split raw input into answers and pending file uploads.

    Checkbox values accumulate into a de-duplicated list in the order they
    were ticked.  Keys that are not field ids of *form* are dropped.
    """
    answers: dict[str, AnswerValue] = {}
    files: dict[str, FileUpload] = {}

    for field in form.fields:
        if field.id not in raw:
            continue
        value = raw[field.id]

        if field.type == FieldType.file.value:
            if isinstance(value, FileUpload):
                files[field.id] = value
            elif isinstance(value, str) and value:
                # Already a stored file URL
                answers[field.id] = value
        elif field.type == FieldType.checkbox.value:
            if value is None:
                items: list[Any] = []
            elif isinstance(value, (list, tuple, set)):
                items = list(value)
            else:
                items = [value]
            answers[field.id] = list(dict.fromkeys(str(v) for v in items if v is not None))
        else:
            answers[field.id] = _stringify(value)

    return answers, files


def validate_submission(
    form: FormSchema,
    answers: Mapping[str, Any],
    files: Mapping[str, FileUpload] | None = None,
) -> None:
    """Raise ``SubmissionError`` for the first required field left empty.

    Values are only checked for presence; an email field is not checked for
    email syntax here.
    """
    files = files or {}
    for field in form.fields:
        if not field.required or field.id in files:
            continue
        if not _stringify(answers.get(field.id)).strip():
            raise SubmissionError(
                f"Please fill in the required field: {field.label}",
                field_id=field.id,
            )


def _field_for_role(form: FormSchema, role: FieldRole, fallback_type: FieldType) -> Any:
    for field in form.fields:
        if getattr(field, "role", None) == role:
            return field
    # Forms authored before roles existed: first unclaimed field of the matching type
    for field in form.fields:
        if field.type == fallback_type.value and getattr(field, "role", None) is None:
            return field
    return None


def extract_applicant(form: FormSchema, answers: Mapping[str, Any]) -> tuple[str, str]:
    """Return ``(name, email)`` for the candidate record.

    Each is taken from the field carrying the matching role, or else from
    the first ``text`` / ``email`` field without a role.  The error names
    the missing one.
    """
    resolved: dict[FieldRole, str] = {}
    for role, fallback in ((FieldRole.name, FieldType.text), (FieldRole.email, FieldType.email)):
        field = _field_for_role(form, role, fallback)
        if field is None:
            raise SubmissionError(
                f"This form has no {role.value} field and cannot accept applications"
            )
        value = _stringify(answers.get(field.id)).strip()
        if not value:
            raise SubmissionError(
                f"Please provide your {role.value} ({field.label})", field_id=field.id
            )
        resolved[role] = value
    return resolved[FieldRole.name], resolved[FieldRole.email]


# ---------------------------------------------------------------------------
# HTTP flow
# ---------------------------------------------------------------------------

def _error_message(response: httpx.Response, default: str) -> str:
    try:
        body = response.json()
    except ValueError:
        return default
    if isinstance(body, dict) and body.get("error"):
        return str(body["error"])
    return default


class ApplicationSubmitter:
    """Submits applications against the CRM HTTP API."""

    def __init__(self, http: httpx.Client, api_prefix: str = "/api") -> None:
        self.http = http
        self.api_prefix = api_prefix.rstrip("/")

    def load(self, form_id: str) -> PublicApplication:
        """Fetch a published form and the campaign that uses it."""
        response = self.http.get(f"{self.api_prefix}/forms/{form_id}/fields")
        if response.is_error:
            raise SubmissionRejected(
                _error_message(response, "Form not found or not published"),
                response.status_code,
            )
        try:
            form = FormSchema.model_validate(response.json())
        except ValidationError as exc:
            logger.warning(
                "application_form_invalid",
                extra={"form_id": form_id, "error_count": exc.error_count()},
            )
            raise SubmissionError(
                "This form is misconfigured and cannot accept applications"
            ) from exc

        campaign = None
        campaign_response = self.http.get(f"{self.api_prefix}/campaigns/by-form/{form_id}")
        if campaign_response.is_success:
            campaign = campaign_response.json()
        return PublicApplication(form=form, campaign=campaign)

    def _upload_files(self, files: Mapping[str, FileUpload]) -> dict[str, str]:
        urls: dict[str, str] = {}
        for field_id, upload in files.items():
            try:
                response = self.http.post(
                    f"{self.api_prefix}/upload",
                    files={
                        "file": (
                            upload.filename,
                            upload.content,
                            upload.content_type or "application/octet-stream",
                        )
                    },
                )
                response.raise_for_status()
                urls[field_id] = response.json()["url"]
            except (httpx.HTTPError, KeyError, ValueError) as exc:
                logger.warning(
                    "application_file_upload_failed",
                    extra={
                        "field_id": field_id,
                        "file_name": upload.filename,
                        "error_message": str(exc),
                    },
                )
        return urls

    def submit(
        self,
        form: FormSchema,
        campaign_id: str | None,
        values: Mapping[str, Any],
    ) -> dict[str, Any]:
        """Validate *values* and create a candidate; return the created row."""
        if not form.is_published:
            raise SubmissionError("This form is not accepting applications")

        answers, files = collect_submission(form, values)
        validate_submission(form, answers, files)
        name, email = extract_applicant(form, answers)
        if not campaign_id:
            raise SubmissionError("No campaign is collecting applications for this form")

        uploaded = self._upload_files(files)

        payload: dict[str, Any] = {
            "form_id": form.id,
            "campaign_id": campaign_id,
            "data": {**answers, **uploaded},
            "email": email,
            "name": name,
        }
        if uploaded:
            payload["resume_url"] = next(iter(uploaded.values()))

        response = self.http.post(f"{self.api_prefix}/candidates", json=payload)
        if response.is_error:
            raise SubmissionRejected(
                _error_message(response, "Failed to submit application"),
                response.status_code,
            )
        logger.info(
            "application_submitted",
            extra={"form_id": form.id, "campaign_id": campaign_id},
        )
        return response.json()

    def apply(self, form_id: str, values: Mapping[str, Any]) -> dict[str, Any]:
        """Load the form for *form_id* and submit *values* against it."""
        application = self.load(form_id)
        return self.submit(application.form, application.campaign_id, values)
