"""Contact form endpoint for the portfolio site.

This module contains the FastAPI route that relays contact form submissions
to the site owner's inbox.
"""

import json
import logging
from typing import Any, Dict

from fastapi import APIRouter, Request, status
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from app.core.exceptions import ConfigurationError, ContactValidationError, TransportError
from app.models.contact import ContactRequest, ContactResponse
from app.services.relay_service import MISSING_FIELDS_ERROR, relay_service

logger = logging.getLogger(__name__)

router = APIRouter()

FORM_CONTENT_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


async def read_contact_body(request: Request) -> Dict[str, Any]:
    """Read a JSON or form-encoded body into a dict.

    Unparseable or non-object bodies are returned as an empty dict so that
    they are reported as missing fields.
    """
    content_type = request.headers.get("content-type", "")
    if content_type.startswith(FORM_CONTENT_TYPES):
        form = await request.form()
        return {key: value for key, value in form.items() if isinstance(value, str)}

    raw = await request.body()
    if not raw:
        return {}
    try:
        payload = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError):
        logger.warning("Contact request body is not valid JSON")
        return {}
    return payload if isinstance(payload, dict) else {}


def error_response(status_code: int, error: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ContactResponse(ok=False, error=error).model_dump(),
    )


@router.post(
    "/contact",
    response_model=ContactResponse,
    response_model_exclude_none=True,
    status_code=status.HTTP_200_OK,
    summary="Submit contact form",
    description="Send the visitor's message to the site owner and an auto-reply to the visitor.",
)
async def submit_contact_form(http_request: Request) -> ContactResponse:
    """
    Relay a contact form submission.

    This endpoint:
    - Accepts JSON or form-encoded bodies with name, email, subject and message
    - Sends a notification email to the site owner
    - Sends an auto-reply to the visitor

    Args:
        http_request: FastAPI request object carrying the submission body

    Returns:
        ``{"ok": true}`` once both emails are sent, otherwise a 400 or 500
        response with a generic error message
    """
    body = await read_contact_body(http_request)

    try:
        contact_request = ContactRequest.model_validate(body)
        submission = relay_service.prepare(contact_request)
        await relay_service.relay(submission)
    except ValidationError:
        return error_response(status.HTTP_400_BAD_REQUEST, MISSING_FIELDS_ERROR)
    except ContactValidationError as e:
        return error_response(status.HTTP_400_BAD_REQUEST, str(e))
    except ConfigurationError:
        return error_response(
            status.HTTP_500_INTERNAL_SERVER_ERROR, "Email is not configured on server"
        )
    except TransportError:
        return error_response(status.HTTP_500_INTERNAL_SERVER_ERROR, "Failed to send email")

    return ContactResponse(ok=True)
