import json
import logging
from typing import Any

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from pydantic import ValidationError

from contact_api.api.dependencies import get_contact_service
from contact_api.core.client_identity import client_identity
from contact_api.core.errors import ValidationAppError
from contact_api.core.logging import get_request_id
from contact_api.core.rate_limit import rate_limit_headers
from contact_api.schemas.contact import ContactAcceptedResponse, ContactSubmission
from contact_api.services.contact_service import ContactService, SubmissionOutcome

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Contact"])


def parse_submission(raw_body: bytes) -> ContactSubmission:
    """Parse a raw request body into a ContactSubmission.

    An empty body is treated as ``{}`` so that it is reported as missing
    fields rather than malformed input.

    Args:
        raw_body: Request body bytes.

    Returns:
        ContactSubmission with trimmed string fields.

    Raises:
        ValidationAppError: If the body is not a JSON object.
    """
    try:
        payload: Any = json.loads(raw_body or b"{}")
    except (json.JSONDecodeError, UnicodeDecodeError) as exc:
        raise ValidationAppError(
            code="invalid_json",
            message="Request body must be a JSON object",
        ) from exc

    if not isinstance(payload, dict):
        raise ValidationAppError(
            code="invalid_json",
            message="Request body must be a JSON object",
        )

    try:
        return ContactSubmission.model_validate(payload)
    except ValidationError as exc:
        raise ValidationAppError(
            code="invalid_payload",
            message="Request body has invalid fields",
        ) from exc


@router.post(
    "/contact",
    response_model=ContactAcceptedResponse,
    responses={400: {"description": "Missing fields or malformed body."}},
)
async def submit_contact(
    request: Request,
    service: ContactService = Depends(get_contact_service),
):
    """Submit a contact form message.

    Accepts a JSON object with ``name``, ``email``, ``message`` and the
    ``company`` honeypot. Bot submissions get the same 200 response as real
    ones, without an email being sent.

    Returns:
        ContactAcceptedResponse on success, or a 429 error when the client
        has used up its submissions for the current hour.

    Raises:
        ValidationAppError: 400 for malformed bodies or missing fields.
    """
    submission = parse_submission(await request.body())

    cfg = request.app.state.settings
    identity = client_identity(request, trust_forwarded_for=cfg.app.trust_forwarded_for)

    result = await service.submit(submission, identity)

    if result.outcome is SubmissionOutcome.RATE_LIMITED:
        headers = {}
        if result.rate_limit is not None and cfg.app.rate_limit_include_headers:
            headers = rate_limit_headers(result.rate_limit)
        return JSONResponse(
            status_code=429,
            content={
                "error": {
                    "code": "rate_limit_exceeded",
                    "message": "Too many requests. Try again later.",
                    "request_id": get_request_id(),
                }
            },
            headers=headers,
        )

    return ContactAcceptedResponse()
