"""FastAPI dependencies resolving collaborators built by the app factory."""

from __future__ import annotations

from fastapi import Request

from contact_api.services.contact_service import ContactService


def get_contact_service(request: Request) -> ContactService:
    """Return the ContactService owned by the running application."""

    return request.app.state.contact_service
