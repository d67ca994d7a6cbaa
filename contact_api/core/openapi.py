"""OpenAPI metadata and customization utilities.

Enriches the generated OpenAPI schema with tags metadata and documents the
rate limit headers and 429 response of the contact endpoint, keeping
documentation concerns out of the app factory.
"""

from __future__ import annotations

from typing import Any, Dict

from fastapi import FastAPI

_RATE_LIMITED_RESPONSE: Dict[str, Any] = {
    "description": "Too many submissions from this client in the current hour.",
    "headers": {
        "Retry-After": {
            "description": "Seconds until the current window ends.",
            "schema": {"type": "integer"},
        },
        "X-RateLimit-Limit": {
            "description": "Submissions allowed per window.",
            "schema": {"type": "integer"},
        },
        "X-RateLimit-Reset": {
            "description": "UNIX time at which the window resets.",
            "schema": {"type": "integer"},
        },
    },
}


def apply_openapi_customizations(app: FastAPI) -> None:
    """Patch FastAPI's OpenAPI generation to add metadata.

    - Adds tags metadata if not present
    - Documents the 429 response on the contact submission operation
    """

    original_openapi = app.openapi

    def custom_openapi() -> Dict[str, Any]:
        if app.openapi_schema:
            return app.openapi_schema

        schema = original_openapi()

        tags = schema.setdefault("tags", [])
        existing_tag_names = {t.get("name") for t in tags}
        desired_tags = [
            {
                "name": "Contact",
                "description": "Contact form submission.",
            },
            {
                "name": "Health",
                "description": "Liveness checks.",
            },
        ]
        for tag in desired_tags:
            if tag["name"] not in existing_tag_names:
                tags.append(tag)

        paths = schema.get("paths", {})
        for path, methods in paths.items():
            if path.endswith("/contact") and isinstance(methods.get("post"), dict):
                responses = methods["post"].setdefault("responses", {})
                responses.setdefault("429", _RATE_LIMITED_RESPONSE)

        app.openapi_schema = schema
        return schema

    app.openapi = custom_openapi  # type: ignore[assignment]
