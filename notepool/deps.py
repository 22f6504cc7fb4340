"""
Shared request dependencies for FastAPI routes.

Everything a route needs is looked up on the application instance that
`create_app` built, never on module globals.
"""

import json
from typing import Any, Dict

from fastapi import Request

from notepool.config import Settings
from notepool.exceptions import ValidationError


FORM_CONTENT_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


def get_app_settings(request: Request) -> Settings:
    """Settings the running app was created with."""
    return request.app.state.settings


async def read_payload(request: Request) -> Dict[str, Any]:
    """
    Read the request body as a dict, whether JSON or form-encoded.

    Repeated form keys become lists. An empty body (or a GET) yields {}.
    """
    if request.method in ("GET", "HEAD"):
        return {}

    content_type = request.headers.get("content-type", "").split(";")[0].strip().lower()

    if content_type in FORM_CONTENT_TYPES:
        form = await request.form()
        payload: Dict[str, Any] = {}
        for key in form.keys():
            values = form.getlist(key)
            payload[key] = values[0] if len(values) == 1 else values
        return payload

    body = await request.body()
    if not body.strip():
        return {}
    try:
        data = json.loads(body)
    except ValueError as exc:
        raise ValidationError("Invalid JSON body") from exc
    if not isinstance(data, dict):
        raise ValidationError("Invalid JSON body")
    return data
