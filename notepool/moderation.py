"""
Moderation helpers: message length limits and the admin secret guard.
"""

import hmac
import logging
from typing import Any, Dict, Optional

from fastapi import Depends, Request

from notepool.config import Settings
from notepool.deps import get_app_settings, read_payload
from notepool.exceptions import AuthError


logger = logging.getLogger(__name__)

ADMIN_HEADER = "x-admin-password"
ADMIN_FIELD = "password"


def word_count(text: Optional[str]) -> int:
    """Number of whitespace-separated tokens in `text`."""
    return len((text or "").split())


def extract_admin_secret(request: Request, payload: Dict[str, Any]) -> str:
    """
    Find the candidate admin secret on a request.

    Looks at the `x-admin-password` header, then the `password` query
    parameter, then the `password` body field. The first non-empty one
    wins.
    """
    for candidate in (
        request.headers.get(ADMIN_HEADER),
        request.query_params.get(ADMIN_FIELD),
        payload.get(ADMIN_FIELD),
    ):
        if isinstance(candidate, list):
            candidate = candidate[0] if candidate else None
        if candidate:
            return str(candidate).strip()
    return ""


def secret_matches(candidate: str, secret: str) -> bool:
    """Constant-time comparison. An unset secret never matches."""
    if not secret or not candidate:
        return False
    return hmac.compare_digest(candidate.encode("utf-8"), secret.encode("utf-8"))


def require_admin(
    request: Request,
    payload: Dict[str, Any] = Depends(read_payload),
    settings: Settings = Depends(get_app_settings),
) -> None:
    """Dependency guarding every admin data route. Fails closed."""
    if not settings.admin_enabled:
        logger.warning("Admin request refused: ADMIN_PASSWORD is not configured")
        raise AuthError()

    if not secret_matches(extract_admin_secret(request, payload), settings.admin_password):
        raise AuthError()
