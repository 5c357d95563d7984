"""
API security helpers.

Tokens are verified upstream. By the time a request reaches this service the
authentication layer has attached the caller's claims, either as trusted
headers or as an API Gateway authorizer block on the raw event. This module
only reads those claims and decides whether the caller is an admin.
"""
from dataclasses import dataclass
from typing import Any, Dict, Optional

from fastapi import Request

from remote_config.core.config import settings
from remote_config.core.errors import Forbidden
from remote_config.models.content import UNKNOWN_WRITER


@dataclass(frozen=True)
class Principal:
    role: Optional[str] = None
    subject: Optional[str] = None

    @property
    def is_admin(self) -> bool:
        return self.role == settings.ADMIN_ROLE

    @property
    def updated_by(self) -> str:
        return self.subject or UNKNOWN_WRITER


def _authorizer_claims(event: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    authorizer = (event.get("requestContext") or {}).get("authorizer") or {}
    claims = authorizer.get("claims")
    return claims if isinstance(claims, dict) else None


def _claim(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def get_principal(request: Request) -> Optional[Principal]:
    """
    Return the caller's principal, or None when no claims were forwarded.

    Behind API Gateway only the authorizer claims count; client headers are
    never trusted there.
    """
    event = request.scope.get("aws.event")
    if isinstance(event, dict):
        claims = _authorizer_claims(event)
        if claims is None:
            return None
        return Principal(role=_claim(claims.get("role")), subject=_claim(claims.get("sub")))

    role = _claim(request.headers.get(settings.AUTH_ROLE_HEADER))
    subject = _claim(request.headers.get(settings.AUTH_SUBJECT_HEADER))
    if role is None and subject is None:
        return None
    return Principal(role=role, subject=subject)


async def require_admin(request: Request) -> Principal:
    """Require the admin role; missing claims count as not an admin."""
    principal = get_principal(request)
    if principal is None or not principal.is_admin:
        raise Forbidden()
    return principal
