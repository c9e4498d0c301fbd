"""Caller identity

Authentication belongs to the account directory in front of this service;
requests arrive with the authenticated identity in headers:

    X-User-Id:   user identifier
    X-User-Role: admin | seller | customer
    X-Tenant-Id: tenant a seller works for
"""

from typing import Optional
from fastapi import Header, WebSocket
from config import ApplicationConfig
from libs.result import Error
from src.api.error import ClientError
from src.domain.actor import Actor, Role

ANONYMOUS_ADMIN = Actor(user_id="system", role=Role.ADMIN)


def get_current_actor(
    x_user_id: Optional[str] = Header(default=None),
    x_user_role: Optional[str] = Header(default=None),
    x_tenant_id: Optional[str] = Header(default=None),
) -> Actor:
    if not x_user_id or not x_user_role:
        if ApplicationConfig.AUTH_DISABLED:
            return ANONYMOUS_ADMIN
        raise ClientError(Error(code="UNAUTHENTICATED", message="Missing caller identity"))

    try:
        role = Role(x_user_role.lower())
    except ValueError:
        raise ClientError(Error(code="FORBIDDEN", message=f"Unknown role {x_user_role}"))

    return Actor(user_id=x_user_id, role=role, tenant_id=x_tenant_id)


def actor_from_websocket(websocket: WebSocket) -> Optional[Actor]:
    """
    Websocket clients in browsers cannot set headers, so the identity may
    also come as user_id / role / tenant_id query parameters.
    """
    headers = websocket.headers
    params = websocket.query_params
    user_id = headers.get("x-user-id") or params.get("user_id")
    role = headers.get("x-user-role") or params.get("role")
    tenant_id = headers.get("x-tenant-id") or params.get("tenant_id")

    if not user_id or not role:
        return ANONYMOUS_ADMIN if ApplicationConfig.AUTH_DISABLED else None
    try:
        return Actor(user_id=user_id, role=Role(role.lower()), tenant_id=tenant_id)
    except ValueError:
        return None
