"""Caller identity and role-based authorization.

Every authorization decision branches over the closed Role set in one
place; call sites ask the Actor, never compare role strings.
"""

from enum import Enum
from typing import Optional
from pydantic import BaseModel


class Role(str, Enum):
    ADMIN = "admin"
    SELLER = "seller"
    CUSTOMER = "customer"


class UnknownRole(ValueError):
    pass


class Actor(BaseModel):
    user_id: str
    role: Role
    tenant_id: Optional[str] = None

    def can_manage_tenant(self, tenant_id: str) -> bool:
        """Seller-side operations on a tenant: status updates, withdrawals"""
        if self.role == Role.ADMIN:
            return True
        if self.role == Role.SELLER:
            return self.tenant_id is not None and self.tenant_id == tenant_id
        if self.role == Role.CUSTOMER:
            return False
        raise UnknownRole(self.role)

    def can_access_order(self, user_id: str, tenant_id: str) -> bool:
        if self.role == Role.ADMIN:
            return True
        if self.role == Role.SELLER:
            return self.can_manage_tenant(tenant_id)
        if self.role == Role.CUSTOMER:
            return self.user_id == user_id
        raise UnknownRole(self.role)

    def can_settle_withdrawals(self) -> bool:
        if self.role == Role.ADMIN:
            return True
        if self.role in (Role.SELLER, Role.CUSTOMER):
            return False
        raise UnknownRole(self.role)
