import uuid
from enum import Enum
from typing import Type
from sqlalchemy import Enum as SAEnum
from sqlmodel import SQLModel


class BaseModel(SQLModel):
    pass


def generate_uuid() -> str:
    return str(uuid.uuid4())


def enum_type(enum_cls: Type[Enum]) -> SAEnum:
    """Store enum values (not member names) as plain strings."""
    return SAEnum(
        enum_cls,
        values_callable=lambda members: [m.value for m in members],
        native_enum=False,
        length=20,
    )
