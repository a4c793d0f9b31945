"""Shared base for domain entities"""

import uuid
from sqlalchemy import BigInteger, Integer
from sqlmodel import SQLModel


# SQLite only autoincrements INTEGER PRIMARY KEY columns
BigIntegerPK = BigInteger().with_variant(Integer(), "sqlite")


def generate_uuid() -> str:
    return uuid.uuid4().hex


class BaseModel(SQLModel):
    pass
