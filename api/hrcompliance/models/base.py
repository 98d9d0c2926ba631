"""Declarative base for all ORM models."""
import uuid
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass


def new_uuid() -> str:
    """Primary keys are UUID strings so ids round-trip unchanged through JSON."""
    return str(uuid.uuid4())
