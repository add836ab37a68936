"""Database engine, sessions and the declarative base."""
from .base import Base
from .session import Database

__all__ = ["Base", "Database"]
