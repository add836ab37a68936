"""Route modules for the CivicPulse API."""
from . import categories, complaints, users

__all__ = ["categories", "complaints", "users"]
