"""SQLAlchemy models exposed for metadata creation and imports."""
from .category import Category
from .issue import Issue, IssueStatus
from .user import User, UserRole

__all__ = ["User", "UserRole", "Category", "Issue", "IssueStatus"]
