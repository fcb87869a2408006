from authstarter.models.base import Base
from authstarter.models.user import User

__all__ = ["Base", "User"]
