"""Database model exports."""

from .food import FoodEntry
from .user import USERNAME_MAX_LENGTH, User

__all__ = [
    "FoodEntry",
    "USERNAME_MAX_LENGTH",
    "User",
]
