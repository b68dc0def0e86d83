"""
Database models for the Quill backend.
"""

from .base import Base
from .setting import Setting

__all__ = ["Base", "Setting"]
