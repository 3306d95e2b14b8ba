"""
FastAPI Routes.

API 라우트 (JSON)
"""

from . import explain

__all__ = ["explain"]
