"""
Routes package for the Anonymous Notes API.
"""

from notepool.routes.admin import router as admin_router
from notepool.routes.notes import router as notes_router

__all__ = ["notes_router", "admin_router"]
