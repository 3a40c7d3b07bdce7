"""
Riposte API package.

Provides the FastAPI application for the Riposte debate turn service.
"""

from .app import app, create_app

__all__ = ["app", "create_app"]
