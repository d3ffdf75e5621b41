"""Public entry points for the MovieMitra discovery service."""

from __future__ import annotations

from app.config import Settings, get_settings
from app.main import app, create_app
from app.moods import list_moods

__all__ = ["Settings", "app", "create_app", "get_settings", "list_moods"]
