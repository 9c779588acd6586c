# File: /app/routers/__init__.py | Version: 2.0 | Path: /app/routers/__init__.py
"""
Router package exports.

Keeping these explicit helps static analyzers and avoids surprises
when importing submodules like: `from app.routers import work_item_types`.
"""
from . import apps, auth, core_entities, health, work_item_types

__all__ = ["apps", "auth", "core_entities", "health", "work_item_types"]
