# File: /app/schemas/__init__.py | Version: 2.0 | Path: /app/schemas/__init__.py
from . import apps, auth, core_entities, jsonapi, user, work_item_type

__all__ = ["apps", "auth", "core_entities", "jsonapi", "user", "work_item_type"]
