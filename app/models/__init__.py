# File: /app/models/__init__.py | Version: 2.0 | Title: Models Package Exports
from .core_entities import Space, User
from .work_item_type import WorkItemType

__all__ = [
    "User",
    "Space",
    "WorkItemType",
]
