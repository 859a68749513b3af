# File: /gridbase/models/__init__.py | Version: 1.0 | Title: Models Package Exports
from .core_entities import DataTable, Record, User
from .custom_fields import CellValue, Field
from .view import View, ViewFilter, ViewSort

__all__ = [
    "User",
    "DataTable",
    "Record",
    "Field",
    "CellValue",
    "View",
    "ViewFilter",
    "ViewSort",
]
