# File: /gridbase/routers/__init__.py | Version: 1.0 | Path: /gridbase/routers/__init__.py
"""
Router package exports.

Keeping these explicit helps static analyzers and avoids surprises
when importing submodules like: `from gridbase.routers import views as views_router`.
"""
from . import auth, tables, views

__all__ = ["auth", "tables", "views"]
