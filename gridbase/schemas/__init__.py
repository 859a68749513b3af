# File: /gridbase/schemas/__init__.py | Version: 1.0 | Path: /gridbase/schemas/__init__.py
from . import auth, cells, filters, page, table, view

__all__ = ["auth", "cells", "filters", "page", "table", "view"]
