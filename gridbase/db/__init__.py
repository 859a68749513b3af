# File: gridbase/db/__init__.py | Version: 1.0 | Path: /gridbase/db/__init__.py
# Importing the models registers every table on Base.metadata before create_all
import gridbase.models  # noqa: F401

from .base_class import Base
from .session import SessionLocal, engine, get_db

__all__ = ["Base", "get_db", "SessionLocal", "engine"]
