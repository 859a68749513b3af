# File: /gridbase/schemas/_base.py | Version: 1.0 | Title: Pydantic Base Schema (V2)
from pydantic import BaseModel, ConfigDict


class ORMSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)
