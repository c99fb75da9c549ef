# ============================================================================
# FILE: app/schemas/base.py
# ============================================================================
from datetime import datetime, timezone
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

class CamelModel(BaseModel):
    """Base schema exchanging camelCase JSON with the frontend"""
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )

def as_utc(value: datetime) -> datetime:
    """Tag naive timestamps (SQLite drops the offset) as UTC"""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value
