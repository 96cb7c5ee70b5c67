from datetime import date
from enum import Enum
from uuid import UUID

from pydantic import BaseModel


def serialize_data(data):
    """Reduce response models to JSON-safe values for the cache."""
    if isinstance(data, BaseModel):
        return serialize_data(data.model_dump())
    if isinstance(data, dict):
        return {k: serialize_data(v) for k, v in data.items()}
    if isinstance(data, (list, tuple)):
        return [serialize_data(item) for item in data]
    if isinstance(data, date):
        return data.isoformat()
    if isinstance(data, UUID):
        return str(data)
    if isinstance(data, Enum):
        return data.value
    return data
