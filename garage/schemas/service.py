"""
Pydantic schemas for Service.
"""
from pydantic import BaseModel
from typing import Any, Optional


class ServiceBase(BaseModel):
    """Base service schema with common fields."""
    vehicle_id: Optional[int] = None
    service_date: Optional[str] = None
    description: Optional[str] = None
    # Passed through untouched; ServiceRepository parses and range-checks it.
    cost: Any = None
    status: Optional[str] = None


class ServiceCreate(ServiceBase):
    """Schema for creating a service."""
    pass


class ServiceUpdate(ServiceBase):
    """Schema for updating a service. Replaces all mutable fields."""
    pass
