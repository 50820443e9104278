"""
Pydantic schemas for Vehicle.
"""
from pydantic import BaseModel
from typing import Optional


class VehicleBase(BaseModel):
    """Base vehicle schema with common fields."""
    customer_id: Optional[int] = None
    make: Optional[str] = None
    model: Optional[str] = None
    year: Optional[int] = None
    license_plate: Optional[str] = None


class VehicleCreate(VehicleBase):
    """Schema for creating a vehicle."""
    pass


class VehicleUpdate(VehicleBase):
    """Schema for updating a vehicle. Replaces all mutable fields."""
    pass
