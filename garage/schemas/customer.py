"""
Pydantic schemas for Customer.

Every field is optional at this layer: missing or empty required
values are reported by CustomerRepository with the API's own error
message rather than FastAPI's 422 body.
"""
from pydantic import BaseModel
from typing import Optional


class CustomerBase(BaseModel):
    """Base customer schema with common fields."""
    name: Optional[str] = None
    phone: Optional[str] = None
    email: Optional[str] = None
    address: Optional[str] = None


class CustomerCreate(CustomerBase):
    """Schema for creating a customer."""
    pass


class CustomerUpdate(CustomerBase):
    """Schema for updating a customer. Replaces all mutable fields."""
    pass
