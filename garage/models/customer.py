"""
Customer model for database.
"""
from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from garage.database import Base


class Customer(Base):
    """Customer database model."""

    __tablename__ = "customers"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True)
    name = Column(String, nullable=False, index=True)
    phone = Column(String, nullable=False)
    email = Column(String, nullable=True)
    address = Column(String, nullable=True)
    created_date = Column(DateTime, server_default=func.current_timestamp())

    # Deletes are guarded in CustomerRepository; no ORM cascade.
    vehicles = relationship("Vehicle", back_populates="customer")
