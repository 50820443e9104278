"""
Vehicle model for database.
"""
from sqlalchemy import Column, Integer, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from garage.database import Base


class Vehicle(Base):
    """Vehicle database model."""

    __tablename__ = "vehicles"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True)
    customer_id = Column(Integer, ForeignKey("customers.id"), nullable=False, index=True)
    make = Column(String, nullable=False)
    model = Column(String, nullable=False)
    year = Column(Integer, nullable=False)
    license_plate = Column(String, unique=True, nullable=False)
    created_date = Column(DateTime, server_default=func.current_timestamp())

    # Relationships
    customer = relationship("Customer", back_populates="vehicles")
    services = relationship("Service", back_populates="vehicle")
