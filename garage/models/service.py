"""
Service record model for database.
"""
from sqlalchemy import Column, Integer, String, Date, DateTime, Numeric, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from garage.database import Base


DEFAULT_STATUS = "completed"


class Service(Base):
    """Service database model."""

    __tablename__ = "services"
    __table_args__ = {"sqlite_autoincrement": True}

    id = Column(Integer, primary_key=True)
    vehicle_id = Column(Integer, ForeignKey("vehicles.id"), nullable=False, index=True)
    service_date = Column(Date, nullable=False)
    description = Column(String, nullable=False)
    cost = Column(Numeric(10, 2), nullable=False)
    status = Column(String, server_default=DEFAULT_STATUS)
    created_date = Column(DateTime, server_default=func.current_timestamp())

    # Relationships
    vehicle = relationship("Vehicle", back_populates="services")
