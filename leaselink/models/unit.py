from sqlalchemy import Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from leaselink.core.database import Base, utcnow

UNIT_STATUSES = ("VACANT", "OCCUPIED", "NOTICE")


class Unit(Base):
    __tablename__ = "units"

    id = Column(Integer, primary_key=True, index=True)
    property_id = Column(Integer, ForeignKey("properties.id", ondelete="CASCADE"), nullable=False, index=True)
    unit_number = Column(String(50), nullable=False)
    beds = Column(Integer, nullable=True)
    baths = Column(Integer, nullable=True)
    sqft = Column(Integer, nullable=True)
    status = Column(String(20), nullable=False, default="VACANT")
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    property = relationship("Property", back_populates="units")
    tenants = relationship("Tenant", back_populates="unit", cascade="all, delete")
    tickets = relationship("Ticket", back_populates="unit", cascade="all, delete")
