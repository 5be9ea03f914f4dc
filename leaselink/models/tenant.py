from sqlalchemy import Column, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from leaselink.core.database import Base, utcnow


class Tenant(Base):
    """A resident of a unit. Tenants do not log in; staff act on their behalf."""

    __tablename__ = "tenants"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(200), nullable=False)
    email = Column(String(255), nullable=True)
    phone = Column(String(50), nullable=True)
    unit_id = Column(Integer, ForeignKey("units.id", ondelete="CASCADE"), nullable=True, index=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    unit = relationship("Unit", back_populates="tenants")
    tickets = relationship("Ticket", back_populates="tenant", cascade="all, delete")
