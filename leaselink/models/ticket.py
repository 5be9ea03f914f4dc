from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from leaselink.core.database import Base, utcnow
from leaselink.models.comment import Comment

TICKET_PRIORITIES = ("LOW", "MEDIUM", "HIGH", "URGENT")
TICKET_STATUSES = ("OPEN", "IN_PROGRESS", "RESOLVED", "CLOSED")


class Ticket(Base):
    __tablename__ = "tickets"

    id = Column(Integer, primary_key=True, index=True)
    unit_id = Column(Integer, ForeignKey("units.id", ondelete="CASCADE"), nullable=False, index=True)
    tenant_id = Column(Integer, ForeignKey("tenants.id", ondelete="CASCADE"), nullable=False, index=True)

    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    priority = Column(String(20), nullable=False, default="MEDIUM")
    status = Column(String(20), nullable=False, default="OPEN")  # OPEN / IN_PROGRESS / RESOLVED / CLOSED

    # No FK cascade on user removal; the reference is only checked at write time.
    assigned_to_id = Column(Integer, ForeignKey("users.id"), nullable=True, index=True)

    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow, nullable=False)

    unit = relationship("Unit", back_populates="tickets")
    tenant = relationship("Tenant", back_populates="tickets")
    assigned_to = relationship("User", foreign_keys=[assigned_to_id])
    comments = relationship(
        "Comment",
        back_populates="ticket",
        cascade="all, delete",
        order_by=[Comment.created_at.asc(), Comment.id.asc()],
    )
