from sqlalchemy import Column, DateTime, Integer, String
from sqlalchemy.orm import relationship

from leaselink.core.database import Base, utcnow


class Property(Base):
    __tablename__ = "properties"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    address = Column(String(255), nullable=False)
    city = Column(String(100), nullable=True)
    state = Column(String(50), nullable=True)
    zip = Column(String(20), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    units = relationship(
        "Unit",
        back_populates="property",
        cascade="all, delete",
        order_by="Unit.id",
    )
