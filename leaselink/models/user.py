from sqlalchemy import Column, DateTime, Integer, String

from leaselink.core.database import Base, utcnow

USER_ROLES = ("ADMIN", "MANAGER", "STAFF")


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String(255), unique=True, index=True, nullable=False)
    # Hashed for every new row; demo/legacy rows may still hold plaintext.
    password = Column(String(255), nullable=False)
    role = Column(String(20), nullable=False, default="STAFF")
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
