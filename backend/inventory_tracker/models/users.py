# backend/inventory_tracker/models/users.py
from sqlalchemy import Column, Integer, String, DateTime

from inventory_tracker.database import Base
from inventory_tracker.utils.dates import utcnow


# Represents a user account with authentication details and system role
class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String, nullable=False)
    email = Column(String, unique=True, nullable=False, index=True)
    password_hash = Column(String, nullable=False)
    role = Column(String, nullable=False, default="viewer")  # viewer / manager / admin
    theme = Column(String, nullable=False, default="light")
    created_at = Column(DateTime, default=utcnow, nullable=False)
