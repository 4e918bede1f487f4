from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, JSON, Index
from sqlalchemy.orm import relationship

from inventory_tracker.database import Base
from inventory_tracker.utils.dates import utcnow

AUDIT_ACTIONS = ("create", "update", "delete", "login", "logout", "export", "import", "bulk-action")
AUDIT_ENTITIES = ("product", "category", "supplier", "warehouse", "user", "stock-movement", "system")


# Append-only audit trail: one entry per logical user action
class ActivityLog(Base):
    __tablename__ = "activity_logs"

    id = Column(Integer, primary_key=True, index=True)

    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    action = Column(String(20), nullable=False, index=True)
    entity = Column(String(20), nullable=False, index=True)
    entity_id = Column(Integer, nullable=True)
    description = Column(String, nullable=False)

    # JSON container for flexible context data
    meta = Column(JSON, nullable=True)

    ip_address = Column(String(64), nullable=True)
    user_agent = Column(String, nullable=True)
    created_at = Column(DateTime, default=utcnow, nullable=False, index=True)

    # Relationship to the acting user
    user = relationship("User", lazy="joined", uselist=False)

    __table_args__ = (
        Index("ix_activity_logs_entity_ref", entity, entity_id),
    )

    @property
    def user_name(self):
        return self.user.name if self.user else None
