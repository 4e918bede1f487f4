from datetime import datetime
from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict

from inventory_tracker.models.log import AUDIT_ACTIONS, AUDIT_ENTITIES

AuditAction = Literal[AUDIT_ACTIONS]
AuditEntity = Literal[AUDIT_ENTITIES]


class ActivityLogCreate(BaseModel):
    action: AuditAction
    entity: AuditEntity
    entity_id: Optional[int] = None
    description: str
    meta: Optional[Dict[str, Any]] = None


class ActivityLogOut(BaseModel):
    id: int
    user_id: int
    user_name: Optional[str] = None
    action: str
    entity: str
    entity_id: Optional[int] = None
    description: str
    meta: Optional[Any] = None
    ip_address: Optional[str] = None
    user_agent: Optional[str] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class UserActivitySummary(BaseModel):
    total_actions: int
    by_action: Dict[str, int]
    by_entity: Dict[str, int]
    recent_activity: List[ActivityLogOut]
