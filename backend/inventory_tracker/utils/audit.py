from typing import Optional

from fastapi import Request
from sqlalchemy.orm import Session

from inventory_tracker.models.log import ActivityLog


def request_origin(request: Optional[Request]) -> dict:
    if request is None:
        return {"ip_address": None, "user_agent": None}
    return {
        "ip_address": request.client.host if request.client else None,
        "user_agent": request.headers.get("user-agent"),
    }


def write_log(db: Session, *, user_id, action, entity, description, entity_id=None, meta=None, request=None):
    entry = ActivityLog(
        user_id=user_id, action=action, entity=entity, entity_id=entity_id,
        description=description, meta=meta, **request_origin(request),
    )
    db.add(entry)
    db.commit()
