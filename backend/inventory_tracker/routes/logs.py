# inventory_tracker/routes/logs.py
from collections import Counter
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, Depends, Query, Request, status

from inventory_tracker.models.users import User
from inventory_tracker.repositories import InventoryStore, get_store
from inventory_tracker.schemas.logs import ActivityLogCreate, ActivityLogOut, UserActivitySummary
from inventory_tracker.utils.audit import request_origin
from inventory_tracker.utils.dates import to_naive_utc
from inventory_tracker.utils.tokenJWT import get_current_user

router = APIRouter(prefix="/api/activity-logs", tags=["Activity logs"])


@router.get("", response_model=List[ActivityLogOut])
def get_logs(
    user: Optional[int] = Query(None, description="Filter by user ID"),
    action: Optional[str] = Query(None),
    entity: Optional[str] = Query(None),
    start_date: Optional[datetime] = Query(None),
    end_date: Optional[datetime] = Query(None),
    limit: int = Query(100, ge=1, le=1000),
    store: InventoryStore = Depends(get_store),
    current_user: User = Depends(get_current_user),
):
    return store.activity.search(
        user_id=user, action=action, entity=entity,
        start=to_naive_utc(start_date), end=to_naive_utc(end_date), limit=limit,
    )


@router.get("/entity/{entity}/{entity_id}", response_model=List[ActivityLogOut])
def get_entity_logs(
    entity: str,
    entity_id: int,
    store: InventoryStore = Depends(get_store),
    current_user: User = Depends(get_current_user),
):
    return store.activity.search(entity=entity, entity_id=entity_id)


@router.get("/user/{user_id}/summary", response_model=UserActivitySummary)
def get_user_summary(
    user_id: int,
    store: InventoryStore = Depends(get_store),
    current_user: User = Depends(get_current_user),
):
    logs = store.activity.search(user_id=user_id)
    return {
        "total_actions": len(logs),
        "by_action": dict(Counter(log.action for log in logs)),
        "by_entity": dict(Counter(log.entity for log in logs)),
        "recent_activity": logs[:10],
    }


# Manual entries for actions performed outside the API (e.g. imports)
@router.post("", response_model=ActivityLogOut, status_code=status.HTTP_201_CREATED)
def create_log(
    payload: ActivityLogCreate,
    request: Request,
    store: InventoryStore = Depends(get_store),
    current_user: User = Depends(get_current_user),
):
    entry = store.activity.record(
        user_id=current_user.id, **payload.model_dump(), **request_origin(request)
    )
    store.commit()
    store.refresh(entry)
    return entry
