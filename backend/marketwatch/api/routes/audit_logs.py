from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, Query

from marketwatch.api.deps import get_audit_repo, get_current_user_id, get_identity_repo
from marketwatch.api.schemas.audit import AuditEntryOut
from marketwatch.domain.audit import AuditAction
from marketwatch.domain.identity import AppRole
from marketwatch.repositories.audit_repository import AuditRepository
from marketwatch.repositories.identity_repository import IdentityRepository


router = APIRouter(prefix="/audit-logs", tags=["audit"])


@router.get("", response_model=list[AuditEntryOut])
def list_audit_logs(
    user_id: str | None = Query(default=None),
    action: str | None = Query(default=None),
    limit: int = Query(default=100, ge=1, le=1000),
    caller_id: str = Depends(get_current_user_id),
    identity: IdentityRepository = Depends(get_identity_repo),
    repo: AuditRepository = Depends(get_audit_repo),
):
    if not (identity.has_role(caller_id, AppRole.ADMIN) or identity.has_role(caller_id, AppRole.AUDITOR)):
        raise HTTPException(status_code=403, detail="admin or auditor role required")

    try:
        act = AuditAction(action) if action is not None else None
    except ValueError:
        raise HTTPException(status_code=422, detail="Invalid action")

    return [
        AuditEntryOut(
            id=e.id,
            user_id=e.user_id,
            action=e.action.value,
            resource_type=e.resource_type,
            details=e.details,
            status_code=e.status_code,
            created_at=e.created_at,
        )
        for e in repo.list(user_id=user_id, action=act, limit=limit)
    ]
