from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException

from marketwatch.api.deps import get_advisor_repo, get_current_user_id, get_identity_repo, get_portfolio_repo
from marketwatch.api.schemas.advisors import AdvisorClientCreate, AdvisorClientOut
from marketwatch.api.schemas.portfolios import PortfolioOut
from marketwatch.domain.advisor import AdvisorClientLink
from marketwatch.domain.identity import AppRole
from marketwatch.repositories.advisor_repository import AdvisorRepository
from marketwatch.repositories.identity_repository import IdentityRepository
from marketwatch.repositories.portfolio_repository import PortfolioRepository


router = APIRouter(prefix="/advisor-clients", tags=["advisors"])


def _out(link: AdvisorClientLink) -> AdvisorClientOut:
    return AdvisorClientOut(
        id=link.id,
        advisor_id=link.advisor_id,
        client_id=link.client_id,
        created_at=link.created_at,
    )


def _require_admin(identity: IdentityRepository, user_id: str) -> None:
    if not identity.has_role(user_id, AppRole.ADMIN):
        raise HTTPException(status_code=403, detail="admin role required")


@router.get("", response_model=list[AdvisorClientOut])
def list_links(
    user_id: str = Depends(get_current_user_id),
    repo: AdvisorRepository = Depends(get_advisor_repo),
):
    return [_out(link) for link in repo.list_for_user(user_id=user_id)]


@router.post("", response_model=AdvisorClientOut, status_code=201)
def create_link(
    payload: AdvisorClientCreate,
    user_id: str = Depends(get_current_user_id),
    identity: IdentityRepository = Depends(get_identity_repo),
    repo: AdvisorRepository = Depends(get_advisor_repo),
):
    _require_admin(identity, user_id)

    for uid in (payload.advisor_id, payload.client_id):
        if not identity.user_exists(uid):
            raise HTTPException(status_code=404, detail=f"user '{uid}' not found")
    if not identity.has_role(payload.advisor_id, AppRole.ADVISOR):
        raise HTTPException(status_code=422, detail="advisor_id does not hold the advisor role")

    try:
        link = AdvisorClientLink.create(advisor_id=payload.advisor_id, client_id=payload.client_id)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))

    try:
        repo.add(link)
    except ValueError as e:
        raise HTTPException(status_code=409, detail=str(e))
    return _out(link)


@router.delete("/{link_id}", status_code=204)
def delete_link(
    link_id: UUID,
    user_id: str = Depends(get_current_user_id),
    identity: IdentityRepository = Depends(get_identity_repo),
    repo: AdvisorRepository = Depends(get_advisor_repo),
):
    _require_admin(identity, user_id)
    if not repo.delete(link_id):
        raise HTTPException(status_code=404, detail="link not found")


@router.get("/{client_id}/portfolios", response_model=list[PortfolioOut])
def client_portfolios(
    client_id: str,
    user_id: str = Depends(get_current_user_id),
    repo: AdvisorRepository = Depends(get_advisor_repo),
    portfolio_repo: PortfolioRepository = Depends(get_portfolio_repo),
):
    # unlinked clients look the same as unknown ones
    if not repo.is_client(advisor_id=user_id, client_id=client_id):
        raise HTTPException(status_code=404, detail="client not found")

    return [
        PortfolioOut(id=p.id, name=p.name, description=p.description, created_at=p.created_at)
        for p in portfolio_repo.list_for_owner(owner_id=client_id)
    ]
