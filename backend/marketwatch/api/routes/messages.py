from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query

from marketwatch.api.deps import get_current_user_id, get_identity_repo, get_message_repo, get_portfolio_repo
from marketwatch.api.schemas.messages import MessageCreate, MessageOut
from marketwatch.domain.message import Message, MessageBox
from marketwatch.repositories.identity_repository import IdentityRepository
from marketwatch.repositories.message_repository import MessageRepository
from marketwatch.repositories.portfolio_repository import PortfolioRepository


router = APIRouter(prefix="/messages", tags=["messages"])


def _out(m: Message) -> MessageOut:
    return MessageOut(
        id=m.id,
        sender_id=m.sender_id,
        receiver_id=m.receiver_id,
        portfolio_id=m.portfolio_id,
        content=m.content,
        read=m.read,
        created_at=m.created_at,
    )


@router.get("", response_model=list[MessageOut])
def list_messages(
    box: str = Query(default=MessageBox.ALL.value),
    with_user: str | None = Query(default=None),
    user_id: str = Depends(get_current_user_id),
    repo: MessageRepository = Depends(get_message_repo),
):
    try:
        mb = MessageBox(box)
    except ValueError:
        raise HTTPException(status_code=422, detail="box must be one of: all, sent, received")

    return [_out(m) for m in repo.list_for_user(user_id=user_id, box=mb, with_user=with_user)]


@router.post("", response_model=MessageOut, status_code=201)
def send_message(
    payload: MessageCreate,
    user_id: str = Depends(get_current_user_id),
    identity: IdentityRepository = Depends(get_identity_repo),
    portfolio_repo: PortfolioRepository = Depends(get_portfolio_repo),
    repo: MessageRepository = Depends(get_message_repo),
):
    if not identity.user_exists(payload.receiver_id):
        raise HTTPException(status_code=404, detail="receiver not found")

    if payload.portfolio_id is not None:
        try:
            portfolio = portfolio_repo.get(payload.portfolio_id)
        except KeyError:
            raise HTTPException(status_code=404, detail="portfolio not found")
        if portfolio.owner_id != user_id:
            raise HTTPException(status_code=404, detail="portfolio not found")

    try:
        m = Message.create(
            sender_id=user_id,
            receiver_id=payload.receiver_id,
            content=payload.content,
            portfolio_id=payload.portfolio_id,
        )
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))

    repo.add(m)
    return _out(m)


@router.post("/{message_id}/read", status_code=204)
def mark_message_read(
    message_id: UUID,
    user_id: str = Depends(get_current_user_id),
    repo: MessageRepository = Depends(get_message_repo),
):
    if not repo.mark_read(receiver_id=user_id, message_id=message_id):
        raise HTTPException(status_code=404, detail="message not found")
