"""sb_ticket REST endpoints (all nested under a market).

POST   /markets/{address}/tickets            — open the caller's ticket
GET    /markets/{address}/tickets            — list + ticket count
GET    /markets/{address}/tickets/me         — caller's ticket
GET    /markets/{address}/tickets/me/layout  — caller's ticket, binary form
DELETE /markets/{address}/tickets/me         — close, refund rent
POST   /markets/{address}/bets               — stake into the caller's ticket
POST   /markets/{address}/bet                — open the ticket if missing, then stake
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.sb_common.database import get_db_session
from src.sb_common.response import ApiResponse, respond
from src.sb_gateway.auth.dependencies import get_current_identity
from src.sb_ticket.application.schemas import (
    BetRequest,
    CreateTicketRequest,
    PlaceBetRequest,
)
from src.sb_ticket.application.service import TicketApplicationService

router = APIRouter(prefix="/markets/{address}", tags=["tickets"])

_service = TicketApplicationService()


@router.post("/tickets")
async def create_ticket(
    address: str,
    body: CreateTicketRequest,
    request: Request,
    identity: Annotated[str, Depends(get_current_identity)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.create_ticket(db, identity, address, body.side)
    return respond(request, result)


@router.get("/tickets")
async def list_tickets(
    address: str,
    request: Request,
    identity: Annotated[str, Depends(get_current_identity)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    limit: int = Query(50, ge=1, le=200),
    cursor: str | None = Query(None),
) -> ApiResponse:
    result = await _service.list_tickets(db, address, cursor, limit)
    return respond(request, result)


@router.get("/tickets/me")
async def get_my_ticket(
    address: str,
    request: Request,
    identity: Annotated[str, Depends(get_current_identity)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.get_my_ticket(db, identity, address)
    return respond(request, result)


@router.get("/tickets/me/layout")
async def get_my_ticket_layout(
    address: str,
    request: Request,
    identity: Annotated[str, Depends(get_current_identity)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.get_ticket_layout(db, identity, address)
    return respond(request, result)


@router.delete("/tickets/me")
async def close_ticket(
    address: str,
    request: Request,
    identity: Annotated[str, Depends(get_current_identity)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.close_ticket(db, identity, address)
    return respond(request, result)


@router.post("/bets")
async def place_bet(
    address: str,
    body: PlaceBetRequest,
    request: Request,
    identity: Annotated[str, Depends(get_current_identity)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.place_bet(db, identity, address, body.amount)
    return respond(request, result)


@router.post("/bet")
async def bet(
    address: str,
    body: BetRequest,
    request: Request,
    identity: Annotated[str, Depends(get_current_identity)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.bet(db, identity, address, body.side, body.amount)
    return respond(request, result)
