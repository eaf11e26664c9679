"""sb_market REST endpoints.

POST /markets                        — initialize the caller's next market
GET  /markets                        — list with cursor pagination
GET  /markets/{address}              — full detail
GET  /markets/{address}/layout       — fixed-width binary record
POST /markets/{address}/freeze       — operator stops betting
GET  /authority-meta/{authority}/current-market — operator's latest cycle
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.sb_common.database import get_db_session
from src.sb_common.response import ApiResponse, respond
from src.sb_gateway.auth.dependencies import get_current_identity
from src.sb_market.application.schemas import InitializeMarketRequest
from src.sb_market.application.service import MarketApplicationService

router = APIRouter(prefix="/markets", tags=["markets"])
authority_router = APIRouter(prefix="/authority-meta", tags=["markets"])

_service = MarketApplicationService()


@router.post("")
async def initialize_market(
    body: InitializeMarketRequest,
    request: Request,
    identity: Annotated[str, Depends(get_current_identity)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.initialize_market(db, identity, body)
    return respond(request, result)


@router.get("")
async def list_markets(
    request: Request,
    identity: Annotated[str, Depends(get_current_identity)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    authority: str | None = Query(None, description="Filter by operator identity"),
    limit: int = Query(20, ge=1, le=100),
    cursor: str | None = Query(None),
) -> ApiResponse:
    result = await _service.list_markets(db, authority, cursor, limit)
    return respond(request, result)


@router.get("/{address}")
async def get_market(
    address: str,
    request: Request,
    identity: Annotated[str, Depends(get_current_identity)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.get_market(db, address)
    return respond(request, result)


@router.get("/{address}/layout")
async def get_market_layout(
    address: str,
    request: Request,
    identity: Annotated[str, Depends(get_current_identity)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.get_market_layout(db, address)
    return respond(request, result)


@router.post("/{address}/freeze")
async def freeze_market(
    address: str,
    request: Request,
    identity: Annotated[str, Depends(get_current_identity)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.freeze_market(db, identity, address)
    return respond(request, result)


@authority_router.get("/{authority}/current-market")
async def get_current_market(
    authority: str,
    request: Request,
    identity: Annotated[str, Depends(get_current_identity)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.get_current_market(db, authority)
    return respond(request, result)
