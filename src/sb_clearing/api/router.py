"""sb_clearing REST endpoints (resolution, claims, reclamation).

POST /markets/{address}/resolve        — operator declares the winning side
POST /markets/{address}/claim          — caller claims their winnings
GET  /markets/{address}/quote          — caller's estimated net payout
POST /markets/{address}/withdraw-fees  — host pays out accrued fees
POST /markets/{address}/close          — host drains and deletes the market
GET  /markets/{address}/invariants     — conservation audit
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.sb_clearing.application.schemas import ResolveRequest
from src.sb_clearing.application.service import ClearingService
from src.sb_common.database import get_db_session
from src.sb_common.response import ApiResponse, respond
from src.sb_gateway.auth.dependencies import get_current_identity, require_host

router = APIRouter(prefix="/markets/{address}", tags=["clearing"])

_service = ClearingService()


@router.post("/resolve")
async def resolve_market(
    address: str,
    body: ResolveRequest,
    request: Request,
    identity: Annotated[str, Depends(get_current_identity)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.resolve_market(db, identity, address, body.winning_side)
    return respond(request, result)


@router.post("/claim")
async def claim_winnings(
    address: str,
    request: Request,
    identity: Annotated[str, Depends(get_current_identity)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.claim_winnings(db, identity, address)
    return respond(request, result)


@router.get("/quote")
async def quote_payout(
    address: str,
    request: Request,
    identity: Annotated[str, Depends(get_current_identity)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.quote_payout(db, identity, address)
    return respond(request, result)


@router.post("/withdraw-fees")
async def withdraw_fees(
    address: str,
    request: Request,
    host: Annotated[str, Depends(require_host)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.withdraw_fees(db, host, address)
    return respond(request, result)


@router.post("/close")
async def close_market(
    address: str,
    request: Request,
    host: Annotated[str, Depends(require_host)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.close_market(db, host, address)
    return respond(request, result)


@router.get("/invariants")
async def verify_market(
    address: str,
    request: Request,
    identity: Annotated[str, Depends(get_current_identity)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
) -> ApiResponse:
    result = await _service.verify_market(db, address)
    return respond(request, result)
