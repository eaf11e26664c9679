"""sb_account REST API — balances, ledger, faucet and authority metas.

All endpoints require JWT authentication; the caller acts as the identity
in the token's `sub` claim.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.ext.asyncio import AsyncSession

from src.sb_account.application.schemas import AirdropRequest
from src.sb_account.application.service import AccountApplicationService
from src.sb_common.database import get_db_session
from src.sb_common.response import ApiResponse, respond
from src.sb_gateway.auth.dependencies import get_current_identity

router = APIRouter(tags=["account"])

_service = AccountApplicationService()


@router.get("/account/balance")
async def get_balance(
    identity: Annotated[str, Depends(get_current_identity)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    data = await _service.get_balance(db, identity)
    return respond(request, data)


@router.get("/account/ledger")
async def list_ledger(
    identity: Annotated[str, Depends(get_current_identity)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
    cursor: str | None = Query(None, description="Pagination cursor (opaque Base64)"),
    limit: int = Query(20, ge=1, le=100, description="Items per page"),
    entry_type: str | None = Query(None, description="Filter by LedgerEntryType"),
) -> ApiResponse:
    data = await _service.list_ledger(db, identity, cursor, limit, entry_type)
    return respond(request, data)


@router.post("/account/airdrop")
async def airdrop(
    body: AirdropRequest,
    identity: Annotated[str, Depends(get_current_identity)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    data = await _service.airdrop(db, identity, body.lamports)
    return respond(request, data)


@router.post("/authority-meta")
async def init_authority_meta(
    identity: Annotated[str, Depends(get_current_identity)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    data = await _service.init_authority_meta(db, identity)
    return respond(request, data)


@router.get("/authority-meta/{authority}")
async def get_authority_meta(
    authority: str,
    identity: Annotated[str, Depends(get_current_identity)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    data = await _service.get_authority_meta(db, authority)
    return respond(request, data)


@router.get("/authority-meta/{authority}/layout")
async def get_authority_meta_layout(
    authority: str,
    identity: Annotated[str, Depends(get_current_identity)],
    db: Annotated[AsyncSession, Depends(get_db_session)],
    request: Request,
) -> ApiResponse:
    data = await _service.get_authority_meta_layout(db, authority)
    return respond(request, data)
