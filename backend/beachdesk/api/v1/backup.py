"""Backup export and restore endpoints."""

from __future__ import annotations

from typing import Annotated, Any

from fastapi import APIRouter, Body, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from beachdesk.api import deps
from beachdesk.core.errors import LedgerError
from beachdesk.services import backup_service

router = APIRouter()


@router.get("", summary="Export the full ledger")
async def export_backup(
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
) -> dict[str, Any]:
    return await backup_service.export_bundle(session)


@router.post("", summary="Restore a ledger export, replacing current data")
async def import_backup(
    bundle: Annotated[dict[str, Any], Body()],
    session: Annotated[AsyncSession, Depends(deps.get_db_session)],
) -> dict[str, int]:
    try:
        return await backup_service.import_bundle(session, bundle=bundle)
    except LedgerError as exc:
        raise deps.http_error(exc) from exc
