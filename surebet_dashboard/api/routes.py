from __future__ import annotations

import logging
from typing import Any

from fastapi import APIRouter, Depends, Query, Request
from fastapi.concurrency import run_in_threadpool
from pydantic import BaseModel

from ..db.registry import SheetRegistry
from ..models.config_models import AppConfig
from ..services.cache import SheetRowsCache
from ..services.dashboard import overview_for_all, overview_for_sheet
from ..sheets.client import SheetsClient
from .errors import ApiError, InternalError, NotFoundError, ValidationError

"""HTTP routes: sheet registrations and dashboard statistics.

Handlers stay thin: they resolve the registry / cache / sheets client from
the application state, call the services and translate failures into the
error taxonomy of ``api.errors``.
"""

__all__ = [
    "router",
    "SheetCreate",
]

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api")

REFRESH_MESSAGE = (
    "Cache de planilhas limpo. Na próxima carga do dashboard ele vai ler tudo "
    "de novo do Google Sheets."
)

# SERIAL primary key (int4)
MAX_SHEET_ID = 2**31 - 1


class SheetCreate(BaseModel):
    name: str | None = None
    googleSheetId: str | None = None
    range: str | None = None


def get_config(request: Request) -> AppConfig:
    return request.app.state.config


def get_registry(request: Request) -> SheetRegistry:
    return request.app.state.registry


def get_cache(request: Request) -> SheetRowsCache:
    return request.app.state.cache


def get_sheets_client(request: Request) -> SheetsClient:
    return request.app.state.sheets_client


def _parse_id(raw: str | None) -> int | None:
    """Registration id from a path/query value; None when it cannot exist."""
    try:
        value = int(str(raw).strip())
    except (TypeError, ValueError):
        return None
    return value if 1 <= value <= MAX_SHEET_ID else None


def _internal(message: str, exc: Exception) -> InternalError:
    logger.exception(f"{message}: {exc}")
    return InternalError(message, detail=str(exc))


@router.get("/sheets")
async def list_sheets(registry: SheetRegistry = Depends(get_registry)) -> list[dict[str, Any]]:
    try:
        sheets = await run_in_threadpool(registry.list_all)
    except Exception as e:
        raise _internal("Erro ao listar planilhas", e) from e
    return [s.to_dict() for s in sheets]


@router.post("/sheets", status_code=201)
async def create_sheet(
    payload: SheetCreate,
    registry: SheetRegistry = Depends(get_registry),
    cache: SheetRowsCache = Depends(get_cache),
    config: AppConfig = Depends(get_config),
) -> dict[str, Any]:
    if not (payload.name or "").strip() or not (payload.googleSheetId or "").strip():
        raise ValidationError("name e googleSheetId são obrigatórios")

    try:
        created = await run_in_threadpool(
            registry.insert,
            payload.name,
            payload.googleSheetId,
            payload.range or config.google.default_range,
        )
    except Exception as e:
        raise _internal("Erro ao cadastrar planilha", e) from e

    # new registration: drop everything rather than track what changed
    cache.clear()
    logger.info(f"sheet registered: id={created.id} name={created.name!r}")
    return created.to_dict()


@router.delete("/sheets/{sheet_id}")
async def delete_sheet(
    sheet_id: str,
    registry: SheetRegistry = Depends(get_registry),
    cache: SheetRowsCache = Depends(get_cache),
) -> dict[str, Any]:
    sid = _parse_id(sheet_id)
    try:
        sheet = await run_in_threadpool(registry.get, sid) if sid is not None else None
        if sheet is None:
            raise NotFoundError("Planilha não encontrada")
        await run_in_threadpool(registry.delete, sheet.id)
    except ApiError:
        raise
    except Exception as e:
        raise _internal("Erro ao remover planilha", e) from e

    cache.invalidate(sheet.id)
    logger.info(f"sheet removed: id={sheet.id}")
    return {"success": True}


@router.post("/dashboard/refresh-sheets")
async def refresh_sheets(cache: SheetRowsCache = Depends(get_cache)) -> dict[str, Any]:
    cache.clear()
    logger.info("sheet cache cleared")
    return {"ok": True, "message": REFRESH_MESSAGE}


@router.get("/dashboard/cache-status")
async def cache_status(cache: SheetRowsCache = Depends(get_cache)) -> list[dict[str, Any]]:
    return cache.snapshot()


@router.get("/dashboard/overview")
async def overview(
    sheetDbId: str | None = None,
    operador: str | None = None,
    date_from: str | None = Query(None, alias="from"),
    date_to: str | None = Query(None, alias="to"),
    registry: SheetRegistry = Depends(get_registry),
    cache: SheetRowsCache = Depends(get_cache),
    client: SheetsClient = Depends(get_sheets_client),
) -> dict[str, Any]:
    if not sheetDbId:
        raise ValidationError("sheetDbId é obrigatório")

    sid = _parse_id(sheetDbId)
    try:
        sheet = await run_in_threadpool(registry.get, sid) if sid is not None else None
        if sheet is None:
            raise NotFoundError("Planilha não encontrada")
        stats = await overview_for_sheet(sheet, cache, client.afetch_rows, operador, date_from, date_to)
    except ApiError:
        raise
    except Exception as e:
        raise _internal("Erro ao montar overview", e) from e
    return stats.to_dict()


@router.get("/dashboard/overview-all")
async def overview_all(
    operador: str | None = None,
    date_from: str | None = Query(None, alias="from"),
    date_to: str | None = Query(None, alias="to"),
    registry: SheetRegistry = Depends(get_registry),
    cache: SheetRowsCache = Depends(get_cache),
    client: SheetsClient = Depends(get_sheets_client),
) -> dict[str, Any]:
    try:
        sheets = await run_in_threadpool(registry.list_all)
        if not sheets:
            raise ValidationError("Nenhuma planilha cadastrada")
        # oldest registration first
        sheets = sorted(sheets, key=lambda s: s.id)
        stats = await overview_for_all(sheets, cache, client.afetch_rows, operador, date_from, date_to)
    except ApiError:
        raise
    except Exception as e:
        raise _internal("Erro ao montar overview geral", e) from e
    return stats.to_dict()
