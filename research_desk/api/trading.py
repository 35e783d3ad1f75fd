"""Simulated trading API endpoints.

Every response uses the ``{"success": bool, ...}`` envelope.
"""

from __future__ import annotations

from typing import Optional

import structlog
from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import JSONResponse

from ..core.errors import AuthenticationError, ResearchDeskError
from ..dependencies import get_trading_service
from ..schemas.trading import (
    CancelTradeRequest,
    PlaceTradeRequest,
    PositionResponse,
    SyncTradeRequest,
    TradeResponse,
)
from ..security import AuthUser, get_optional_user
from ..services.trading import TradeResult, TradingService
from .common import read_json_body

logger = structlog.get_logger(__name__)

router = APIRouter(prefix="/trading", tags=["trading"])


def _failure(message: str, status_code: int) -> JSONResponse:
    return JSONResponse({"success": False, "error": message}, status_code=status_code)


def _from_error(exc: ResearchDeskError) -> JSONResponse:
    if exc.status_code >= 500:
        logger.error("trading_request_failed", code=exc.code, error=exc.message)
    return _failure(exc.message, exc.status_code)


def _unexpected(exc: Exception, fallback: str) -> JSONResponse:
    """500 carrying the exception's own message when it has one."""
    logger.error("trading_request_crashed", error=str(exc), error_type=type(exc).__name__)
    return _failure(str(exc) or fallback, 500)


def _trade_result(result: TradeResult) -> JSONResponse:
    return JSONResponse(
        {
            "success": True,
            "trade": TradeResponse.model_validate(result.trade).model_dump(mode="json"),
            "message": result.message,
        }
    )


@router.post("/place")
async def place_trade(
    request: Request,
    user: Optional[AuthUser] = Depends(get_optional_user),
    service: TradingService = Depends(get_trading_service),
) -> JSONResponse:
    """Place an order with the broker and record it against a session."""
    try:
        if user is None:
            raise AuthenticationError()

        payload = await read_json_body(request, PlaceTradeRequest)
        result = await service.place_trade(
            user_id=user.id,
            session_id=payload.session_id,
            symbol=payload.symbol,
            side=payload.side,
            quantity=payload.quantity,
            order_type=payload.order_type,
            limit_price=payload.limit_price,
            stop_price=payload.stop_price,
            investment_thesis=payload.investment_thesis,
        )
        return _trade_result(result)

    except ResearchDeskError as exc:
        return _from_error(exc)
    except Exception as e:
        return _unexpected(e, "Failed to place trade")


@router.post("/cancel")
async def cancel_trade(
    request: Request,
    user: Optional[AuthUser] = Depends(get_optional_user),
    service: TradingService = Depends(get_trading_service),
) -> JSONResponse:
    """Cancel one of the caller's trades.

    The broker-side cancel is best effort; the trade is marked cancelled
    locally even when the broker call fails.
    """
    try:
        if user is None:
            raise AuthenticationError()

        payload = await read_json_body(request, CancelTradeRequest)
        await service.cancel_trade(user_id=user.id, trade_id=payload.trade_id)
        return JSONResponse({"success": True, "message": "Trade cancelled successfully"})

    except ResearchDeskError as exc:
        return _from_error(exc)
    except Exception as e:
        return _unexpected(e, "Failed to cancel trade")


@router.post("/sync")
async def sync_trade(
    request: Request,
    user: Optional[AuthUser] = Depends(get_optional_user),
    service: TradingService = Depends(get_trading_service),
) -> JSONResponse:
    """Refresh a trade's status and fill details from the broker."""
    try:
        if user is None:
            raise AuthenticationError()

        payload = await read_json_body(request, SyncTradeRequest)
        result = await service.sync_trade(user_id=user.id, trade_id=payload.trade_id)
        return _trade_result(result)

    except ResearchDeskError as exc:
        return _from_error(exc)
    except Exception as e:
        return _unexpected(e, "Failed to sync trade")


@router.get("/trades")
async def list_trades(
    session_id: Optional[str] = Query(None, alias="sessionId"),
    user: Optional[AuthUser] = Depends(get_optional_user),
    service: TradingService = Depends(get_trading_service),
) -> JSONResponse:
    """A session's trades with refreshed prices and net positions."""
    try:
        if user is None:
            raise AuthenticationError()

        trades, positions = await service.list_trades(user_id=user.id, session_id=session_id)
        return JSONResponse(
            {
                "success": True,
                "trades": [
                    TradeResponse.model_validate(t).model_dump(mode="json") for t in trades
                ],
                "positions": [
                    PositionResponse.model_validate(p).model_dump(mode="json") for p in positions
                ],
            }
        )

    except ResearchDeskError as exc:
        return _from_error(exc)
    except Exception as e:
        return _unexpected(e, "Failed to fetch trades")
