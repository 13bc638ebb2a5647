from __future__ import annotations

from decimal import Decimal
from typing import Protocol, runtime_checkable

from ticktrader.models import FeedTick, FeedTickLevel2, Symbol, Trade, TradeCreate, TradeModify


@runtime_checkable
class TickTraderMarketDataClient(Protocol):
    """심볼/시세 조회용 프로토콜."""

    async def get_public_symbol_async(self, symbol: str) -> Symbol:
        ...

    async def get_public_tick_async(self, symbol: str) -> FeedTick:
        ...

    async def get_public_tick_level2_async(self, symbol: str) -> FeedTickLevel2:
        ...


@runtime_checkable
class TickTraderTradingClient(Protocol):
    """주문 관리 프로토콜."""

    async def create_trade_async(self, request: TradeCreate) -> Trade:
        ...

    async def modify_trade_async(self, request: TradeModify) -> Trade:
        ...

    async def cancel_trade_async(self, trade_id: int) -> None:
        ...

    async def close_trade_async(self, trade_id: int, amount: float | Decimal | None = None) -> None:
        ...
