"""TickTrader Web API 요청/응답 스키마.

서버는 PascalCase 필드명(``IsLastReport``, ``RequestFromId`` 등)을 사용한다.
파이썬 쪽 속성은 snake_case 이며 alias 로 매핑된다. 서버가 null 필드를 생략하므로
모든 필드는 선택값이고, 모르는 필드는 버리지 않고 보존한다.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_pascal


class TickTraderModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_pascal,
        populate_by_name=True,
        extra="allow",
        coerce_numbers_to_str=True,
    )

    def to_json(self) -> str:
        """요청 바디로 보낼 JSON (alias 기준, None 필드 제외)."""
        return self.model_dump_json(by_alias=True, exclude_none=True)


class TradeType(str, Enum):
    MARKET = "Market"
    LIMIT = "Limit"
    STOP = "Stop"
    POSITION = "Position"


class TradeSide(str, Enum):
    BUY = "Buy"
    SELL = "Sell"


class RequestDirection(str, Enum):
    FORWARD = "Forward"
    BACKWARD = "Backward"


class TradeSession(TickTraderModel):
    platform_name: Optional[str] = None
    platform_company: Optional[str] = None
    platform_address: Optional[str] = None
    platform_timezone_offset: Optional[int] = None
    trade_session_id: Optional[int] = None
    trade_session_status: Optional[str] = None
    trade_session_start: Optional[int] = None
    trade_session_end: Optional[int] = None
    trade_session_open: Optional[int] = None
    trade_session_close: Optional[int] = None


class Currency(TickTraderModel):
    name: Optional[str] = None
    precision: Optional[int] = None
    description: Optional[str] = None


class Symbol(TickTraderModel):
    symbol: Optional[str] = None
    precision: Optional[int] = None
    is_trade_allowed: Optional[bool] = None
    margin_mode: Optional[str] = None
    profit_mode: Optional[str] = None
    contract_size: Optional[float] = None
    margin_hedged: Optional[float] = None
    margin_factor: Optional[float] = None
    margin_currency: Optional[str] = None
    margin_currency_precision: Optional[int] = None
    profit_currency: Optional[str] = None
    profit_currency_precision: Optional[int] = None
    description: Optional[str] = None
    swap_enabled: Optional[bool] = None
    swap_size_short: Optional[float] = None
    swap_size_long: Optional[float] = None
    min_trade_amount: Optional[float] = None
    max_trade_amount: Optional[float] = None
    trade_amount_step: Optional[float] = None
    commission: Optional[float] = None
    limits_commission: Optional[float] = None
    min_commission: Optional[float] = None
    min_commission_currency: Optional[str] = None


class FeedLevel(TickTraderModel):
    """호가 한 단계 (가격, 수량)."""

    type: Optional[str] = None
    price: Optional[float] = None
    volume: Optional[float] = None


class FeedTick(TickTraderModel):
    symbol: Optional[str] = None
    timestamp: Optional[int] = None
    best_bid: Optional[FeedLevel] = None
    best_ask: Optional[FeedLevel] = None


class FeedLevel2Record(TickTraderModel):
    type: Optional[str] = None
    price: Optional[float] = None
    volume: Optional[float] = None


class FeedTickLevel2(TickTraderModel):
    """호가창 스냅샷."""

    symbol: Optional[str] = None
    timestamp: Optional[int] = None
    best_bid: Optional[FeedLevel] = None
    best_ask: Optional[FeedLevel] = None
    bids: list[FeedLevel2Record] = Field(default_factory=list)
    asks: list[FeedLevel2Record] = Field(default_factory=list)


class Account(TickTraderModel):
    id: Optional[int] = None
    group: Optional[str] = None
    access_type: Optional[str] = None
    accounting_type: Optional[str] = None
    name: Optional[str] = None
    email: Optional[str] = None
    comment: Optional[str] = None
    registered: Optional[int] = None
    is_blocked: Optional[bool] = None
    is_readonly: Optional[bool] = None
    is_valid: Optional[bool] = None
    is_web_api_enabled: Optional[bool] = None
    leverage: Optional[int] = None
    balance: Optional[float] = None
    balance_currency: Optional[str] = None
    profit: Optional[float] = None
    commission: Optional[float] = None
    agent_commission: Optional[float] = None
    swap: Optional[float] = None
    equity: Optional[float] = None
    margin: Optional[float] = None
    margin_level: Optional[float] = None
    margin_call_level: Optional[float] = None
    stop_out_level: Optional[float] = None


class Asset(TickTraderModel):
    """현금(cash) 계좌 자산."""

    currency: Optional[str] = None
    amount: Optional[float] = None
    free_amount: Optional[float] = None
    locked_amount: Optional[float] = None


class Position(TickTraderModel):
    """넷(net) 계좌 포지션."""

    id: Optional[int] = None
    symbol: Optional[str] = None
    long_amount: Optional[float] = None
    long_price: Optional[float] = None
    short_amount: Optional[float] = None
    short_price: Optional[float] = None
    commission: Optional[float] = None
    agent_commission: Optional[float] = None
    swap: Optional[float] = None
    modified: Optional[int] = None


class Trade(TickTraderModel):
    id: Optional[int] = None
    client_id: Optional[str] = None
    account_id: Optional[int] = None
    type: Optional[str] = None
    initial_type: Optional[str] = None
    side: Optional[str] = None
    status: Optional[str] = None
    symbol: Optional[str] = None
    price: Optional[float] = None
    amount: Optional[float] = None
    remaining_amount: Optional[float] = None
    stop_loss: Optional[float] = None
    take_profit: Optional[float] = None
    margin: Optional[float] = None
    profit: Optional[float] = None
    commission: Optional[float] = None
    agent_commission: Optional[float] = None
    swap: Optional[float] = None
    immediate_or_cancel: Optional[bool] = None
    market_with_slippage: Optional[bool] = None
    created: Optional[int] = None
    modified: Optional[int] = None
    filled: Optional[int] = None
    position_id: Optional[int] = None
    expired: Optional[int] = None
    comment: Optional[str] = None


class TradeCreate(TickTraderModel):
    """신규 주문 요청.

    Type, Side, Symbol, Amount 는 필수. Price 는 Limit/Stop 에만 의미가 있고
    ImmediateOrCancel 은 Limit 에서만 동작한다.
    """

    client_id: Optional[str] = None
    type: TradeType
    side: TradeSide
    symbol: str
    price: Optional[float] = None
    amount: float
    stop_loss: Optional[float] = None
    take_profit: Optional[float] = None
    expired_timestamp: Optional[int] = None
    immediate_or_cancel: Optional[bool] = None
    comment: Optional[str] = None


class TradeModify(TickTraderModel):
    """기존 주문 수정 요청. Market 주문의 가격은 바꿀 수 없다."""

    id: int
    price: Optional[float] = None
    stop_loss: Optional[float] = None
    take_profit: Optional[float] = None
    expired_timestamp: Optional[int] = None
    comment: Optional[str] = None


class TradeHistoryRequest(TickTraderModel):
    """거래 내역 페이지 요청.

    타임스탬프 범위가 없으면 방향에 따라 처음 또는 현재 시점부터 조회한다.
    다음 페이지는 마지막으로 받은 레코드 Id 를 RequestFromId 로 넣어 요청한다.
    """

    timestamp_from: Optional[int] = None
    timestamp_to: Optional[int] = None
    request_direction: RequestDirection = RequestDirection.FORWARD
    request_from_id: Optional[str] = None


class TradeHistory(TickTraderModel):
    id: Optional[str] = None
    transaction_type: Optional[str] = None
    transaction_reason: Optional[str] = None
    transaction_timestamp: Optional[int] = None
    symbol: Optional[str] = None
    trade_id: Optional[int] = None
    client_trade_id: Optional[str] = None
    trade_side: Optional[str] = None
    trade_type: Optional[str] = None
    trade_created: Optional[int] = None
    trade_amount: Optional[float] = None
    trade_remaining_amount: Optional[float] = None
    trade_price: Optional[float] = None
    trade_comment: Optional[str] = None
    position_id: Optional[int] = None
    position_amount: Optional[float] = None
    position_last_amount: Optional[float] = None
    position_last_price: Optional[float] = None
    balance: Optional[float] = None
    balance_movement: Optional[float] = None
    balance_currency: Optional[str] = None
    commission: Optional[float] = None
    swap: Optional[float] = None
    profit: Optional[float] = None


class TradeHistoryReport(TickTraderModel):
    is_last_report: bool = True
    total_reports: Optional[int] = None
    records: list[TradeHistory] = Field(default_factory=list)

    def next_request(self, request: TradeHistoryRequest) -> Optional[TradeHistoryRequest]:
        """다음 페이지 요청을 만든다. 마지막 페이지면 None.

        RequestFromId 외의 필드는 그대로 유지된다.
        """
        if self.is_last_report or not self.records:
            return None
        return request.model_copy(update={"request_from_id": self.records[-1].id})
