from __future__ import annotations

from decimal import Decimal

from ticktrader.errors import ConfigurationError
from ticktrader.models import (
    Account,
    Asset,
    Currency,
    FeedTick,
    FeedTickLevel2,
    Position,
    Symbol,
    Trade,
    TradeCreate,
    TradeHistoryReport,
    TradeHistoryRequest,
    TradeModify,
    TradeSession,
)
from ticktrader.paths import cancel_trade_path, close_by_trade_path, close_trade_path, encode_path_value
from ticktrader.protocols import TickTraderMarketDataClient, TickTraderTradingClient
from ticktrader.settings import TickTraderSettings, get_settings
from ticktrader.signer import HMACAuth
from ticktrader.sync import blocking
from ticktrader.transport import Transport


class TickTraderWebClient(TickTraderMarketDataClient, TickTraderTradingClient):
    """TickTrader Web API 클라이언트.

    주소만 주면 공개(public) 메서드만 쓸 수 있는 클라이언트가 된다.
    계좌 메서드는 Web API 토큰(id, key, secret)이 모두 있어야 하며, 일부만 주면 생성 시점에 실패한다.

    모든 메서드는 ``xxx_async`` (코루틴)와 ``xxx`` (블로킹) 두 형태로 제공된다.
    클라이언트는 불변 설정만 들고 있으므로 동시에 여러 호출을 해도 안전하다.
    """

    def __init__(
        self,
        address: str,
        web_api_id: str | None = None,
        web_api_key: str | None = None,
        web_api_secret: str | None = None,
        *,
        timeout: float = 10.0,
        verify_ssl: bool = True,
    ) -> None:
        if not address:
            raise ConfigurationError("Web API address is required")
        self.address = address
        self.web_api_id = web_api_id
        self.web_api_key = web_api_key
        self.timeout = timeout
        self.verify_ssl = verify_ssl

        self._public = Transport(address, timeout=timeout, verify=verify_ssl)
        self._private: Transport | None = None
        if web_api_id is not None or web_api_key is not None or web_api_secret is not None:
            auth = HMACAuth(web_api_id or "", web_api_key or "", web_api_secret or "")
            self._private = Transport(address, auth=auth, timeout=timeout, verify=verify_ssl)

    @classmethod
    def from_settings(cls, settings: TickTraderSettings | None = None) -> TickTraderWebClient:
        """설정(환경변수/.env)으로부터 클라이언트를 만든다."""
        settings = settings or get_settings()
        if settings.has_credentials():
            return cls(
                settings.address,
                settings.web_api_id,
                settings.web_api_key,
                settings.web_api_secret,
                timeout=settings.timeout,
                verify_ssl=settings.verify_ssl,
            )
        return cls(settings.address, timeout=settings.timeout, verify_ssl=settings.verify_ssl)

    @property
    def is_public_only(self) -> bool:
        return self._private is None

    @property
    def _signed(self) -> Transport:
        if self._private is None:
            raise ConfigurationError(
                "Account Web API methods require a valid Web API token (id, key, secret); "
                "this client was created for public methods only"
            )
        return self._private

    # ─────────────────────────────────────────────────────────────────
    # 공개 메서드
    # ─────────────────────────────────────────────────────────────────

    async def get_public_trade_session_async(self) -> TradeSession:
        return await self._public.get("/api/v1/public/tradesession", TradeSession)

    async def get_public_all_currencies_async(self) -> list[Currency]:
        return await self._public.get("/api/v1/public/currency", list[Currency])

    async def get_public_currency_async(self, currency: str) -> Currency:
        return await self._public.get(f"/api/v1/public/currency/{encode_path_value(currency)}", Currency)

    async def get_public_all_symbols_async(self) -> list[Symbol]:
        return await self._public.get("/api/v1/public/symbol", list[Symbol])

    async def get_public_symbol_async(self, symbol: str) -> Symbol:
        return await self._public.get(f"/api/v1/public/symbol/{encode_path_value(symbol)}", Symbol)

    async def get_public_all_ticks_async(self) -> list[FeedTick]:
        return await self._public.get("/api/v1/public/tick", list[FeedTick])

    async def get_public_tick_async(self, symbol: str) -> FeedTick:
        return await self._public.get(f"/api/v1/public/tick/{encode_path_value(symbol)}", FeedTick)

    async def get_public_all_ticks_level2_async(self) -> list[FeedTickLevel2]:
        return await self._public.get("/api/v1/public/level2", list[FeedTickLevel2])

    async def get_public_tick_level2_async(self, symbol: str) -> FeedTickLevel2:
        return await self._public.get(f"/api/v1/public/level2/{encode_path_value(symbol)}", FeedTickLevel2)

    get_public_trade_session = blocking(get_public_trade_session_async)
    get_public_all_currencies = blocking(get_public_all_currencies_async)
    get_public_currency = blocking(get_public_currency_async)
    get_public_all_symbols = blocking(get_public_all_symbols_async)
    get_public_symbol = blocking(get_public_symbol_async)
    get_public_all_ticks = blocking(get_public_all_ticks_async)
    get_public_tick = blocking(get_public_tick_async)
    get_public_all_ticks_level2 = blocking(get_public_all_ticks_level2_async)
    get_public_tick_level2 = blocking(get_public_tick_level2_async)

    # ─────────────────────────────────────────────────────────────────
    # 계좌 메서드 (서명 필요)
    # ─────────────────────────────────────────────────────────────────

    async def get_account_async(self) -> Account:
        return await self._signed.get("/api/v1/account", Account)

    async def get_trade_session_async(self) -> TradeSession:
        return await self._signed.get("/api/v1/tradesession", TradeSession)

    async def get_all_currencies_async(self) -> list[Currency]:
        return await self._signed.get("/api/v1/currency", list[Currency])

    async def get_currency_async(self, currency: str) -> Currency:
        return await self._signed.get(f"/api/v1/currency/{encode_path_value(currency)}", Currency)

    async def get_all_symbols_async(self) -> list[Symbol]:
        return await self._signed.get("/api/v1/symbol", list[Symbol])

    async def get_symbol_async(self, symbol: str) -> Symbol:
        return await self._signed.get(f"/api/v1/symbol/{encode_path_value(symbol)}", Symbol)

    async def get_all_ticks_async(self) -> list[FeedTick]:
        return await self._signed.get("/api/v1/tick", list[FeedTick])

    async def get_tick_async(self, symbol: str) -> FeedTick:
        return await self._signed.get(f"/api/v1/tick/{encode_path_value(symbol)}", FeedTick)

    async def get_all_ticks_level2_async(self) -> list[FeedTickLevel2]:
        return await self._signed.get("/api/v1/level2", list[FeedTickLevel2])

    async def get_tick_level2_async(self, symbol: str) -> FeedTickLevel2:
        return await self._signed.get(f"/api/v1/level2/{encode_path_value(symbol)}", FeedTickLevel2)

    async def get_all_assets_async(self) -> list[Asset]:
        """현금 계좌 자산 목록. 현금(cash) 계좌에서만 동작한다."""
        return await self._signed.get("/api/v1/asset", list[Asset])

    async def get_asset_async(self, currency: str) -> Asset:
        """통화별 현금 계좌 자산. 현금(cash) 계좌에서만 동작한다."""
        return await self._signed.get(f"/api/v1/asset/{encode_path_value(currency)}", Asset)

    async def get_all_positions_async(self) -> list[Position]:
        """포지션 목록. 넷(net) 계좌에서만 동작한다."""
        return await self._signed.get("/api/v1/position", list[Position])

    async def get_position_async(self, symbol: str) -> Position:
        """심볼별 포지션. 넷(net) 계좌에서만 동작한다."""
        return await self._signed.get(f"/api/v1/position/{encode_path_value(symbol)}", Position)

    async def get_all_trades_async(self) -> list[Trade]:
        return await self._signed.get("/api/v1/trade", list[Trade])

    async def get_trade_async(self, trade_id: int) -> Trade:
        return await self._signed.get(f"/api/v1/trade/{trade_id}", Trade)

    async def create_trade_async(self, request: TradeCreate) -> Trade:
        return await self._signed.post("/api/v1/trade", request, Trade)

    async def modify_trade_async(self, request: TradeModify) -> Trade:
        return await self._signed.put("/api/v1/trade", request, Trade)

    async def cancel_trade_async(self, trade_id: int) -> None:
        """대기(pending) 주문 취소."""
        await self._signed.delete(cancel_trade_path(trade_id))

    async def close_trade_async(self, trade_id: int, amount: float | Decimal | None = None) -> None:
        """시장가 포지션 청산. amount 가 없으면 전량 청산."""
        await self._signed.delete(close_trade_path(trade_id, amount))

    async def close_by_trade_async(self, trade_id: int, by_trade_id: int) -> None:
        """반대 포지션(by_trade_id)으로 상계 청산."""
        await self._signed.delete(close_by_trade_path(trade_id, by_trade_id))

    async def get_trade_history_async(self, request: TradeHistoryRequest) -> TradeHistoryReport:
        """계좌 거래 내역 한 페이지를 조회한다.

        자동으로 다음 페이지를 가져오지 않는다. ``IsLastReport`` 가 거짓이면
        ``report.next_request(request)`` 로 다음 요청을 만들어 다시 호출한다.
        """
        return await self._signed.post("/api/v1/tradehistory", request, TradeHistoryReport)

    async def get_trade_history_by_trade_async(
        self, trade_id: int, request: TradeHistoryRequest
    ) -> TradeHistoryReport:
        return await self._signed.post(f"/api/v1/tradehistory/{trade_id}", request, TradeHistoryReport)

    get_account = blocking(get_account_async)
    get_trade_session = blocking(get_trade_session_async)
    get_all_currencies = blocking(get_all_currencies_async)
    get_currency = blocking(get_currency_async)
    get_all_symbols = blocking(get_all_symbols_async)
    get_symbol = blocking(get_symbol_async)
    get_all_ticks = blocking(get_all_ticks_async)
    get_tick = blocking(get_tick_async)
    get_all_ticks_level2 = blocking(get_all_ticks_level2_async)
    get_tick_level2 = blocking(get_tick_level2_async)
    get_all_assets = blocking(get_all_assets_async)
    get_asset = blocking(get_asset_async)
    get_all_positions = blocking(get_all_positions_async)
    get_position = blocking(get_position_async)
    get_all_trades = blocking(get_all_trades_async)
    get_trade = blocking(get_trade_async)
    create_trade = blocking(create_trade_async)
    modify_trade = blocking(modify_trade_async)
    cancel_trade = blocking(cancel_trade_async)
    close_trade = blocking(close_trade_async)
    close_by_trade = blocking(close_by_trade_async)
    get_trade_history = blocking(get_trade_history_async)
    get_trade_history_by_trade = blocking(get_trade_history_by_trade_async)
