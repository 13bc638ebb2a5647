import json
import logging
from collections.abc import Callable
from typing import Any, Optional

import typer
from pydantic import BaseModel

from ticktrader.client import TickTraderWebClient
from ticktrader.errors import HttpStatusError, TickTraderError
from ticktrader.logger import get_logger
from ticktrader.models import RequestDirection, TradeHistoryRequest
from ticktrader.settings import get_settings

app = typer.Typer(add_completion=False, help="TickTrader Web API 조회 도구")


def _client() -> TickTraderWebClient:
    settings = get_settings()
    get_logger("ticktrader", console_output=True, log_level=getattr(logging, settings.log_level.upper(), logging.INFO))
    return TickTraderWebClient.from_settings(settings)


def _dump(value: Any) -> None:
    if isinstance(value, list):
        data = [item.model_dump(by_alias=True, exclude_none=True) for item in value]
    elif isinstance(value, BaseModel):
        data = value.model_dump(by_alias=True, exclude_none=True)
    else:
        data = value
    typer.echo(json.dumps(data, indent=2, ensure_ascii=False))


def _call(pick: Callable[[TickTraderWebClient], Callable[..., Any]], *args: Any) -> None:
    """클라이언트 생성부터 호출까지 한 번에 감싸 에러를 종료 코드 1 로 바꾼다."""
    try:
        _dump(pick(_client())(*args))
    except HttpStatusError as e:
        typer.echo(f"request failed: {e.status_code} {e.body}", err=True)
        raise typer.Exit(code=1) from e
    except TickTraderError as e:
        typer.echo(f"{e.kind.value} error: {e}", err=True)
        raise typer.Exit(code=1) from e


@app.command()
def session(private: bool = typer.Option(False, help="서명된 계좌 엔드포인트 사용")) -> None:
    """거래 세션 정보."""
    _call(lambda c: c.get_trade_session if private else c.get_public_trade_session)


@app.command()
def symbols(private: bool = typer.Option(False, help="서명된 계좌 엔드포인트 사용")) -> None:
    """전체 심볼 목록."""
    _call(lambda c: c.get_all_symbols if private else c.get_public_all_symbols)


@app.command()
def symbol(
    name: str = typer.Argument(..., help="심볼 이름 (예: EUR/USD)"),
    private: bool = typer.Option(False, help="서명된 계좌 엔드포인트 사용"),
) -> None:
    """심볼 상세."""
    _call(lambda c: c.get_symbol if private else c.get_public_symbol, name)


@app.command()
def tick(
    name: str = typer.Argument(..., help="심볼 이름"),
    level2: bool = typer.Option(False, help="호가창(level2) 스냅샷 조회"),
) -> None:
    """공개 시세 조회."""
    _call(lambda c: c.get_public_tick_level2 if level2 else c.get_public_tick, name)


@app.command()
def account() -> None:
    """계좌 정보 (서명 필요)."""
    _call(lambda c: c.get_account)


@app.command()
def trades() -> None:
    """주문 목록 (서명 필요)."""
    _call(lambda c: c.get_all_trades)


@app.command()
def history(
    timestamp_from: Optional[int] = typer.Option(None, "--from", help="시작 타임스탬프(ms)"),
    timestamp_to: Optional[int] = typer.Option(None, "--to", help="종료 타임스탬프(ms)"),
    direction: RequestDirection = typer.Option(RequestDirection.FORWARD, help="페이지 방향"),
    from_id: Optional[str] = typer.Option(None, "--from-id", help="이어서 조회할 마지막 레코드 Id"),
    trade_id: Optional[int] = typer.Option(None, help="특정 주문의 내역만 조회"),
) -> None:
    """거래 내역 한 페이지 (서명 필요)."""
    request = TradeHistoryRequest(
        timestamp_from=timestamp_from,
        timestamp_to=timestamp_to,
        request_direction=direction,
        request_from_id=from_id,
    )
    if trade_id is None:
        _call(lambda c: c.get_trade_history, request)
    else:
        _call(lambda c: c.get_trade_history_by_trade, trade_id, request)


if __name__ == "__main__":
    app()
