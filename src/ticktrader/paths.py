"""요청 경로 구성 유틸리티."""

from __future__ import annotations

from decimal import Decimal
from urllib.parse import quote_plus


def _url_encode(value: str) -> str:
    # 서버 쪽 폼 인코딩 규칙: "!*()" 는 그대로, "~" 는 인코딩
    return quote_plus(value, safe="!*()").replace("~", "%7E")


def encode_path_value(value: str) -> str:
    """경로 세그먼트 값을 두 번 URL 인코딩한다.

    서버가 경로를 두 번 디코딩하므로 ``EUR/USD`` 는 ``EUR%252FUSD`` 로 보내야 한다.
    서버 쪽 특성이지만 같은 서버를 상대하는 한 그대로 유지해야 한다.
    """
    return _url_encode(_url_encode(value))


def format_amount(amount: float | Decimal | int) -> str:
    """수량을 쿼리 문자열용으로 변환한다 (float 노이즈, 지수 표기 없이)."""
    if isinstance(amount, float):
        # repr 은 같은 float 로 되돌아오는 가장 짧은 표기
        amount = Decimal(repr(amount))
    if isinstance(amount, Decimal):
        s = format(amount, "f")
        if "." in s:
            s = s.rstrip("0").rstrip(".")
        return s if s else "0"
    return str(amount)


def cancel_trade_path(trade_id: int) -> str:
    return f"/api/v1/trade?type=Cancel&id={trade_id}"


def close_trade_path(trade_id: int, amount: float | Decimal | None = None) -> str:
    if amount is None:
        return f"/api/v1/trade?type=Close&id={trade_id}"
    return f"/api/v1/trade?type=Close&id={trade_id}&amount={format_amount(amount)}"


def close_by_trade_path(trade_id: int, by_trade_id: int) -> str:
    return f"/api/v1/trade?type=CloseBy&id={trade_id}&byid={by_trade_id}"
