"""TickTrader Web API 클라이언트 예외 계층."""

from __future__ import annotations

import json
from enum import Enum
from typing import Any


class ErrorKind(str, Enum):
    """실패 종류 태그."""

    CONFIGURATION = "Configuration"
    TRANSPORT = "Transport"
    HTTP_STATUS = "HttpStatus"
    DECODE = "Decode"


class TickTraderError(Exception):
    """모든 클라이언트 예외의 기반 클래스."""

    kind: ErrorKind


class ConfigurationError(TickTraderError, ValueError):
    """자격 증명 누락 등 잘못된 클라이언트 구성."""

    kind = ErrorKind.CONFIGURATION


class TransportError(TickTraderError):
    """연결 실패, 타임아웃 등 네트워크 계층 오류.

    원본 httpx 예외는 ``__cause__`` 로 연결된다.
    """

    kind = ErrorKind.TRANSPORT


class HttpStatusError(TickTraderError):
    """2xx 가 아닌 응답. 상태 코드와 원문 바디를 그대로 보존한다."""

    kind = ErrorKind.HTTP_STATUS

    def __init__(self, status_code: int, body: str, *, method: str = "", url: str = "") -> None:
        self.status_code = status_code
        self.body = body
        self.method = method
        self.url = url
        super().__init__(f"TickTrader API error: {status_code} {method} {url} | body={body}".strip())

    def json(self) -> Any:
        """에러 바디를 JSON 으로 파싱한다. JSON 이 아니면 None."""
        try:
            return json.loads(self.body)
        except ValueError:
            return None


class DecodeError(TickTraderError):
    """응답 바디를 기대한 타입으로 해석하지 못함."""

    kind = ErrorKind.DECODE

    def __init__(self, message: str, body: str = "") -> None:
        self.body = body
        super().__init__(message)
