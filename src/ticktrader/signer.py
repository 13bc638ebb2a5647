"""Web API 토큰 기반 HMAC 요청 서명."""

from __future__ import annotations

import base64
import hashlib
import hmac
import time
from collections.abc import Generator

import httpx

from ticktrader.errors import ConfigurationError

_CREDENTIALS_MESSAGE = "Account Web API methods require a valid Web API token (id, key, secret)"


def sign(
    account_id: str,
    key: str,
    secret: str,
    timestamp_ms: int,
    http_method: str,
    full_request_uri: str,
    body: str = "",
) -> str:
    """요청 서명값(base64)을 계산한다.

    서명 대상 문자열은 구분자 없이
    ``timestamp + id + key + METHOD + uri + body`` 순서로 이어 붙이며,
    secret 을 키로 HMAC-SHA256 을 계산한다. uri 는 실제 전송되는 절대 주소(쿼리 포함)여야 한다.
    """
    message = f"{timestamp_ms}{account_id}{key}{http_method.upper()}{full_request_uri}{body}"
    # ASCII 외 문자는 "?" 로 치환된 뒤 서명된다
    digest = hmac.new(
        secret.encode("ascii", errors="replace"),
        message.encode("ascii", errors="replace"),
        hashlib.sha256,
    ).digest()
    return base64.b64encode(digest).decode("ascii")


def authorization_header(account_id: str, key: str, timestamp_ms: int, signature: str) -> str:
    return f"HMAC {account_id}:{key}:{timestamp_ms}:{signature}"


def now_ms() -> int:
    return int(time.time() * 1000)


class HMACAuth(httpx.Auth):
    """요청마다 Authorization 헤더를 새로 서명해 붙이는 httpx 인증 흐름."""

    requires_request_body = True

    def __init__(self, web_api_id: str, web_api_key: str, web_api_secret: str) -> None:
        for name, value in (
            ("web_api_id", web_api_id),
            ("web_api_key", web_api_key),
            ("web_api_secret", web_api_secret),
        ):
            if not value:
                raise ConfigurationError(f"{_CREDENTIALS_MESSAGE}: {name} is empty")
        self._id = web_api_id
        self._key = web_api_key
        self._secret = web_api_secret

    def auth_flow(self, request: httpx.Request) -> Generator[httpx.Request, httpx.Response, None]:
        # 전송 직전에 타임스탬프를 한 번만 잡는다
        timestamp = now_ms()
        body = request.content.decode("utf-8") if request.content else ""
        signature = sign(
            self._id,
            self._key,
            self._secret,
            timestamp,
            request.method,
            str(request.url),
            body,
        )
        request.headers["Authorization"] = authorization_header(self._id, self._key, timestamp, signature)
        yield request
