"""단일 HTTP 호출 + JSON 디코딩 + 에러 매핑."""

from __future__ import annotations

from functools import lru_cache
from typing import Any, TypeVar

import httpx
from pydantic import TypeAdapter, ValidationError

from ticktrader.errors import DecodeError, HttpStatusError, TransportError
from ticktrader.logger import get_logger
from ticktrader.models import TickTraderModel

T = TypeVar("T")

_ACCEPT_HEADERS = {"Accept": "application/json"}
_JSON_HEADERS = {"Accept": "application/json", "Content-Type": "application/json"}


@lru_cache(maxsize=None)
def _adapter(result_type: Any) -> TypeAdapter[Any]:
    return TypeAdapter(result_type)


class Transport:
    """한 신뢰 도메인(공개/서명)에 대한 HTTP 전송 계층.

    호출마다 ``httpx.AsyncClient`` 를 새로 열고 ``async with`` 로 닫는다.
    성공, 디코딩 실패, HTTP 실패, 취소 어느 경우에도 연결이 정리된다.
    """

    def __init__(
        self,
        base_url: str,
        *,
        auth: httpx.Auth | None = None,
        timeout: float = 10.0,
        verify: bool = True,
    ) -> None:
        self.base_url = base_url
        self.timeout = timeout
        self.verify = verify
        self._auth = auth
        self._logger = get_logger("ticktrader.transport")

    @property
    def signed(self) -> bool:
        return self._auth is not None

    async def get(self, path: str, result_type: type[T]) -> T:
        response = await self._send("GET", path)
        return self._decode(response, result_type)

    async def post(self, path: str, body: TickTraderModel, result_type: type[T]) -> T:
        response = await self._send("POST", path, content=body.to_json())
        return self._decode(response, result_type)

    async def put(self, path: str, body: TickTraderModel, result_type: type[T]) -> T:
        response = await self._send("PUT", path, content=body.to_json())
        return self._decode(response, result_type)

    async def delete(self, path: str) -> None:
        await self._send("DELETE", path)

    async def _send(self, method: str, path: str, content: str | None = None) -> httpx.Response:
        headers = _JSON_HEADERS if content is not None else _ACCEPT_HEADERS
        self._logger.log_request(method, path, signed=self.signed)
        try:
            async with httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                verify=self.verify,
                auth=self._auth,
            ) as client:
                response = await client.request(
                    method,
                    path,
                    content=content.encode("utf-8") if content is not None else None,
                    headers=headers,
                )
        except httpx.RequestError as e:
            self._logger.log_failure("Transport", method, path, f"{type(e).__name__}: {e}")
            raise TransportError(f"TickTrader request failed: {method} {path} | {type(e).__name__}: {e}") from e

        self._logger.log_response(
            method, path, response.status_code, response.elapsed.total_seconds() * 1000
        )
        if not response.is_success:
            self._logger.log_failure("HttpStatus", method, path, f"{response.status_code}")
            raise HttpStatusError(
                response.status_code,
                response.text,
                method=method,
                url=str(response.request.url),
            )
        return response

    def _decode(self, response: httpx.Response, result_type: type[T]) -> T:
        try:
            return _adapter(result_type).validate_json(response.content)
        except ValidationError as e:
            method = response.request.method
            path = response.request.url.raw_path.decode("ascii")
            self._logger.log_failure("Decode", method, path, f"{e.error_count()} validation error(s)")
            raise DecodeError(
                f"Cannot decode response of {method} {path} as {getattr(result_type, '__name__', result_type)}: {e}",
                body=response.text,
            ) from e
