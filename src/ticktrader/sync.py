"""비동기 호출을 블로킹 호출로 감싸는 어댑터."""

from __future__ import annotations

import asyncio
import functools
from collections.abc import Awaitable, Callable
from concurrent.futures import ThreadPoolExecutor
from typing import ParamSpec, TypeVar

P = ParamSpec("P")
R = TypeVar("R")


def first_cause(exc: BaseException) -> BaseException:
    """예외 그룹이면 가장 안쪽의 첫 번째 예외를 꺼낸다."""
    while isinstance(exc, BaseExceptionGroup) and exc.exceptions:
        exc = exc.exceptions[0]
    return exc


def _run(async_fn: Callable[P, Awaitable[R]], *args: P.args, **kwargs: P.kwargs) -> R:
    async def _main() -> R:
        return await async_fn(*args, **kwargs)

    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return asyncio.run(_main())

    # 호출자가 이벤트 루프 안에 있으면 같은 스레드에서 돌릴 수 없으므로 전용 스레드에서 실행한다
    with ThreadPoolExecutor(max_workers=1, thread_name_prefix="ticktrader-sync") as executor:
        return executor.submit(asyncio.run, _main()).result()


def run_sync(async_fn: Callable[P, Awaitable[R]], *args: P.args, **kwargs: P.kwargs) -> R:
    """``async_fn`` 을 끝까지 실행하고 결과를 돌려준다.

    실패하면 원래 예외(종류, 메시지)를 그대로 다시 던진다. 동시성 계층이 만든
    예외 그룹은 첫 번째 원인 하나로 풀어서 던진다.
    """
    try:
        return _run(async_fn, *args, **kwargs)
    except BaseExceptionGroup as group:
        cause = first_cause(group)
        raise cause from cause.__cause__


def blocking(async_fn: Callable[P, Awaitable[R]]) -> Callable[P, R]:
    """``xxx_async`` 코루틴 함수로부터 블로킹 버전 ``xxx`` 를 만든다."""

    @functools.wraps(async_fn)
    def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
        return run_sync(async_fn, *args, **kwargs)

    wrapper.__name__ = async_fn.__name__.removesuffix("_async")
    wrapper.__qualname__ = async_fn.__qualname__.removesuffix("_async")
    return wrapper
