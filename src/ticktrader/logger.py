"""간단한 콘솔 로거."""

import logging as std_logging
from typing import Any


class SimpleLogger:
    """간단한 콘솔 로거.

    라이브러리로 쓰일 때는 핸들러를 붙이지 않고, CLI 에서만 console_output=True 로 만든다.
    """

    def __init__(
        self,
        name: str = "ticktrader",
        console_output: bool = False,
        log_level: int | None = None,
    ) -> None:
        """로거 초기화.

        Args:
            name: 로거 이름
            console_output: 콘솔 핸들러 추가 여부
            log_level: 로그 레벨 (None 이면 기존 레벨 유지)
        """
        self.name = name
        self.console_output = console_output
        self.logger = std_logging.getLogger(name)
        if log_level is not None:
            self.logger.setLevel(log_level)

        if console_output and not self.logger.handlers:
            handler = std_logging.StreamHandler()
            formatter = std_logging.Formatter(
                "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
                datefmt="%Y-%m-%d %H:%M:%S",
            )
            handler.setFormatter(formatter)
            self.logger.addHandler(handler)

    def warning(self, message: str, **extra: Any) -> None:
        """WARNING 레벨 로그."""
        self._log(std_logging.WARNING, message, extra)

    def debug(self, message: str, **extra: Any) -> None:
        """DEBUG 레벨 로그."""
        self._log(std_logging.DEBUG, message, extra)

    def _log(
        self,
        level: int,
        message: str,
        extra: dict[str, Any],
    ) -> None:
        if not self.logger.isEnabledFor(level):
            return
        if extra:
            extra_str = " | ".join(f"{k}={v}" for k, v in extra.items())
            message = f"{message} | {extra_str}"
        self.logger.log(level, message)

    def log_request(self, method: str, path: str, signed: bool) -> None:
        """요청 로그 (서명/비밀값은 남기지 않는다)."""
        self.debug("REQUEST", method=method, path=path, signed=signed)

    def log_response(self, method: str, path: str, status_code: int, elapsed_ms: float) -> None:
        self.debug(
            "RESPONSE",
            method=method,
            path=path,
            status=status_code,
            elapsed_ms=f"{elapsed_ms:.1f}",
        )

    def log_failure(self, kind: str, method: str, path: str, detail: str) -> None:
        """실패 로그 (WARNING 레벨)."""
        self.warning("REQUEST_FAILED", kind=kind, method=method, path=path, detail=detail)


def get_logger(name: str = "ticktrader", **kwargs: Any) -> SimpleLogger:
    """로거 인스턴스 반환.

    Args:
        name: 로거 이름
        **kwargs: SimpleLogger 생성 인자
    """
    return SimpleLogger(name=name, **kwargs)
