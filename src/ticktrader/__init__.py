"""TickTrader Web API 클라이언트 패키지."""

from ticktrader.client import TickTraderWebClient
from ticktrader.errors import (
    ConfigurationError,
    DecodeError,
    ErrorKind,
    HttpStatusError,
    TickTraderError,
    TransportError,
)
from ticktrader import models
from ticktrader.signer import HMACAuth, sign

__all__ = [
    "ConfigurationError",
    "DecodeError",
    "ErrorKind",
    "HMACAuth",
    "HttpStatusError",
    "TickTraderError",
    "TickTraderWebClient",
    "TransportError",
    "models",
    "sign",
]
