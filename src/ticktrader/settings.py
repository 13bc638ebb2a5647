from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class TickTraderSettings(BaseSettings):
    """TickTrader Web API 접속 설정."""

    address: str = Field(
        default="https://ttlivewebapi.fxopen.com:8443",
        alias="TICKTRADER_ADDRESS",
        description="Web API 주소. 데모 서버는 https://ttdemowebapi.fxopen.com:8443",
    )
    web_api_id: str = Field(default="", alias="TICKTRADER_WEB_API_ID")
    web_api_key: str = Field(default="", alias="TICKTRADER_WEB_API_KEY")
    web_api_secret: str = Field(default="", alias="TICKTRADER_WEB_API_SECRET")
    timeout: float = Field(default=10.0, alias="TICKTRADER_TIMEOUT")
    verify_ssl: bool = Field(
        default=True,
        alias="TICKTRADER_VERIFY_SSL",
        description="False 면 서버 인증서 검증을 건너뛴다 (클라이언트 단위 설정)",
    )
    log_level: str = Field(default="INFO", alias="TICKTRADER_LOG_LEVEL")

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    def has_credentials(self) -> bool:
        return bool(self.web_api_id or self.web_api_key or self.web_api_secret)


@lru_cache(maxsize=1)
def get_settings() -> TickTraderSettings:
    """설정을 캐싱해 로드한다."""
    return TickTraderSettings()
