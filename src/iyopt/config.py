from datetime import timedelta
from typing import Literal

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class IyoptSettings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix="IYOPT_")

    base_url: str = "https://bandits.incisive.ly/v1"
    account_id: int = 0
    lab_id: str = ""

    # cookie settings
    domain: str | None = None
    user_cookie_name: str = "iyV"
    reward_cookie_prefix: str = "iyR-"
    cookie_lifetime_hours: int = 26297  # about three years

    request_timeout: float | None = None  # seconds, None leaves it to the transport

    # http settings
    http_host: str = "0.0.0.0"
    http_port: int = 8080

    # logging settings
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    log_format: Literal["json", "text"] = "text"

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_level(cls, value):
        return value.upper() if isinstance(value, str) else value

    @field_validator("log_format", mode="before")
    @classmethod
    def _lower_format(cls, value):
        return value.lower() if isinstance(value, str) else value

    @property
    def reward_cookie_name(self) -> str:
        return f"{self.reward_cookie_prefix}{self.lab_id}"

    @property
    def cookie_lifetime(self) -> timedelta:
        return timedelta(hours=self.cookie_lifetime_hours)


settings = IyoptSettings()
