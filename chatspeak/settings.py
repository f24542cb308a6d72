from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    twitch_username: str
    twitch_oauth_token: str
    twitch_channel: str

    twitch_ws_url: str = "wss://irc-ws.chat.twitch.tv:443"
    chat_reconnect_seconds: float = 5.0

    volume_api_url: str
    resolver_timeout_seconds: float = 5.0

    tts_voice: str = "Alex"
    tts_speed: float = Field(default=1.0, gt=0)
    tts_base_rate: int = 200
    base_volume: float = 1.0
    max_message_length: int = Field(default=200, gt=0)

    poll_interval_ms: int = Field(default=1000, gt=0)
    handler_workers: int = Field(default=4, ge=1)

    api_enabled: bool = True
    api_host: str = "127.0.0.1"
    api_port: int = 8000

    log_level: str = "INFO"

    @property
    def poll_interval_seconds(self) -> float:
        return self.poll_interval_ms / 1000

@lru_cache
def get_settings() -> Settings:
    return Settings()
