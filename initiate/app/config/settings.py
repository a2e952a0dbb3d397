from typing import List, Optional

import httpx
from pydantic import ConfigDict
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    Configuration settings for the voice assistant backend.

    Credentials are optional at load time. A missing key is reported by
    the component that needs it when a request arrives.
    """

    # Chat completion endpoint
    CHAT_API_KEY: Optional[str] = None
    CHAT_MODEL: str = "gpt-4o"
    CHAT_COMPLETIONS_URL: str = "https://api.anannas.ai/v1/chat/completions"

    # Speech-to-text endpoint
    TRANSCRIPTION_API_KEY: Optional[str] = None
    TRANSCRIPTION_MODEL: str = "whisper-large-v3-turbo"
    TRANSCRIPTION_URL: str = (
        "https://api.groq.com/openai/v1/audio/transcriptions"
    )
    TRANSCRIPTION_MIN_AUDIO_BYTES: int = 1000
    TRANSCRIPTION_DEFAULT_CONFIDENCE: float = 0.95

    # Blockchain explorer
    EXPLORER_API_URL: str = "https://arbitrum.blockscout.com/api"
    TOKEN_ICON_URL_TEMPLATE: str = (
        "https://static.cx.metamask.io/api/v1/tokenIcons/42161/{address}.png"
    )

    # Wallet / network node
    RPC_URL: str = "https://arb1.arbitrum.io/rpc"
    WALLET_PRIVATE_KEY: Optional[str] = None
    ENABLE_WALLET_TOOLS: bool = True
    DEFAULT_WALLET_ADDRESS: str = "0xC039654Bf76d6aF77A851c26167FBf07405C59BA"

    # HTTP client settings
    HTTP_CONNECT_TIMEOUT: float = 30.0
    HTTP_READ_TIMEOUT: float = 120.0

    CORS_ALLOW_ORIGINS: List[str] = ["*"]

    # Logging settings
    LOG_LEVEL: str = "INFO"
    LOG_FORMAT: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    model_config = ConfigDict(env_file=".env", extra="ignore")

    @property
    def httpx_timeout(self) -> httpx.Timeout:
        return httpx.Timeout(
            connect=self.HTTP_CONNECT_TIMEOUT,
            read=self.HTTP_READ_TIMEOUT,
            write=self.HTTP_READ_TIMEOUT,
            pool=self.HTTP_CONNECT_TIMEOUT,
        )


# Create a settings instance
settings = Settings()
