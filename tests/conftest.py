import pytest

from initiate.app.config.settings import Settings


@pytest.fixture
def settings():
    return Settings(
        _env_file=None,
        CHAT_API_KEY="test-chat-key",
        CHAT_COMPLETIONS_URL="https://chat.test/v1/chat/completions",
        TRANSCRIPTION_API_KEY="test-stt-key",
        TRANSCRIPTION_URL="https://stt.test/v1/audio/transcriptions",
        EXPLORER_API_URL="https://explorer.test/api",
        TOKEN_ICON_URL_TEMPLATE="https://icons.test/{address}.png",
        WALLET_PRIVATE_KEY=None,
        ENABLE_WALLET_TOOLS=True,
    )
