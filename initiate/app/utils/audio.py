import base64
import binascii
from typing import List, NamedTuple, Optional

from initiate.app.models.domain.error import InvalidAudioError


class AudioFormat(NamedTuple):
    mime_type: str
    filename: str


# Tried in order until the transcription endpoint accepts one.
AUDIO_FORMAT_CANDIDATES: List[AudioFormat] = [
    AudioFormat("audio/mp4", "audio.m4a"),
    AudioFormat("audio/mpeg", "audio.mp3"),
    AudioFormat("audio/wav", "audio.wav"),
    AudioFormat("audio/m4a", "audio.m4a"),
]


def detect_audio_container(data: bytes) -> Optional[str]:
    """Guess the container from its magic bytes. None when unrecognised."""
    if len(data) < 8:
        return None

    if data[4:8] == b"ftyp":
        return "mp4"
    if data[:2] == b"\xff\xfb" or data[:3] == b"ID3":
        return "mp3"
    if data[:4] == b"RIFF":
        return "wav"
    if data[:4] == b"OggS":
        return "ogg"
    if data[:4] == b"fLaC":
        return "flac"
    return None


def hex_preview(data: bytes, length: int = 32) -> str:
    return " ".join(f"{b:02x}" for b in data[:length])


def decode_base64_audio(encoded: str) -> bytes:
    try:
        return base64.b64decode(encoded, validate=True)
    except (binascii.Error, ValueError) as e:
        raise InvalidAudioError(f"Audio is not valid base64: {e}") from e
