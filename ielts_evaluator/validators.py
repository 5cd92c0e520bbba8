"""Input validation utilities for the IELTS evaluator."""
import binascii
import base64
from typing import Optional, Tuple, Any


def normalize_audio_base64(audio_base64: Any) -> Any:
    """Drop the line breaks that MIME-style encoders insert every 76 characters."""
    if isinstance(audio_base64, str):
        return ''.join(audio_base64.split())
    return audio_base64


def validate_audio_base64(audio_base64: Any) -> Tuple[bool, Optional[str]]:
    """
    Validate the base64-encoded audio payload. Line-wrapped input is accepted.
    Returns (is_valid, error_message).
    """
    audio_base64 = normalize_audio_base64(audio_base64)
    if audio_base64 is None or audio_base64 == '':
        return False, "Audio payload is required"
    if not isinstance(audio_base64, str):
        return False, "Audio payload must be a base64 string"
    try:
        decoded = base64.b64decode(audio_base64, validate=True)
    except (binascii.Error, ValueError):
        return False, "Audio payload is not valid base64"
    if not decoded:
        return False, "Audio payload decodes to zero bytes"
    return True, None


def validate_topic(topic: Any) -> Tuple[bool, Optional[str]]:
    """
    Validate the speaking topic. Content is passed to the prompt verbatim,
    so only the type is checked.
    Returns (is_valid, error_message).
    """
    if not isinstance(topic, str):
        return False, "Topic must be a string"
    return True, None
