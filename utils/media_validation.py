"""Validation helpers for uploaded multimedia content."""

from typing import Optional

AUDIO_EXTENSIONS = {
    "audio/webm": "webm",
    "audio/wav": "wav",
    "audio/x-wav": "wav",
    "audio/mpeg": "mp3",
    "audio/mp3": "mp3",
    "audio/mp4": "mp4",
    "audio/aac": "m4a",
    "audio/ogg": "oga",
    "audio/opus": "ogg",
    "audio/flac": "flac",
    "audio/x-flac": "flac",
}

_KNOWN_SUFFIXES = {"webm", "wav", "mp3", "mp4", "mpeg", "mpga", "oga", "ogg", "flac", "m4a"}


def normalize_mime(mime_type: Optional[str]) -> str:
    """Lowercase a MIME type and strip parameters such as `;codecs=opus`."""
    return (mime_type or "").lower().split(";", 1)[0].strip()


def audio_filename_for_mime(mime_type: Optional[str]) -> str:
    """Return an upload filename whose extension matches the audio MIME type.

    An empty or generic `application/octet-stream` type falls back to webm,
    which is what browsers' MediaRecorder produces by default.

    Raises:
        ValueError: If the MIME type is not a supported audio format.
    """
    mime = normalize_mime(mime_type)
    if not mime or mime == "application/octet-stream":
        return "audio.webm"
    if mime in AUDIO_EXTENSIONS:
        suffix = AUDIO_EXTENSIONS[mime]
    elif mime.startswith("audio/") and mime.split("/")[-1] in _KNOWN_SUFFIXES:
        suffix = mime.split("/")[-1]
    else:
        raise ValueError(f"Unsupported or unknown audio MIME type: '{mime_type}'")
    return f"audio.{suffix}"


def require_text(value: Optional[str]) -> str:
    """Return `value` stripped, or an empty string when missing."""
    return value.strip() if isinstance(value, str) else ""
