"""Utilities to build multimodal chat payloads for the vision model."""

from typing import Any, Dict, List


def to_image_data_url(jpeg_b64: str) -> str:
    """Wrap a base64 JPEG string in a data URL suitable for vision input."""
    if not jpeg_b64:
        raise ValueError("Image data is empty.")
    return f"data:image/jpeg;base64,{jpeg_b64}"


def build_vision_messages(prompt: str, image_url: str) -> List[Dict[str, Any]]:
    """Build a single user message pairing the frame with its instruction."""
    return [
        {
            "role": "user",
            "content": [
                {"type": "image_url", "image_url": {"url": image_url}},
                {"type": "text", "text": prompt},
            ],
        }
    ]
