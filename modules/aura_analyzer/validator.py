"""
Validation utilities for aura scan inputs.
"""

import base64
import binascii
from typing import Optional
from urllib.parse import urlparse

ALLOWED_UPLOAD_TYPES = ("image/jpeg", "image/png")


def validate_image_url(url: str) -> bool:
    """Basic URL validation: HTTP/HTTPS with a host."""
    if not url or not isinstance(url, str):
        return False
    parsed = urlparse(url.strip())
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def validate_image_data(data: str, max_size_bytes: int) -> bool:
    """Validate a base64 image payload: non-empty, within the size limit, decodable."""
    if not data or not isinstance(data, str):
        return False
    if len(data) > max_size_bytes:
        return False
    try:
        base64.b64decode(_strip_data_uri(data), validate=True)
    except (binascii.Error, ValueError):
        return False
    return True


def validate_upload(content_type: Optional[str], size_bytes: int, max_size_bytes: int) -> bool:
    """Validate a multipart upload: JPEG or PNG, non-empty, within the size limit."""
    if not content_type or not content_type.startswith(ALLOWED_UPLOAD_TYPES):
        return False
    return 0 < size_bytes <= max_size_bytes


def _strip_data_uri(data: str) -> str:
    if data.startswith("data:") and "," in data:
        return data.split(",", 1)[1]
    return data


def to_data_uri(data: str, content_type: str = "image/jpeg") -> str:
    """Wrap raw base64 image data as a data URI; existing data URIs pass through."""
    if data.startswith("data:"):
        return data
    return f"data:{content_type};base64,{data}"
