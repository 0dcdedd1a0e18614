import base64
import logging
from typing import Optional

from tasknest.core.config import settings

logger = logging.getLogger(__name__)

PLACEHOLDER_SVG = (
    '<svg xmlns="http://www.w3.org/2000/svg" width="150" height="150">'
    '<rect width="150" height="150" fill="#e5e7eb"/>'
    '<text x="75" y="75" text-anchor="middle" dy=".3em" fill="#9ca3af" font-size="14">Image too large</text>'
    "</svg>"
)


class AvatarError(ValueError):
    """Raised when an uploaded profile picture is rejected."""


def _data_url(content_type: str, content: bytes) -> str:
    return f"data:{content_type};base64,{base64.b64encode(content).decode('ascii')}"


def placeholder_data_url() -> str:
    return _data_url("image/svg+xml", PLACEHOLDER_SVG.encode("utf-8"))


def build_avatar_data_url(content: bytes, content_type: Optional[str]) -> str:
    """
    Validate an uploaded image and turn it into the data URL stored on the user.

    Images whose encoded form is longer than AVATAR_MAX_DATA_URL_LENGTH are
    replaced by a small "Image too large" SVG.
    """
    if len(content) > settings.AVATAR_MAX_BYTES:
        raise AvatarError("Image size must be less than 5MB")
    if (content_type or "").lower() not in settings.AVATAR_ALLOWED_TYPES:
        raise AvatarError("Only JPG, PNG, and GIF files are allowed")

    data_url = _data_url(content_type.lower(), content)
    if len(data_url) > settings.AVATAR_MAX_DATA_URL_LENGTH:
        logger.info(f"Avatar data URL too long ({len(data_url)} chars), storing placeholder")
        return placeholder_data_url()
    return data_url


def describe_avatar(avatar: Optional[str]) -> str:
    """Storage kind of an avatar value: base64, url or none."""
    if not avatar:
        return "none"
    if avatar.startswith("data:"):
        return "base64"
    return "url"
