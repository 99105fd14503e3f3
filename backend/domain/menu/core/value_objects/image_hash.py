"""ImageHash value object.

Content address of a submitted menu photo, used as the analysis cache key.
"""

import base64
import binascii
import hashlib
import re
from dataclasses import dataclass

from domain.menu.core.exceptions.domain_errors import InvalidImageError

_HEX_DIGEST = re.compile(r"^[0-9a-f]{64}$")


@dataclass(frozen=True)
class ImageHash:
    """SHA-256 hex digest of the decoded image bytes.

    Hashing the decoded bytes (not the base64 text) means the same photo
    uploaded as multipart or as base64 JSON maps to the same cache entry.

    Examples:
        >>> h = ImageHash.from_bytes(b"menu")
        >>> len(str(h))
        64

    Raises:
        ValueError: If value is not a 64 character lowercase hex digest.
    """

    value: str

    def __post_init__(self) -> None:
        if not _HEX_DIGEST.match(self.value):
            raise ValueError(f"Invalid image hash: {self.value!r}")

    @classmethod
    def from_bytes(cls, data: bytes) -> "ImageHash":
        return cls(hashlib.sha256(data).hexdigest())

    @classmethod
    def from_base64(cls, image_base64: str) -> "ImageHash":
        """
        Hash a base64 payload (an optional data URL prefix is stripped).

        Raises:
            InvalidImageError: If the payload is not valid base64.
        """
        payload = image_base64.split(",", 1)[1] if image_base64.startswith("data:") else image_base64
        try:
            raw = base64.b64decode(payload, validate=True)
        except (binascii.Error, ValueError) as e:
            raise InvalidImageError("Image payload is not valid base64") from e
        return cls.from_bytes(raw)

    def __str__(self) -> str:
        return self.value
