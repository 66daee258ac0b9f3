"""
Allow-list check for explicit source URLs.
"""

from typing import Any

from ..models import ValidationResult
from .resolver import ALLOWED_HOSTS, descriptor_from_parts, split_host_url


INVALID_INPUT = 'Invalid URL provided'
UNSUPPORTED_HOST = 'URL must be from github.com or gist.github.com'


class UrlValidator:
    """Confirms a URL belongs to github.com or gist.github.com."""

    def validate(self, url: Any) -> ValidationResult:
        if not url or not isinstance(url, str) or not url.strip():
            return ValidationResult(valid=False, reason=INVALID_INPUT)

        parts = split_host_url(url)
        if parts is None or parts.host not in ALLOWED_HOSTS:
            return ValidationResult(valid=False, reason=UNSUPPORTED_HOST)

        descriptor = descriptor_from_parts(parts, from_url=True)
        if descriptor is None:
            return ValidationResult(
                valid=False,
                reason=f"Could not find owner and name in {url.strip()}"
            )

        return ValidationResult(
            valid=True,
            kind=descriptor.kind,
            owner=descriptor.owner,
            name=descriptor.name,
        )


def validate(url: Any) -> ValidationResult:
    return UrlValidator().validate(url)


__all__ = [
    "INVALID_INPUT",
    "UNSUPPORTED_HOST",
    "UrlValidator",
    "validate",
]
