"""Package registry interrogation."""

from bumpwatch.registry.npm import (
    NpmRegistry,
    is_forge_url,
    normalize_repository_url,
)

__all__ = [
    "NpmRegistry",
    "is_forge_url",
    "normalize_repository_url",
]
