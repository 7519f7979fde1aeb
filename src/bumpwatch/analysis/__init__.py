"""Version classification and changelog discovery."""

from bumpwatch.analysis.changelog_locator import ChangelogLocator, candidate_urls
from bumpwatch.analysis.versions import (
    clean_version,
    is_major_upgrade,
    previous_breaking_version,
)

__all__ = [
    "ChangelogLocator",
    "candidate_urls",
    "clean_version",
    "is_major_upgrade",
    "previous_breaking_version",
]
