"""Breaking-boundary classification for semantic version strings.

Versions are compared textually by their major component (the text before
the first dot). Packages below 1.0.0 may break on any change, so every
difference counts as breaking for them.
"""

import re

_RANGE_PREFIX = re.compile(r"^[^\d]+")


def _major(version: str) -> str:
    return version.split(".")[0]


def clean_version(version_range: str) -> str:
    """Strip range operators from a declared version.

    Args:
        version_range: Declared range such as ``^1.2.3`` or ``~0.3.2``.

    Returns:
        The range with its leading non-digit characters removed.
    """
    return _RANGE_PREFIX.sub("", version_range)


def previous_breaking_version(version: str) -> str:
    """Return the version that opened the breaking series ``version`` belongs to.

    Args:
        version: A semantic version such as ``2.5.1``.

    Returns:
        ``<major>.0.0``, or ``version`` itself when the major component is 0.
    """
    major = _major(version)
    if major == "0":
        return version
    return f"{major}.0.0"


def is_major_upgrade(current_version: str, new_version: str) -> bool:
    """Check whether moving to ``new_version`` crosses a breaking boundary.

    Args:
        current_version: Currently declared version (range operators stripped).
        new_version: Latest published version.

    Returns:
        True if the versions differ at all under major 0, otherwise True if
        the major components differ.
    """
    if _major(current_version) == "0":
        return current_version != new_version
    return _major(current_version) != _major(new_version)
