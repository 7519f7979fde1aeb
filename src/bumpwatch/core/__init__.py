"""Core module containing the data models and the upgrade checker.

The checker is imported from ``bumpwatch.core.checker`` directly; it depends
on the scanners and registry, which in turn depend on the models here.
"""

from bumpwatch.core.models import (
    CheckReport,
    CheckResult,
    CheckStatus,
    Dependency,
    RegistryInfo,
)

__all__ = [
    "CheckReport",
    "CheckResult",
    "CheckStatus",
    "Dependency",
    "RegistryInfo",
]
