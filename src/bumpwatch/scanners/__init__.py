"""Dependency manifest scanners."""

from bumpwatch.scanners.npm import NpmManifestScanner

__all__ = ["NpmManifestScanner"]
