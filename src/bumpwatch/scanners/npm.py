"""Scanner for dependencies declared in package.json."""

import json
from pathlib import Path
from typing import Any, ClassVar

from bumpwatch.core.models import Dependency
from bumpwatch.errors import ManifestNotFoundError, ManifestParseError
from bumpwatch.utils.logging import get_logger

logger = get_logger(__name__)


class NpmManifestScanner:
    """Reads the direct dependencies declared in a package.json manifest."""

    manifest_name: ClassVar[str] = "package.json"

    DEFAULT_EXCLUDE_PREFIXES: ClassVar[list[str]] = ["http", "@types"]

    def __init__(
        self,
        include_dev: bool = True,
        exclude_prefixes: list[str] | None = None,
    ) -> None:
        """Initialize the scanner.

        Args:
            include_dev: Whether devDependencies are reported.
            exclude_prefixes: Package name prefixes to skip.
        """
        self.include_dev = include_dev
        self.exclude_prefixes = (
            list(self.DEFAULT_EXCLUDE_PREFIXES)
            if exclude_prefixes is None
            else exclude_prefixes
        )

    def manifest_path(self, directory: str | Path) -> Path:
        """Return the manifest location inside ``directory``."""
        return Path(directory) / self.manifest_name

    def parse_manifest(self, path: Path) -> list[Dependency]:
        """Parse a package.json file.

        devDependencies come first, then dependencies, each in file order.

        Args:
            path: Path to package.json.

        Returns:
            Dependencies that pass the name filter.

        Raises:
            ManifestNotFoundError: If the file does not exist.
            ManifestParseError: If the file is not a JSON object.
        """
        if not path.is_file():
            raise ManifestNotFoundError(str(path))

        try:
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ManifestParseError(str(path), message=f"Invalid JSON in {path}: {e}") from e

        if not isinstance(data, dict):
            raise ManifestParseError(str(path))

        dependencies: list[Dependency] = []
        if self.include_dev:
            dependencies.extend(self._collect(data.get("devDependencies"), is_dev=True))
        dependencies.extend(self._collect(data.get("dependencies"), is_dev=False))

        logger.debug("Found %d dependencies in %s", len(dependencies), path)
        return dependencies

    def scan_directory(self, directory: str | Path) -> list[Dependency]:
        """Parse the package.json in ``directory``."""
        return self.parse_manifest(self.manifest_path(directory))

    def _collect(self, section: Any, is_dev: bool) -> list[Dependency]:
        if not isinstance(section, dict):
            return []

        dependencies: list[Dependency] = []
        for name, version_range in section.items():
            if self._should_exclude(name):
                logger.debug("Excluding %s", name)
                continue
            dependencies.append(
                Dependency(name=name, version_range=str(version_range), is_dev=is_dev)
            )
        return dependencies

    def _should_exclude(self, name: str) -> bool:
        return any(name.startswith(prefix) for prefix in self.exclude_prefixes)
