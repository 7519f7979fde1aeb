"""Upgrade checker.

Runs the per-dependency pipeline one dependency at a time:
1. Strip range operators from the declared version
2. Ask the registry for the latest version and repository URL
3. Classify the upgrade
4. Normalize the repository URL and probe for a changelog
"""

from __future__ import annotations

from collections.abc import AsyncIterator, Iterable

from bumpwatch.analysis.changelog_locator import ChangelogLocator
from bumpwatch.analysis.versions import clean_version, is_major_upgrade
from bumpwatch.config import BumpwatchConfig
from bumpwatch.core.models import CheckResult, CheckStatus, Dependency
from bumpwatch.errors import PackageNotFoundError
from bumpwatch.registry.npm import NpmRegistry, is_forge_url, normalize_repository_url
from bumpwatch.utils.http import AsyncHttpClient
from bumpwatch.utils.logging import get_logger

logger = get_logger(__name__)


class UpgradeChecker:
    """Checks declared dependencies for breaking upgrades."""

    def __init__(
        self,
        registry: NpmRegistry,
        locator: ChangelogLocator,
        forge: str = "github",
    ) -> None:
        """Initialize the checker.

        Args:
            registry: Registry client used to look up latest versions.
            locator: Changelog locator used for breaking upgrades.
            forge: Forge marker repository URLs must contain to be probed.
        """
        self._registry = registry
        self._locator = locator
        self._forge = forge

    @classmethod
    def from_config(
        cls,
        config: BumpwatchConfig,
        http_client: AsyncHttpClient,
    ) -> UpgradeChecker:
        """Build a checker from configuration and an entered HTTP client."""
        registry = NpmRegistry(
            npm_command=config.registry.npm_command,
            timeout=config.registry.timeout,
        )
        locator = ChangelogLocator(http_client, branch=config.probe.default_branch)
        return cls(registry, locator, forge=config.probe.forge)

    async def check(self, dependency: Dependency) -> CheckResult:
        """Check a single dependency.

        Args:
            dependency: Declared dependency.

        Returns:
            The outcome for this dependency.

        Raises:
            RegistryError: If npm fails for a reason other than a missing package.
            ChangelogProbeError: If probing the repository fails.
        """
        current = clean_version(dependency.version_range)

        try:
            info = await self._registry.view(dependency.name)
        except PackageNotFoundError:
            return CheckResult(
                dependency=dependency,
                status=CheckStatus.NOT_IN_REGISTRY,
                current_version=current,
            )

        result = CheckResult(
            dependency=dependency,
            status=CheckStatus.UP_TO_DATE,
            current_version=current,
            latest_version=info.version,
            repository_url=info.repository_url,
        )

        if not is_major_upgrade(current, info.version):
            logger.debug("%s: %s -> %s is not breaking", dependency.name, current, info.version)
            return result

        if not info.repository_url:
            result.status = CheckStatus.NO_REPOSITORY
            return result

        if not is_forge_url(info.repository_url, self._forge):
            result.status = CheckStatus.NOT_ON_FORGE
            return result

        repository = normalize_repository_url(info.repository_url)
        result.repository_url = repository
        result.changelog_url = await self._locator.locate(repository, info.version)
        result.status = CheckStatus.BREAKING
        return result

    async def iter_results(
        self,
        dependencies: Iterable[Dependency],
    ) -> AsyncIterator[CheckResult]:
        """Check dependencies in order, yielding each result as it completes."""
        for dependency in dependencies:
            yield await self.check(dependency)
