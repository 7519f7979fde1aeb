"""Tests for the upgrade checker pipeline."""

from unittest.mock import AsyncMock

import httpx
import pytest

from bumpwatch.analysis.changelog_locator import ChangelogLocator
from bumpwatch.config import BumpwatchConfig
from bumpwatch.core.checker import UpgradeChecker
from bumpwatch.core.models import CheckReport, CheckStatus, Dependency, RegistryInfo
from bumpwatch.errors import ChangelogProbeError, PackageNotFoundError, RegistryError
from bumpwatch.registry.npm import NpmRegistry
from bumpwatch.utils.http import AsyncHttpClient

FOO_REPO = "https://github.com/x/foo"


def _registry(infos: dict[str, RegistryInfo | Exception]) -> AsyncMock:
    registry = AsyncMock(spec=NpmRegistry)

    def view(name: str) -> RegistryInfo:
        value = infos[name]
        if isinstance(value, Exception):
            raise value
        return value

    registry.view.side_effect = view
    return registry


def _github(existing: set[str]) -> httpx.MockTransport:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200 if str(request.url) in existing else 404)

    return httpx.MockTransport(handler)


class TestUpgradeChecker:
    """Tests for UpgradeChecker.check."""

    @pytest.mark.asyncio
    async def test_breaking_upgrade_located(self) -> None:
        """Test a breaking upgrade reports the probed changelog URL."""
        registry = _registry(
            {
                "foo": RegistryInfo(
                    name="foo",
                    version="2.0.0",
                    repository_url="git+https://github.com/x/foo.git",
                )
            }
        )
        transport = _github({f"{FOO_REPO}/blob/master/CHANGELOG.md"})

        async with AsyncHttpClient(transport=transport) as client:
            checker = UpgradeChecker(registry, ChangelogLocator(client))
            result = await checker.check(Dependency(name="foo", version_range="^1.0.0"))

        assert result.status == CheckStatus.BREAKING
        assert result.current_version == "1.0.0"
        assert result.latest_version == "2.0.0"
        assert result.repository_url == FOO_REPO
        assert result.changelog_url == f"{FOO_REPO}/blob/master/CHANGELOG.md"

    @pytest.mark.asyncio
    async def test_no_candidate_falls_back_to_repository(self) -> None:
        registry = _registry(
            {
                "foo": RegistryInfo(
                    name="foo",
                    version="2.0.0",
                    repository_url="git+https://github.com/x/foo.git",
                )
            }
        )

        async with AsyncHttpClient(transport=_github(set())) as client:
            checker = UpgradeChecker(registry, ChangelogLocator(client))
            result = await checker.check(Dependency(name="foo", version_range="^1.0.0"))

        assert result.changelog_url == FOO_REPO

    @pytest.mark.asyncio
    async def test_non_breaking_not_probed(self) -> None:
        """Test that non-breaking updates are not probed."""
        registry = _registry({"foo": RegistryInfo(name="foo", version="1.9.9")})
        locator = AsyncMock(spec=ChangelogLocator)

        result = await UpgradeChecker(registry, locator).check(
            Dependency(name="foo", version_range="~1.2.0")
        )

        assert result.status == CheckStatus.UP_TO_DATE
        assert result.latest_version == "1.9.9"
        locator.locate.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_not_in_registry(self) -> None:
        registry = _registry({"private": PackageNotFoundError("private")})
        locator = AsyncMock(spec=ChangelogLocator)

        result = await UpgradeChecker(registry, locator).check(
            Dependency(name="private", version_range="^1.0.0")
        )

        assert result.status == CheckStatus.NOT_IN_REGISTRY
        assert result.is_skipped is True

    @pytest.mark.asyncio
    async def test_no_repository(self) -> None:
        registry = _registry({"left-pad": RegistryInfo(name="left-pad", version="2.0.0")})
        locator = AsyncMock(spec=ChangelogLocator)

        result = await UpgradeChecker(registry, locator).check(
            Dependency(name="left-pad", version_range="^1.0.0")
        )

        assert result.status == CheckStatus.NO_REPOSITORY
        locator.locate.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_not_on_forge_keeps_raw_url(self) -> None:
        raw = "git+https://gitlab.com/x/bar.git"
        registry = _registry(
            {"bar": RegistryInfo(name="bar", version="3.0.0", repository_url=raw)}
        )
        locator = AsyncMock(spec=ChangelogLocator)

        result = await UpgradeChecker(registry, locator).check(
            Dependency(name="bar", version_range="^2.0.0")
        )

        assert result.status == CheckStatus.NOT_ON_FORGE
        assert result.repository_url == raw
        locator.locate.assert_not_awaited()


class TestIterResults:
    """Tests for sequential iteration."""

    @pytest.mark.asyncio
    async def test_skip_does_not_abort(self) -> None:
        """Test that a missing package is skipped and later ones still run."""
        registry = _registry(
            {
                "private": PackageNotFoundError("private"),
                "foo": RegistryInfo(
                    name="foo",
                    version="2.0.0",
                    repository_url="git+https://github.com/x/foo.git",
                ),
            }
        )
        locator = AsyncMock(spec=ChangelogLocator)
        locator.locate.return_value = f"{FOO_REPO}/releases/v2.0.0"

        checker = UpgradeChecker(registry, locator)
        deps = [
            Dependency(name="private", version_range="^1.0.0"),
            Dependency(name="foo", version_range="^1.0.0"),
        ]
        report = CheckReport(manifest_path="package.json")
        async for result in checker.iter_results(deps):
            report.results.append(result)

        assert [r.status for r in report.results] == [
            CheckStatus.NOT_IN_REGISTRY,
            CheckStatus.BREAKING,
        ]
        assert report.breaking_count == 1
        assert report.skipped_count == 1
        locator.locate.assert_awaited_once_with(FOO_REPO, "2.0.0")

    @pytest.mark.asyncio
    async def test_registry_failure_aborts(self) -> None:
        """Test that other registry failures stop the run after earlier results."""
        registry = _registry(
            {
                "a": RegistryInfo(name="a", version="1.0.1"),
                "b": RegistryError("npm view failed for b"),
                "c": RegistryInfo(name="c", version="1.0.0"),
            }
        )
        checker = UpgradeChecker(registry, AsyncMock(spec=ChangelogLocator))
        deps = [Dependency(name=n, version_range="1.0.0") for n in ("a", "b", "c")]

        seen: list[str] = []
        with pytest.raises(RegistryError):
            async for result in checker.iter_results(deps):
                seen.append(result.dependency.name)

        assert seen == ["a"]
        assert [c.args[0] for c in registry.view.await_args_list] == ["a", "b"]

    @pytest.mark.asyncio
    async def test_probe_failure_aborts(self) -> None:
        registry = _registry(
            {
                "foo": RegistryInfo(
                    name="foo",
                    version="2.0.0",
                    repository_url="git+https://github.com/x/foo.git",
                )
            }
        )
        locator = AsyncMock(spec=ChangelogLocator)
        locator.locate.side_effect = ChangelogProbeError(FOO_REPO)

        checker = UpgradeChecker(registry, locator)
        with pytest.raises(ChangelogProbeError):
            async for _ in checker.iter_results([Dependency(name="foo", version_range="1.0.0")]):
                pass


class TestFromConfig:
    @pytest.mark.asyncio
    async def test_uses_configured_branch(self) -> None:
        config = BumpwatchConfig(probe={"default_branch": "main"}, registry={"npm_command": "pnpm"})
        requested: list[str] = []

        def handler(request: httpx.Request) -> httpx.Response:
            requested.append(str(request.url))
            return httpx.Response(404)

        async with AsyncHttpClient(transport=httpx.MockTransport(handler)) as client:
            checker = UpgradeChecker.from_config(config, client)
            checker._registry.view = AsyncMock(
                return_value=RegistryInfo(
                    name="foo", version="2.0.0", repository_url="https://github.com/x/foo"
                )
            )
            await checker.check(Dependency(name="foo", version_range="1.0.0"))

        assert checker._registry.npm_command == "pnpm"
        assert f"{FOO_REPO}/blob/main/CHANGELOG.md" in requested
