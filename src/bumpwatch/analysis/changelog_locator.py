"""Guess where a repository keeps the release notes for a breaking version.

There is no index of changelog locations, so a fixed list of candidate URLs
is probed in order and the first one that does not 404 wins.
"""

import httpx

from bumpwatch.analysis.versions import previous_breaking_version
from bumpwatch.errors import ChangelogProbeError
from bumpwatch.utils.http import AsyncHttpClient
from bumpwatch.utils.logging import get_logger

logger = get_logger(__name__)

DEFAULT_BRANCH = "master"


def candidate_urls(
    repository_url: str,
    version: str,
    branch: str = DEFAULT_BRANCH,
) -> list[str]:
    """Build the ordered list of changelog candidates for a repository.

    Args:
        repository_url: Normalized https repository URL.
        version: Latest published version.
        branch: Branch used for files in the repository tree.

    Returns:
        Candidate URLs, most specific first.
    """
    breaking = previous_breaking_version(version)
    return [
        f"{repository_url}/releases/v{breaking}",
        f"{repository_url}/blob/{branch}/CHANGELOG.md",
        f"{repository_url}/blob/{branch}/HISTORY.md",
        f"{repository_url}/releases/{breaking}",
        f"{repository_url}/releases/v{version}",
        f"{repository_url}/releases/v{breaking}",
    ]


class ChangelogLocator:
    """Probes candidate URLs sequentially to find a changelog."""

    def __init__(
        self,
        http_client: AsyncHttpClient,
        branch: str = DEFAULT_BRANCH,
    ) -> None:
        """Initialize the locator.

        Args:
            http_client: Entered HTTP client shared for the whole run.
            branch: Branch used for CHANGELOG.md / HISTORY.md candidates.
        """
        self._http_client = http_client
        self._branch = branch

    async def url_exists(self, url: str) -> bool:
        """Check whether ``url`` exists, i.e. its final status is not 404."""
        status = await self._http_client.status(url)
        logger.debug("Probed %s -> %d", url, status)
        return status != 404

    async def locate(self, repository_url: str, version: str) -> str:
        """Return the first existing changelog candidate.

        Args:
            repository_url: Normalized https repository URL.
            version: Latest published version.

        Returns:
            The first candidate that exists, or ``repository_url`` if none do.

        Raises:
            ChangelogProbeError: If a request fails at the transport level
                or a candidate URL cannot be parsed.
        """
        try:
            for url in candidate_urls(repository_url, version, self._branch):
                if await self.url_exists(url):
                    return url
        except (httpx.HTTPError, httpx.InvalidURL) as e:
            raise ChangelogProbeError(repository_url, e) from e

        return repository_url
