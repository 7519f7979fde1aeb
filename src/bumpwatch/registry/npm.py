"""Query the npm registry through the npm CLI."""

import asyncio
import json
import re
from typing import Any

from bumpwatch.core.models import RegistryInfo
from bumpwatch.errors import PackageNotFoundError, RegistryError
from bumpwatch.utils.logging import get_logger

logger = get_logger(__name__)

NOT_FOUND_MARKERS = (
    "not in the npm registry",
    "not in this registry",
    "E404",
)

_SCP_STYLE = re.compile(r"^git@([^:/]+):(.+)$")
# ssh://git@host:owner/repo; a numeric segment is a real port.
_HOST_COLON = re.compile(r"^(https://[^/:]+):(?!\d+(?:/|$))")


def normalize_repository_url(url: str) -> str:
    """Convert a published repository URL into a browsable https URL.

    Handles ``git+https://``, ``git+ssh://git@`` (with a slash or a colon after
    the host), ``git://`` and scp-style ``git@host:owner/repo`` forms, and drops
    a trailing ``.git``.

    Args:
        url: Raw ``repository.url`` value.

    Returns:
        The normalized URL.
    """
    url = url.strip()
    if url.startswith("git+"):
        url = url[len("git+"):]

    match = _SCP_STYLE.match(url)
    if match:
        url = f"https://{match.group(1)}/{match.group(2)}"

    url = url.replace("git://", "https://", 1)
    url = url.replace("ssh://git@", "https://", 1)
    url = _HOST_COLON.sub(r"\1/", url, count=1)

    url = url.rstrip("/")
    if url.endswith(".git"):
        url = url[: -len(".git")]
    return url


def is_forge_url(url: str, forge: str = "github") -> bool:
    """Check whether a repository URL points at the given forge."""
    return forge in url


class NpmRegistry:
    """Runs ``npm view`` to fetch the latest version and repository of packages."""

    FIELDS = ("version", "repository.url")

    def __init__(self, npm_command: str = "npm", timeout: float = 60.0) -> None:
        """Initialize the registry client.

        Args:
            npm_command: npm executable to invoke.
            timeout: Seconds to wait for a single ``npm view`` call.
        """
        self.npm_command = npm_command
        self.timeout = timeout

    async def _run_npm(self, *args: str) -> tuple[int, str, str]:
        """Run npm and return (returncode, stdout, stderr)."""
        logger.debug("Running %s %s", self.npm_command, " ".join(args))
        try:
            process = await asyncio.create_subprocess_exec(
                self.npm_command,
                *args,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except FileNotFoundError as e:
            raise RegistryError(
                f"Could not run '{self.npm_command}'",
                hint="Install Node.js/npm or set BUMPWATCH_NPM_COMMAND to the npm executable.",
            ) from e

        try:
            stdout, stderr = await asyncio.wait_for(
                process.communicate(), timeout=self.timeout
            )
        except asyncio.TimeoutError as e:
            process.kill()
            await process.wait()
            raise RegistryError(
                f"npm {' '.join(args)} timed out after {self.timeout:g} seconds",
                hint="Increase registry.timeout in .bumpwatch.yml.",
            ) from e

        return (
            process.returncode or 0,
            stdout.decode("utf-8", errors="replace"),
            stderr.decode("utf-8", errors="replace"),
        )

    async def view(self, name: str) -> RegistryInfo:
        """Fetch the latest published version and repository URL of a package.

        Args:
            name: Package name.

        Returns:
            Registry metadata for the package.

        Raises:
            PackageNotFoundError: If the package is not in the registry.
            RegistryError: If npm fails for any other reason.
        """
        returncode, stdout, stderr = await self._run_npm(
            "view", "--json", name, *self.FIELDS
        )

        if returncode != 0:
            output = f"{stderr}\n{stdout}"
            if any(marker in output for marker in NOT_FOUND_MARKERS):
                raise PackageNotFoundError(name)
            raise RegistryError(
                f"npm view failed for {name}: {stderr.strip() or 'exit code ' + str(returncode)}"
            )

        return self._parse_view_output(name, stdout)

    def _parse_view_output(self, name: str, stdout: str) -> RegistryInfo:
        """Parse ``npm view --json`` output.

        npm prints an object when several fields resolve and a bare value
        when only one does.
        """
        try:
            data: Any = json.loads(stdout)
        except json.JSONDecodeError as e:
            raise RegistryError(f"npm view returned invalid JSON for {name}: {e}") from e

        if isinstance(data, str):
            return RegistryInfo(name=name, version=data)

        if not isinstance(data, dict) or not data.get("version"):
            raise RegistryError(f"npm view returned no version for {name}")

        repository_url = data.get("repository.url")
        if not isinstance(repository_url, str) or not repository_url:
            repository_url = None

        return RegistryInfo(
            name=name,
            version=str(data["version"]),
            repository_url=repository_url,
        )
