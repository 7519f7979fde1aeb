"""Custom exceptions for bumpwatch with user-friendly error messages."""


class BumpwatchError(Exception):
    """Base exception with user-friendly message and optional hint.

    Attributes:
        message: The main error message.
        hint: Optional hint for resolving the error.
    """

    def __init__(self, message: str, hint: str = "") -> None:
        """Initialize the exception.

        Args:
            message: The main error message.
            hint: Optional hint for resolving the error.
        """
        self.message = message
        self.hint = hint
        super().__init__(message)

    def __str__(self) -> str:
        """Return string representation."""
        if self.hint:
            return f"{self.message}\nHint: {self.hint}"
        return self.message


class ManifestNotFoundError(BumpwatchError):
    """The package.json manifest does not exist."""

    def __init__(
        self,
        path: str = "",
        message: str = "",
        hint: str = "",
    ) -> None:
        if not message:
            message = "could not find package.json in this directory"
        if not hint and path:
            hint = f"Looked for {path}"
        self.path = path
        super().__init__(message, hint)


class ManifestParseError(BumpwatchError):
    """The manifest could not be parsed."""

    def __init__(
        self,
        path: str = "",
        message: str = "",
        hint: str = "",
    ) -> None:
        if not message:
            message = f"Failed to parse {path}" if path else "Failed to parse package.json"
        if not hint:
            hint = "package.json must contain a JSON object."
        super().__init__(message, hint)


class RegistryError(BumpwatchError):
    """The npm registry query failed."""

    pass


class PackageNotFoundError(RegistryError):
    """Package is not published in the npm registry."""

    def __init__(
        self,
        package: str,
        message: str = "",
        hint: str = "",
    ) -> None:
        if not message:
            message = f"{package} is not in the npm registry"
        self.package = package
        super().__init__(message, hint)


class NetworkError(BumpwatchError):
    """Network connectivity issue."""

    def __init__(
        self,
        service: str,
        original_error: Exception | None = None,
        message: str = "",
        hint: str = "",
    ) -> None:
        if not message:
            message = f"Failed to reach {service}"
            if original_error:
                message += f": {original_error}"
        if not hint:
            hint = "Check your internet connection and firewall settings."
        self.original_error = original_error
        super().__init__(message, hint)


class ChangelogProbeError(NetworkError):
    """Probing candidate changelog URLs for a repository failed."""

    def __init__(
        self,
        repository: str,
        original_error: Exception | None = None,
        hint: str = "",
    ) -> None:
        message = f"failed for repo: {repository}"
        if original_error:
            message += f" ({original_error})"
        self.repository = repository
        super().__init__(repository, original_error, message, hint)


class ConfigurationError(BumpwatchError):
    """Invalid configuration."""

    pass
