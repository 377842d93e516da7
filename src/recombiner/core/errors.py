from __future__ import annotations

from typing import Any

TITLE_NOT_FOUND_MARKER = "Title not found"


class RecombinerError(Exception):
    """Base error for all user-facing recombiner exceptions."""


class ConfigurationError(RecombinerError):
    """Raised when configuration is invalid or incomplete."""


class UnsupportedProviderError(RecombinerError):
    """Raised when a repository is hosted on neither GitHub nor GitLab."""

    def __init__(self, code_url: str) -> None:
        super().__init__(f"Only GitHub and GitLab are supported, got: {code_url}")
        self.code_url = code_url


class FetchFailedError(RecombinerError):
    """Raised when a server answers with a non-success HTTP status."""

    def __init__(self, url: str, status: int | None = None) -> None:
        detail = f" (HTTP {status})" if status is not None else ""
        super().__init__(f"Failed to fetch {url}{detail}")
        self.url = url
        self.status = status


class NetworkFailure(RecombinerError):
    """Raised when a request fails below the HTTP layer."""

    def __init__(self, url: str, reason: object = None) -> None:
        detail = f": {reason}" if reason else ""
        super().__init__(f"Network failure while fetching {url}{detail}")
        self.url = url
        self.reason = reason


class ManifestFormatError(RecombinerError):
    """Raised when a manifest or site config is not a YAML mapping."""


class TitleNotFoundError(RecombinerError):
    """Raised when a manifest content node has no matching navigation anchor."""

    def __init__(self, file: str) -> None:
        super().__init__(f"{TITLE_NOT_FOUND_MARKER} for '{file}'")
        self.file = file


class UnsupportedContentError(RecombinerError):
    """Raised for manifest entries marked as external content."""


class UnknownContentTypeError(RecombinerError):
    """Raised when a manifest node matches none of the known shapes."""

    def __init__(self, raw: Any) -> None:
        super().__init__(f"Unknown type of content entry: {raw!r}")
        self.raw = raw


class NavigationNotFoundError(RecombinerError):
    """Raised when a rendered page has no navigation panel."""

    def __init__(self, url: str) -> None:
        super().__init__(f"No table of contents found in HTML of {url}")
        self.url = url


class HarvestCancelledError(RecombinerError):
    """Raised when a harvest is aborted by its caller."""


class CatalogError(RecombinerError):
    """Raised when catalog operations fail."""
