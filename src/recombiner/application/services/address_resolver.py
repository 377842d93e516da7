"""Raw-content and blob-view URLs for files in GitHub and GitLab repositories.

Examples of produced URLs::

    https://raw.githubusercontent.com/TeachBooks/manual/refs/tags/v1.1.1/book/intro.md
    https://gitlab.example.org/group/project/raw/v0.1/book/intro.md
    https://github.com/ORG/REPO/blob/TAG/book/intro.md
    https://gitlab.example.org/GROUP/PROJECT/-/blob/TAG/book/intro.md
    https://gitlab.example.org/GROUP/SUBGROUP/PROJECT/blob/TAG/book/intro.md
"""

from __future__ import annotations

import logging
from enum import Enum
from urllib.parse import urlparse

from recombiner.core.errors import UnsupportedProviderError
from recombiner.core.paths import has_extension, sibling_path
from recombiner.domain.models.book import BookQuery
from recombiner.infrastructure.http.fetcher import Fetcher

logger = logging.getLogger(__name__)

# Sub-group thresholds count the pieces of ``code_url.split("/")``,
# scheme and empty authority separator included.
RAW_SUBGROUP_SEGMENTS = 4
BLOB_SUBGROUP_SEGMENTS = 5


class Provider(str, Enum):
    GITHUB = "github"
    GITLAB = "gitlab"


def detect_provider(code_url: str) -> Provider:
    host = (urlparse(code_url).hostname or "").lower()
    if "github.com" in host:
        return Provider.GITHUB
    if "gitlab" in host:
        return Provider.GITLAB
    raise UnsupportedProviderError(code_url)


def is_gitlab_url(code_url: str) -> bool:
    try:
        return detect_provider(code_url) is Provider.GITLAB
    except UnsupportedProviderError:
        return False


def has_subgroup(code_url: str, threshold: int) -> bool:
    return len(code_url.rstrip("/").split("/")) > threshold


class AddressResolver:
    def __init__(self, fetcher: Fetcher) -> None:
        self.fetcher = fetcher

    def resolve_raw_url(self, code_url: str, release: str, path: str) -> str:
        """URL for the raw content of ``path`` at ``release``.

        On GitHub ``release`` is checked as a tag first; when no such tag exists
        it is assumed to be a branch and the branch URL is returned unchecked.
        """
        code_url = code_url.rstrip("/")
        provider = detect_provider(code_url)

        if provider is Provider.GITHUB:
            tag_url = _to_raw_host(f"{code_url}/refs/tags/{release}/{path}")
            if self.fetcher.exists(tag_url):
                return tag_url
            logger.debug("'%s' is not a tag of %s, assuming a branch", release, code_url)
            return _to_raw_host(f"{code_url}/refs/heads/{release}/{path}")

        if has_subgroup(code_url, RAW_SUBGROUP_SEGMENTS):
            return f"{code_url}/raw/{release}/{path}"
        return f"{code_url}/-/raw/{release}/{path}"


def resolve_blob_url(query: BookQuery, file_path: str) -> str:
    path = file_path if has_extension(file_path) else f"{file_path}.md"
    path = sibling_path(query.toc_path, path)
    code_url = query.code_url.rstrip("/")

    provider = detect_provider(code_url)
    if provider is Provider.GITHUB:
        return f"{code_url}/blob/{query.release}/{path}"
    if has_subgroup(code_url, BLOB_SUBGROUP_SEGMENTS):
        return f"{code_url}/blob/{query.release}/{path}"
    return f"{code_url}/-/blob/{query.release}/{path}"


def _to_raw_host(url: str) -> str:
    return url.replace("github.com", "raw.githubusercontent.com", 1)
