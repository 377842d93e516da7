from __future__ import annotations

import base64
import binascii
import logging
from typing import Any
from urllib.parse import quote, urlencode, urlparse

import yaml

from recombiner.application.services.address_resolver import AddressResolver, is_gitlab_url
from recombiner.core.errors import FetchFailedError, ManifestFormatError, NetworkFailure
from recombiner.core.paths import sibling_path
from recombiner.domain.models.book import BookQuery, SiteConfig
from recombiner.domain.models.manifest import TocManifest, parse_manifest
from recombiner.infrastructure.http.fetcher import Fetcher

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "_config.yml"


def config_path_for(toc_path: str) -> str:
    return sibling_path(toc_path, CONFIG_FILENAME)


def load_yaml_mapping(text: str, source: str) -> dict[str, Any]:
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ManifestFormatError(f"Invalid YAML in {source}: {exc}") from exc
    if not isinstance(data, dict):
        raise ManifestFormatError(f"Expected a YAML mapping in {source}")
    return data


class ManifestFetcher:
    """Loads ``_toc.yml`` and the sibling ``_config.yml`` from a repository.

    Raw file URLs are tried first. Some networks block GitLab raw downloads
    outright; for GitLab repositories a transport-level failure switches to
    the GitLab REST API, which serves the same files base64-encoded.
    """

    def __init__(self, fetcher: Fetcher, resolver: AddressResolver) -> None:
        self.fetcher = fetcher
        self.resolver = resolver

    def fetch_manifest_and_config(self, query: BookQuery) -> tuple[TocManifest, SiteConfig]:
        try:
            return self._fetch_raw(query)
        except NetworkFailure as exc:
            if not is_gitlab_url(query.code_url):
                raise
            logger.info("Raw download failed (%s), retrying through the GitLab API", exc)
            return self._fetch_via_gitlab_api(query)

    def _fetch_raw(self, query: BookQuery) -> tuple[TocManifest, SiteConfig]:
        toc_url = self.resolver.resolve_raw_url(query.code_url, query.release, query.toc_path)
        manifest = parse_manifest(load_yaml_mapping(self.fetcher.get_text(toc_url), toc_url))

        config_url = self.resolver.resolve_raw_url(
            query.code_url, query.release, config_path_for(query.toc_path)
        )
        config = load_yaml_mapping(self.fetcher.get_text(config_url), config_url)
        return manifest, SiteConfig.from_mapping(config)

    def _fetch_via_gitlab_api(self, query: BookQuery) -> tuple[TocManifest, SiteConfig]:
        api_base = gitlab_api_base(query.code_url)
        project_id = self._gitlab_project_id(api_base, query.code_url)

        toc_text = self._gitlab_file(api_base, project_id, query.toc_path, query.release)
        manifest = parse_manifest(load_yaml_mapping(toc_text, query.toc_path))

        config_path = config_path_for(query.toc_path)
        config_text = self._gitlab_file(api_base, project_id, config_path, query.release)
        return manifest, SiteConfig.from_mapping(load_yaml_mapping(config_text, config_path))

    def _gitlab_project_id(self, api_base: str, code_url: str) -> int:
        project_path = urlparse(code_url).path.strip("/")
        project_url = f"{api_base}/projects/{quote(project_path, safe='')}"
        payload = self.fetcher.get_json(project_url)
        if not isinstance(payload, dict) or "id" not in payload:
            raise FetchFailedError(project_url)
        return int(payload["id"])

    def _gitlab_file(self, api_base: str, project_id: int, path: str, release: str) -> str:
        file_url = (
            f"{api_base}/projects/{project_id}/repository/files/{quote(path, safe='')}"
            f"?{urlencode({'ref': release})}"
        )
        payload = self.fetcher.get_json(file_url)
        if not isinstance(payload, dict) or "content" not in payload:
            raise FetchFailedError(file_url)
        try:
            return base64.b64decode(payload["content"]).decode("utf-8")
        except (binascii.Error, UnicodeDecodeError) as exc:
            raise ManifestFormatError(f"Undecodable file content from {file_url}") from exc


def gitlab_api_base(code_url: str) -> str:
    parsed = urlparse(code_url)
    return f"{parsed.scheme}://{parsed.netloc}/api/v4"
