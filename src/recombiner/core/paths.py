from __future__ import annotations

import posixpath
from urllib.parse import quote

# Characters left untouched by the browser's encodeURI.
_URI_SAFE = ";,/?:@&=+$!*'()#"


def sibling_path(manifest_path: str, relative: str) -> str:
    """Replace the manifest's own filename in ``manifest_path`` with ``relative``."""
    head, sep, _ = manifest_path.rpartition("/")
    return f"{head}{sep}{relative}"


def with_suffix(path: str, suffix: str) -> str:
    stem, _ = posixpath.splitext(path)
    return stem + suffix


def has_extension(path: str) -> bool:
    return bool(posixpath.splitext(posixpath.basename(path))[1])


def encode_uri(path: str) -> str:
    return quote(path, safe=_URI_SAFE)


def is_absolute_url(value: str) -> bool:
    return value.startswith(("http://", "https://"))


def last_path_segment(url: str) -> str:
    return url.rstrip("/").rsplit("/", 1)[-1]
