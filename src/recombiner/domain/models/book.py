from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterator

LOGO_SENTINEL = "undefined"


@dataclass(frozen=True, slots=True)
class BookQuery:
    html_url: str
    code_url: str
    release: str
    toc_path: str

    def to_dict(self) -> dict[str, str]:
        return {
            "html_url": self.html_url,
            "code_url": self.code_url,
            "release": self.release,
            "toc_path": self.toc_path,
        }


@dataclass(slots=True)
class SiteConfig:
    title: str
    author: str
    logo: str | None = None
    # Sphinx-only hints used to derive a logo when ``logo`` is absent.
    static_path: str | None = None
    theme_logo: str | None = None

    @classmethod
    def from_mapping(cls, raw: dict[str, Any]) -> SiteConfig:
        sphinx_config = _dig(raw, "sphinx", "config")
        static_path = None
        theme_logo = None
        if isinstance(sphinx_config, dict) and "html_static_path" in sphinx_config:
            static_paths = sphinx_config.get("html_static_path") or []
            if isinstance(static_paths, list) and static_paths:
                static_path = str(static_paths[0])
            image = _dig(sphinx_config, "html_theme_options", "logo", "image_light")
            if image:
                theme_logo = str(image)
        logo = raw.get("logo")
        return cls(
            title=str(raw.get("title") or ""),
            author=str(raw.get("author") or ""),
            logo=str(logo) if logo else None,
            static_path=static_path,
            theme_logo=theme_logo,
        )


@dataclass(slots=True, eq=False)
class TocEntry:
    title: str
    html_url: str | None
    external_url: str | None
    children: list[TocEntry] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "title": self.title,
            "html_url": self.html_url,
            "external_url": self.external_url,
            "children": [child.to_dict() for child in self.children],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> TocEntry:
        return cls(
            title=str(data.get("title") or ""),
            html_url=data.get("html_url"),
            external_url=data.get("external_url"),
            children=[cls.from_dict(child) for child in data.get("children") or []],
        )

    def walk(self) -> Iterator[TocEntry]:
        yield self
        for child in self.children:
            yield from child.walk()


@dataclass(slots=True, eq=False)
class Book:
    html_url: str
    code_url: str
    release: str
    toc_path: str
    title: str
    logo: str
    author: str
    toc: TocEntry
    deleteable: bool = True

    @property
    def query(self) -> BookQuery:
        return BookQuery(
            html_url=self.html_url,
            code_url=self.code_url,
            release=self.release,
            toc_path=self.toc_path,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            **self.query.to_dict(),
            "title": self.title,
            "logo": self.logo,
            "author": self.author,
            "toc": self.toc.to_dict(),
            "deleteable": self.deleteable,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Book:
        return cls(
            html_url=str(data["html_url"]),
            code_url=str(data["code_url"]),
            release=str(data["release"]),
            toc_path=str(data["toc_path"]),
            title=str(data.get("title") or ""),
            logo=str(data.get("logo") or LOGO_SENTINEL),
            author=str(data.get("author") or ""),
            toc=TocEntry.from_dict(data.get("toc") or {}),
            deleteable=bool(data.get("deleteable", True)),
        )


def _dig(raw: Any, *keys: str) -> Any:
    current = raw
    for key in keys:
        if not isinstance(current, dict):
            return None
        current = current.get(key)
    return current
