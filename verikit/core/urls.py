from abc import ABC, abstractmethod

import httpx

from verikit.core.exceptions import UrlResolutionError


class Urlifier(ABC):
    """Anything that owns a base URL and resolves relative paths against it."""

    @property
    @abstractmethod
    def base_url(self) -> httpx.URL: ...

    def urlify(self, path: str) -> httpx.URL:
        """Resolve `path` against `base_url` using RFC 3986 relative resolution.

        Raises `UrlResolutionError` when the join fails or the result is not an
        absolute URL with a host.
        """
        base = self.base_url
        try:
            url = base.join(path)
        except httpx.InvalidURL as exc:
            raise UrlResolutionError(str(base), path, str(exc)) from exc
        if not url.is_absolute_url or not url.host:
            raise UrlResolutionError(str(base), path, "result is not an absolute URL")
        return url


class ServiceEndpoint(Urlifier):
    def __init__(self, base_url: str | httpx.URL) -> None:
        try:
            url = httpx.URL(base_url)
        except httpx.InvalidURL as exc:
            raise UrlResolutionError(str(base_url), "", str(exc)) from exc
        if not url.is_absolute_url or not url.host:
            raise UrlResolutionError(str(base_url), "", "base is not an absolute URL")
        self._base_url = url

    @property
    def base_url(self) -> httpx.URL:
        return self._base_url

    def __repr__(self) -> str:
        return f"ServiceEndpoint({str(self._base_url)!r})"
