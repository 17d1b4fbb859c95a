"""Fetching dataset text over HTTP with bounded timeouts."""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING, Final

import httpx

from travelref.adapters.http_resilience import (
    CacheConfig,
    RateLimit,
    ResilienceConfig,
    ResilientClient,
)
from travelref.domain.errors import SourceUnavailableError

if TYPE_CHECKING:
    from collections.abc import Callable, Sequence

    from travelref.domain.ports.sources import Dataset

log = getLogger(__name__)

DEFAULT_FETCH_TIMEOUT_SECONDS: Final = 5.0
_USER_AGENT: Final = "travelref-seed/0.1"


def _default_resilience_config() -> ResilienceConfig:
    return ResilienceConfig(
        name="datasets",
        timeout_seconds=30.0,
        ratelimit=RateLimit(max_calls=5, per_seconds=1.0),
        cache=CacheConfig(backend="sqlite"),
        default_headers={"User-Agent": _USER_AGENT},
    )


def _default_client_factory(config: ResilienceConfig) -> ResilientClient:
    return ResilientClient(config)


@dataclass(slots=True)
class RemoteFetcher:
    """Lazily opened resilient client shared by every remote dataset of a run."""

    timeout_seconds: float = DEFAULT_FETCH_TIMEOUT_SECONDS
    resilience: ResilienceConfig = field(default_factory=_default_resilience_config)
    client_factory: Callable[[ResilienceConfig], ResilientClient] = field(
        default=_default_client_factory
    )
    _client: ResilientClient | None = field(default=None, init=False)

    async def fetch_text(self, url: str, *, dataset: Dataset | None = None) -> str:
        """GET ``url``; any transport error, timeout or HTTP error status raises."""

        client = self._ensure_client()
        try:
            response = await client.get(url, timeout=self.timeout_seconds)
            response.raise_for_status()
        except httpx.HTTPError as exc:
            raise SourceUnavailableError(f"GET {url} failed: {exc}", dataset=dataset) from exc
        return response.text

    async def first_available(
        self,
        urls: Sequence[str],
        *,
        dataset: Dataset | None = None,
        accept: Callable[[str], bool] | None = None,
    ) -> str:
        """Text of the first URL that answers (and that ``accept`` approves of)."""

        failures: list[str] = []
        for url in urls:
            try:
                text = await self.fetch_text(url, dataset=dataset)
            except SourceUnavailableError as exc:
                log.warning("Remote source failed: %s", exc)
                failures.append(url)
                continue
            if accept is not None and not accept(text):
                log.warning("Remote source %s returned unusable content", url)
                failures.append(url)
                continue
            log.info("Loaded %s from %s", dataset or "dataset", url)
            return text
        raise SourceUnavailableError(
            f"No remote location answered ({', '.join(failures) or 'none configured'})",
            dataset=dataset,
        )

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    def _ensure_client(self) -> ResilientClient:
        if self._client is None:
            self._client = self.client_factory(self.resilience)
        return self._client
