"""Registry client: cached, deduplicated and throttled access to the catalog."""

from __future__ import annotations

import asyncio
import logging
import types
from collections.abc import Callable, Sequence
from pathlib import Path
from typing import Any, Self, TypeVar, cast

import httpx

from skillshelf.cache import TTLCache
from skillshelf.config import RegistryConfig
from skillshelf.counter import RequestCounter
from skillshelf.dedup import RequestDeduplicator
from skillshelf.errors import HttpStatusError, NetworkError, RegistryError
from skillshelf.fallback import FALLBACK_PLUGINS, FALLBACK_SKILLS
from skillshelf.limiter import ConcurrencyLimiter
from skillshelf.parsing import parse_page, parse_plugin, parse_skill
from skillshelf.rate_limiter import RateLimiter
from skillshelf.timeout import with_timeout
from skillshelf.types import DownloadInfo, PaginatedResult, Plugin, ResourceKind, Skill

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Size of the first page used by the non-paginated helpers
FULL_LISTING_LIMIT = 100


class RegistryClient:
    """Async client for the plugin and skill registry.

    Every call goes through the same pipeline: cache lookup, scroll rate
    check, single-flight deduplication, a concurrency permit and a timed HTTP
    request. Paginated listings never raise for registry failures; they fall
    back to the bundled catalog (first unfiltered page) or an empty page.

    All collaborators can be injected, which is how tests substitute clocks
    and limits. Anything not supplied is built from ``config``.

    Usage:
        async with RegistryClient() as client:
            page = await client.fetch_plugins_paginated(0, 20)
    """

    def __init__(
        self,
        config: RegistryConfig | None = None,
        *,
        http_client: httpx.AsyncClient | None = None,
        cache: TTLCache | None = None,
        search_cache: TTLCache | None = None,
        deduplicator: RequestDeduplicator | None = None,
        limiter: ConcurrencyLimiter | None = None,
        rate_limiter: RateLimiter | None = None,
        counter: RequestCounter | None = None,
    ) -> None:
        self._config = config or RegistryConfig()
        self._base_url = self._config.base_url.rstrip("/")
        self._timeout_ms = self._config.request_timeout_ms
        self._owns_http = http_client is None
        self._http = http_client or httpx.AsyncClient(
            headers={"Accept": "application/json"},
            follow_redirects=True,
            timeout=30.0,
        )
        self._cache = cache if cache is not None else TTLCache(self._config.cache_ttl)
        self._search_cache = (
            search_cache
            if search_cache is not None
            else TTLCache(self._config.search_cache_ttl)
        )
        self._deduplicator = deduplicator or RequestDeduplicator()
        self._limiter = limiter or ConcurrencyLimiter(self._config.max_concurrent)
        self._rate_limiter = rate_limiter or RateLimiter(
            self._config.scroll_rate_limit, self._config.scroll_rate_window
        )
        self._counter = counter or RequestCounter()
        self._background_tasks: set[asyncio.Task[None]] = set()

    @property
    def config(self) -> RegistryConfig:
        return self._config

    def select_cache(self, query: str | None) -> TTLCache:
        """Search results and plain listings live in separate caches."""
        return self._search_cache if query else self._cache

    # -------------------------------------------------------------------------
    # Paginated listings
    # -------------------------------------------------------------------------

    async def fetch_plugins_paginated(
        self,
        offset: int = 0,
        limit: int | None = None,
        query: str | None = None,
    ) -> PaginatedResult[Plugin]:
        """Fetch one page of plugins, optionally filtered by a search query."""
        limit = limit or self._config.plugin_page_size
        return await self._fetch_page(
            "plugins", offset, limit, query, parse_plugin, FALLBACK_PLUGINS
        )

    async def fetch_skills_paginated(
        self,
        offset: int = 0,
        limit: int | None = None,
        query: str | None = None,
    ) -> PaginatedResult[Skill]:
        """Fetch one page of skills, optionally filtered by a search query."""
        limit = limit or self._config.skill_page_size
        return await self._fetch_page(
            "skills", offset, limit, query, parse_skill, FALLBACK_SKILLS
        )

    async def fetch_plugins(self) -> list[Plugin]:
        page = await self.fetch_plugins_paginated(0, FULL_LISTING_LIMIT)
        return list(page.items)

    async def fetch_skills(self) -> list[Skill]:
        page = await self.fetch_skills_paginated(0, FULL_LISTING_LIMIT)
        return list(page.items)

    async def search_plugins(self, query: str) -> list[Plugin]:
        page = await self.fetch_plugins_paginated(0, FULL_LISTING_LIMIT, query)
        return list(page.items)

    async def search_skills(self, query: str) -> list[Skill]:
        page = await self.fetch_skills_paginated(0, FULL_LISTING_LIMIT, query)
        return list(page.items)

    # -------------------------------------------------------------------------
    # Prefetching
    # -------------------------------------------------------------------------

    def prefetch_plugins_next_page(
        self, offset: int, limit: int | None = None, query: str | None = None
    ) -> None:
        """Warm the cache with the plugin page after ``offset``.

        Best effort: scheduled in the background, never raises, never blocks.
        Without a running event loop the prefetch is skipped.
        """
        limit = limit or self._config.plugin_page_size
        self._schedule_prefetch(
            "plugins", offset + limit, limit, query, self.fetch_plugins_paginated
        )

    def prefetch_skills_next_page(
        self, offset: int, limit: int | None = None, query: str | None = None
    ) -> None:
        """Warm the cache with the skill page after ``offset``.

        Best effort: scheduled in the background, never raises, never blocks.
        Without a running event loop the prefetch is skipped.
        """
        limit = limit or self._config.skill_page_size
        self._schedule_prefetch(
            "skills", offset + limit, limit, query, self.fetch_skills_paginated
        )

    def _schedule_prefetch(
        self,
        kind: ResourceKind,
        offset: int,
        limit: int,
        query: str | None,
        fetch: Callable[[int, int, str | None], Any],
    ) -> None:
        try:
            asyncio.get_running_loop()
        except RuntimeError:
            logger.debug("No running event loop; skipping prefetch of %s", kind)
            return

        key = self._page_key(kind, offset, limit, query)
        if self.select_cache(query).has(key):
            return

        delay = self._config.prefetch_delay_ms / 1000

        async def prefetch() -> None:
            await asyncio.sleep(delay)
            try:
                await fetch(offset, limit, query)
            except Exception:
                # Discarded; the page is fetched again when actually needed
                logger.debug("Prefetch of %s failed", key, exc_info=True)

        logger.debug("Scheduling prefetch of %s offset=%d", kind, offset)
        task = asyncio.create_task(prefetch())
        self._background_tasks.add(task)
        task.add_done_callback(self._background_tasks.discard)

    # -------------------------------------------------------------------------
    # Invalidation
    # -------------------------------------------------------------------------

    def clear_plugins_cache(self) -> None:
        self._invalidate("plugins")

    def clear_skills_cache(self) -> None:
        self._invalidate("skills")

    def _invalidate(self, kind: ResourceKind) -> None:
        self._cache.invalidate_pattern(kind)
        self._search_cache.invalidate_pattern(kind)

    async def refresh_plugins(
        self, limit: int | None = None
    ) -> PaginatedResult[Plugin]:
        """Drop every cached plugin page and refetch the first one."""
        self.clear_plugins_cache()
        return await self.fetch_plugins_paginated(0, limit)

    async def refresh_skills(
        self, limit: int | None = None
    ) -> PaginatedResult[Skill]:
        """Drop every cached skill page and refetch the first one."""
        self.clear_skills_cache()
        return await self.fetch_skills_paginated(0, limit)

    # -------------------------------------------------------------------------
    # Skill content
    # -------------------------------------------------------------------------

    async def fetch_skill_content(self, url: str) -> str:
        """Fetch the raw SKILL.md text behind ``url``.

        Unlike listings there is nothing sensible to fall back to, so
        registry errors propagate to the caller.
        """
        key = self._cache.generate_key("skill-content", {"url": url})
        cached = self._cache.get(key)
        if cached is not None:
            logger.debug("Cache hit for skill content: %s", key)
            return cast(str, cached)

        async def fetch() -> str:
            try:
                response = await self._get(url)
            except RegistryError:
                self._counter.record("skill-content", False)
                raise
            self._counter.record("skill-content", True)
            content = response.text
            self._cache.set(key, content)
            return content

        return await self._deduplicator.dedupe(key, fetch)

    def get_skill_download_info(self, skill: Skill) -> DownloadInfo | None:
        """Download location for a skill's SKILL.md, if the registry has one."""
        if not skill.raw_file_url:
            return None
        return DownloadInfo(url=skill.raw_file_url, filename=f"{skill.name}.md")

    async def download_skill(self, skill: Skill, directory: str | Path) -> Path:
        """Save a skill's SKILL.md as ``<directory>/<name>.md``."""
        info = self.get_skill_download_info(skill)
        if info is None:
            raise ValueError(f"Skill {skill.name!r} has no downloadable file")

        target_dir = Path(directory).expanduser()
        path = target_dir / info.filename
        if (
            Path(info.filename).name != info.filename
            or not path.resolve().is_relative_to(target_dir.resolve())
        ):
            raise ValueError(
                f"Refusing to write skill {skill.name!r} outside {target_dir}"
            )

        content = await self.fetch_skill_content(info.url)

        def write() -> None:
            target_dir.mkdir(parents=True, exist_ok=True)
            path.write_text(content, encoding="utf-8")

        await asyncio.to_thread(write)
        logger.debug("Saved %s to %s", skill.name, path)
        return path

    # -------------------------------------------------------------------------
    # Diagnostics and lifecycle
    # -------------------------------------------------------------------------

    def get_api_stats(self) -> dict[str, Any]:
        """Read-only snapshot of cache, request and concurrency counters."""
        return {
            "cache": {
                "api": self._cache.get_stats(),
                "search": self._search_cache.get_stats(),
            },
            "requests": self._counter.get_stats(),
            "concurrency": self._limiter.get_stats(),
        }

    async def aclose(self) -> None:
        """Cancel pending prefetches and close the HTTP client if we own it."""
        for task in list(self._background_tasks):
            task.cancel()
        await asyncio.gather(*self._background_tasks, return_exceptions=True)
        if self._owns_http:
            await self._http.aclose()

    async def __aenter__(self) -> Self:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: types.TracebackType | None,
    ) -> None:
        await self.aclose()

    # -------------------------------------------------------------------------
    # Internal helpers
    # -------------------------------------------------------------------------

    def _page_key(
        self, kind: ResourceKind, offset: int, limit: int, query: str | None
    ) -> str:
        return self.select_cache(query).generate_key(
            kind, {"offset": offset, "limit": limit, "q": query or ""}
        )

    async def _fetch_page(
        self,
        kind: ResourceKind,
        offset: int,
        limit: int,
        query: str | None,
        parser: Callable[[Any], T],
        fallback: Sequence[T],
    ) -> PaginatedResult[T]:
        cache = self.select_cache(query)
        key = self._page_key(kind, offset, limit, query)

        cached = cache.get(key)
        if cached is not None:
            logger.debug("Cache hit for %s: %s", kind, key)
            return cast(PaginatedResult[T], cached)

        # Infinite-scroll continuations are throttled per stream
        if offset > 0 and not query:
            stream = f"{kind}-scroll"
            if not self._rate_limiter.can_request(stream):
                logger.debug("Scroll rate limited for %s, deferring", stream)
                return PaginatedResult.empty(has_more=True)
            self._rate_limiter.record_request(stream)

        params: dict[str, str | int] = {"limit": limit, "offset": offset}
        if query:
            params["q"] = query

        async def fetch() -> PaginatedResult[T]:
            try:
                response = await self._get(f"{self._base_url}/api/{kind}", params)
                page = parse_page(self._decode_json(response), kind, parser, offset)
            except RegistryError:
                self._counter.record(kind, False)
                raise
            self._counter.record(kind, True)
            cache.set(key, page)
            return page

        try:
            return await self._deduplicator.dedupe(key, fetch)
        except RegistryError as exc:
            logger.warning(
                "Failed to fetch %s (offset=%d, query=%r): %s",
                kind,
                offset,
                query,
                exc,
            )
            if offset == 0 and not query:
                return PaginatedResult(
                    items=tuple(fallback), total=len(fallback), has_more=False
                )
            return PaginatedResult.empty()

    async def _get(
        self, url: str, params: dict[str, str | int] | None = None
    ) -> httpx.Response:
        """GET under a concurrency permit, bounded by the request timeout."""
        await self._limiter.acquire()
        try:
            return await with_timeout(
                self._send(url, params),
                self._timeout_ms,
                f"Request to {url} timed out",
            )
        finally:
            self._limiter.release()

    async def _send(
        self, url: str, params: dict[str, str | int] | None
    ) -> httpx.Response:
        try:
            response = await self._http.get(url, params=params)
        except httpx.HTTPError as exc:
            raise NetworkError(f"Request to {url} failed: {exc}") from exc
        if not response.is_success:
            raise HttpStatusError(response.status_code, url)
        return response

    @staticmethod
    def _decode_json(response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError as exc:
            raise RegistryError(f"Invalid JSON from {response.url}") from exc


def create_registry_client(
    *,
    http_client: httpx.AsyncClient | None = None,
    **settings: Any,
) -> RegistryClient:
    """Create a registry client from keyword settings.

    Args:
        http_client: Shared HTTP client; left open when the registry client
            is closed
        **settings: Any :class:`RegistryConfig` field, e.g. ``base_url`` or
            ``request_timeout="5s"``

    Returns:
        RegistryClient with freshly built caches and limiters
    """
    return RegistryClient(RegistryConfig(**settings), http_client=http_client)


__all__ = ["FULL_LISTING_LIMIT", "RegistryClient", "create_registry_client"]
