"""Shared pytest fixtures."""

from collections.abc import AsyncIterator, Callable

import httpx
import pytest

from skillshelf import (
    ConcurrencyLimiter,
    RateLimiter,
    RegistryClient,
    RegistryConfig,
    RequestCounter,
    RequestDeduplicator,
    TTLCache,
)

BASE_URL = "https://registry.test"


class FakeClock:
    """Manually advanced millisecond clock."""

    def __init__(self, start: float = 1_000_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, ms: float) -> None:
        self.now += ms


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def cache(clock: FakeClock) -> TTLCache:
    """Listing cache with a 10s TTL on the fake clock."""
    return TTLCache("10s", clock=clock)


@pytest.fixture
def search_cache(clock: FakeClock) -> TTLCache:
    return TTLCache("5s", clock=clock)


@pytest.fixture
def rate_limiter(clock: FakeClock) -> RateLimiter:
    return RateLimiter(max_requests=3, window="1s", clock=clock)


@pytest.fixture
def config() -> RegistryConfig:
    return RegistryConfig(
        base_url=BASE_URL,
        request_timeout="500ms",
        prefetch_delay=0,
    )


@pytest.fixture
async def make_client(
    config: RegistryConfig,
    cache: TTLCache,
    search_cache: TTLCache,
    rate_limiter: RateLimiter,
) -> AsyncIterator[Callable[..., RegistryClient]]:
    """Build a RegistryClient sharing the fake-clock components.

    Pass ``handler`` to route requests through an ``httpx.MockTransport``;
    without one the client uses a plain AsyncClient (mock it with respx).
    """
    http_clients: list[httpx.AsyncClient] = []

    def factory(
        handler: Callable[..., object] | None = None, **kwargs: object
    ) -> RegistryClient:
        http_client = (
            httpx.AsyncClient(transport=httpx.MockTransport(handler))
            if handler is not None
            else httpx.AsyncClient()
        )
        http_clients.append(http_client)
        defaults: dict[str, object] = {
            "http_client": http_client,
            "cache": cache,
            "search_cache": search_cache,
            "deduplicator": RequestDeduplicator(),
            "limiter": ConcurrencyLimiter(max_concurrent=4),
            "rate_limiter": rate_limiter,
            "counter": RequestCounter(),
        }
        settings = kwargs.pop("config", config)
        defaults.update(kwargs)
        return RegistryClient(settings, **defaults)  # type: ignore[arg-type]

    yield factory

    for http_client in http_clients:
        await http_client.aclose()


@pytest.fixture
async def client(
    make_client: Callable[..., RegistryClient],
) -> AsyncIterator[RegistryClient]:
    """Registry client for respx-mocked tests."""
    registry = make_client()
    yield registry
    await registry.aclose()
