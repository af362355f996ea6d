"""Registry client configuration."""

from dataclasses import dataclass

from skillshelf.duration import parse_duration
from skillshelf.types import Duration

DEFAULT_BASE_URL = "https://claude-plugins.dev"

PLUGIN_PAGE_SIZE = 20
SKILL_PAGE_SIZE = 20
API_TIMEOUT_MS = 15_000


@dataclass(frozen=True, slots=True)
class RegistryConfig:
    """Fixed tuning constants for a :class:`~skillshelf.client.RegistryClient`.

    Durations take the same forms as everywhere else in the package:
    "100ms", "15s", "5m" or integer milliseconds.
    """

    base_url: str = DEFAULT_BASE_URL
    plugin_page_size: int = PLUGIN_PAGE_SIZE
    skill_page_size: int = SKILL_PAGE_SIZE
    request_timeout: Duration = API_TIMEOUT_MS
    cache_ttl: Duration = "5m"
    search_cache_ttl: Duration = "1m"
    max_concurrent: int = 4
    scroll_rate_limit: int = 10
    scroll_rate_window: Duration = "10s"
    prefetch_delay: Duration = "100ms"

    def __post_init__(self) -> None:
        for name in ("plugin_page_size", "skill_page_size", "max_concurrent"):
            if getattr(self, name) <= 0:
                raise ValueError(f"{name} must be positive")
        if self.request_timeout_ms <= 0:
            raise ValueError("request_timeout must be positive")
        parse_duration(self.prefetch_delay)

    @property
    def request_timeout_ms(self) -> int:
        return parse_duration(self.request_timeout)

    @property
    def prefetch_delay_ms(self) -> int:
        return parse_duration(self.prefetch_delay)
