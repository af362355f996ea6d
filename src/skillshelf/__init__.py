"""skillshelf - Resilient async access to plugin and skill registries."""

# Building blocks
from skillshelf.cache import TTLCache

# Catalog helpers
from skillshelf.catalog import SortOption, collect_tags, filter_by_tag, sort_items

# Registry client
from skillshelf.client import RegistryClient, create_registry_client
from skillshelf.config import (
    API_TIMEOUT_MS,
    PLUGIN_PAGE_SIZE,
    SKILL_PAGE_SIZE,
    RegistryConfig,
)
from skillshelf.counter import RequestCounter
from skillshelf.dedup import RequestDeduplicator

# Duration parsing
from skillshelf.duration import parse_duration

# Errors
from skillshelf.errors import (
    HttpStatusError,
    NetworkError,
    RegistryError,
    RequestTimeoutError,
)
from skillshelf.limiter import ConcurrencyLimiter
from skillshelf.parsing import parse_plugin, parse_skill
from skillshelf.rate_limiter import RateLimiter
from skillshelf.timeout import with_timeout

# Core types
from skillshelf.types import (
    CacheEntry,
    DownloadInfo,
    Duration,
    PaginatedResult,
    Plugin,
    Skill,
)

__version__ = "0.1.0"

__all__ = [
    "API_TIMEOUT_MS",
    "PLUGIN_PAGE_SIZE",
    "SKILL_PAGE_SIZE",
    "CacheEntry",
    "ConcurrencyLimiter",
    "DownloadInfo",
    "Duration",
    "HttpStatusError",
    "NetworkError",
    "PaginatedResult",
    "Plugin",
    "RateLimiter",
    "RegistryClient",
    "RegistryConfig",
    "RegistryError",
    "RequestCounter",
    "RequestDeduplicator",
    "RequestTimeoutError",
    "Skill",
    "SortOption",
    "TTLCache",
    "collect_tags",
    "create_registry_client",
    "filter_by_tag",
    "parse_duration",
    "parse_plugin",
    "parse_skill",
    "sort_items",
    "with_timeout",
]
