"""Core types for the registry access layer."""

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Generic, Literal, TypeVar

T = TypeVar("T")

# Duration type alias
Duration = str | int  # "100ms", "15s", "5m" or milliseconds

ResourceKind = Literal["plugins", "skills"]

SUPPORTED_CLIENTS: tuple[str, ...] = (
    "claude-code",
    "cursor",
    "vscode",
    "codex",
    "amp",
    "opencode",
    "goose",
    "letta",
    "github",
)


@dataclass(frozen=True, slots=True)
class CacheEntry(Generic[T]):
    """A cached value with its expiry."""

    value: T
    expires_at: float  # ms on the owning cache's clock


@dataclass(frozen=True, slots=True)
class PaginatedResult(Generic[T]):
    """One page of registry items."""

    items: tuple[T, ...]
    total: int
    has_more: bool

    @classmethod
    def from_page(
        cls, items: Sequence[T], total: int, offset: int
    ) -> "PaginatedResult[T]":
        """Build a page, deriving ``has_more`` from the offset and total."""
        page = tuple(items)
        return cls(items=page, total=total, has_more=offset + len(page) < total)

    @classmethod
    def empty(cls, *, has_more: bool = False) -> "PaginatedResult[T]":
        return cls(items=(), total=0, has_more=has_more)


@dataclass(frozen=True, slots=True)
class Plugin:
    """A plugin package listed by the registry."""

    id: str
    name: str
    description: str
    owner: str
    repo: str
    downloads: int
    stars: int
    category: str
    tags: tuple[str, ...] = ()
    namespace: str = ""


@dataclass(frozen=True, slots=True)
class Skill:
    """A skill package listed by the registry."""

    id: str
    name: str
    description: str
    owner: str
    repo: str
    downloads: int
    stars: int
    tags: tuple[str, ...] = ()
    install_identifier: str = ""
    supported_clients: tuple[str, ...] = SUPPORTED_CLIENTS
    raw_file_url: str | None = None


@dataclass(frozen=True, slots=True)
class DownloadInfo:
    """Where to fetch a skill's SKILL.md and what to call it locally."""

    url: str
    filename: str
