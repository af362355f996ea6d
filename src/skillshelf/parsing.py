"""Normalisation of untyped registry JSON into Plugin and Skill records.

Registry payloads are loosely shaped: fields go missing, change names between
endpoints or arrive with the wrong type. Nothing here raises on bad data.
Every field has a defaulting rule instead:

- strings default to ``""`` (``"Unknown"`` for names) when missing or empty
- counts default to ``0`` when missing or not a number
- tags come from ``keywords``, then ``tags``; non-string entries are dropped
- owner/repo are read from a ``@owner/repo`` namespace before the plain
  ``owner``/``repo`` fields
"""

from collections.abc import Callable, Mapping
from typing import Any, TypeVar

from skillshelf.types import PaginatedResult, Plugin, ResourceKind, Skill

T = TypeVar("T")


def _mapping(value: Any) -> Mapping[str, Any]:
    return value if isinstance(value, Mapping) else {}


def _text(value: Any, default: str = "") -> str:
    return value if isinstance(value, str) and value else default


def _count(value: Any) -> int:
    # bool is an int subclass but never a meaningful count
    if isinstance(value, bool) or not isinstance(value, int | float):
        return 0
    return int(value)


def _string_list(value: Any) -> tuple[str, ...] | None:
    if not isinstance(value, list):
        return None
    return tuple(item for item in value if isinstance(item, str))


def _tags(data: Mapping[str, Any]) -> tuple[str, ...]:
    for field in ("keywords", "tags"):
        tags = _string_list(data.get(field))
        if tags is not None:
            return tags
    return ()


def _namespace_parts(namespace: str) -> tuple[str, str]:
    parts = namespace.replace("@", "").split("/")
    owner = parts[0] if parts else ""
    repo = parts[1] if len(parts) > 1 else ""
    return owner, repo


def parse_plugin(raw: Any) -> Plugin:
    """Map one raw plugin object to a fully-defaulted :class:`Plugin`."""
    data = _mapping(raw)
    namespace = _text(data.get("namespace"))
    ns_owner, ns_repo = _namespace_parts(namespace)
    owner = ns_owner or _text(data.get("owner"))
    repo = ns_repo or _text(data.get("repo"))
    name = _text(data.get("name"), "Unknown")

    raw_tags = _string_list(data.get("tags")) or ()
    category = _text(data.get("category")) or (raw_tags[0] if raw_tags else "other")

    return Plugin(
        id=_text(data.get("id")) or f"{owner}/{repo}/{name}",
        name=name,
        description=_text(data.get("description")),
        owner=owner,
        repo=repo,
        downloads=_count(data.get("downloads")),
        stars=_count(data.get("stars")),
        category=category,
        tags=_tags(data),
        namespace=namespace,
    )


def parse_skill(raw: Any) -> Skill:
    """Map one raw skill object to a fully-defaulted :class:`Skill`.

    Skills differ from plugins in where they keep some fields: ``author``
    takes precedence for the owner and ``installs`` for the download count.
    """
    data = _mapping(raw)
    namespace = _text(data.get("namespace"))
    ns_owner, ns_repo = _namespace_parts(namespace)
    owner = _text(data.get("author")) or ns_owner or _text(data.get("owner"))
    repo = ns_repo or _text(data.get("repo"))
    name = _text(data.get("name"), "Unknown")
    installs = _count(data.get("installs"))

    return Skill(
        id=_text(data.get("id")) or f"{owner}/{repo}/{name}",
        name=name,
        description=_text(data.get("description")),
        owner=owner,
        repo=repo,
        downloads=installs or _count(data.get("downloads")),
        stars=_count(data.get("stars")),
        tags=_tags(data),
        install_identifier=namespace or f"@{owner}/{repo}/{name}",
        raw_file_url=_text(_mapping(data.get("metadata")).get("rawFileUrl")) or None,
    )


def extract_items(payload: Any, kind: ResourceKind) -> list[Any]:
    """Raw item list from a ``{kind: [...]}`` object or a bare array."""
    if isinstance(payload, list):
        return payload
    items = _mapping(payload).get(kind)
    return items if isinstance(items, list) else []


def extract_total(payload: Any) -> int:
    return _count(_mapping(payload).get("total"))


def parse_page(
    payload: Any,
    kind: ResourceKind,
    parser: Callable[[Any], T],
    offset: int,
) -> PaginatedResult[T]:
    """Parse a listing response into a page starting at ``offset``."""
    items = [parser(item) for item in extract_items(payload, kind)]
    return PaginatedResult.from_page(items, extract_total(payload), offset)
