"""Tests for catalog sorting and filtering helpers."""

import pytest

from skillshelf import Plugin, collect_tags, filter_by_tag, sort_items


def make_plugin(name: str, downloads: int, stars: int, tags: tuple[str, ...]) -> Plugin:
    return Plugin(
        id=name,
        name=name,
        description="",
        owner="acme",
        repo="plugins",
        downloads=downloads,
        stars=stars,
        category="other",
        tags=tags,
    )


@pytest.fixture
def plugins() -> list[Plugin]:
    return [
        make_plugin("alpha", downloads=10, stars=300, tags=("ai",)),
        make_plugin("beta", downloads=500, stars=20, tags=("tools", "ai")),
        make_plugin("gamma", downloads=500, stars=1, tags=()),
    ]


class TestSortItems:
    def test_relevance_keeps_registry_order(self, plugins: list[Plugin]) -> None:
        assert [p.name for p in sort_items(plugins)] == ["alpha", "beta", "gamma"]

    def test_downloads_descending_and_stable(self, plugins: list[Plugin]) -> None:
        result = sort_items(plugins, "downloads")
        assert [p.name for p in result] == ["beta", "gamma", "alpha"]

    def test_stars_descending(self, plugins: list[Plugin]) -> None:
        result = sort_items(plugins, "stars")
        assert [p.name for p in result] == ["alpha", "beta", "gamma"]

    def test_does_not_mutate_input(self, plugins: list[Plugin]) -> None:
        sort_items(plugins, "downloads")
        assert [p.name for p in plugins] == ["alpha", "beta", "gamma"]

    def test_unknown_option(self, plugins: list[Plugin]) -> None:
        with pytest.raises(ValueError, match="Unknown sort option"):
            sort_items(plugins, "newest")  # type: ignore[arg-type]


class TestTags:
    def test_filter_by_tag(self, plugins: list[Plugin]) -> None:
        assert [p.name for p in filter_by_tag(plugins, "ai")] == ["alpha", "beta"]

    def test_filter_none_keeps_everything(self, plugins: list[Plugin]) -> None:
        assert filter_by_tag(plugins, None) == plugins

    def test_collect_tags_sorted_unique(self, plugins: list[Plugin]) -> None:
        assert collect_tags(plugins) == ["ai", "tools"]
