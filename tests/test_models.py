"""Tests for portfolio entries and the toggle helpers."""

from portfolio_sync.models import PortfolioEntry, toggle_enabled, toggle_featured


def _entries():
    return [
        PortfolioEntry(name="A", github="https://github.com/u/a"),
        PortfolioEntry(name="B", github="https://github.com/u/b", featured=True),
    ]


class TestToDict:
    def test_key_order_and_casing(self):
        entry = PortfolioEntry(
            name="A",
            github="https://github.com/u/a",
            short_description="Short",
            date_completed="2024-03",
            links={"liveDemo": "https://a.dev"},
            featured=False,
        )
        assert list(entry.to_dict()) == [
            "name", "shortDescription", "dateCompleted", "links", "featured", "github",
        ]

    def test_enabled_never_serialized(self):
        entry = PortfolioEntry(name="A", github="g", enabled=False)
        assert entry.to_dict() == {"name": "A", "github": "g"}


class TestToggles:
    def test_toggle_enabled_copies(self):
        entries = _entries()
        updated = toggle_enabled(entries, 0)
        assert updated[0].enabled is False
        assert entries[0].enabled is True
        assert updated[1] is entries[1]

    def test_toggle_featured(self):
        entries = _entries()
        updated = toggle_featured(toggle_featured(entries, 0), 1)
        assert updated[0].featured is True
        assert updated[1].featured is False
        assert entries[0].featured is None
        assert entries[1].featured is True
