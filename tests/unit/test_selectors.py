"""
Unit tests for read-only collection selectors.
"""

from datetime import datetime

from snapcards.collection.selectors import (
    accuracy,
    cards_in_folder,
    collection_stats,
    favorite_cards,
    group_by_date,
    search_cards,
)


def ms(year, month, day, hour=12):
    return int(datetime(year, month, day, hour).timestamp() * 1000)


class TestSearch:

    def test_matches_either_side_case_insensitively(self, card_factory):
        cards = [
            card_factory("1", front="Mitochondria", back="Powerhouse"),
            card_factory("2", front="Ribosome", back="Makes PROTEIN"),
            card_factory("3", front="Nucleus", back="Holds DNA"),
        ]
        assert [c.id for c in search_cards(cards, "mito")] == ["1"]
        assert [c.id for c in search_cards(cards, "protein")] == ["2"]

    def test_blank_term_returns_everything(self, sample_cards):
        assert search_cards(sample_cards, "  ") == list(sample_cards)

    def test_no_match(self, sample_cards):
        assert search_cards(sample_cards, "zzz") == []


class TestFilters:

    def test_cards_in_folder_and_unfiled(self, card_factory):
        cards = [card_factory("1", folder_id="F1"), card_factory("2"), card_factory("3", folder_id="F2")]
        assert [c.id for c in cards_in_folder(cards, "F1")] == ["1"]
        assert [c.id for c in cards_in_folder(cards, None)] == ["2"]

    def test_favorites(self, card_factory):
        cards = [card_factory("1", is_favorite=True), card_factory("2")]
        assert [c.id for c in favorite_cards(cards)] == ["1"]


class TestGroupByDate:

    def test_newest_day_first_collection_order_within_day(self, card_factory):
        cards = [
            card_factory("old", created_at=ms(2024, 1, 1)),
            card_factory("new-1", created_at=ms(2024, 3, 5, 9)),
            card_factory("mid", created_at=ms(2024, 2, 10)),
            card_factory("new-2", created_at=ms(2024, 3, 5, 8)),
        ]
        groups = group_by_date(cards)
        assert [day.isoformat() for day, _ in groups] == ["2024-03-05", "2024-02-10", "2024-01-01"]
        assert [c.id for c in groups[0][1]] == ["new-1", "new-2"]

    def test_empty(self):
        assert group_by_date([]) == []


class TestAccuracy:

    def test_never_answered(self, card_factory):
        assert accuracy(card_factory("1")) is None

    def test_rounds_percentage(self, card_factory):
        assert accuracy(card_factory("1", correct=2, wrong=1)) == 67
        assert accuracy(card_factory("1", correct=0, wrong=4)) == 0

    def test_collection_stats(self, card_factory):
        cards = [
            card_factory("1", correct=3, wrong=1, is_favorite=True, folder_id="F1"),
            card_factory("2", correct=1, wrong=3),
            card_factory("3"),
        ]
        stats = collection_stats(cards)
        assert stats.total_cards == 3
        assert stats.favorites == 1
        assert stats.unfiled == 2
        assert stats.answered == 8
        assert stats.accuracy == 50

    def test_collection_stats_without_answers(self, sample_cards):
        assert collection_stats(sample_cards).accuracy is None
