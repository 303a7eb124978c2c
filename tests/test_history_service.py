"""Tests for the scan history store."""

from app.core.enums import HistoryFilter
from app.models.domain import HistoryStats, PriceCheck
from app.services.history_service import HistoryService


def _check(bgn: float = 12.50, eur: float = 6.39, is_correct: bool = True) -> PriceCheck:
    return PriceCheck(bgn_price=bgn, eur_price=eur, expected_eur=6.39, is_correct=is_correct, confidence=90.0)


class TestHistoryService:
    """Tests for HistoryService."""

    def test_empty_when_file_missing(self, history_service: HistoryService) -> None:
        assert history_service.get_history() == []
        assert history_service.stats() == HistoryStats()

    def test_newest_first_and_persisted(self, history_service: HistoryService) -> None:
        first = history_service.add(_check(bgn=1.00))
        second = history_service.add(_check(bgn=2.00), location="Sofia")

        reloaded = HistoryService(history_file=str(history_service.path))
        items = reloaded.get_history()

        assert [item.id for item in items] == [second.id, first.id]
        assert items[0].location == "Sofia"
        assert items[0].bgn_price == 2.00
        assert items[1].timestamp == first.timestamp

    def test_limit(self, history_service: HistoryService) -> None:
        limited = HistoryService(history_file=str(history_service.path), limit=3)
        for price in range(5):
            limited.add(_check(bgn=float(price + 1)))

        assert [item.bgn_price for item in limited.get_history()] == [5.0, 4.0, 3.0]

    def test_filter_and_stats(self, history_service: HistoryService) -> None:
        history_service.add(_check(is_correct=True))
        history_service.add(_check(eur=6.40, is_correct=False))
        history_service.add(_check(is_correct=True))

        assert len(history_service.get_history(HistoryFilter.CORRECT)) == 2
        assert len(history_service.get_history(HistoryFilter.INCORRECT)) == 1
        assert history_service.stats() == HistoryStats(total=3, correct=2, incorrect=1, accuracy_percent=67)

    def test_remove(self, history_service: HistoryService) -> None:
        item = history_service.add(_check())

        assert history_service.remove("missing") is False
        assert history_service.remove(item.id) is True
        assert history_service.get_history() == []

    def test_clear(self, history_service: HistoryService) -> None:
        history_service.add(_check())

        history_service.clear()
        history_service.clear()

        assert history_service.get_history() == []

    def test_corrupt_file_reads_as_empty(self, history_service: HistoryService) -> None:
        history_service.path.write_text("{not json", encoding="utf-8")

        assert history_service.get_history() == []

        history_service.add(_check())
        assert len(history_service.get_history()) == 1
