"""
Unit tests for the Similarity Finder
"""
import pytest

from recommender.models.schemas import TicketQuery
from recommender.services.similarity import find_similar, jaccard, match_similar
from recommender.utils.keywords import extract_keywords


class TestJaccard:
    def test_overlap(self):
        assert jaccard({"a", "b"}, {"b", "c"}) == pytest.approx(1 / 3)

    def test_identical(self):
        assert jaccard({"a"}, {"a"}) == 1.0

    def test_empty(self):
        assert jaccard(set(), set()) == 0.0


class TestMatchSimilar:
    """Test ranking of candidates"""

    def test_exclude_id(self, make_ticket):
        tickets = [
            make_ticket("1", "Проблема с сервером", "done"),
            make_ticket("2", "Проблема с сервером повторно", "new"),
        ]

        result = match_similar(tickets, extract_keywords("Проблема с сервером"), exclude_id="1")

        assert [m.ticket_id for m in result] == ["2"]
        assert result[0].custom_id == "TICKET-2"
        assert result[0].status == "new"
        assert result[0].similarity == 0.67
        assert result[0].matching_terms == ["проблема", "сервером"]

    def test_no_overlap_skipped(self, make_ticket):
        tickets = [make_ticket("1", "Не работает отчёт", "new")]

        assert match_similar(tickets, extract_keywords("Проблема авторизации")) == []

    def test_threshold(self, make_ticket):
        tickets = [
            # 1 shared of 10 distinct keywords -> 0.10
            make_ticket("1", "alpha bravo charlie delta echo foxtrot golf hotel india"),
            # 1 shared of 11 distinct keywords -> 0.09
            make_ticket("2", "alpha bravo charlie delta echo foxtrot golf hotel india juliet"),
        ]

        result = match_similar(tickets, {"alpha", "kilo"})

        assert [m.ticket_id for m in result] == ["1"]
        assert result[0].similarity == 0.1

    def test_sorted_and_limited(self, make_ticket):
        tickets = [
            make_ticket("1", "printer offline office"),
            make_ticket("2", "printer offline"),
            make_ticket("3", "printer jammed paper tray stuck"),
            make_ticket("4", "printer offline again today"),
        ]

        result = match_similar(tickets, extract_keywords("printer offline"), limit=2)

        assert [m.ticket_id for m in result] == ["2", "1"]
        assert result[0].similarity == 1.0

        full = match_similar(tickets, extract_keywords("printer offline"), limit=10)
        similarities = [m.similarity for m in full]
        assert similarities == sorted(similarities, reverse=True)
        for match in full:
            assert 0 <= match.similarity <= 1
            assert match.matching_terms


class TestFindSimilar:
    """Test service call"""

    @pytest.mark.asyncio
    async def test_stop_words_only_short_circuits(self, mock_repository):
        result = await find_similar(mock_repository, "ws-1", "и в на")

        assert result == []
        mock_repository.list_tickets_async.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_reads_200_most_recent(self, mock_repository, make_ticket):
        mock_repository.list_tickets_async.return_value = [
            make_ticket("1", "Проблема с авторизацией", "done"),
            make_ticket("2", "Ошибка авторизации пользователя", "in-progress"),
            make_ticket("3", "Не работает отчёт", "new"),
        ]

        result = await find_similar(mock_repository, "ws-1", "Проблема", "с авторизацией")

        assert [m.ticket_id for m in result] == ["1"]
        mock_repository.list_tickets_async.assert_awaited_once_with(
            "ws-1", TicketQuery(limit=200)
        )
