"""
Unit Tests - Ranking
"""
import pytest

from staff_analytics.exceptions import InvalidRankingMetricError
from staff_analytics.transformation import RANK_NOT_FOUND, AggregatedEntity, RankingMetric, rank_entities


@pytest.fixture
def entities():
    return [
        AggregatedEntity("nam", active_users=3, sessions=4, screen_page_views=90),
        AggregatedEntity("linh", active_users=7, sessions=8, screen_page_views=70),
        AggregatedEntity("bao", active_users=7, sessions=1, screen_page_views=70),
        AggregatedEntity("an", active_users=1, sessions=9, screen_page_views=5),
    ]


class TestRankEntities:
    """Tests for rank_entities"""

    def test_metric_is_non_increasing(self, entities):
        leaderboard = rank_entities(entities, RankingMetric.SCREEN_PAGE_VIEWS)
        values = [entry.value for entry in leaderboard.entries]

        assert all(a >= b for a, b in zip(values, values[1:]))

    def test_ranks_are_one_to_n(self, entities):
        leaderboard = rank_entities(entities, "sessions")

        assert [entry.rank for entry in leaderboard.entries] == [1, 2, 3, 4]
        assert leaderboard.total_entities == 4
        assert [entry.identity for entry in leaderboard.entries] == ["an", "linh", "nam", "bao"]

    def test_ties_broken_by_identity(self, entities):
        leaderboard = rank_entities(entities, RankingMetric.ACTIVE_USERS)

        assert [entry.identity for entry in leaderboard.entries[:2]] == ["bao", "linh"]
        assert leaderboard.rank_of("bao") == 1
        assert leaderboard.rank_of("linh") == 2

    def test_tie_break_independent_of_input_order(self, entities):
        forward = rank_entities(entities, RankingMetric.SCREEN_PAGE_VIEWS)
        backward = rank_entities(list(reversed(entities)), RankingMetric.SCREEN_PAGE_VIEWS)

        assert [e.identity for e in forward.entries] == [e.identity for e in backward.entries]

    def test_rank_of_absent_identity(self, entities):
        leaderboard = rank_entities(entities, RankingMetric.SCREEN_PAGE_VIEWS)

        assert leaderboard.rank_of("ghost") == RANK_NOT_FOUND == -1
        assert leaderboard.get("ghost") is None

    def test_empty(self):
        leaderboard = rank_entities([], RankingMetric.SCREEN_PAGE_VIEWS)

        assert leaderboard.entries == ()
        assert leaderboard.rank_of("linh") == -1

    def test_invalid_metric(self, entities):
        with pytest.raises(InvalidRankingMetricError):
            rank_entities(entities, "totalRevenue")

    def test_top(self, entities):
        leaderboard = rank_entities(entities, RankingMetric.SCREEN_PAGE_VIEWS)

        assert [entry.identity for entry in leaderboard.top(2)] == ["nam", "bao"]
        assert len(leaderboard.top()) == 4
        assert leaderboard.metric is RankingMetric.SCREEN_PAGE_VIEWS


class TestRankingMetric:
    """Tests for RankingMetric parsing"""

    @pytest.mark.parametrize("value", ["activeUsers", "sessions", "screenPageViews"])
    def test_parse_valid(self, value):
        assert RankingMetric.parse(value).value == value

    def test_parse_invalid_is_value_error(self):
        with pytest.raises(ValueError):
            RankingMetric.parse("bounceRate")
