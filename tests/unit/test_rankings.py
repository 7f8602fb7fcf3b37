"""Unit tests for player card rankings."""

from __future__ import annotations

from sportai.core.models import PlayerMetricSet, SwingEvent
from sportai.statistics.rankings import compute_player_rankings, rank_values
from sportai.tracking.ingest import parse_players


def _player(
    player_id: int,
    swing_count: int,
    distance: float = 0.0,
    sprint: float = 0.0,
    speeds: tuple[float, ...] = (),
) -> PlayerMetricSet:
    swings = tuple(
        SwingEvent(hit_timestamp=float(i), player_id=player_id, ball_speed=s)
        for i, s in enumerate(speeds)
    )
    return PlayerMetricSet(
        player_id=player_id,
        swing_count=swing_count,
        covered_distance=distance,
        fastest_sprint=sprint,
        swings=swings,
    )


class TestRankValues:
    """Tests for top-3 ranking of a single metric."""

    def test_descending_top_three(self) -> None:
        ranks = rank_values([(1, 10.0), (2, 30.0), (3, 20.0), (4, 5.0)])
        assert ranks == {2: 1, 3: 2, 1: 3}

    def test_non_positive_values_unranked(self) -> None:
        assert rank_values([(1, 0.0), (2, -3.0), (3, 4.0)]) == {3: 1}

    def test_ties_keep_input_order(self) -> None:
        ranks = rank_values([(1, 5.0), (2, 5.0), (3, 7.0), (4, 5.0)])
        assert ranks == {3: 1, 1: 2, 2: 3}

    def test_bounded(self) -> None:
        values = [(pid, float((pid * 37) % 11)) for pid in range(20)]
        ranks = rank_values(values)
        assert len(ranks) <= 3
        assert set(ranks.values()) <= {1, 2, 3}

    def test_empty(self) -> None:
        assert rank_values([]) == {}


class TestComputePlayerRankings:
    """Tests for the per-metric rankings across displayed players."""

    def _players(self) -> list[PlayerMetricSet]:
        return [
            _player(1, swing_count=20, distance=100.0, sprint=5.0, speeds=(50.0, 60.0)),
            _player(2, swing_count=15, distance=200.0, sprint=6.0, speeds=(70.0,)),
            _player(3, swing_count=5, distance=900.0, sprint=9.0, speeds=(99.0,)),
        ]

    def test_min_swings_filter(self) -> None:
        rankings = compute_player_rankings(self._players(), min_swings=10)
        assert [p.player_id for p in rankings.players] == [1, 2]
        assert 3 not in rankings.distance_rankings

    def test_display_names(self) -> None:
        rankings = compute_player_rankings(self._players(), player_names={2: "Alex"})
        assert rankings.display_names == {1: "Player 1", 2: "Alex"}

    def test_metric_maps_and_maxima(self) -> None:
        rankings = compute_player_rankings(self._players())
        assert rankings.distance_rankings == {2: 1, 1: 2}
        assert rankings.sprint_rankings == {2: 1, 1: 2}
        assert rankings.ball_speed_rankings == {2: 1, 1: 2}
        assert rankings.swings_rankings == {1: 1, 2: 2}
        assert rankings.max_distance_covered == 200.0
        assert rankings.max_ball_speed == 70.0
        assert rankings.max_sprint_speed == 6.0
        assert rankings.max_swings == 2

    def test_overall_points_and_gold(self) -> None:
        rankings = compute_player_rankings(self._players())
        assert rankings.overall_rank_points(2) == 11
        assert rankings.overall_rank_points(1) == 9
        assert rankings.gold_count(2) == 3
        assert rankings.gold_count(1) == 1
        assert rankings.overall_rank_points(3) == 0

    def test_sorted_with_overall_rank(self) -> None:
        rankings = compute_player_rankings(self._players())
        ordered = rankings.sorted_with_overall_rank()
        assert [(p.player_id, p.overall_rank) for p in ordered] == [(2, 1), (1, 2)]

    def test_gold_count_breaks_point_ties(self) -> None:
        players = [
            _player(1, swing_count=10, distance=10.0),
            _player(2, swing_count=10, distance=5.0, sprint=1.0),
            _player(3, swing_count=10, distance=1.0, sprint=9.0),
        ]
        rankings = compute_player_rankings(players)
        # Players 2 and 3 both have 4 points; only player 3 holds a gold
        assert rankings.overall_rank_points(2) == rankings.overall_rank_points(3) == 4
        ordered = [p.player_id for p in rankings.sorted_with_overall_rank()]
        assert ordered == [3, 2, 1]

    def test_swings_outside_rallies_count(self) -> None:
        players = parse_players([
            {
                "player_id": 1,
                "swing_count": 10,
                "swings": [{"ball_hit": {"timestamp": 1.0}, "ball_speed": 40.0, "is_in_rally": True}]
                + [
                    {"ball_hit": {"timestamp": 5.0 + i}, "ball_speed": 120.0, "is_in_rally": False}
                    for i in range(3)
                ],
            },
            {
                "player_id": 2,
                "swing_count": 10,
                "swings": [
                    {"ball_hit": {"timestamp": 2.0}, "ball_speed": 60.0, "is_in_rally": True},
                    {"ball_hit": {"timestamp": 3.0}, "ball_speed": 50.0, "is_in_rally": True},
                ],
            },
        ])
        rankings = compute_player_rankings(players)
        assert rankings.ball_speed_rankings == {1: 1, 2: 2}
        assert rankings.swings_rankings == {1: 1, 2: 2}
        assert rankings.max_ball_speed == 120.0
        assert rankings.max_swings == 4

    def test_no_eligible_players(self) -> None:
        rankings = compute_player_rankings([_player(1, swing_count=2, distance=5.0)])
        assert rankings.players == []
        assert rankings.distance_rankings == {}
        assert rankings.max_distance_covered == 0.0

    def test_to_dict(self) -> None:
        data = compute_player_rankings(self._players()).to_dict()
        assert data["players"][0]["player_id"] == 2
        assert data["players"][0]["overall_rank"] == 1
        assert data["swings_rankings"] == {1: 1, 2: 2}
