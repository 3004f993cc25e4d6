"""
Unit tests for depth-bounded path exploration.

Uses fixed-speed leg estimators so path counts and timings are exact.
"""

import itertools

import pytest

from regatta.errors import NotFoundError
from regatta.optimization.path_explorer import Path, PathExplorer, rank_paths
from regatta.routes.course import Buoy, Coordinate, CourseGraph, Leg


@pytest.fixture
def explorer(four_node_graph, constant_estimator) -> PathExplorer:
    return PathExplorer(four_node_graph, constant_estimator(2.0))


def _buoy_sequences(paths):
    return [tuple(p.buoys) for p in paths]


# ---------------------------------------------------------------------------
# explore
# ---------------------------------------------------------------------------
class TestExplore:

    def test_four_node_two_steps_is_every_simple_path(self, explorer):
        paths = explorer.explore("A", 0.0, 2)
        sequences = _buoy_sequences(paths)

        others = ["B", "C", "D"]
        expected = {("A", x) for x in others} | {("A",) + p for p in itertools.permutations(others, 2)}

        assert len(paths) == 9
        assert len(set(sequences)) == len(sequences)
        assert set(sequences) == expected

    def test_no_buoy_repeats(self, explorer):
        for path in explorer.explore("A", 0.0, 3):
            assert len(set(path.buoys)) == len(path.buoys)

    @pytest.mark.parametrize("max_steps,expected", [(1, 3), (2, 9), (3, 15), (4, 15), (10, 15)])
    def test_path_counts(self, explorer, max_steps, expected):
        assert len(explorer.explore("A", 0.0, max_steps)) == expected

    def test_depth_first_order(self, explorer):
        sequences = _buoy_sequences(explorer.explore("A", 0.0, 2))
        assert sequences[:4] == [("A", "B"), ("A", "B", "C"), ("A", "B", "D"), ("A", "C")]

    def test_zero_steps_is_empty(self, explorer):
        assert explorer.explore("A", 0.0, 0) == []

    def test_unknown_start(self, explorer):
        with pytest.raises(NotFoundError):
            explorer.explore("Z", 0.0, 2)

    def test_unknown_start_with_zero_steps(self, explorer):
        with pytest.raises(NotFoundError):
            explorer.explore("Z", 0.0, 0)

    def test_negative_steps_rejected(self, explorer):
        with pytest.raises(ValueError):
            explorer.explore("A", 0.0, -1)

    def test_max_paths_caps_results(self, explorer):
        full = explorer.explore("A", 0.0, 3)
        capped = explorer.explore("A", 0.0, 3, max_paths=4)
        assert len(capped) == 4
        assert _buoy_sequences(capped) == _buoy_sequences(full)[:4]

    def test_max_paths_must_be_positive(self, explorer):
        with pytest.raises(ValueError):
            explorer.explore("A", 0.0, 3, max_paths=0)

    def test_repeated_calls_are_independent(self, explorer):
        first = _buoy_sequences(explorer.explore("A", 0.0, 3))
        second = _buoy_sequences(explorer.explore("A", 0.0, 3))
        assert first == second


class TestTiming:

    def test_steps_chain_in_time(self, explorer):
        path = next(p for p in explorer.explore("A", 1.0, 3) if len(p) == 3)
        # 1 nm legs at 2 kts
        assert [s.elapsed_hours for s in path.steps] == [0.5, 0.5, 0.5]
        assert path.steps[0].start_time == 1.0
        for prev, cur in zip(path.steps, path.steps[1:]):
            assert cur.start_time == prev.end_time
        assert path.total_hours == pytest.approx(1.5)
        assert path.end_time == pytest.approx(2.5)
        assert path.total_distance_nm == pytest.approx(3.0)

    def test_each_leg_estimated_at_its_departure_time(self, four_node_graph, make_estimate):
        calls = []

        def estimator(leg, time):
            calls.append((leg.from_buoy, leg.to_buoy, time))
            return make_estimate(4.0)

        PathExplorer(four_node_graph, estimator).explore("A", 2.0, 2)
        assert ("A", "B", 2.0) in calls
        assert ("B", "C", 2.25) in calls

    def test_zero_speed_prunes_branch(self, four_node_graph, make_estimate):
        def estimator(leg, time):
            return make_estimate(0.0 if leg.to_buoy == "C" else 3.0)

        paths = PathExplorer(four_node_graph, estimator).explore("A", 0.0, 3)
        assert paths
        assert all("C" not in p.buoys for p in paths)
        # Only A, B, D remain reachable: 2 + 2 paths
        assert len(paths) == 4

    def test_nan_speed_prunes_branch(self, four_node_graph, make_estimate):
        explorer = PathExplorer(four_node_graph, lambda leg, time: make_estimate(float("nan")))
        assert explorer.explore("A", 0.0, 2) == []

    def test_zero_distance_leg_takes_no_time(self, make_estimate):
        buoys = [Buoy("A", Coordinate(0.0, 0.0)), Buoy("A2", Coordinate(0.0, 0.0))]
        graph = CourseGraph(buoys, [Leg("A", "A2", 0.0)])
        explorer = PathExplorer(graph, lambda leg, time: make_estimate(0.0))

        paths = explorer.explore("A", 3.0, 1)
        assert len(paths) == 1
        assert paths[0].steps[0].elapsed_hours == 0.0
        assert paths[0].end_time == 3.0

    def test_leg_max_number_does_not_allow_repeats(self, buoy_a, buoy_b, constant_estimator):
        legs = [Leg("A", "B", 4.0, max_number=3), Leg("B", "A", 4.0, max_number=3)]
        explorer = PathExplorer(CourseGraph([buoy_a, buoy_b], legs), constant_estimator(2.0))

        assert _buoy_sequences(explorer.explore("A", 0.0, 4)) == [("A", "B")]


# ---------------------------------------------------------------------------
# find_target
# ---------------------------------------------------------------------------
class TestFindTarget:

    def test_paths_end_at_target(self, explorer):
        paths = explorer.find_target("A", "D", 0.0, 2)
        assert set(_buoy_sequences(paths)) == {("A", "D"), ("A", "B", "D"), ("A", "C", "D")}

    def test_three_steps(self, explorer):
        paths = explorer.find_target("A", "D", 0.0, 3)
        assert len(paths) == 5
        assert all(p.end == "D" for p in paths)

    def test_branch_stops_at_target(self, explorer):
        for path in explorer.find_target("A", "D", 0.0, 3):
            assert "D" not in path.buoys[:-1]

    def test_target_is_start(self, explorer):
        paths = explorer.find_target("A", "A", 5.0, 3)
        assert len(paths) == 1
        assert len(paths[0]) == 0
        assert paths[0].end == "A"
        assert paths[0].buoys == ["A"]
        assert paths[0].total_hours == 0.0
        assert paths[0].end_time == 5.0

    def test_zero_steps_is_empty(self, explorer):
        assert explorer.find_target("A", "D", 0.0, 0) == []
        assert explorer.find_target("A", "A", 0.0, 0) == []

    def test_unreachable_target(self, buoy_a, buoy_b, constant_estimator):
        graph = CourseGraph([buoy_a, buoy_b], [Leg("B", "A", 1.0)])
        explorer = PathExplorer(graph, constant_estimator(5.0))
        assert explorer.find_target("A", "B", 0.0, 5) == []

    @pytest.mark.parametrize("start,target", [("Z", "A"), ("A", "Z")])
    def test_unknown_buoys(self, explorer, start, target):
        with pytest.raises(NotFoundError):
            explorer.find_target(start, target, 0.0, 2)

    def test_max_paths(self, explorer):
        assert len(explorer.find_target("A", "D", 0.0, 3, max_paths=2)) == 2


class TestPathHelpers:

    def test_empty_path(self):
        path = Path(start="A", start_time=1.0)
        assert path.end == "A"
        assert len(path) == 0
        assert path.total_distance_nm == 0.0
        assert path.to_dict()["steps"] == []

    def test_to_dict(self, explorer):
        path = explorer.find_target("A", "D", 0.0, 1)[0]
        data = path.to_dict()
        assert data["buoys"] == ["A", "D"]
        assert data["steps"][0]["from"] == "A"
        assert data["steps"][0]["to"] == "D"
        assert data["steps"][0]["sailing_mode"] == "beam_reach"
        assert data["total_hours"] == pytest.approx(0.5)

    def test_rank_paths_fastest_first(self, four_node_graph, make_estimate):
        def estimator(leg, time):
            return make_estimate(1.0 if leg.from_buoy == "A" and leg.to_buoy == "D" else 4.0)

        paths = PathExplorer(four_node_graph, estimator).find_target("A", "D", 0.0, 2)
        ranked = rank_paths(paths)
        assert [p.total_hours for p in ranked] == sorted(p.total_hours for p in paths)
        assert ranked[-1].buoys == ["A", "D"]
