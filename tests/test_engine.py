"""Tests for the CPM schedule engine."""

import dataclasses

import pytest

from sitesched.cpm import (
    CycleDetected,
    DuplicateTaskId,
    EngineConfig,
    InvalidDuration,
    ScheduleEngine,
    Task,
    TaskNetwork,
    UnknownPredecessorReference,
    compute_schedule,
    verify_schedule,
)


def dates(snapshot, task_id):
    entry = snapshot[task_id]
    return entry.early_start, entry.early_finish, entry.late_start, entry.late_finish


class TestScenarios:
    """Reference schedules for small networks."""

    def test_single_task(self, engine):
        snapshot = engine.compute([Task("A", 5)]).unwrap()

        assert dates(snapshot, "A") == (0, 5, 0, 5)
        assert snapshot["A"].total_float == 0
        assert snapshot["A"].is_critical
        assert snapshot.project_duration == 5
        assert snapshot.critical_path_duration == 5

    def test_finish_to_start_chain(self, engine, edge):
        tasks = [Task("A", 3), Task("B", 4, [edge("A")])]
        snapshot = engine.compute(tasks).unwrap()

        assert dates(snapshot, "A") == (0, 3, 0, 3)
        assert dates(snapshot, "B") == (3, 7, 3, 7)
        assert snapshot.critical_task_ids == ("A", "B")
        assert snapshot.project_duration == 7

    def test_finish_to_start_with_lag(self, engine, edge):
        tasks = [Task("A", 3), Task("B", 4, [edge("A", "FS", 2)])]
        snapshot = engine.compute(tasks).unwrap()

        assert snapshot["B"].early_start == 5
        assert snapshot["B"].early_finish == 9
        assert snapshot.project_duration == 9
        assert snapshot["A"].is_critical

    def test_shorter_branch_has_float(self, engine, parallel_branches):
        snapshot = engine.compute(parallel_branches).unwrap()

        assert snapshot["C"].early_start == 4
        assert snapshot["A"].late_start == 1
        assert snapshot["A"].total_float == 1
        assert not snapshot["A"].is_critical
        assert snapshot["B"].is_critical
        assert snapshot["C"].is_critical
        assert snapshot.critical_task_ids == ("B", "C")

    def test_cycle_is_rejected(self, engine, edge, is_dependency_loop):
        tasks = [
            Task("A", 1, [edge("C")]),
            Task("B", 1, [edge("A")]),
            Task("C", 1, [edge("B")]),
        ]
        result = engine.compute(tasks)

        assert not result.ok
        assert result.snapshot is None
        assert isinstance(result.error, CycleDetected)
        assert result.error.cycle in (["A", "B", "C"], ["B", "C", "A"], ["C", "A", "B"])
        assert is_dependency_loop(TaskNetwork(tasks), result.error.cycle)

    def test_negative_duration_is_rejected(self, engine):
        result = engine.compute([Task("A", 2), Task("B", -1)])

        assert isinstance(result.error, InvalidDuration)
        assert result.error.task_id == "B"
        assert result.error.duration == -1


class TestDependencyTypes:
    """Forward and backward arithmetic for each relationship type."""

    def test_start_to_start(self, engine, edge):
        snapshot = engine.compute([Task("A", 5), Task("B", 3, [edge("A", "SS", 2)])]).unwrap()

        assert dates(snapshot, "B") == (2, 5, 2, 5)
        assert dates(snapshot, "A") == (0, 5, 0, 5)

    def test_finish_to_finish(self, engine, edge):
        snapshot = engine.compute([Task("A", 5), Task("B", 2, [edge("A", "FF", 1)])]).unwrap()

        assert dates(snapshot, "B") == (4, 6, 4, 6)
        assert dates(snapshot, "A") == (0, 5, 0, 5)
        assert snapshot.project_duration == 6

    def test_start_to_finish(self, engine, edge):
        snapshot = engine.compute([Task("A", 4), Task("B", 2, [edge("A", "SF", 3)])]).unwrap()

        assert dates(snapshot, "B") == (1, 3, 2, 4)
        assert snapshot["B"].total_float == 1
        assert snapshot["B"].is_near_critical
        assert snapshot["A"].is_critical

    def test_lead_overlaps_tasks(self, engine, edge):
        snapshot = engine.compute([Task("A", 5), Task("B", 4, [edge("A", "FS", -2)])]).unwrap()

        assert dates(snapshot, "B") == (3, 7, 3, 7)
        assert snapshot["A"].late_finish == 5

    def test_large_lead_is_floored_at_zero(self, engine, edge):
        snapshot = engine.compute([Task("A", 3), Task("B", 2, [edge("A", "FS", -5)])]).unwrap()

        assert snapshot["B"].early_start == 0
        assert snapshot["B"].total_float == 1
        assert snapshot["A"].is_critical

    def test_long_start_to_start_predecessor_stays_critical(self, engine, edge):
        snapshot = engine.compute([Task("A", 10), Task("B", 2, [edge("A", "SS")])]).unwrap()

        assert snapshot.project_duration == 10
        assert dates(snapshot, "A") == (0, 10, 0, 10)
        assert snapshot["B"].total_float == 8
        assert snapshot.critical_task_ids == ("A",)

    def test_parallel_edges_between_same_pair(self, engine, edge):
        tasks = [Task("A", 4), Task("B", 2, [edge("A", "SS", 1), edge("A", "FF", 3)])]
        snapshot = engine.compute(tasks).unwrap()

        assert dates(snapshot, "B") == (5, 7, 5, 7)
        assert dates(snapshot, "A") == (0, 4, 0, 4)

    def test_milestone(self, engine, edge):
        tasks = [Task("A", 3), Task("done", 0, [edge("A")])]
        snapshot = engine.compute(tasks).unwrap()

        assert dates(snapshot, "done") == (3, 3, 3, 3)
        assert snapshot["done"].is_critical


class TestFloat:
    def test_free_float_of_non_critical_branch(self, engine, diamond):
        snapshot = engine.compute(diamond).unwrap()

        assert snapshot["C"].total_float == 4
        assert snapshot["C"].free_float == 4
        assert snapshot["A"].free_float == 0

    def test_free_float_below_total_float(self, engine, edge):
        tasks = [
            Task("P", 1),
            Task("Q", 1, [edge("P")]),
            Task("R", 1, [edge("Q")]),
            Task("S", 10),
        ]
        snapshot = engine.compute(tasks).unwrap()

        assert snapshot["P"].total_float == 7
        assert snapshot["P"].free_float == 0
        assert snapshot["R"].free_float == 7

    def test_near_critical_threshold_is_configurable(self, parallel_branches):
        default = compute_schedule(parallel_branches).unwrap()
        strict = compute_schedule(parallel_branches, EngineConfig(near_critical_threshold=0)).unwrap()

        assert default.near_critical_task_ids == ("A",)
        assert strict.near_critical_task_ids == ()
        assert not strict["A"].is_near_critical


class TestReferencesAndValidation:
    def test_unknown_predecessor_is_ignored_by_default(self, engine, edge):
        snapshot = engine.compute([Task("A", 2), Task("B", 3, [edge("X")])]).unwrap()

        assert snapshot["B"].early_start == 0
        assert snapshot.ignored_references == (("B", "X"),)

    def test_unknown_predecessor_rejected_in_strict_mode(self, edge):
        engine = ScheduleEngine(EngineConfig(strict_references=True))
        result = engine.compute([Task("A", 2), Task("B", 3, [edge("X")])])

        assert isinstance(result.error, UnknownPredecessorReference)
        assert result.error.predecessor_id == "X"

    def test_duplicate_ids_rejected(self, engine):
        result = engine.compute([Task("A", 2), Task("A", 3)])

        assert isinstance(result.error, DuplicateTaskId)

    def test_unwrap_raises_stored_error(self, engine):
        result = engine.compute([Task("A", -3)])

        with pytest.raises(InvalidDuration):
            result.unwrap()

    def test_empty_network(self, engine):
        snapshot = engine.compute([]).unwrap()

        assert snapshot.project_duration == 0
        assert snapshot.critical_path_duration == 0
        assert snapshot.critical_task_ids == ()

    def test_accepts_prebuilt_network(self, engine, diamond):
        network = TaskNetwork(diamond)

        assert engine.compute(network).unwrap().project_duration == 8

    def test_caller_tasks_are_not_modified(self, engine, diamond):
        before = list(diamond)
        engine.compute(diamond)

        assert diamond == before


class TestProperties:
    """Invariants checked over seeded random networks."""

    @pytest.mark.parametrize("seed", range(8))
    def test_schedule_invariants(self, engine, random_network, seed):
        tasks = random_network(seed)
        network = TaskNetwork(tasks)
        snapshot = engine.compute(network).unwrap()

        for entry in snapshot.tasks:
            assert entry.early_finish == entry.early_start + entry.duration
            assert entry.late_finish == entry.late_start + entry.duration
            assert entry.total_float >= 0
            assert 0 <= entry.free_float <= entry.total_float

        assert snapshot.critical_task_ids
        assert snapshot.project_duration == max(e.early_finish for e in snapshot.tasks)
        assert snapshot.project_duration == max(snapshot[t].late_finish for t in network.sinks())
        assert verify_schedule(network, snapshot) == []

    @pytest.mark.parametrize("seed", range(4))
    def test_deterministic(self, engine, random_network, seed):
        tasks = random_network(seed)

        assert engine.compute(tasks).unwrap() == engine.compute(tasks).unwrap()

    @pytest.mark.parametrize("seed", range(6))
    def test_lag_increase_never_pulls_dates_earlier(self, engine, random_network, seed):
        tasks = random_network(seed)
        target = next(i for i, task in enumerate(tasks) if task.predecessors)
        task = tasks[target]
        bumped_edge = dataclasses.replace(task.predecessors[0], lag=task.predecessors[0].lag + 3)
        bumped = list(tasks)
        bumped[target] = dataclasses.replace(task, predecessors=(bumped_edge,) + task.predecessors[1:])

        before = engine.compute(tasks).unwrap()
        after = engine.compute(bumped).unwrap()

        assert after.project_duration >= before.project_duration
        for entry in before.tasks:
            assert after[entry.task_id].early_start >= entry.early_start


class TestComputeByProject:
    def test_groups_by_project(self, engine, edge):
        tasks = [
            Task("A", 3, project_id="p1"),
            Task("B", 2, [edge("A")], project_id="p1"),
            Task("C", 5, [edge("A")], project_id="p2"),
            Task("D", 1),
        ]
        results = engine.compute_by_project(tasks)

        assert list(results) == ["p1", "p2", "unassigned"]
        assert results["p1"].unwrap().project_duration == 5
        assert results["p2"].unwrap()["C"].early_start == 0
        assert results["p2"].unwrap().ignored_references == (("C", "A"),)
        assert results["unassigned"].unwrap().project_duration == 1

    def test_error_is_isolated_to_its_project(self, engine, edge):
        tasks = [
            Task("A", 1, [edge("B")], project_id="p1"),
            Task("B", 1, [edge("A")], project_id="p1"),
            Task("C", 4, project_id="p2"),
        ]
        results = engine.compute_by_project(tasks)

        assert isinstance(results["p1"].error, CycleDetected)
        assert results["p2"].ok
