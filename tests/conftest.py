"""Pytest configuration and fixtures."""
import random
from typing import Callable, List

import pytest

from sitesched.cpm import (
    DependencyEdge,
    DependencyType,
    EngineConfig,
    ScheduleEngine,
    Task,
    TaskNetwork,
)


@pytest.fixture
def edge() -> Callable[..., DependencyEdge]:
    """Build a DependencyEdge from a predecessor id, type code and lag."""

    def _edge(predecessor_id, dep_type="FS", lag=0):
        return DependencyEdge(predecessor_id, DependencyType.parse(dep_type), lag)

    return _edge


@pytest.fixture
def is_dependency_loop() -> Callable[[TaskNetwork, List], bool]:
    """Check that ids form one loop in dependency order, last wrapping to first."""

    def _check(network: TaskNetwork, cycle: List) -> bool:
        if not cycle or len(set(cycle)) != len(cycle):
            return False
        return all(
            network.graph.has_edge(task_id, cycle[(index + 1) % len(cycle)])
            for index, task_id in enumerate(cycle)
        )

    return _check


@pytest.fixture
def engine() -> ScheduleEngine:
    """Engine with default settings (near-critical threshold of 2 days)."""
    return ScheduleEngine(EngineConfig())


@pytest.fixture
def parallel_branches(edge) -> List[Task]:
    """A(3) and B(4) both feeding C(2) finish-to-start."""
    return [
        Task("A", 3),
        Task("B", 4),
        Task("C", 2, [edge("A"), edge("B")]),
    ]


@pytest.fixture
def diamond(edge) -> List[Task]:
    """A(2) -> B(5), C(1) -> D(1)."""
    return [
        Task("A", 2),
        Task("B", 5, [edge("A")]),
        Task("C", 1, [edge("A")]),
        Task("D", 1, [edge("B"), edge("C")]),
    ]


@pytest.fixture
def random_network() -> Callable[[int, int], List[Task]]:
    """Acyclic network with mixed dependency types and lags, seeded."""

    def _build(seed: int, size: int = 25) -> List[Task]:
        rng = random.Random(seed)
        types = list(DependencyType)
        tasks = []
        for index in range(size):
            predecessors = []
            if index:
                for pred_index in rng.sample(range(index), k=min(index, rng.randint(0, 3))):
                    predecessors.append(
                        DependencyEdge(
                            f"T{pred_index}",
                            rng.choice(types),
                            rng.randint(-3, 4),
                        )
                    )
            tasks.append(Task(f"T{index}", rng.randint(0, 8), predecessors))
        return tasks

    return _build
