"""Forward pass: earliest start and finish for every task."""

import logging
from typing import Dict, List, NamedTuple

from .models import DependencyEdge, DependencyType, TaskId
from .network import TaskNetwork

logger = logging.getLogger(__name__)


class DateWindow(NamedTuple):
    """Start/finish offsets of a task."""

    start: int
    finish: int


def early_start_candidate(edge: DependencyEdge, predecessor: DateWindow, duration: int) -> int:
    """Earliest start a single incoming edge allows.

    Args:
        edge: Edge from the predecessor to the task being scheduled
        predecessor: Early dates of the predecessor
        duration: Duration of the task being scheduled

    Returns:
        Lower bound on the task's early start
    """
    if edge.type is DependencyType.FS:
        return predecessor.finish + edge.lag
    if edge.type is DependencyType.SS:
        return predecessor.start + edge.lag
    if edge.type is DependencyType.FF:
        return predecessor.finish - duration + edge.lag
    # SF: successor finishes after predecessor starts
    return predecessor.start - duration + edge.lag


def compute_early_dates(network: TaskNetwork, order: List[TaskId]) -> Dict[TaskId, DateWindow]:
    """Run the forward pass.

    Args:
        network: Acyclic task network
        order: Task ids in topological order

    Returns:
        Early dates keyed by task id
    """
    early: Dict[TaskId, DateWindow] = {}

    for task_id in order:
        task = network.get_task(task_id)
        early_start = 0
        for edge in network.predecessors_of(task_id):
            candidate = early_start_candidate(edge, early[edge.predecessor_id], task.duration)
            early_start = max(early_start, candidate)

        early[task_id] = DateWindow(early_start, early_start + task.duration)

    logger.debug("Forward pass complete for %d tasks", len(early))
    return early


def project_duration(early: Dict[TaskId, DateWindow]) -> int:
    """Latest early finish across all tasks (0 for an empty network)."""
    return max((window.finish for window in early.values()), default=0)
