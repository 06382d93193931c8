"""Backward pass: latest start and finish for every task."""

import logging
from typing import Dict, List

from .forward import DateWindow
from .models import DependencyEdge, DependencyType, TaskId
from .network import TaskNetwork

logger = logging.getLogger(__name__)


def late_finish_candidate(edge: DependencyEdge, successor: DateWindow, duration: int) -> int:
    """Latest finish of a predecessor allowed by one outgoing edge.

    SS and SF bound the predecessor's late start; the bound is shifted by
    the predecessor's duration to express it as a finish.

    Args:
        edge: Edge from the predecessor to the successor
        successor: Late dates of the successor
        duration: Duration of the predecessor

    Returns:
        Upper bound on the predecessor's late finish
    """
    if edge.type is DependencyType.FS:
        return successor.start - edge.lag
    if edge.type is DependencyType.SS:
        return successor.start - edge.lag + duration
    if edge.type is DependencyType.FF:
        return successor.finish - edge.lag
    # SF
    return successor.finish - edge.lag + duration


def compute_late_dates(
    network: TaskNetwork,
    order: List[TaskId],
    project_duration: int,
) -> Dict[TaskId, DateWindow]:
    """Run the backward pass.

    Sinks finish at ``project_duration``. Every other task takes the
    tightest bound from its successors, and no task may finish later than
    the project itself.

    Args:
        network: Acyclic task network
        order: Task ids in topological order (walked in reverse)
        project_duration: Latest early finish from the forward pass

    Returns:
        Late dates keyed by task id
    """
    late: Dict[TaskId, DateWindow] = {}

    for task_id in reversed(order):
        task = network.get_task(task_id)
        late_finish = project_duration
        for successor_id, edge in network.successors_of(task_id):
            candidate = late_finish_candidate(edge, late[successor_id], task.duration)
            late_finish = min(late_finish, candidate)

        late[task_id] = DateWindow(late_finish - task.duration, late_finish)

    logger.debug("Backward pass complete for %d tasks", len(late))
    return late
