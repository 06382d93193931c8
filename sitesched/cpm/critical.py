"""Float, criticality and critical-chain extraction."""

import logging
from typing import Dict, List, Tuple

from .forward import DateWindow
from .models import DependencyEdge, DependencyType, ScheduleSnapshot, TaskId, TaskSchedule
from .network import TaskNetwork

logger = logging.getLogger(__name__)


def relationship_slack(edge: DependencyEdge, predecessor: DateWindow, successor: DateWindow) -> int:
    """Time units by which an edge's constraint is over-satisfied.

    Zero means the edge is driving: the successor sits exactly on it.
    """
    if edge.type is DependencyType.FS:
        return successor.start - predecessor.finish - edge.lag
    if edge.type is DependencyType.SS:
        return successor.start - predecessor.start - edge.lag
    if edge.type is DependencyType.FF:
        return successor.finish - predecessor.finish - edge.lag
    return successor.finish - predecessor.start - edge.lag


def free_float(
    network: TaskNetwork,
    task_id: TaskId,
    early: Dict[TaskId, DateWindow],
    project_duration: int,
    total_float: int,
) -> int:
    """Delay a task absorbs without moving any immediate successor."""
    own = early[task_id]
    successors = network.successors_of(task_id)
    if successors:
        slack = min(
            relationship_slack(edge, own, early[successor_id])
            for successor_id, edge in successors
        )
    else:
        slack = project_duration - own.finish
    return max(0, min(slack, total_float))


def build_snapshot(
    network: TaskNetwork,
    early: Dict[TaskId, DateWindow],
    late: Dict[TaskId, DateWindow],
    project_duration: int,
    near_critical_threshold: int,
) -> ScheduleSnapshot:
    """Combine both passes into a schedule snapshot.

    Args:
        network: Scheduled task network
        early: Forward pass results
        late: Backward pass results
        project_duration: Latest early finish
        near_critical_threshold: Largest positive float still near-critical

    Returns:
        ScheduleSnapshot with tasks in input order
    """
    entries: List[TaskSchedule] = []
    critical: List[TaskId] = []
    near_critical: List[TaskId] = []

    for task in network:
        task_id = task.task_id
        total_float = late[task_id].start - early[task_id].start
        is_critical = total_float == 0
        is_near_critical = 0 < total_float <= near_critical_threshold

        entries.append(
            TaskSchedule(
                task_id=task_id,
                duration=task.duration,
                early_start=early[task_id].start,
                early_finish=early[task_id].finish,
                late_start=late[task_id].start,
                late_finish=late[task_id].finish,
                total_float=total_float,
                free_float=free_float(network, task_id, early, project_duration, total_float),
                is_critical=is_critical,
                is_near_critical=is_near_critical,
            )
        )
        if is_critical:
            critical.append(task_id)
        elif is_near_critical:
            near_critical.append(task_id)

    logger.debug("Critical tasks: %s", critical)

    return ScheduleSnapshot(
        tasks=tuple(entries),
        project_duration=project_duration,
        critical_task_ids=tuple(critical),
        near_critical_task_ids=tuple(near_critical),
        near_critical_threshold=near_critical_threshold,
        ignored_references=network.ignored_references,
    )


def critical_edges(network: TaskNetwork, snapshot: ScheduleSnapshot) -> List[Tuple[TaskId, TaskId]]:
    """Driving edges between two critical tasks.

    Returns:
        (predecessor_id, successor_id) pairs, without duplicates
    """
    pairs: List[Tuple[TaskId, TaskId]] = []
    seen = set()
    for predecessor_id, successor_id, edge in network.edges():
        if not (snapshot.is_critical(predecessor_id) and snapshot.is_critical(successor_id)):
            continue
        pred = snapshot[predecessor_id]
        succ = snapshot[successor_id]
        slack = relationship_slack(
            edge,
            DateWindow(pred.early_start, pred.early_finish),
            DateWindow(succ.early_start, succ.early_finish),
        )
        pair = (predecessor_id, successor_id)
        if slack == 0 and pair not in seen:
            seen.add(pair)
            pairs.append(pair)
    return pairs


def critical_chains(network: TaskNetwork, snapshot: ScheduleSnapshot) -> List[List[TaskId]]:
    """Split the critical subgraph into ordered id sequences.

    Chains break wherever critical work forks or joins, so every driving
    critical edge appears in exactly one chain and the result stays linear
    in the size of the network. A critical task with no driving critical
    edges forms a chain of its own.
    """
    following: Dict[TaskId, List[TaskId]] = {task_id: [] for task_id in snapshot.critical_task_ids}
    incoming: Dict[TaskId, int] = {task_id: 0 for task_id in snapshot.critical_task_ids}
    for predecessor_id, successor_id in critical_edges(network, snapshot):
        following[predecessor_id].append(successor_id)
        incoming[successor_id] += 1

    def is_junction(task_id: TaskId) -> bool:
        return incoming[task_id] != 1 or len(following[task_id]) != 1

    chains: List[List[TaskId]] = []
    for task_id in snapshot.critical_task_ids:
        if not is_junction(task_id):
            continue
        if not following[task_id] and not incoming[task_id]:
            chains.append([task_id])
        for successor_id in following[task_id]:
            chain = [task_id, successor_id]
            while not is_junction(chain[-1]):
                chain.append(following[chain[-1]][0])
            chains.append(chain)
    return chains
