"""Schedule analysis on top of a computed snapshot."""

import dataclasses
import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple, Union

from .config import EngineConfig
from .critical import relationship_slack
from .cycles import topological_order
from .engine import ScheduleEngine
from .forward import DateWindow
from .models import ScheduleSnapshot, Task, TaskId
from .network import TaskNetwork

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Bottleneck:
    """A task whose delay cascades into many dependents."""

    task_id: TaskId
    successor_count: int
    is_critical: bool
    risk_level: str  # HIGH, MEDIUM, LOW
    reason: str


@dataclass(frozen=True)
class CompressionRisk:
    """A very short task sitting on the critical path."""

    task_id: TaskId
    name: str
    duration: int
    risk: str = "Very short duration on critical path"


@dataclass(frozen=True)
class DelayImpact:
    """Effect of extending one task's duration."""

    task_id: TaskId
    delay: int
    original: ScheduleSnapshot
    simulated: ScheduleSnapshot
    shifted_task_ids: Tuple[TaskId, ...]

    @property
    def original_duration(self) -> int:
        return self.original.project_duration

    @property
    def simulated_duration(self) -> int:
        return self.simulated.project_duration

    @property
    def duration_delta(self) -> int:
        return self.simulated_duration - self.original_duration


def find_bottlenecks(
    network: TaskNetwork,
    snapshot: ScheduleSnapshot,
    min_successors: int = 3,
    min_critical_successors: int = 2,
) -> List[Bottleneck]:
    """Flag tasks with many dependents.

    A task is a bottleneck with ``min_successors`` or more successors, or
    when it is critical with ``min_critical_successors`` or more. Five or
    more successors is HIGH risk, three or more MEDIUM, otherwise LOW.
    """
    bottlenecks = []
    for task in network:
        successor_count = len({succ_id for succ_id, _ in network.successors_of(task.task_id)})
        is_critical = snapshot.is_critical(task.task_id)
        if successor_count < min_successors and not (
            is_critical and successor_count >= min_critical_successors
        ):
            continue

        if successor_count >= 5:
            risk_level = "HIGH"
        elif successor_count >= 3:
            risk_level = "MEDIUM"
        else:
            risk_level = "LOW"

        if is_critical:
            reason = (
                f"Critical path task with {successor_count} dependent tasks - "
                "any delay cascades to project completion"
            )
        else:
            reason = f"High-dependency task - delays impact {successor_count} downstream tasks"

        bottlenecks.append(
            Bottleneck(
                task_id=task.task_id,
                successor_count=successor_count,
                is_critical=is_critical,
                risk_level=risk_level,
                reason=reason,
            )
        )
    return bottlenecks


def compression_risks(
    network: TaskNetwork,
    snapshot: ScheduleSnapshot,
    min_duration: int = 2,
) -> List[CompressionRisk]:
    """Critical tasks shorter than ``min_duration``.

    Milestones (zero duration) are not work and are skipped.
    """
    risks = []
    for task_id in snapshot.critical_task_ids:
        task = network.get_task(task_id)
        if 0 < task.duration < min_duration:
            risks.append(CompressionRisk(task_id=task_id, name=task.label, duration=task.duration))
    return risks


def dependency_levels(network: TaskNetwork) -> List[List[TaskId]]:
    """Group tasks by the length of their longest predecessor chain.

    Level 0 holds tasks without predecessors. Within a level tasks keep
    their input order.

    Raises:
        CycleDetected: The network contains a loop
    """
    level: Dict[TaskId, int] = {}
    for task_id in topological_order(network):
        predecessor_levels = [level[edge.predecessor_id] for edge in network.predecessors_of(task_id)]
        level[task_id] = 1 + max(predecessor_levels) if predecessor_levels else 0

    levels: List[List[TaskId]] = [[] for _ in range(max(level.values(), default=-1) + 1)]
    for task_id in network.task_ids:
        levels[level[task_id]].append(task_id)
    return levels


def simulate_delay(
    tasks: Union[TaskNetwork, Iterable[Task]],
    task_id: TaskId,
    delay: int,
    config: Optional[EngineConfig] = None,
) -> DelayImpact:
    """Recompute the schedule with one task running ``delay`` days longer.

    Both schedules are computed from scratch; the caller's tasks are not
    modified.

    Args:
        tasks: The current tasks (or a network built from them)
        task_id: Task to delay
        delay: Extra days added to its duration
        config: Engine settings

    Returns:
        DelayImpact comparing the two schedules

    Raises:
        KeyError: task_id names no task
        ScheduleError: Either schedule cannot be computed
    """
    engine = ScheduleEngine(config)
    task_list = list(tasks.tasks if isinstance(tasks, TaskNetwork) else tasks)
    if not any(task.task_id == task_id for task in task_list):
        raise KeyError(task_id)

    delayed = [
        dataclasses.replace(task, duration=task.duration + delay) if task.task_id == task_id else task
        for task in task_list
    ]

    original = engine.schedule(task_list)
    simulated = engine.schedule(delayed)

    shifted = tuple(
        entry.task_id
        for entry in simulated.tasks
        if (entry.early_start, entry.early_finish)
        != (original[entry.task_id].early_start, original[entry.task_id].early_finish)
    )
    logger.info(
        "Delaying %s by %d moves project end from %d to %d",
        task_id,
        delay,
        original.project_duration,
        simulated.project_duration,
    )
    return DelayImpact(
        task_id=task_id,
        delay=delay,
        original=original,
        simulated=simulated,
        shifted_task_ids=shifted,
    )


def verify_schedule(network: TaskNetwork, snapshot: ScheduleSnapshot) -> List[str]:
    """Check a snapshot against the network it was computed from.

    Returns:
        List of violation messages (empty if all good)
    """
    violations = []

    for entry in snapshot.tasks:
        if entry.early_finish != entry.early_start + entry.duration:
            violations.append(f"Task {entry.task_id} early finish does not match its duration")
        if entry.late_finish != entry.late_start + entry.duration:
            violations.append(f"Task {entry.task_id} late finish does not match its duration")
        if entry.total_float < 0:
            violations.append(f"Task {entry.task_id} has negative float {entry.total_float}")
        if entry.late_finish > snapshot.project_duration:
            violations.append(f"Task {entry.task_id} finishes after the project end")

    for predecessor_id, successor_id, edge in network.edges():
        pred = snapshot[predecessor_id]
        succ = snapshot[successor_id]
        early_slack = relationship_slack(
            edge,
            DateWindow(pred.early_start, pred.early_finish),
            DateWindow(succ.early_start, succ.early_finish),
        )
        late_slack = relationship_slack(
            edge,
            DateWindow(pred.late_start, pred.late_finish),
            DateWindow(succ.late_start, succ.late_finish),
        )
        if early_slack < 0:
            violations.append(
                f"Early dates violate {predecessor_id} -> {successor_id} ({edge.type.value}, lag {edge.lag})"
            )
        if late_slack < 0:
            violations.append(
                f"Late dates violate {predecessor_id} -> {successor_id} ({edge.type.value}, lag {edge.lag})"
            )

    return violations
