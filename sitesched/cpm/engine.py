"""Entry point for CPM schedule computation."""

import logging
from collections import OrderedDict
from dataclasses import dataclass
from typing import Dict, Iterable, Optional, Union

from .backward import compute_late_dates
from .config import EngineConfig
from .critical import build_snapshot
from .cycles import topological_order
from .errors import ScheduleError
from .forward import compute_early_dates, project_duration
from .models import ScheduleSnapshot, Task
from .network import TaskNetwork

logger = logging.getLogger(__name__)

UNASSIGNED_PROJECT = "unassigned"


@dataclass(frozen=True)
class ScheduleResult:
    """Outcome of one computation: a snapshot or the error that prevented it."""

    snapshot: Optional[ScheduleSnapshot] = None
    error: Optional[ScheduleError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> ScheduleSnapshot:
        """Return the snapshot, raising the stored error if there is none."""
        if self.error is not None:
            raise self.error
        return self.snapshot


class ScheduleEngine:
    """Computes CPM schedules.

    The engine holds only its configuration. Every call validates the
    input, runs the forward and backward passes, and extracts float and
    criticality into a fresh ScheduleSnapshot.
    """

    def __init__(self, config: Optional[EngineConfig] = None):
        """Initialize the engine.

        Args:
            config: Engine settings (defaults when omitted)
        """
        self.config = config or EngineConfig()

    def build_network(self, tasks: Union[TaskNetwork, Iterable[Task]]) -> TaskNetwork:
        """Validate tasks into a network using the configured reference policy."""
        if isinstance(tasks, TaskNetwork):
            return tasks
        return TaskNetwork(tasks, strict_references=self.config.strict_references)

    def schedule(self, tasks: Union[TaskNetwork, Iterable[Task]]) -> ScheduleSnapshot:
        """Compute the schedule, raising ScheduleError on invalid input.

        Args:
            tasks: A TaskNetwork or the tasks to build one from

        Returns:
            The computed ScheduleSnapshot
        """
        network = self.build_network(tasks)
        order = topological_order(network)

        early = compute_early_dates(network, order)
        duration = project_duration(early)
        late = compute_late_dates(network, order, duration)

        snapshot = build_snapshot(
            network, early, late, duration, self.config.near_critical_threshold
        )
        logger.info(
            "Scheduled %d tasks: project duration %d, %d critical",
            len(snapshot),
            snapshot.project_duration,
            len(snapshot.critical_task_ids),
        )
        return snapshot

    def compute(self, tasks: Union[TaskNetwork, Iterable[Task]]) -> ScheduleResult:
        """Compute the schedule, returning errors instead of raising them.

        Args:
            tasks: A TaskNetwork or the tasks to build one from

        Returns:
            ScheduleResult holding either the snapshot or the error
        """
        try:
            return ScheduleResult(snapshot=self.schedule(tasks))
        except ScheduleError as e:
            logger.warning("Schedule rejected: %s", e)
            return ScheduleResult(error=e)

    def compute_by_project(self, tasks: Iterable[Task]) -> Dict[str, ScheduleResult]:
        """Compute one schedule per project.

        Tasks are grouped by project_id (missing ids go to "unassigned").
        Dependencies that cross projects are unresolved references within
        each group and follow the configured reference policy.

        Returns:
            Results keyed by project id, in order of first appearance
        """
        groups: Dict[str, list] = OrderedDict()
        for task in tasks:
            project_id = task.project_id or UNASSIGNED_PROJECT
            groups.setdefault(project_id, []).append(task)

        results: Dict[str, ScheduleResult] = OrderedDict()
        for project_id, project_tasks in groups.items():
            logger.debug("Scheduling project %s (%d tasks)", project_id, len(project_tasks))
            results[project_id] = self.compute(project_tasks)
        return results


def compute_schedule(
    tasks: Union[TaskNetwork, Iterable[Task]],
    config: Optional[EngineConfig] = None,
) -> ScheduleResult:
    """Compute a CPM schedule with a one-off engine."""
    return ScheduleEngine(config).compute(tasks)
