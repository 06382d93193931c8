"""Data models for CPM task-dependency scheduling."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Tuple, Union

TaskId = Union[str, int]


class DependencyType(Enum):
    """Precedence relationship between a predecessor and a successor."""

    FS = "FS"  # Finish-to-Start
    SS = "SS"  # Start-to-Start
    FF = "FF"  # Finish-to-Finish
    SF = "SF"  # Start-to-Finish

    @classmethod
    def parse(cls, value: Any) -> "DependencyType":
        """Parse a dependency code.

        Args:
            value: A DependencyType, a code string such as "fs", or None

        Returns:
            The matching DependencyType (FS when value is None)
        """
        if isinstance(value, cls):
            return value
        if value is None:
            return cls.FS
        if isinstance(value, str):
            code = value.strip().upper()
            if code in cls.__members__:
                return cls[code]
        raise ValueError(f"Unknown dependency type: {value!r}")


@dataclass(frozen=True)
class DependencyEdge:
    """A typed precedence constraint pointing at a predecessor task."""

    predecessor_id: TaskId
    type: DependencyType = DependencyType.FS
    lag: int = 0  # positive = delay, negative = lead

    def __str__(self) -> str:
        lag_str = f"+{self.lag}" if self.lag >= 0 else str(self.lag)
        return f"{self.predecessor_id}:{self.type.value}:{lag_str}"


@dataclass(frozen=True)
class Task:
    """A unit of schedulable work."""

    task_id: TaskId
    duration: int  # days; zero models a milestone
    predecessors: Tuple[DependencyEdge, ...] = field(default_factory=tuple)
    name: Optional[str] = None
    project_id: Optional[str] = None

    def __post_init__(self):
        if not isinstance(self.predecessors, tuple):
            object.__setattr__(self, "predecessors", tuple(self.predecessors))

    @property
    def label(self) -> str:
        """Name for display, falling back to the id."""
        return self.name or str(self.task_id)


@dataclass(frozen=True)
class TaskSchedule:
    """Computed CPM dates for one task, as offsets from project day 0."""

    task_id: TaskId
    duration: int
    early_start: int
    early_finish: int
    late_start: int
    late_finish: int
    total_float: int
    free_float: int
    is_critical: bool
    is_near_critical: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.task_id,
            "duration": self.duration,
            "early_start": self.early_start,
            "early_finish": self.early_finish,
            "late_start": self.late_start,
            "late_finish": self.late_finish,
            "total_float": self.total_float,
            "free_float": self.free_float,
            "is_critical": self.is_critical,
            "is_near_critical": self.is_near_critical,
        }


@dataclass(frozen=True)
class ScheduleSnapshot:
    """Immutable result of one schedule computation.

    Tasks keep the order in which they were supplied. The critical path is
    exposed as a set of ids (``critical_task_ids``, in input order) because a
    network may contain several parallel critical chains.
    """

    tasks: Tuple[TaskSchedule, ...]
    project_duration: int
    critical_task_ids: Tuple[TaskId, ...]
    near_critical_task_ids: Tuple[TaskId, ...] = ()
    near_critical_threshold: int = 0
    ignored_references: Tuple[Tuple[TaskId, TaskId], ...] = ()
    _index: Dict[TaskId, TaskSchedule] = field(
        init=False, repr=False, compare=False, default_factory=dict
    )

    def __post_init__(self):
        object.__setattr__(self, "_index", {t.task_id: t for t in self.tasks})

    @property
    def critical_path_duration(self) -> int:
        """Length of the critical path; equals the project duration."""
        return self.project_duration if self.tasks else 0

    @property
    def task_ids(self) -> Tuple[TaskId, ...]:
        return tuple(t.task_id for t in self.tasks)

    def get(self, task_id: TaskId) -> Optional[TaskSchedule]:
        """Get the schedule entry for a task, or None if absent."""
        return self._index.get(task_id)

    def __getitem__(self, task_id: TaskId) -> TaskSchedule:
        entry = self.get(task_id)
        if entry is None:
            raise KeyError(task_id)
        return entry

    def __contains__(self, task_id: object) -> bool:
        return task_id in self._index

    def __len__(self) -> int:
        return len(self.tasks)

    def is_critical(self, task_id: TaskId) -> bool:
        return task_id in self.critical_task_ids

    def to_dict(self) -> Dict[str, Any]:
        """Serializable form of the snapshot."""
        return {
            "project_duration": self.project_duration,
            "critical_path_duration": self.critical_path_duration,
            "critical_task_ids": list(self.critical_task_ids),
            "near_critical_task_ids": list(self.near_critical_task_ids),
            "near_critical_threshold": self.near_critical_threshold,
            "tasks": [entry.to_dict() for entry in self.tasks],
        }
