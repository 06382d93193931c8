"""Structured errors raised while validating or scheduling a task network."""

from typing import Any, Dict, List


class ScheduleError(Exception):
    """Base class for errors that prevent a schedule from being produced."""

    code = "schedule_error"

    def to_dict(self) -> Dict[str, Any]:
        return {"code": self.code, "message": str(self)}


class CycleDetected(ScheduleError):
    """The dependency graph contains a loop."""

    code = "cycle_detected"

    def __init__(self, cycle: List[Any]):
        self.cycle = list(cycle)
        path = " -> ".join(str(task_id) for task_id in self.cycle + self.cycle[:1])
        super().__init__(f"Circular dependency detected: {path}")

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["cycle"] = list(self.cycle)
        return data


class UnknownPredecessorReference(ScheduleError):
    """A predecessor id does not name a task in the network."""

    code = "unknown_predecessor_reference"

    def __init__(self, task_id: Any, predecessor_id: Any):
        self.task_id = task_id
        self.predecessor_id = predecessor_id
        super().__init__(
            f"Task {task_id} references undefined predecessor {predecessor_id}"
        )

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data.update(task_id=self.task_id, predecessor_id=self.predecessor_id)
        return data


class InvalidDuration(ScheduleError):
    """A task duration is negative or not an integer."""

    code = "invalid_duration"

    def __init__(self, task_id: Any, duration: Any):
        self.task_id = task_id
        self.duration = duration
        super().__init__(
            f"Task {task_id} has invalid duration {duration!r}; "
            "expected a non-negative integer"
        )

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data.update(task_id=self.task_id, duration=self.duration)
        return data


class InvalidDependency(ScheduleError):
    """A dependency has an unknown type code or a non-integer lag."""

    code = "invalid_dependency"

    def __init__(self, task_id: Any, detail: str):
        self.task_id = task_id
        self.detail = detail
        super().__init__(f"Task {task_id} has an invalid dependency: {detail}")

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data.update(task_id=self.task_id, detail=self.detail)
        return data


class DuplicateTaskId(ScheduleError):
    """Two tasks share the same id."""

    code = "duplicate_task_id"

    def __init__(self, task_id: Any):
        self.task_id = task_id
        super().__init__(f"Task id {task_id} appears more than once")

    def to_dict(self) -> Dict[str, Any]:
        data = super().to_dict()
        data["task_id"] = self.task_id
        return data
