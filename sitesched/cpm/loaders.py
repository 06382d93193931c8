"""JSON parsers for task networks."""

import json
from typing import Any, Dict, List, Tuple, Union

from .errors import InvalidDependency, InvalidDuration
from .models import DependencyEdge, DependencyType, Task, TaskId


def _as_int(value: Any):
    """Integer value of ``value``, or None if it is not a whole number."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return None


def parse_dependency(task_id: TaskId, entry: Dict[str, Any]) -> DependencyEdge:
    """Parse one ``{predecessor_id, type, lag}`` entry.

    ``lag_days`` is accepted for ``lag``; a missing type means FS.
    """
    if not isinstance(entry, dict) or "predecessor_id" not in entry:
        raise InvalidDependency(task_id, f"expected an object with predecessor_id, got {entry!r}")

    try:
        dep_type = DependencyType.parse(entry.get("type"))
    except ValueError as e:
        raise InvalidDependency(task_id, str(e))

    raw_lag = entry.get("lag", entry.get("lag_days", 0))
    lag = _as_int(0 if raw_lag is None else raw_lag)
    if lag is None:
        raise InvalidDependency(
            task_id, f"lag {raw_lag!r} from {entry['predecessor_id']} is not an integer"
        )

    return DependencyEdge(predecessor_id=entry["predecessor_id"], type=dep_type, lag=lag)


def parse_task(entry: Dict[str, Any]) -> Task:
    """Parse one task object.

    Typed dependencies come from ``predecessors`` (or ``predecessor_configs``).
    When neither is given, legacy ``predecessor_ids`` become FS edges with
    no lag.
    """
    if not isinstance(entry, dict) or "id" not in entry:
        raise ValueError(f"Task entry must be an object with an 'id': {entry!r}")
    task_id = entry["id"]

    raw_duration = entry.get("duration", entry.get("duration_days"))
    duration = _as_int(raw_duration)
    if duration is None:
        raise InvalidDuration(task_id, raw_duration)

    configs = entry.get("predecessors") or entry.get("predecessor_configs") or []
    if configs:
        predecessors = [parse_dependency(task_id, config) for config in configs]
    else:
        predecessors = [
            DependencyEdge(predecessor_id=pred_id)
            for pred_id in entry.get("predecessor_ids") or []
        ]

    return Task(
        task_id=task_id,
        duration=duration,
        predecessors=tuple(predecessors),
        name=entry.get("name"),
        project_id=entry.get("project_id"),
    )


def parse_network(data: Union[List[Any], Dict[str, Any]]) -> List[Task]:
    """Parse tasks from a list or from a ``{"tasks": [...]}`` document."""
    if isinstance(data, dict):
        data = data.get("tasks", [])
    if not isinstance(data, list):
        raise ValueError("Task network must be a list of tasks")
    return [parse_task(entry) for entry in data]


def load_network(filepath: str) -> Tuple[List[Task], Dict[str, Any]]:
    """Load a task network from a JSON file.

    Args:
        filepath: Path to the network JSON

    Returns:
        Tuple of (tasks list, metadata dict)
    """
    with open(filepath, "r") as f:
        data = json.load(f)

    metadata = data.get("metadata", {}) if isinstance(data, dict) else {}
    return parse_network(data), metadata
