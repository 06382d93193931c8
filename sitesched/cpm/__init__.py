"""Critical Path Method scheduling for task dependency networks.

The engine is a pure computation: it borrows the caller's tasks read-only
and returns a fresh ScheduleSnapshot (or a structured error) on every call.
"""

from .models import DependencyType, DependencyEdge, Task, TaskSchedule, ScheduleSnapshot
from .errors import (
    ScheduleError,
    CycleDetected,
    UnknownPredecessorReference,
    InvalidDuration,
    InvalidDependency,
    DuplicateTaskId,
)
from .network import TaskNetwork
from .cycles import find_cycle, topological_order
from .critical import critical_chains, critical_edges
from .config import EngineConfig, load_config, get_default_config
from .engine import ScheduleEngine, ScheduleResult, compute_schedule
from .analysis import (
    find_bottlenecks,
    compression_risks,
    dependency_levels,
    simulate_delay,
    verify_schedule,
)
from .loaders import load_network, parse_network
from .report import ScheduleReport

__all__ = [
    "DependencyType",
    "DependencyEdge",
    "Task",
    "TaskSchedule",
    "ScheduleSnapshot",
    "ScheduleError",
    "CycleDetected",
    "UnknownPredecessorReference",
    "InvalidDuration",
    "InvalidDependency",
    "DuplicateTaskId",
    "TaskNetwork",
    "find_cycle",
    "topological_order",
    "critical_chains",
    "critical_edges",
    "EngineConfig",
    "load_config",
    "get_default_config",
    "ScheduleEngine",
    "ScheduleResult",
    "compute_schedule",
    "find_bottlenecks",
    "compression_risks",
    "dependency_levels",
    "simulate_delay",
    "verify_schedule",
    "load_network",
    "parse_network",
    "ScheduleReport",
]
