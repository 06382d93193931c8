"""Validated task network with indexed dependency lookup."""

import logging
from typing import Dict, Iterable, Iterator, List, Optional, Tuple

import networkx as nx

from .errors import (
    DuplicateTaskId,
    InvalidDependency,
    InvalidDuration,
    UnknownPredecessorReference,
)
from .models import DependencyEdge, DependencyType, Task, TaskId

logger = logging.getLogger(__name__)


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


class TaskNetwork:
    """Read-only view over a caller's tasks and their dependency edges.

    The caller keeps ownership of the tasks. The network builds its own
    id index and edge lists once, plus a NetworkX directed graph with an
    edge from every predecessor to its successor.
    """

    def __init__(self, tasks: Iterable[Task], strict_references: bool = False):
        """Initialize and validate the network.

        Args:
            tasks: Tasks in caller order
            strict_references: Reject predecessor ids that name no task
                instead of ignoring them

        Raises:
            DuplicateTaskId: Two tasks share an id
            InvalidDuration: A duration is negative or not an integer
            InvalidDependency: A dependency has a bad type or lag
            UnknownPredecessorReference: Dangling reference in strict mode
        """
        self.strict_references = strict_references
        self._tasks: Dict[TaskId, Task] = {}
        self._position: Dict[TaskId, int] = {}
        self._incoming: Dict[TaskId, List[DependencyEdge]] = {}
        self._outgoing: Dict[TaskId, List[Tuple[TaskId, DependencyEdge]]] = {}
        self._ignored: List[Tuple[TaskId, TaskId]] = []
        self.graph = nx.DiGraph()

        for task in tasks:
            self._add_task(task)
        self._link_edges()

    def _add_task(self, task: Task):
        if task.task_id in self._tasks:
            raise DuplicateTaskId(task.task_id)
        if not _is_int(task.duration) or task.duration < 0:
            raise InvalidDuration(task.task_id, task.duration)

        for edge in task.predecessors:
            if not isinstance(edge.type, DependencyType):
                raise InvalidDependency(task.task_id, f"unknown type {edge.type!r}")
            if not _is_int(edge.lag):
                raise InvalidDependency(
                    task.task_id, f"lag {edge.lag!r} from {edge.predecessor_id} is not an integer"
                )

        self._position[task.task_id] = len(self._tasks)
        self._tasks[task.task_id] = task
        self._incoming[task.task_id] = []
        self._outgoing[task.task_id] = []
        self.graph.add_node(task.task_id, task=task)

    def _link_edges(self):
        """Resolve predecessor ids once every task is known."""
        for task in self._tasks.values():
            for edge in task.predecessors:
                if edge.predecessor_id not in self._tasks:
                    if self.strict_references:
                        raise UnknownPredecessorReference(task.task_id, edge.predecessor_id)
                    logger.warning(
                        "Ignoring dependency of %s on unknown task %s",
                        task.task_id,
                        edge.predecessor_id,
                    )
                    self._ignored.append((task.task_id, edge.predecessor_id))
                    continue

                self._incoming[task.task_id].append(edge)
                self._outgoing[edge.predecessor_id].append((task.task_id, edge))
                # Parallel edges between one pair collapse in the graph; the
                # edge lists above keep every relationship.
                self.graph.add_edge(edge.predecessor_id, task.task_id)

    def __len__(self) -> int:
        return len(self._tasks)

    def __contains__(self, task_id: object) -> bool:
        return task_id in self._tasks

    def __iter__(self) -> Iterator[Task]:
        return iter(self._tasks.values())

    @property
    def tasks(self) -> Tuple[Task, ...]:
        return tuple(self._tasks.values())

    @property
    def task_ids(self) -> Tuple[TaskId, ...]:
        return tuple(self._tasks)

    @property
    def ignored_references(self) -> Tuple[Tuple[TaskId, TaskId], ...]:
        """(task_id, missing predecessor_id) pairs dropped during linking."""
        return tuple(self._ignored)

    def get_task(self, task_id: TaskId) -> Optional[Task]:
        """Get a task by ID."""
        return self._tasks.get(task_id)

    def position(self, task_id: TaskId) -> int:
        """Index of the task in caller order."""
        return self._position[task_id]

    def predecessors_of(self, task_id: TaskId) -> List[DependencyEdge]:
        """Resolved incoming edges of a task, in declaration order."""
        return list(self._incoming[task_id])

    def successors_of(self, task_id: TaskId) -> List[Tuple[TaskId, DependencyEdge]]:
        """(successor_id, edge) pairs for every edge leaving a task."""
        return list(self._outgoing[task_id])

    def sources(self) -> List[TaskId]:
        """Tasks without resolved predecessors."""
        return [task_id for task_id, edges in self._incoming.items() if not edges]

    def sinks(self) -> List[TaskId]:
        """Tasks without successors."""
        return [task_id for task_id, edges in self._outgoing.items() if not edges]

    def edges(self) -> Iterator[Tuple[TaskId, TaskId, DependencyEdge]]:
        """Iterate (predecessor_id, successor_id, edge) over resolved edges."""
        for task_id, incoming in self._incoming.items():
            for edge in incoming:
                yield edge.predecessor_id, task_id, edge

    def subnetwork(self, task_ids: Iterable[TaskId]) -> "TaskNetwork":
        """Network restricted to the given tasks.

        Edges to tasks outside the selection become unresolved references and
        follow this network's reference policy.
        """
        selected = set(task_ids)
        return TaskNetwork(
            (task for task in self._tasks.values() if task.task_id in selected),
            strict_references=self.strict_references,
        )
