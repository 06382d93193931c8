"""Cycle detection and topological ordering of a task network."""

import logging
from typing import List, Optional

import networkx as nx

from .errors import CycleDetected
from .models import TaskId
from .network import TaskNetwork

logger = logging.getLogger(__name__)


def find_cycle(network: TaskNetwork) -> Optional[List[TaskId]]:
    """Search the network for a dependency loop.

    Depth-first search from every unvisited task, tracking the tasks on the
    current path; reaching one of them again closes a loop.

    Args:
        network: Task network to check

    Returns:
        Task ids forming the loop in dependency order, or None if acyclic
    """
    try:
        cycle_edges = nx.find_cycle(network.graph)
    except nx.NetworkXNoCycle:
        return None
    return [predecessor for predecessor, _ in cycle_edges]


def topological_order(network: TaskNetwork) -> List[TaskId]:
    """Order tasks so that every predecessor comes before its successors.

    Independent tasks keep their input order, so the result depends only on
    the network contents.

    Args:
        network: Task network to order

    Returns:
        Task ids in topological order

    Raises:
        CycleDetected: The network contains a loop
    """
    cycle = find_cycle(network)
    if cycle is not None:
        logger.debug("Cycle found: %s", cycle)
        raise CycleDetected(cycle)

    return list(nx.lexicographical_topological_sort(network.graph, key=network.position))
