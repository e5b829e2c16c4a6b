#!/usr/bin/env python3
"""Drain Scheduler module: drives a whole node group to the drained state."""

import time
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, List, Optional, Set

from .cordon_controller import CordonController
from .exceptions import DrainTimeoutError, EvictionUnavailableError, NodeEvictionError, NodeGroupDrainError, NodeListError
from .node_evictor import evict_node
from .print_manager import printer as default_printer
from .utilities import format_runtime


class DrainState(Enum):
    CHECKING = "Checking"
    POLLING = "Polling"
    SUCCEEDED = "Succeeded"
    TIMED_OUT = "TimedOut"
    FAILED = "Failed"


@dataclass
class DrainOutcome:
    """Terminal result of one drain or undo invocation."""

    state: DrainState
    drained_nodes: List[str] = field(default_factory=list)
    error: Optional[NodeGroupDrainError] = None

    @property
    def succeeded(self) -> bool:
        return self.state is DrainState.SUCCEEDED


class DrainRun:
    """State of a single drain run: the drained set and the deadline."""

    def __init__(self, wait_timeout: float) -> None:
        self.deadline = time.monotonic() + wait_timeout
        self._drained: Set[str] = set()

    def deadline_passed(self) -> bool:
        return time.monotonic() >= self.deadline

    def mark_drained(self, node_name: str) -> None:
        self._drained.add(node_name)

    def is_drained(self, node_name: str) -> bool:
        return node_name in self._drained

    def drained_nodes(self) -> List[str]:
        return sorted(self._drained)


class NodeGroupDrainer:
    """
    Cordons and drains every node of a node group, re-listing the group on
    each pass so nodes added or removed mid-drain are picked up.

    States: Checking -> Polling -> Succeeded | TimedOut | Failed
    """

    def __init__(
        self,
        cluster_client: Any,
        eviction_policy: Any,
        node_group: Any,
        settings: Any,
        printer: Any = None,
        cordon_controller: Any = None,
    ) -> None:
        """
        Args:
            cluster_client: Cluster API client (list_group_members, patch_node_cordon, replace_node)
            eviction_policy: Pod eviction policy (can_use_evictions, get_pods_for_deletion, evict_or_delete_pod)
            node_group: NodeGroup to operate on
            settings: DrainSettings with wait_timeout, retry_delay and undo
            printer: Printer instance for output
            cordon_controller: Optional CordonController, built from cluster_client when omitted
        """
        self.cluster_client = cluster_client
        self.eviction_policy = eviction_policy
        self.node_group = node_group
        self.settings = settings
        self.printer = printer or default_printer
        self.cordon_controller = cordon_controller or CordonController(cluster_client, printer=self.printer)
        self.state = DrainState.CHECKING

    def _finish(self, state: DrainState, drained_nodes: Optional[List[str]] = None, error=None) -> DrainOutcome:
        self.state = state
        return DrainOutcome(state=state, drained_nodes=drained_nodes or [], error=error)

    def _timeout_error(self, run: DrainRun) -> DrainTimeoutError:
        return DrainTimeoutError(
            self.node_group.name_string(),
            format_runtime(0, self.settings.wait_timeout),
            run.drained_nodes(),
        )

    def drain(self) -> DrainOutcome:
        """
        Drain the node group, or uncordon it when settings.undo is set.

        Returns:
            DrainOutcome: SUCCEEDED with the drained node names, TIMED_OUT with a
                DrainTimeoutError, or FAILED with the capability or listing error
        """
        self.state = DrainState.CHECKING
        try:
            self.eviction_policy.can_use_evictions()
        except EvictionUnavailableError as e:
            return self._finish(DrainState.FAILED, error=e)

        try:
            nodes = self.cluster_client.list_group_members(self.node_group)
        except NodeListError as e:
            return self._finish(DrainState.FAILED, error=e)

        if not nodes:
            self.printer.print_warning(
                f'no nodes found in nodegroup "{self.node_group.name_string()}" '
                f'(label selector: "{self.node_group.selector}")'
            )
            return self._finish(DrainState.SUCCEEDED)

        if self.settings.undo:
            self.cordon_controller.toggle_cordon(False, nodes)
            return self._finish(DrainState.SUCCEEDED)

        return self._poll(DrainRun(self.settings.wait_timeout))

    def _poll(self, run: DrainRun) -> DrainOutcome:
        """Steady-state loop; the deadline is only checked between passes."""
        self.state = DrainState.POLLING
        while True:
            if run.deadline_passed():
                return self._finish(DrainState.TIMED_OUT, run.drained_nodes(), self._timeout_error(run))

            try:
                nodes = self.cluster_client.list_group_members(self.node_group)
            except NodeListError as e:
                return self._finish(DrainState.FAILED, run.drained_nodes(), e)

            self.cordon_controller.toggle_cordon(True, nodes)

            pending = [name for name in sorted({node["metadata"]["name"] for node in nodes}) if not run.is_drained(name)]
            if not pending:
                self.printer.print_success(f"drained all nodes: {run.drained_nodes()}")
                return self._finish(DrainState.SUCCEEDED, run.drained_nodes())

            self.printer.print_debug(f"already drained: {run.drained_nodes()}")
            self.printer.print_debug(f"will drain: {pending}")

            for node_name in pending:
                self._drain_node(run, node_name)

    def _drain_node(self, run: DrainRun, node_name: str) -> None:
        try:
            pending = evict_node(self.eviction_policy, node_name, printer=self.printer)
        except NodeEvictionError as e:
            self.printer.print_warning(
                f'pod eviction error ("{e}") on node {node_name} - will retry after delay of '
                f"{self.settings.retry_delay}s"
            )
            time.sleep(self.settings.retry_delay)
            return

        self.printer.print_debug(f"{pending} pods to be evicted from {node_name}")
        if pending == 0:
            run.mark_drained(node_name)
