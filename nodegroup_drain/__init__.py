#!/usr/bin/env python3
"""
Node Group Drain Tool - Modular Components.

This package contains the components of the Node Group Drain Tool, which
cordons every node of a node group and evicts their pods, tolerating nodes
that join or leave the group while the drain is running.

Modules:
- print_manager: Handles all output formatting and printing
- exceptions: Error types raised by the components
- utilities: kubectl execution with retries and common helpers
- configuration_manager: Node group definitions and drain settings
- arguments_parser: Command-line argument parsing
- cluster_client: Cluster API client backed by kubectl
- cordon_controller: Idempotent cordon/uncordon of nodes
- pod_eviction_policy: Pod filtering and eviction/deletion strategies
- node_evictor: Removal of the evictable pods of one node
- drain_scheduler: Node group drain state machine
- orchestrator: High-level workflow orchestration and completion handling
"""

from .arguments_parser import ArgumentsParser
from .cluster_client import ClusterClient
from .configuration_manager import (
    DrainSettings,
    NodeGroup,
    load_nodegroups_from_file,
    resolve_node_group,
)
from .cordon_controller import CordonController, CordonResult
from .drain_scheduler import DrainOutcome, DrainState, NodeGroupDrainer
from .exceptions import (
    ConfigurationError,
    DrainTimeoutError,
    EvictionUnavailableError,
    KubectlCommandError,
    NodeEvictionError,
    NodeGroupDrainError,
    NodeListError,
)
from .node_evictor import evict_node
from .orchestrator import DrainOrchestrator, handle_drain_failure, handle_successful_completion
from .pod_eviction_policy import DeletionRemoval, EvictionRemoval, Evictor, PodDeleteList
from .print_manager import PrintManager, printer, DEBUG_MODE
from .utilities import configure_kubectl, execute_kubectl_command, format_runtime

__all__ = [
    "ArgumentsParser",
    "ClusterClient",
    "DrainSettings",
    "NodeGroup",
    "load_nodegroups_from_file",
    "resolve_node_group",
    "CordonController",
    "CordonResult",
    "DrainOutcome",
    "DrainState",
    "NodeGroupDrainer",
    "ConfigurationError",
    "DrainTimeoutError",
    "EvictionUnavailableError",
    "KubectlCommandError",
    "NodeEvictionError",
    "NodeGroupDrainError",
    "NodeListError",
    "evict_node",
    "DrainOrchestrator",
    "handle_drain_failure",
    "handle_successful_completion",
    "DeletionRemoval",
    "EvictionRemoval",
    "Evictor",
    "PodDeleteList",
    "PrintManager",
    "printer",
    "DEBUG_MODE",
    "configure_kubectl",
    "execute_kubectl_command",
    "format_runtime",
]
