#!/usr/bin/env python3
"""Orchestrator module for node group drain workflow management."""

import time
from typing import Any

from .configuration_manager import DrainSettings
from .exceptions import ConfigurationError


class DrainOrchestrator:
    """
    Orchestrates a node group drain or undo: resolves the node group, wires the
    cluster collaborators together, runs the drainer and reports the outcome.
    """

    def __init__(self, **dependencies: Any) -> None:
        """
        Initialize the orchestrator with all required dependencies.

        Args:
            **dependencies: All required function and class dependencies including:
                - printer: PrintManager instance for output formatting
                - execute_kubectl_command: Function to execute kubectl commands
                - configure_kubectl: Function storing kubectl connection flags
                - format_runtime: Function to format time durations
                - resolve_node_group: Function turning CLI values into a NodeGroup
                - ClusterClient, Evictor, NodeGroupDrainer: class constructors
                - handle_successful_completion, handle_drain_failure: reporting functions
        """
        # Core dependencies
        self.printer = dependencies["printer"]
        self.execute_kubectl_command = dependencies["execute_kubectl_command"]
        self.configure_kubectl = dependencies["configure_kubectl"]
        self.format_runtime = dependencies["format_runtime"]
        self.resolve_node_group = dependencies["resolve_node_group"]

        # Class constructors
        self.ClusterClient = dependencies["ClusterClient"]
        self.Evictor = dependencies["Evictor"]
        self.NodeGroupDrainer = dependencies["NodeGroupDrainer"]

        # Workflow functions
        self.handle_successful_completion = dependencies["handle_successful_completion"]
        self.handle_drain_failure = dependencies["handle_drain_failure"]

    def _build_settings(self, args: Any) -> DrainSettings:
        return DrainSettings(
            wait_timeout=args.timeout,
            max_grace_period=args.max_grace_period,
            undo=args.undo,
        )

    def process_drain_operation(self, args: Any) -> int:
        """
        Run a drain (or undo) for the node group named on the command line.

        Args:
            args: Parsed command line arguments

        Returns:
            int: Process exit code, 0 on success, 1 on timeout or failure,
                2 on an invalid node group configuration
        """
        start_time = time.time()
        total_steps = 3

        self.printer.print_step(1, total_steps, "Resolving node group")
        try:
            node_group = self.resolve_node_group(
                name=args.nodegroup, selector=args.selector, config_file=args.config_file
            )
        except ConfigurationError as e:
            self.printer.print_error(str(e))
            return 2
        self.printer.print_info(f'Node group "{node_group.name}" (label selector: "{node_group.selector}")')

        self.printer.print_step(2, total_steps, "Connecting to cluster")
        self.configure_kubectl(
            kubeconfig=args.kubeconfig, context=args.context, request_timeout=args.request_timeout
        )
        settings = self._build_settings(args)
        cluster_client = self.ClusterClient(self.execute_kubectl_command, printer=self.printer)
        evictor = self.Evictor(cluster_client, settings, printer=self.printer)
        drainer = self.NodeGroupDrainer(cluster_client, evictor, node_group, settings, printer=self.printer)

        action = "Uncordoning" if settings.undo else "Cordoning and draining"
        self.printer.print_step(3, total_steps, f"{action} nodes of {node_group.name}")
        outcome = drainer.drain()

        if outcome.succeeded:
            self.handle_successful_completion(
                node_group.name,
                outcome,
                start_time,
                settings.undo,
                printer=self.printer,
                format_runtime=self.format_runtime,
            )
            return 0

        self.handle_drain_failure(
            node_group.name, outcome, start_time, printer=self.printer, format_runtime=self.format_runtime
        )
        return 1


def handle_successful_completion(
    node_group_name: str,
    outcome: Any,
    start_time: float,
    undo: bool,
    printer: Any = None,
    format_runtime: Any = None,
) -> None:
    """
    Report a successful drain or undo.

    Args:
        node_group_name: Name of the node group
        outcome: DrainOutcome returned by the drainer
        start_time: Start time of the operation
        undo: True if the nodes were uncordoned rather than drained
        printer: PrintManager instance for output formatting
        format_runtime: Function to format time duration
    """
    total_runtime = format_runtime(start_time, time.time())

    if undo:
        printer.print_header(f"Node group '{node_group_name}' uncordoned")
        printer.print_info("Nodes accept new pods again")
    else:
        printer.print_header(f"Node group '{node_group_name}' drained successfully!")
        if outcome.drained_nodes:
            printer.print_info(f"Drained nodes: {', '.join(outcome.drained_nodes)}")
        else:
            printer.print_info("No nodes needed draining")

    printer.print_info(f"Total runtime: {total_runtime}")


def handle_drain_failure(
    node_group_name: str, outcome: Any, start_time: float, printer: Any = None, format_runtime: Any = None
) -> None:
    """
    Report a drain that timed out or failed.

    Args:
        node_group_name: Name of the node group
        outcome: DrainOutcome returned by the drainer
        start_time: Start time of the operation
        printer: PrintManager instance for output formatting
        format_runtime: Function to format time duration
    """
    total_runtime = format_runtime(start_time, time.time())
    printer.print_error(f"Drain of node group '{node_group_name}' {outcome.state.value}: {outcome.error}")
    if outcome.drained_nodes:
        printer.print_info(f"Nodes drained before stopping: {', '.join(outcome.drained_nodes)}")
    printer.print_error(f"Total runtime before failure: {total_runtime}")
    printer.print_info("Re-running the command resumes the drain; already empty nodes finish immediately")
