#!/usr/bin/env python3
"""
Node Group Drain Tool

This is the main entry point for the Node Group Drain Tool. It cordons every
node of a node group and evicts their pods until the whole group is empty, or
uncordons the group again with --undo.
"""

import sys

from nodegroup_drain import (
    ArgumentsParser,
    ClusterClient,
    Evictor,
    NodeGroupDrainer,
    configure_kubectl,
    execute_kubectl_command,
    format_runtime,
    printer,
    resolve_node_group,
)
from nodegroup_drain.orchestrator import DrainOrchestrator, handle_drain_failure, handle_successful_completion


def main(argv=None):
    """
    Main function to drain or uncordon a node group.

    Args:
        argv: Argument list, defaults to sys.argv[1:]

    Returns:
        int: Process exit code
    """
    args = ArgumentsParser.parse_arguments(argv)

    # Prepare dependencies for modules
    dependencies = {
        "printer": printer,
        "execute_kubectl_command": execute_kubectl_command,
        "configure_kubectl": configure_kubectl,
        "format_runtime": format_runtime,
        "resolve_node_group": resolve_node_group,
        "ClusterClient": ClusterClient,
        "Evictor": Evictor,
        "NodeGroupDrainer": NodeGroupDrainer,
        "handle_successful_completion": handle_successful_completion,
        "handle_drain_failure": handle_drain_failure,
    }

    orchestrator = DrainOrchestrator(**dependencies)

    if args.undo:
        printer.print_header("Node Group Uncordon")
    else:
        printer.print_header("Node Group Drain")
    return orchestrator.process_drain_operation(args)


if __name__ == "__main__":
    sys.exit(main())
