#!/usr/bin/env python3
"""Arguments Parser module for the Node Group Drain Tool."""

import argparse

from . import print_manager
from .configuration_manager import NODEGROUP_LABEL


class ArgumentsParser:
    """Handles command-line argument parsing for node group drain operations"""

    @staticmethod
    def build_parser():
        """
        Build the argument parser

        Returns:
            argparse.ArgumentParser: Parser for the drain command line
        """
        parser = argparse.ArgumentParser(
            description="Cordon and drain all nodes of a node group, or uncordon them with --undo"
        )

        parser.add_argument(
            "--nodegroup",
            type=str,
            required=False,
            help="The name of the node group to drain",
        )
        parser.add_argument(
            "--selector",
            type=str,
            required=False,
            default=None,
            help=f"Label selector matching the node group's nodes (default: {NODEGROUP_LABEL}=<nodegroup>)",
        )
        parser.add_argument(
            "--config-file",
            type=str,
            required=False,
            default=None,
            help="YAML file with a nodeGroups list; --nodegroup picks one entry when it defines several",
        )
        parser.add_argument(
            "--timeout",
            type=float,
            default=600,
            help="Seconds to wait for the whole node group to be drained (default: 600)",
        )
        parser.add_argument(
            "--max-grace-period",
            type=int,
            default=60,
            help="Maximum termination grace period in seconds granted to each pod (default: 60)",
        )
        parser.add_argument(
            "--undo",
            action="store_true",
            help="Uncordon the nodes of the node group instead of draining them",
        )
        parser.add_argument(
            "--kubeconfig",
            type=str,
            required=False,
            default=None,
            help="Path to the kubeconfig file used by kubectl",
        )
        parser.add_argument(
            "--context",
            type=str,
            required=False,
            default=None,
            help="kubeconfig context to use",
        )
        parser.add_argument(
            "--request-timeout",
            type=str,
            default="30s",
            help="Timeout of a single API request, passed through to kubectl (default: 30s)",
        )
        parser.add_argument(
            "--debug",
            action="store_true",
            help="Enable debug output (shows command execution details)",
        )
        return parser

    @staticmethod
    def parse_arguments(argv=None):
        """
        Parse command-line arguments and return configuration

        Args:
            argv: Argument list, defaults to sys.argv[1:]

        Returns:
            argparse.Namespace: Parsed arguments
        """
        parser = ArgumentsParser.build_parser()
        args = parser.parse_args(argv)

        if not args.nodegroup and not args.config_file:
            parser.error("one of --nodegroup or --config-file is required")
        if args.timeout <= 0:
            parser.error("--timeout must be greater than zero")

        # Set global debug mode
        print_manager.DEBUG_MODE = args.debug

        return args
