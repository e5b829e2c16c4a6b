#!/usr/bin/env python3
"""Cordon Controller module: marks nodes schedulable or unschedulable."""

from dataclasses import dataclass
from typing import Any, Dict, Iterable, List, Optional

from .cluster_client import with_unschedulable
from .exceptions import KubectlCommandError
from .print_manager import printer as default_printer
from .utilities import cordon_status


@dataclass
class CordonResult:
    """Outcome of toggling one node; errors here never stop a drain."""

    node_name: str
    desired: bool
    changed: bool = False
    patch_error: Optional[Exception] = None
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.error is None


def is_cordoned(node: Dict[str, Any]) -> bool:
    return bool(node.get("spec", {}).get("unschedulable", False))


class CordonController:
    """Applies the minimal write needed to bring nodes to a cordon state."""

    def __init__(self, cluster_client: Any, printer: Any = None) -> None:
        self.cluster_client = cluster_client
        self.printer = printer or default_printer

    def toggle_cordon(self, desired: bool, nodes: Iterable[Dict[str, Any]]) -> List[CordonResult]:
        """
        Cordon (desired=True) or uncordon (desired=False) every node that is not
        already in the desired state.

        Args:
            desired: Target value of spec.unschedulable
            nodes: Node objects as listed from the cluster

        Returns:
            List[CordonResult]: One result per node, in input order
        """
        results = []
        for node in nodes:
            node_name = node["metadata"]["name"]
            if is_cordoned(node) == desired:
                self.printer.print_debug(f'no need to {cordon_status(desired)} node "{node_name}"')
                results.append(CordonResult(node_name=node_name, desired=desired))
                continue

            result = self._patch_or_replace(node, desired)
            if result.patch_error is not None:
                self.printer.print_warning(f'patch of node "{node_name}" rejected: {result.patch_error}')
            if result.error is not None:
                self.printer.print_critical(f'failed to {cordon_status(desired)} node "{node_name}": {result.error}')
            else:
                self.printer.print_info(f'{cordon_status(desired)} node "{node_name}"')
            results.append(result)

        return results

    def _patch_or_replace(self, node: Dict[str, Any], desired: bool) -> CordonResult:
        """Patch spec.unschedulable, falling back to replacing the whole node"""
        result = CordonResult(node_name=node["metadata"]["name"], desired=desired)
        try:
            self.cluster_client.patch_node_cordon(node, desired)
            result.changed = True
            return result
        except KubectlCommandError as e:
            result.patch_error = e

        try:
            current = self.cluster_client.get_node(result.node_name)
            self.cluster_client.replace_node(with_unschedulable(current, desired))
            result.changed = True
        except KubectlCommandError as e:
            result.error = e
        return result
