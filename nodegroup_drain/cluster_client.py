#!/usr/bin/env python3
"""Cluster Client module wrapping the kubectl calls the drain tool needs."""

import copy
from typing import Any, Callable, Dict, List, Optional

from .exceptions import KubectlCommandError, NodeListError
from .print_manager import printer as default_printer


class ClusterClient:
    """
    Cluster API client backed by kubectl.

    Node and pod objects are the plain JSON dictionaries returned by
    ``kubectl ... -o json``.
    """

    def __init__(self, execute_kubectl_command: Callable[..., Any], printer: Any = None) -> None:
        """
        Args:
            execute_kubectl_command: Function to execute kubectl commands
            printer: Printer instance for output
        """
        self.execute_kubectl_command = execute_kubectl_command
        self.printer = printer or default_printer

    def _run(self, command: List[str], **kwargs: Any) -> Any:
        return self.execute_kubectl_command(command, printer=self.printer, **kwargs)

    def list_group_members(self, node_group: Any) -> List[Dict[str, Any]]:
        """
        List the nodes currently matching the node group selector.

        Raises:
            NodeListError: If the nodes cannot be listed
        """
        try:
            nodes_data = self._run(["get", "nodes", "-l", node_group.selector, "-o", "json"], json_output=True)
        except KubectlCommandError as e:
            raise NodeListError(f"listing nodes of nodegroup {node_group.name!r}: {e}") from e
        return list((nodes_data or {}).get("items") or [])

    def get_node(self, node_name: str) -> Dict[str, Any]:
        return self._run(["get", "node", node_name, "-o", "json"], json_output=True)

    def patch_node_cordon(self, node: Dict[str, Any], desired: bool) -> None:
        """Patch only spec.unschedulable of a node"""
        patch = '{"spec":{"unschedulable":%s}}' % ("true" if desired else "false")
        self._run(["patch", "node", node["metadata"]["name"], "--type=strategic", "-p", patch], max_retries=0)

    def replace_node(self, node: Dict[str, Any]) -> None:
        """Replace a whole node object (read-modify-write fallback for patch)"""
        self._run(["replace", "-f", "-"], input_data=node)

    def list_pods_on_node(self, node_name: str) -> List[Dict[str, Any]]:
        pods_data = self._run(
            ["get", "pods", "--all-namespaces", "--field-selector", f"spec.nodeName={node_name}", "-o", "json"],
            json_output=True,
        )
        return list((pods_data or {}).get("items") or [])

    def get_api_resources(self, group_version: str) -> Dict[str, Any]:
        """Discovery document of a group/version, e.g. ``v1`` or ``policy/v1``"""
        path = "/api/v1" if group_version == "v1" else f"/apis/{group_version}"
        return self._run(["get", "--raw", path], json_output=True, max_retries=1)

    def get_api_group(self, group: str) -> Optional[Dict[str, Any]]:
        """Discovery document of an API group, None if the group is not served"""
        try:
            return self._run(["get", "--raw", f"/apis/{group}"], json_output=True, max_retries=1)
        except KubectlCommandError as e:
            if e.not_found:
                return None
            raise

    def create_eviction(self, pod: Dict[str, Any], policy_version: str, grace_period: Optional[int]) -> None:
        """Ask the API server to evict a pod through the eviction sub-resource"""
        metadata = pod["metadata"]
        eviction: Dict[str, Any] = {
            "apiVersion": f"policy/{policy_version}",
            "kind": "Eviction",
            "metadata": {"name": metadata["name"], "namespace": metadata["namespace"]},
        }
        if grace_period is not None:
            eviction["deleteOptions"] = {"gracePeriodSeconds": grace_period}

        path = f"/api/v1/namespaces/{metadata['namespace']}/pods/{metadata['name']}/eviction"
        self._run(["create", "--raw", path, "-f", "-"], input_data=eviction, max_retries=0)

    def delete_pod(self, pod: Dict[str, Any], grace_period: Optional[int]) -> None:
        metadata = pod["metadata"]
        command = ["delete", "pod", metadata["name"], "-n", metadata["namespace"], "--wait=false"]
        if grace_period is not None:
            command.append(f"--grace-period={grace_period}")
        self._run(command)


def with_unschedulable(node: Dict[str, Any], desired: bool) -> Dict[str, Any]:
    """Copy of a node object with spec.unschedulable set"""
    updated = copy.deepcopy(node)
    spec = updated.setdefault("spec", {})
    if desired:
        spec["unschedulable"] = True
    else:
        spec.pop("unschedulable", None)
    return updated
