#!/usr/bin/env python3
"""Pod Eviction Policy module: which pods leave a node, and how they are removed."""

from typing import Any, Dict, List, Optional, Tuple

from .exceptions import EvictionUnavailableError, KubectlCommandError
from .print_manager import printer as default_printer
from .utilities import pod_key

MIRROR_POD_ANNOTATION = "kubernetes.io/config.mirror"

# Preferred first
EVICTION_POLICY_VERSIONS = ("v1", "v1beta1")


class PodDeleteList:
    """Pods selected for removal from one node, plus the warnings raised while filtering."""

    def __init__(self, pods: List[Dict[str, Any]], warnings: List[str]) -> None:
        self._pods = list(pods)
        self._warnings = list(warnings)

    def pods(self) -> List[Dict[str, Any]]:
        return list(self._pods)

    def warnings(self) -> str:
        return "; ".join(self._warnings)


class PodRemovalStrategy:
    """How a single pod is taken off its node."""

    description = "remove"

    def __init__(self, cluster_client: Any) -> None:
        self.cluster_client = cluster_client

    def remove(self, pod: Dict[str, Any], grace_period: Optional[int]) -> None:
        raise NotImplementedError


class EvictionRemoval(PodRemovalStrategy):
    """Policy-respecting removal through the pods/eviction sub-resource."""

    description = "evict"

    def __init__(self, cluster_client: Any, policy_version: str) -> None:
        super().__init__(cluster_client)
        self.policy_version = policy_version

    def remove(self, pod: Dict[str, Any], grace_period: Optional[int]) -> None:
        try:
            self.cluster_client.create_eviction(pod, self.policy_version, grace_period)
        except KubectlCommandError as e:
            # Already gone counts as evicted
            if not e.not_found:
                raise


class DeletionRemoval(PodRemovalStrategy):
    """Direct pod deletion for clusters without the eviction sub-resource."""

    description = "delete"

    def remove(self, pod: Dict[str, Any], grace_period: Optional[int]) -> None:
        try:
            self.cluster_client.delete_pod(pod, grace_period)
        except KubectlCommandError as e:
            if not e.not_found:
                raise


def _controller_of(pod: Dict[str, Any]) -> Optional[Dict[str, Any]]:
    for owner in pod.get("metadata", {}).get("ownerReferences") or []:
        if owner.get("controller"):
            return owner
    return None


def _has_local_storage(pod: Dict[str, Any]) -> bool:
    return any("emptyDir" in volume for volume in pod.get("spec", {}).get("volumes") or [])


class Evictor:
    """
    Decides which pods on a node are removed and removes them.

    Filtering rules, applied per pod in order:

    - pods already terminating are skipped
    - finished pods (Succeeded/Failed) are always removable
    - mirror pods cannot be removed through the API server and are skipped
    - DaemonSet pods are skipped when ignored, otherwise reported as errors
    - pods with emptyDir volumes need ``delete_local_data``
    - pods without a controller need ``force``
    """

    def __init__(self, cluster_client: Any, settings: Any, printer: Any = None) -> None:
        self.cluster_client = cluster_client
        self.settings = settings
        self.printer = printer or default_printer
        self.removal_strategy: Optional[PodRemovalStrategy] = None

    def can_use_evictions(self) -> None:
        """
        Check what the cluster offers for pod removal and pick the strategy once.

        Raises:
            EvictionUnavailableError: If the core API cannot be discovered
        """
        try:
            core_resources = self.cluster_client.get_api_resources("v1")
            policy_group = self.cluster_client.get_api_group("policy")
        except KubectlCommandError as e:
            raise EvictionUnavailableError(f"checking if cluster implements policy API: {e}") from e

        has_eviction = any(
            resource.get("name") == "pods/eviction" for resource in (core_resources or {}).get("resources") or []
        )
        served_versions = [version.get("version") for version in (policy_group or {}).get("versions") or []]
        policy_version = next((v for v in EVICTION_POLICY_VERSIONS if v in served_versions), None)

        if has_eviction and policy_version:
            self.removal_strategy = EvictionRemoval(self.cluster_client, policy_version)
            self.printer.print_debug(f"using policy/{policy_version} evictions")
        else:
            self.removal_strategy = DeletionRemoval(self.cluster_client)
            self.printer.print_warning("cluster does not implement the eviction API, pods will be deleted directly")

    def _is_ignored_daemonset(self, owner: Dict[str, Any], namespace: str) -> bool:
        if self.settings.ignore_all_daemonsets:
            return True
        for ignored_namespace, ignored_name in self.settings.ignored_daemonsets:
            if owner.get("name") == ignored_name and ignored_namespace in ("", namespace):
                return True
        return False

    def filter_pods(self, pods: List[Dict[str, Any]]) -> Tuple[List[Dict[str, Any]], List[str], List[str]]:
        """
        Split pods into the ones to remove, warnings and errors.

        Returns:
            tuple: (pods_to_remove, warnings, errors)
        """
        to_delete = []
        daemonset_skipped, daemonset_blocked = [], []
        mirror, local_storage, unmanaged = [], [], []

        for pod in pods:
            metadata = pod.get("metadata", {})
            if metadata.get("deletionTimestamp"):
                continue

            if pod.get("status", {}).get("phase") in ("Succeeded", "Failed"):
                to_delete.append(pod)
                continue

            if MIRROR_POD_ANNOTATION in (metadata.get("annotations") or {}):
                mirror.append(pod_key(pod))
                continue

            controller = _controller_of(pod)
            if controller and controller.get("kind") == "DaemonSet":
                if self._is_ignored_daemonset(controller, metadata.get("namespace", "")):
                    daemonset_skipped.append(pod_key(pod))
                else:
                    daemonset_blocked.append(pod_key(pod))
                continue

            if _has_local_storage(pod):
                local_storage.append(pod_key(pod))
                if not self.settings.delete_local_data:
                    continue

            if controller is None:
                unmanaged.append(pod_key(pod))
                if not self.settings.force:
                    continue

            to_delete.append(pod)

        warnings, errors = [], []
        if mirror:
            warnings.append(f"cannot delete mirror Pods using API server: {', '.join(mirror)}")
        if daemonset_skipped:
            warnings.append(f"ignoring DaemonSet-managed Pods: {', '.join(daemonset_skipped)}")
        if daemonset_blocked:
            errors.append(f"cannot delete DaemonSet-managed Pods: {', '.join(daemonset_blocked)}")

        if local_storage:
            if self.settings.delete_local_data:
                warnings.append(f"deleting Pods with local storage: {', '.join(local_storage)}")
            else:
                errors.append(f"cannot delete Pods with local storage: {', '.join(local_storage)}")

        if unmanaged:
            if self.settings.force:
                warnings.append(f"deleting Pods not managed by a controller: {', '.join(unmanaged)}")
            else:
                errors.append(f"cannot delete Pods not managed by a controller: {', '.join(unmanaged)}")

        return to_delete, warnings, errors

    def get_pods_for_deletion(self, node_name: str) -> Tuple[PodDeleteList, List[str]]:
        """
        List the pods on a node and select the ones to remove.

        Returns:
            tuple: (PodDeleteList, errors); a listing failure is reported as an error
        """
        try:
            pods = self.cluster_client.list_pods_on_node(node_name)
        except KubectlCommandError as e:
            return PodDeleteList([], []), [f"listing pods on node {node_name}: {e}"]

        to_delete, warnings, errors = self.filter_pods(pods)
        return PodDeleteList(to_delete, warnings), errors

    def grace_period_for(self, pod: Dict[str, Any]) -> Optional[int]:
        """Pod's own termination grace period, capped at the configured maximum"""
        pod_grace = pod.get("spec", {}).get("terminationGracePeriodSeconds")
        max_grace = self.settings.max_grace_period
        if max_grace and max_grace > 0:
            if pod_grace is None or pod_grace > max_grace:
                return int(max_grace)
        return pod_grace

    def evict_or_delete_pod(self, pod: Dict[str, Any]) -> None:
        """
        Remove one pod using the strategy picked by can_use_evictions().

        Raises:
            KubectlCommandError: If the API server refuses the removal
        """
        if self.removal_strategy is None:
            self.can_use_evictions()
        self.printer.print_action(f"{self.removal_strategy.description} pod {pod_key(pod)}")
        self.removal_strategy.remove(pod, self.grace_period_for(pod))
