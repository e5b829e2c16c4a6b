#!/usr/bin/env python3
"""
Shared pytest configuration and fixtures for all tests.
"""

import pytest
import sys
import os
from typing import Any, Dict, List, Optional
from unittest.mock import Mock

# Add the parent directory to Python path so we can import the package
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from nodegroup_drain.configuration_manager import DrainSettings, NodeGroup  # noqa: E402
from nodegroup_drain.exceptions import KubectlCommandError  # noqa: E402
from nodegroup_drain.pod_eviction_policy import PodDeleteList  # noqa: E402


@pytest.fixture
def mock_printer() -> Mock:
    """Mock printer for testing output operations.

    Returns:
        Mock: Mock printer instance with all required methods.
    """
    printer = Mock()
    printer.print_info = Mock()
    printer.print_action = Mock()
    printer.print_debug = Mock()
    printer.print_success = Mock()
    printer.print_error = Mock()
    printer.print_critical = Mock()
    printer.print_warning = Mock()
    printer.print_step = Mock()
    printer.print_header = Mock()
    return printer


# =============================================================================
# Kubernetes Object Factories
# =============================================================================


@pytest.fixture
def node_factory():
    """Factory fixture for node objects as returned by 'kubectl get nodes -o json'."""

    def _create_node(name: str, unschedulable: bool = False, nodegroup: str = "workers") -> Dict[str, Any]:
        node = {
            "apiVersion": "v1",
            "kind": "Node",
            "metadata": {
                "name": name,
                "resourceVersion": "1001",
                "labels": {"alpha.eksctl.io/nodegroup-name": nodegroup, "kubernetes.io/hostname": name},
            },
            "spec": {"providerID": f"aws:///us-west-2a/i-{name}"},
            "status": {"conditions": [{"type": "Ready", "status": "True"}]},
        }
        if unschedulable:
            node["spec"]["unschedulable"] = True
        return node

    return _create_node


@pytest.fixture
def pod_factory():
    """Factory fixture for pod objects as returned by 'kubectl get pods -o json'."""

    def _create_pod(
        name: str,
        namespace: str = "default",
        node_name: str = "node-a",
        owner_kind: Optional[str] = "ReplicaSet",
        owner_name: str = "web-5d8f7c",
        phase: str = "Running",
        empty_dir: bool = False,
        mirror: bool = False,
        grace_period: Optional[int] = 30,
        terminating: bool = False,
    ) -> Dict[str, Any]:
        metadata: Dict[str, Any] = {"name": name, "namespace": namespace}
        if owner_kind:
            metadata["ownerReferences"] = [
                {"apiVersion": "apps/v1", "kind": owner_kind, "name": owner_name, "controller": True}
            ]
        if mirror:
            metadata["annotations"] = {"kubernetes.io/config.mirror": "8c1f0a"}
        if terminating:
            metadata["deletionTimestamp"] = "2024-05-01T10:00:00Z"

        spec: Dict[str, Any] = {"nodeName": node_name, "containers": [{"name": "app", "image": "nginx:1.25"}]}
        if grace_period is not None:
            spec["terminationGracePeriodSeconds"] = grace_period
        if empty_dir:
            spec["volumes"] = [{"name": "scratch", "emptyDir": {}}]

        return {"apiVersion": "v1", "kind": "Pod", "metadata": metadata, "spec": spec, "status": {"phase": phase}}

    return _create_pod


# =============================================================================
# Fake Collaborators
# =============================================================================


class FakeCluster:
    """In-memory cluster API client.

    ``membership`` is a list of node-name lists, one per list_group_members()
    call; the last entry repeats once the script runs out.
    """

    def __init__(self, node_factory, membership: List[List[str]], cordoned: Optional[List[str]] = None):
        self.node_factory = node_factory
        self.membership = [list(names) for names in membership]
        self.cordoned = set(cordoned or [])
        self.list_calls = 0
        self.patch_calls: List[tuple] = []
        self.replace_calls: List[Dict[str, Any]] = []
        self.list_error: Optional[Exception] = None
        self.patch_error: Optional[Exception] = None
        self.replace_error: Optional[Exception] = None

    def _node(self, name: str) -> Dict[str, Any]:
        return self.node_factory(name, unschedulable=name in self.cordoned)

    def list_group_members(self, node_group):
        self.list_calls += 1
        if self.list_error is not None:
            raise self.list_error
        index = min(self.list_calls - 1, len(self.membership) - 1)
        return [self._node(name) for name in self.membership[index]]

    def get_node(self, node_name):
        return self._node(node_name)

    def patch_node_cordon(self, node, desired):
        self.patch_calls.append((node["metadata"]["name"], desired))
        if self.patch_error is not None:
            raise self.patch_error
        self._apply(node["metadata"]["name"], desired)

    def replace_node(self, node):
        self.replace_calls.append(node)
        if self.replace_error is not None:
            raise self.replace_error
        self._apply(node["metadata"]["name"], node["spec"].get("unschedulable", False))

    def _apply(self, name, desired):
        if desired:
            self.cordoned.add(name)
        else:
            self.cordoned.discard(name)


class FakeEvictionPolicy:
    """In-memory pod eviction policy.

    ``pods`` maps node names to pod names. ``evict_failures`` maps node names
    to how many eviction calls on that node fail before they start succeeding.
    """

    def __init__(self, pods: Dict[str, List[str]], evict_failures: Optional[Dict[str, int]] = None):
        self.pods = {node: list(names) for node, names in pods.items()}
        self.evict_failures = dict(evict_failures or {})
        self.list_errors: Dict[str, List[str]] = {}
        self.capability_error: Optional[Exception] = None
        self.listed: List[str] = []
        self.evicted: List[tuple] = []
        self.warning_text = ""

    def can_use_evictions(self):
        if self.capability_error is not None:
            raise self.capability_error

    def get_pods_for_deletion(self, node_name):
        self.listed.append(node_name)
        errors = self.list_errors.pop(node_name, [])
        if errors:
            return PodDeleteList([], []), errors
        pods = [{"metadata": {"name": name, "namespace": "default"}, "node": node_name}
                for name in self.pods.get(node_name, [])]
        return PodDeleteList(pods, [self.warning_text] if self.warning_text else []), []

    def evict_or_delete_pod(self, pod):
        node_name = pod["node"]
        if self.evict_failures.get(node_name, 0) > 0:
            self.evict_failures[node_name] -= 1
            raise KubectlCommandError(["create", "--raw"], "Too Many Requests: Cannot evict pod")
        self.evicted.append((node_name, pod["metadata"]["name"]))
        self.pods[node_name].remove(pod["metadata"]["name"])


@pytest.fixture
def fake_cluster_factory(node_factory):
    def _create(membership, cordoned=None):
        return FakeCluster(node_factory, membership, cordoned)

    return _create


@pytest.fixture
def fake_policy_factory():
    def _create(pods, evict_failures=None):
        return FakeEvictionPolicy(pods, evict_failures)

    return _create


@pytest.fixture
def workers_group() -> NodeGroup:
    return NodeGroup.from_name("workers")


@pytest.fixture
def drain_settings() -> DrainSettings:
    return DrainSettings(wait_timeout=600, max_grace_period=60, retry_delay=5)


class FakeClock:
    """Monotonic clock advanced only by sleep()."""

    def __init__(self, start: float = 1000.0):
        self.now = start
        self.sleeps: List[float] = []

    def monotonic(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


