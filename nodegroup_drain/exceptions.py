#!/usr/bin/env python3
"""Exception hierarchy for the Node Group Drain Tool."""


class NodeGroupDrainError(Exception):
    """Base class for all drain errors"""


class ConfigurationError(NodeGroupDrainError):
    """Invalid node group definition or settings"""


class KubectlCommandError(NodeGroupDrainError):
    """A kubectl invocation failed after all retries"""

    def __init__(self, command, stderr=""):
        self.command = list(command)
        self.stderr = (stderr or "").strip()
        message = f"command failed: {' '.join(self.command)}"
        if self.stderr:
            message = f"{message}: {self.stderr}"
        super().__init__(message)

    @property
    def not_found(self):
        """True when the API server answered NotFound"""
        return "notfound" in self.stderr.replace(" ", "").lower()


class EvictionUnavailableError(NodeGroupDrainError):
    """The cluster cannot be asked to remove pods at all"""


class NodeListError(NodeGroupDrainError):
    """The members of a node group could not be enumerated"""


class NodeEvictionError(NodeGroupDrainError):
    """Removing pods from one node failed; the node stays pending"""

    def __init__(self, node_name, message, pending=0):
        self.node_name = node_name
        self.pending = pending
        super().__init__(message)


class DrainTimeoutError(NodeGroupDrainError):
    """The node group was not drained within the wait timeout"""

    def __init__(self, node_group, timeout, drained_nodes=()):
        self.node_group = node_group
        self.timeout = timeout
        self.drained_nodes = sorted(drained_nodes)
        super().__init__(f'timed out (after {timeout}) waiting for nodegroup "{node_group}" to be drained')
