#!/usr/bin/env python3
"""Configuration Manager module for node group definitions and drain settings."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

import yaml

from .exceptions import ConfigurationError

NODEGROUP_LABEL = "alpha.eksctl.io/nodegroup-name"

# Fixed pause after a node-level eviction failure before the next node is tried
RETRY_DELAY_SECONDS = 5

DEFAULT_IGNORED_DAEMONSETS: Tuple[Tuple[str, str], ...] = (
    ("kube-system", "aws-node"),
    ("kube-system", "kube-proxy"),
    ("", "node-exporter"),
    ("", "prom-node-exporter"),
    ("", "weave-scope"),
    ("", "weave-scope-agent"),
    ("", "weave-net"),
)


@dataclass(frozen=True)
class NodeGroup:
    """A named set of nodes selected by a label selector."""

    name: str
    selector: str

    @classmethod
    def from_name(cls, name: str, label_key: str = NODEGROUP_LABEL) -> "NodeGroup":
        return cls(name=name, selector=f"{label_key}={name}")

    def name_string(self) -> str:
        return self.name


@dataclass
class DrainSettings:
    """Knobs for one drain or undo run."""

    wait_timeout: float = 600
    max_grace_period: int = 60
    undo: bool = False
    retry_delay: float = RETRY_DELAY_SECONDS
    force: bool = True
    delete_local_data: bool = True
    ignore_all_daemonsets: bool = True
    ignored_daemonsets: Tuple[Tuple[str, str], ...] = field(default=DEFAULT_IGNORED_DAEMONSETS)


def _selector_from_entry(entry: Dict[str, Any], label_key: str) -> str:
    """Build a label selector string from a nodeGroups entry."""
    if entry.get("selector"):
        return str(entry["selector"])

    labels = entry.get("labels")
    if labels:
        if not isinstance(labels, dict):
            raise ConfigurationError(f"labels of nodegroup {entry['name']!r} must be a mapping")
        return ",".join(f"{key}={value}" for key, value in sorted(labels.items()))

    return f"{label_key}={entry['name']}"


def load_nodegroups_from_file(config_file: str, label_key: str = NODEGROUP_LABEL) -> List[NodeGroup]:
    """
    Load node group definitions from a YAML file.

    The file holds a ``nodeGroups`` list; each entry needs a ``name`` and may
    carry either a ``selector`` expression or a ``labels`` mapping.

    Args:
        config_file: Path to the YAML file
        label_key: Label used to build a selector when an entry has neither

    Returns:
        List[NodeGroup]: Node groups in file order

    Raises:
        ConfigurationError: If the file is unreadable or malformed
    """
    try:
        with open(config_file, "r") as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise ConfigurationError(f"cannot read config file {config_file}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigurationError(f"invalid YAML in {config_file}: {e}") from e

    if not isinstance(data, dict) or not isinstance(data.get("nodeGroups"), list):
        raise ConfigurationError(f"{config_file} does not contain a nodeGroups list")

    node_groups = []
    for entry in data["nodeGroups"]:
        if not isinstance(entry, dict) or not entry.get("name"):
            raise ConfigurationError(f"every nodeGroups entry in {config_file} needs a name")
        node_groups.append(NodeGroup(name=str(entry["name"]), selector=_selector_from_entry(entry, label_key)))

    return node_groups


def resolve_node_group(
    name: Optional[str] = None,
    selector: Optional[str] = None,
    config_file: Optional[str] = None,
    label_key: str = NODEGROUP_LABEL,
) -> NodeGroup:
    """
    Work out which node group to operate on from the command line values.

    Raises:
        ConfigurationError: If the combination does not identify exactly one group
    """
    if config_file:
        node_groups = load_nodegroups_from_file(config_file, label_key)
        if name:
            for node_group in node_groups:
                if node_group.name == name:
                    return node_group
            raise ConfigurationError(f"nodegroup {name!r} not found in {config_file}")
        if not node_groups:
            raise ConfigurationError(f"{config_file} defines no nodegroups")
        if len(node_groups) > 1:
            found = ", ".join(ng.name for ng in node_groups)
            raise ConfigurationError(f"{config_file} defines several nodegroups ({found}), pick one with --nodegroup")
        return node_groups[0]

    if not name:
        raise ConfigurationError("either --nodegroup or --config-file is required")
    if selector:
        return NodeGroup(name=name, selector=selector)
    return NodeGroup.from_name(name, label_key)
