#!/usr/bin/env python3
"""Node Evictor module: removes the evictable pods of a single node."""

from .exceptions import NodeEvictionError, NodeGroupDrainError


def evict_node(eviction_policy, node_name, printer=None):
    """
    Remove every evictable pod from one node, one pod at a time.

    Pods are re-queried on every call, so a retry after a partial failure only
    sees the pods that are still there.

    Args:
        eviction_policy: Object providing get_pods_for_deletion() and evict_or_delete_pod()
        node_name: Name of the node to empty
        printer: Printer instance for logging (optional)

    Returns:
        int: Number of pods that were pending when the call started; 0 means
            the node is drained

    Raises:
        NodeEvictionError: If the pods cannot be listed or a pod cannot be removed.
            ``pending`` is 0 for listing errors, otherwise the pods not yet
            removed including the one that failed.
    """
    pod_list, errors = eviction_policy.get_pods_for_deletion(node_name)
    if errors:
        raise NodeEvictionError(node_name, f"errs: {'; '.join(str(e) for e in errors)}", pending=0)

    warnings = pod_list.warnings()
    if warnings and printer:
        printer.print_warning(warnings)

    pods = pod_list.pods()
    pending = len(pods)
    for removed, pod in enumerate(pods):
        try:
            eviction_policy.evict_or_delete_pod(pod)
        except NodeGroupDrainError as e:
            raise NodeEvictionError(node_name, str(e), pending=pending - removed) from e

    return pending
