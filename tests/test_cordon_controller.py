#!/usr/bin/env python3
"""
Tests for the CordonController: idempotent cordon/uncordon with patch-then-replace.
"""

import sys
import os
from unittest.mock import Mock

# Add parent directory to path for module imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

from nodegroup_drain.cordon_controller import CordonController, CordonResult, is_cordoned  # noqa: E402
from nodegroup_drain.exceptions import KubectlCommandError  # noqa: E402


class TestToggleCordon:
    """Cordon state changes against the in-memory cluster"""

    def test_cordon_is_idempotent(self, fake_cluster_factory, node_factory, mock_printer):
        cluster = fake_cluster_factory([["node-a"]])
        controller = CordonController(cluster, printer=mock_printer)

        first = controller.toggle_cordon(True, cluster.list_group_members(None))
        second = controller.toggle_cordon(True, cluster.list_group_members(None))

        assert cluster.patch_calls == [("node-a", True)]
        assert [r.changed for r in first] == [True]
        assert [r.changed for r in second] == [False]
        mock_printer.print_info.assert_called_once_with('cordon node "node-a"')
        mock_printer.print_debug.assert_called_once_with('no need to cordon node "node-a"')

    def test_uncordon_only_touches_cordoned_nodes(self, fake_cluster_factory, mock_printer):
        cluster = fake_cluster_factory([["node-a", "node-b"]], cordoned=["node-b"])
        controller = CordonController(cluster, printer=mock_printer)

        results = controller.toggle_cordon(False, cluster.list_group_members(None))

        assert cluster.patch_calls == [("node-b", False)]
        assert [(r.node_name, r.changed) for r in results] == [("node-a", False), ("node-b", True)]
        mock_printer.print_info.assert_called_once_with('uncordon node "node-b"')

    def test_rejected_patch_falls_back_to_replace(self, fake_cluster_factory, mock_printer):
        cluster = fake_cluster_factory([["node-a"]])
        cluster.patch_error = KubectlCommandError(["patch", "node", "node-a"], "the server does not allow this method")
        controller = CordonController(cluster, printer=mock_printer)

        results = controller.toggle_cordon(True, cluster.list_group_members(None))

        assert len(cluster.replace_calls) == 1
        assert cluster.replace_calls[0]["spec"]["unschedulable"] is True
        assert cluster.cordoned == {"node-a"}
        assert results[0].changed is True
        assert results[0].ok is True
        assert results[0].patch_error is cluster.patch_error
        assert mock_printer.print_warning.called
        mock_printer.print_critical.assert_not_called()

    def test_replace_for_uncordon_drops_the_flag(self, fake_cluster_factory, mock_printer):
        cluster = fake_cluster_factory([["node-a"]], cordoned=["node-a"])
        cluster.patch_error = KubectlCommandError(["patch"], "rejected")
        controller = CordonController(cluster, printer=mock_printer)

        controller.toggle_cordon(False, cluster.list_group_members(None))

        assert "unschedulable" not in cluster.replace_calls[0]["spec"]
        assert cluster.cordoned == set()

    def test_failures_are_reported_not_raised(self, fake_cluster_factory, mock_printer):
        cluster = fake_cluster_factory([["node-a", "node-b"]])
        cluster.patch_error = KubectlCommandError(["patch"], "rejected")
        cluster.replace_error = KubectlCommandError(["replace"], "Operation cannot be fulfilled")
        controller = CordonController(cluster, printer=mock_printer)

        results = controller.toggle_cordon(True, cluster.list_group_members(None))

        assert [r.ok for r in results] == [False, False]
        assert all(r.changed is False for r in results)
        assert mock_printer.print_critical.call_count == 2
        mock_printer.print_info.assert_not_called()

    def test_replace_uses_a_fresh_read(self, node_factory, mock_printer):
        listed = node_factory("node-a")
        fresh = node_factory("node-a")
        fresh["metadata"]["resourceVersion"] = "2002"
        cluster = Mock()
        cluster.patch_node_cordon.side_effect = KubectlCommandError(["patch"], "conflict")
        cluster.get_node.return_value = fresh
        controller = CordonController(cluster, printer=mock_printer)

        controller.toggle_cordon(True, [listed])

        cluster.get_node.assert_called_once_with("node-a")
        replaced = cluster.replace_node.call_args.args[0]
        assert replaced["metadata"]["resourceVersion"] == "2002"
        assert "unschedulable" not in fresh["spec"]


class TestHelpers:
    def test_is_cordoned(self, node_factory):
        assert is_cordoned(node_factory("node-a", unschedulable=True)) is True
        assert is_cordoned(node_factory("node-a")) is False
        assert is_cordoned({"metadata": {"name": "bare"}}) is False

    def test_cordon_result_defaults(self):
        result = CordonResult(node_name="node-a", desired=True)
        assert result.ok is True
        assert result.changed is False
