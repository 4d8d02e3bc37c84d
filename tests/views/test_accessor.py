# Copyright 2026 OCL Parser Contributors
# SPDX-License-Identifier: Apache-2.0

"""Tests for the read-only document views."""

import copy
from pathlib import Path

import pytest

from ocl.parser.parser import parse
from ocl.views.accessor import (
    BlockCollection,
    DocumentView,
    NodeView,
    is_array,
    keys,
    labels_of,
    lookup,
    name_of,
    view,
)

_DEPLOYMENT = Path(__file__).parent.parent / "data" / "deployment.ocl"

# ###############
# Fixtures
# ###############


@pytest.fixture(scope="module")
def root() -> DocumentView:
    """The deployment document, wrapped in a view."""
    return view(parse(_DEPLOYMENT.read_text(encoding="utf-8")))


@pytest.fixture
def upgrade_action(root: DocumentView) -> NodeView:
    """The second action of the first step, which carries duplicate packages."""
    return root.step[0].action["upgrade-store-client-software"]


# ###############
# Document Root
# ###############


class TestDocumentView:
    def test_fixture_has_no_recoveries(self) -> None:
        assert parse(_DEPLOYMENT.read_text(encoding="utf-8")).recoveries() == []

    def test_length_counts_top_level_nodes(self, root: DocumentView) -> None:
        assert len(root) == 7

    def test_index_access(self, root: DocumentView) -> None:
        assert root[0]["__name"] == "step"
        assert root[4]["__name"] == "int_attribute"
        assert root[-1]["__name"] == "properties"

    def test_out_of_range_index_is_none(self, root: DocumentView) -> None:
        assert root[7] is None
        assert root[-8] is None

    def test_slice(self, root: DocumentView) -> None:
        assert [node["__name"] for node in root[4:]] == ["int_attribute", "array_attribute", "properties"]

    def test_iteration_yields_node_views(self, root: DocumentView) -> None:
        nodes = list(root)
        assert len(nodes) == 7
        assert all(isinstance(node, NodeView) for node in nodes)

    def test_name_lookup_of_blocks(self, root: DocumentView) -> None:
        steps = root.step
        assert isinstance(steps, BlockCollection)
        assert len(steps) == 4

    def test_step_by_index_matches_root_by_index(self, root: DocumentView) -> None:
        assert root.step[0] == root[0]
        assert root.step[3] == root[3]

    def test_top_level_attributes(self, root: DocumentView) -> None:
        assert root.int_attribute == 1
        assert root.array_attribute == [1]
        assert root.properties.Purpose == ""
        assert root.properties.SelectionMode == "immediate"

    def test_missing_name_is_none(self, root: DocumentView) -> None:
        assert root.missing is None
        assert root["missing"] is None

    def test_child_counts_and_named_lookup(self) -> None:
        small = view(parse("A {\n  x = 1\n  y = 2\n}\nB {\n  z = 3\n}"))
        assert len(small) == 2
        assert [k for k in keys(small[0]) if not str(k).startswith("__")] == ["x", "y"]
        assert [k for k in keys(small[1]) if not str(k).startswith("__")] == ["z"]
        assert small.A[0] == small[0]

    def test_empty_document(self) -> None:
        empty = view(parse(""))
        assert len(empty) == 0
        assert list(empty) == []
        assert empty[0] is None

    def test_root_membership(self, root: DocumentView) -> None:
        assert "step" in root
        assert "properties" in root
        assert "missing" not in root
        assert "__name" not in root

    def test_keys_of_root_are_distinct_top_level_names(self, root: DocumentView) -> None:
        assert keys(root) == ["step", "int_attribute", "array_attribute", "properties"]
        assert keys(view(parse(""))) == []


# ###############
# Blocks and Labels
# ###############


class TestBlocks:
    def test_name_and_labels(self, root: DocumentView) -> None:
        step = root.step[0]
        assert step["__name"] == "step"
        assert step["__labels"] == ["back-up-store-client-filesystem"]
        assert name_of(step) == "step"
        assert labels_of(step) == ["back-up-store-client-filesystem"]

    def test_unlabelled_block_has_empty_labels(self, root: DocumentView) -> None:
        assert root.step[1].action[0]["__labels"] == []

    def test_label_lookup(self, root: DocumentView) -> None:
        step = root.step["back-up-store-client-filesystem"]
        assert isinstance(step, NodeView)
        assert step.name == "Upgrade POS client software"

    def test_label_lookup_by_attribute_access(self, root: DocumentView) -> None:
        action = getattr(root.step[0].action, "back-up-store-client-filesystem")
        assert action.name == "Back up store client filesystem"

    def test_label_and_index_lookup_agree(self, root: DocumentView) -> None:
        assert root.step["upgrade-store-server-database"] == root.step[2]

    def test_label_matches_last_label(self) -> None:
        resources = view(parse('resource "aws_instance" "web" {}')).resource
        assert isinstance(resources["web"], NodeView)
        assert resources["aws_instance"] is None

    def test_unknown_label_is_none(self, root: DocumentView) -> None:
        assert root.step["no-such-step"] is None
        assert root.step[1].action["anything"] is None

    def test_out_of_range_position_is_none(self, root: DocumentView) -> None:
        assert root.step[4] is None
        assert root.step[-1]["__labels"] == ["upgrade-store-server-software"]

    def test_collection_slice_and_iteration(self, root: DocumentView) -> None:
        labels = [step["__labels"][0] for step in root.step]
        assert labels[:2] == ["back-up-store-client-filesystem", "back-up-store-server-filesystem"]
        assert len(root.step[1:3]) == 2

    def test_scalar_attributes(self, root: DocumentView) -> None:
        step = root.step[0]
        assert step.number_value == 10
        assert step.bool_value is False
        assert step.array_value[:4] == [1, 2, 3, "test"]

    def test_dictionary_inside_array(self, root: DocumentView) -> None:
        element = root.step[0].array_value[4]
        assert isinstance(element, NodeView)
        assert element.test == 1
        assert element["__name"] == "array_value"

    def test_dotted_names_via_item_access(self, root: DocumentView) -> None:
        properties = root.step[0].properties
        assert properties["Octopus.Action.MaxParallelism"] == "100"
        assert properties["Octopus.Action.TargetRoles"] == "pos-client"
        assert properties["__name"] == "properties"

    def test_indented_heredoc_value(self, root: DocumentView) -> None:
        body = root.step[0].action[0].properties["Octopus.Action.Script.ScriptBody"]
        assert body == (
            'Write-Highlight "Backing up store client filesystem"\n'
            "\n"
            "Start-Sleep 2\n"
            "\n"
            'Write-Highlight "Finished backing up store client filesystem"\n'
            "\n"
        )

    def test_heredoc_keeps_dollar_signs(self, upgrade_action: NodeView) -> None:
        body = upgrade_action.properties["Octopus.Action.Script.ScriptBody"]
        assert body.startswith('$current = $OctopusParameters["Octopus.Release.Previous.Number"]\n')


# ###############
# Duplicates
# ###############


class TestDuplicates:
    def test_duplicate_labels_yield_list(self, upgrade_action: NodeView) -> None:
        packages = upgrade_action.packages["Pos.Client.Application"]
        assert isinstance(packages, list)
        assert len(packages) == 2
        assert packages[0] == upgrade_action.packages[0]

    def test_duplicate_attributes_yield_list_in_order(self, upgrade_action: NodeView) -> None:
        first, second = upgrade_action.packages
        assert [props.Purpose for props in first.properties] == ["", "Second properties"]
        assert [props.Purpose for props in second.properties] == ["", "Third properties"]

    def test_three_way_duplicates_keep_source_order(self) -> None:
        root = view(parse("a = 1\na = 2\na = 3"))
        assert root.a == [1, 2, 3]

    def test_single_attribute_is_not_wrapped(self, upgrade_action: NodeView) -> None:
        assert upgrade_action.action_type == "Octopus.Script"

    def test_keys_are_collapsed(self, upgrade_action: NodeView) -> None:
        package = upgrade_action.packages[0]
        assert keys(package) == [
            "acquisition_location",
            "feed",
            "package_id",
            "properties",
            "__name",
            "__labels",
        ]


# ###############
# Keys and Enumeration
# ###############


class TestKeys:
    def test_block_keys_in_first_occurrence_order(self, root: DocumentView) -> None:
        assert list(root.step[0]) == [
            "name",
            "array_value",
            "number_value",
            "bool_value",
            "properties",
            "action",
            "__name",
            "__labels",
        ]

    def test_dictionary_keys_have_no_labels(self, root: DocumentView) -> None:
        assert list(root.properties) == ["Extract", "Purpose", "SelectionMode", "__name"]

    def test_floating_attribute(self, root: DocumentView) -> None:
        floating = root[4]
        assert list(floating) == ["int_attribute"]
        assert floating.int_attribute == 1
        assert floating["__name"] == "int_attribute"
        assert floating.other is None

    def test_membership(self, root: DocumentView) -> None:
        step = root.step[0]
        assert "name" in step
        assert "__labels" in step
        assert "missing" not in step

    def test_array_view(self) -> None:
        document = parse("items = [1, [2], 3, { x = 1 }]")
        array = view(document, document.node(document.top_level[0]).value)
        assert is_array(array)
        assert keys(array) == [0, 1, 2]
        assert lookup(array, 1) == 3
        assert lookup(array, -1).x == 1
        assert lookup(array, 3) is None
        assert lookup(array, "x") is None

    def test_nested_arrays_are_dropped_from_values(self) -> None:
        assert view(parse("items = [1, [2], 3]")).items == [1, 3]

    def test_literal_view_has_no_keys(self) -> None:
        document = parse("count = 1")
        literal = view(document, document.node(document.top_level[0]).value)
        assert keys(literal) == []
        assert lookup(literal, "count") is None
        assert not is_array(literal)

    def test_recovery_view_has_no_keys(self) -> None:
        document = parse(";")
        recovery = view(document)[0]
        assert keys(recovery) == []
        assert recovery["__name"] is None


# ###############
# Precedence
# ###############


def test_attribute_takes_precedence_over_block() -> None:
    root = view(parse("x = 1\nx { y = 2 }"))
    assert root.x == 1


def test_dictionary_may_hold_blocks() -> None:
    root = view(parse("settings = { nested { x = 1 } }"))
    assert root.settings.nested[0].x == 1


# ###############
# Read-only Behaviour
# ###############


class TestReadOnly:
    def test_attribute_assignment_is_ignored(self, root: DocumentView) -> None:
        step = root.step[0]
        step.name = "changed"
        assert step.name == "Upgrade POS client software"

    def test_item_assignment_is_ignored(self, root: DocumentView) -> None:
        step = root.step[0]
        step["name"] = "changed"
        root["int_attribute"] = 2
        assert step["name"] == "Upgrade POS client software"
        assert root.int_attribute == 1

    def test_deletion_is_ignored(self, root: DocumentView) -> None:
        step = root.step[0]
        del step.name
        del step["name"]
        assert step.name == "Upgrade POS client software"

    def test_copy_returns_same_view(self, root: DocumentView) -> None:
        step = root.step[0]
        assert copy.copy(step) is step
        assert copy.deepcopy(step) is step
        assert copy.deepcopy(root) is root

    def test_views_are_unhashable(self, root: DocumentView) -> None:
        with pytest.raises(TypeError):
            hash(root.step[0])

    def test_protocol_names_raise_attribute_error(self, root: DocumentView) -> None:
        step = root.step[0]
        with pytest.raises(AttributeError):
            getattr(step, "__array__")
        assert not hasattr(root.step, "__fspath__")
        assert not hasattr(root, "__length_hint__")

    def test_view_equality(self, root: DocumentView) -> None:
        assert root.step[1] != root.step[2]
        assert root.step[0] != 1

    def test_repr(self, root: DocumentView) -> None:
        assert repr(root) == "DocumentView(7 top-level node(s))"
        assert repr(root.step) == "BlockCollection(4 block(s))"
        assert repr(root.step[1]) == "NodeView(block 'step' ['back-up-store-server-filesystem'])"
        assert repr(root.properties) == "NodeView(dictionary 'properties')"
