"""Tests for element restore: type rectification, overrides, node swapping and subcircuits."""

import logging

import pytest
from builders import make_element, make_node
from controllers.module_loader import load_module, load_subcircuit, rectify_object_type
from controllers.node_registry import NodeRegistry
from models.element import DEFAULT_PROPAGATION_DELAY
from models.elements import AndGate, DflipFlop, Input, Output, Rom
from models.errors import CorruptDocumentError, SubcircuitReferenceError, UnknownElementTypeError
from models.node import NODE_INPUT, NODE_OUTPUT
from models.project import ProjectSession
from models.scope import Scope
from models.subcircuit import SubCircuit


@pytest.fixture
def scope():
    return Scope(name="main")


@pytest.fixture
def nodes(scope):
    return NodeRegistry(scope)


class TestRectifyObjectType:
    def test_legacy_flip_flop(self):
        assert rectify_object_type("FlipFlop") == "DflipFlop"

    def test_legacy_ram(self):
        assert rectify_object_type("Ram") == "Rom"

    def test_current_tags_unchanged(self):
        assert rectify_object_type("AndGate") == "AndGate"
        assert rectify_object_type("RAM") == "RAM"


class TestConstruction:
    def test_constructor_parameters_passed_through(self, scope, nodes):
        gate = load_module(make_element("AndGate", 30, 40, ["RIGHT", 3, 1]), scope, nodes)
        assert isinstance(gate, AndGate)
        assert (gate.x, gate.y) == (30, 40)
        assert len(gate.inp) == 3
        assert scope.elements_of("AndGate") == [gate]

    def test_legacy_tag_builds_current_type(self, scope, nodes):
        element = load_module(make_element("FlipFlop", params=["RIGHT", 1]), scope, nodes)
        assert isinstance(element, DflipFlop)
        assert scope.elements_of("DflipFlop") == [element]

    def test_legacy_ram_builds_rom(self, scope, nodes):
        element = load_module(make_element("Ram", params=["RIGHT"]), scope, nodes)
        assert isinstance(element, Rom)

    def test_list_key_used_when_record_has_no_type(self, scope, nodes):
        record = make_element("Input", params=["RIGHT", 1])
        del record["objectType"]
        element = load_module(record, scope, nodes, default_type="Input")
        assert isinstance(element, Input)

    def test_unknown_type_fails_loudly(self, scope, nodes):
        with pytest.raises(UnknownElementTypeError) as excinfo:
            load_module(make_element("FluxCapacitor"), scope, nodes)
        assert isinstance(excinfo.value, CorruptDocumentError)
        assert excinfo.value.object_type == "FluxCapacitor"

    def test_bad_constructor_parameters_are_corrupt(self, scope, nodes):
        with pytest.raises(CorruptDocumentError, match="Clock"):
            load_module(make_element("Clock", params=["RIGHT", 1, 2, 3, 4]), scope, nodes)


class TestCommonFields:
    def test_label_restored(self, scope, nodes):
        gate = load_module(make_element("AndGate", params=["RIGHT", 2, 1], label="carry"), scope, nodes)
        assert gate.label == "carry"

    def test_missing_label_is_empty(self, scope, nodes):
        record = make_element("AndGate", params=["RIGHT", 2, 1])
        del record["label"]
        assert load_module(record, scope, nodes).label == ""

    def test_label_direction_defaults_to_opposite(self, scope, nodes):
        gate = load_module(make_element("AndGate", params=["LEFT", 2, 1]), scope, nodes)
        assert gate.label_direction == "RIGHT"

    def test_legacy_direction_token_normalized(self, scope, nodes):
        gate = load_module(make_element("AndGate", params=["u", 2, 1]), scope, nodes)
        assert gate.direction == "UP"
        assert gate.label_direction == "DOWN"

    def test_saved_label_direction_kept(self, scope, nodes):
        gate = load_module(make_element("AndGate", params=["RIGHT", 2, 1], labelDirection="d"), scope, nodes)
        assert gate.label_direction == "DOWN"

    def test_direction_fixed_elements_face_right(self, scope, nodes):
        flip_flop = load_module(make_element("DflipFlop", params=["LEFT", 1]), scope, nodes)
        assert flip_flop.direction == "RIGHT"
        assert (flip_flop.q_output.x, flip_flop.q_output.y) == (20, -10)

    def test_subcircuit_metadata_attached(self, scope, nodes):
        metadata = {"showInSubcircuit": True, "x": 5}
        gate = load_module(
            make_element("AndGate", params=["RIGHT", 2, 1], subcircuitMetadata=metadata), scope, nodes
        )
        assert gate.subcircuit_metadata == metadata


class TestPropagationDelay:
    @pytest.mark.parametrize(
        "saved, expected",
        [
            (0, 0),
            (0.0, 0),
            (25, 25),
            (None, DEFAULT_PROPAGATION_DELAY),
            (False, DEFAULT_PROPAGATION_DELAY),
            ("", DEFAULT_PROPAGATION_DELAY),
        ],
    )
    def test_saved_delay(self, scope, nodes, saved, expected):
        gate = load_module(make_element("AndGate", params=["RIGHT", 2, 1], propagationDelay=saved), scope, nodes)
        assert gate.propagation_delay == expected

    def test_absent_delay_keeps_type_default(self, scope, nodes):
        gate = load_module(make_element("AndGate", params=["RIGHT", 2, 1]), scope, nodes)
        assert gate.propagation_delay == DEFAULT_PROPAGATION_DELAY

    def test_zero_delay_type_default(self, scope, nodes):
        element = load_module(make_element("Input", params=["RIGHT", 1]), scope, nodes)
        assert element.propagation_delay == 0


class TestValueOverrides:
    def test_allow_listed_value_applied(self, scope, nodes):
        element = load_module(make_element("Input", params=["RIGHT", 1], values={"state": 1}), scope, nodes)
        assert element.state == 1

    def test_document_name_mapped_to_attribute(self, scope, nodes):
        gate = load_module(make_element("AndGate", params=["RIGHT", 2, 1], values={"inputSize": 2}), scope, nodes)
        assert gate.input_size == 2

    def test_unknown_value_ignored_and_logged(self, scope, nodes, caplog):
        with caplog.at_level(logging.WARNING):
            gate = load_module(
                make_element("AndGate", params=["RIGHT", 2, 1], values={"__class__": "x", "node_list": []}),
                scope,
                nodes,
            )
        assert gate.__class__ is AndGate
        assert len(gate.node_list) == 3
        assert "Ignoring unknown value '__class__'" in caplog.text


class TestNodeReplacement:
    def test_scalar_and_list_fields_replaced(self, scope, nodes):
        nodes.load_nodes(
            [make_node(-10, -10, NODE_INPUT), make_node(-10, 10, NODE_INPUT), make_node(20, 0, NODE_OUTPUT)]
        )
        gate = load_module(
            make_element("AndGate", params=["RIGHT", 2, 1], nodes={"inp": [0, 1], "output1": 2}), scope, nodes
        )
        assert gate.inp[0] is nodes.resolve(0)
        assert gate.inp[1] is nodes.resolve(1)
        assert gate.output1 is nodes.resolve(2)
        assert all(node.parent is gate for node in nodes.loaded_nodes)
        assert len(gate.node_list) == 3

    def test_minus_one_keeps_fresh_list_entry(self, scope, nodes):
        nodes.load_nodes([make_node(-10, -10, NODE_INPUT)])
        gate = load_module(make_element("AndGate", params=["RIGHT", 2, 1], nodes={"inp": [0, -1]}), scope, nodes)
        assert gate.inp[0] is nodes.resolve(0)
        assert gate.inp[1] is not nodes.resolve(0)
        assert gate.inp[1].parent is gate

    def test_shared_topology_restored(self, scope, nodes):
        node_docs = [make_node(10, 0, NODE_OUTPUT, [1]), make_node(10, 0, NODE_INPUT, [0])]
        nodes.load_nodes(node_docs)
        nodes.construct_connections(node_docs)
        source = load_module(make_element("Input", 0, 0, ["RIGHT", 1], nodes={"output1": 0}), scope, nodes)
        sink = load_module(make_element("Output", 100, 0, ["LEFT", 1], nodes={"inp1": 1}), scope, nodes)
        assert source.output1.connections == [sink.inp1]
        assert len(scope.wires) == 1

    def test_unknown_node_field_is_corrupt(self, scope, nodes):
        nodes.load_nodes([make_node(node_type=NODE_INPUT)])
        with pytest.raises(CorruptDocumentError, match="no node field 'bogus'"):
            load_module(make_element("NotGate", params=["RIGHT", 1], nodes={"bogus": 0}), scope, nodes)

    def test_list_for_scalar_field_is_corrupt(self, scope, nodes):
        nodes.load_nodes([make_node(node_type=NODE_INPUT)])
        with pytest.raises(CorruptDocumentError):
            load_module(make_element("NotGate", params=["RIGHT", 1], nodes={"inp1": [0]}), scope, nodes)

    def test_too_many_list_entries_is_corrupt(self, scope, nodes):
        nodes.load_nodes([make_node(node_type=NODE_INPUT)] * 3)
        with pytest.raises(CorruptDocumentError):
            load_module(make_element("AndGate", params=["RIGHT", 2, 1], nodes={"inp": [0, 1, 2]}), scope, nodes)

    def test_out_of_range_node_is_corrupt(self, scope, nodes):
        with pytest.raises(CorruptDocumentError):
            load_module(make_element("NotGate", params=["RIGHT", 1], nodes={"inp1": 0}), scope, nodes)


class TestLoadSubcircuit:
    @pytest.fixture
    def session(self):
        session = ProjectSession()
        child = session.new_circuit("Half", "half")
        Input(0, 0, child, "RIGHT", 1, {"x": 0, "y": 20, "id": "in0"})
        Input(0, 40, child, "RIGHT", 1, {"x": 0, "y": 40, "id": "in1"})
        Output(200, 0, child, "LEFT", 1, {"x": 100, "y": 30, "id": "out0"})
        return session

    def test_pins_claimed_and_placed(self, session):
        parent = session.new_circuit("Main", "main")
        registry = NodeRegistry(parent)
        registry.load_nodes(
            [make_node(node_type=NODE_INPUT), make_node(node_type=NODE_INPUT), make_node(node_type=NODE_OUTPUT)]
        )
        record = {"id": "half", "x": 50, "y": 60, "inputNodes": [0, 1], "outputNodes": [2]}

        block = load_subcircuit(record, parent, registry, session)

        assert isinstance(block, SubCircuit)
        assert block.child_scope is session.get_scope("half")
        assert block.input_nodes == [registry.resolve(0), registry.resolve(1)]
        assert block.output_nodes == [registry.resolve(2)]
        assert [(n.left_x, n.left_y) for n in block.input_nodes] == [(0, 20), (0, 40)]
        assert (block.output_nodes[0].left_x, block.output_nodes[0].left_y) == (100, 30)
        assert registry.remove_bug_nodes() == 0
        assert parent.elements_of("SubCircuit") == [block]

    def test_label_and_metadata_restored(self, session):
        parent = session.new_circuit("Main", "main")
        registry = NodeRegistry(parent)
        record = {"id": "half", "x": 0, "y": 0, "label": "adder", "subcircuitMetadata": {"a": 1}}
        block = load_subcircuit(record, parent, registry, session)
        assert block.label == "adder"
        assert block.label_direction == "LEFT"
        assert block.subcircuit_metadata == {"a": 1}

    def test_unloaded_circuit_reference(self, session):
        parent = session.new_circuit("Main", "main")
        with pytest.raises(SubcircuitReferenceError) as excinfo:
            load_subcircuit({"id": "later", "x": 0, "y": 0}, parent, NodeRegistry(parent), session)
        assert excinfo.value.scope_id == "later"

    def test_self_reference_rejected(self, session):
        parent = session.new_circuit("Main", "main")
        with pytest.raises(SubcircuitReferenceError):
            load_subcircuit({"id": "main", "x": 0, "y": 0}, parent, NodeRegistry(parent), session)

    def test_pin_count_mismatch_logged(self, session, caplog):
        parent = session.new_circuit("Main", "main")
        registry = NodeRegistry(parent)
        registry.load_nodes([make_node(node_type=NODE_INPUT)])
        with caplog.at_level(logging.WARNING):
            load_subcircuit({"id": "half", "x": 0, "y": 0, "inputNodes": [0]}, parent, registry, session)
        assert "has 1 input pins" in caplog.text
