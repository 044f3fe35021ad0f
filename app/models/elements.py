"""
Concrete circuit element types.

This module contains no Qt dependencies. Constructor signatures follow the
order in which saved documents store ``constructorParamaters``: everything
after ``(x, y, scope)`` comes from that list.

Node offsets are given for a RIGHT-facing element; nodes are rotated by the
element's direction.
"""

from typing import TYPE_CHECKING

from .element import CircuitElement
from .identifiers import generate_id
from .node import NODE_INPUT, NODE_OUTPUT

if TYPE_CHECKING:
    from .scope import Scope

LAYOUT_PIN_SPACING = 20


def get_next_position(x: float, scope: "Scope") -> float:
    """
    Find a free vertical slot for a new input/output pin on the layout edge at ``x``.

    Slots 10 units above or below an occupied one are also skipped. The
    scope's layout grows when the slot falls below its current height.
    """
    taken = set()
    for tag in ("Input", "Output"):
        for element in scope.elements_of(tag):
            props = getattr(element, "layout_properties", None)
            if props and props.get("x") == x:
                taken.add(props.get("y"))

    possible_y = LAYOUT_PIN_SPACING
    while possible_y in taken or possible_y + 10 in taken or possible_y - 10 in taken:
        possible_y += 10

    height = possible_y + LAYOUT_PIN_SPACING
    if height > scope.layout.height:
        scope.layout.height = height
    return possible_y


# --- Inputs and outputs ---


class Input(CircuitElement):
    """A toggleable input pin; also a pin on the circuit's subcircuit layout."""

    object_type = "Input"
    default_propagation_delay = 0
    node_fields = {"output1": "output1"}
    value_fields = {"state": "state"}

    def __init__(self, x, y, scope, direction="RIGHT", bit_width=1, layout_properties=None):
        super().__init__(x, y, scope, direction, bit_width)
        self.state = 0
        if layout_properties:
            self.layout_properties = dict(layout_properties)
        else:
            self.layout_properties = {"x": 0, "y": get_next_position(0, scope), "id": generate_id()}
        self.output1 = self.make_node(10, 0, NODE_OUTPUT)


class Output(CircuitElement):
    """An output probe; also a pin on the circuit's subcircuit layout."""

    object_type = "Output"
    default_propagation_delay = 0
    node_fields = {"inp1": "inp1"}

    def __init__(self, x, y, scope, direction="LEFT", bit_width=1, layout_properties=None):
        super().__init__(x, y, scope, direction, bit_width)
        if layout_properties:
            self.layout_properties = dict(layout_properties)
        else:
            width = scope.layout.width
            self.layout_properties = {"x": width, "y": get_next_position(width, scope), "id": generate_id()}
        self.inp1 = self.make_node(10, 0, NODE_INPUT)


class ConstantVal(CircuitElement):
    """A fixed binary value."""

    object_type = "ConstantVal"
    default_propagation_delay = 0
    node_fields = {"output1": "output1"}
    value_fields = {"state": "state"}

    def __init__(self, x, y, scope, direction="RIGHT", bit_width=1, state="0"):
        super().__init__(x, y, scope, direction, bit_width)
        self.state = state
        self.output1 = self.make_node(10, 0, NODE_OUTPUT)


class Clock(CircuitElement):
    """A square-wave source driven by the project clock."""

    object_type = "Clock"
    node_fields = {"output1": "output1"}

    def __init__(self, x, y, scope, direction="RIGHT"):
        super().__init__(x, y, scope, direction, 1)
        self.output1 = self.make_node(10, 0, NODE_OUTPUT)


# --- Gates ---


class NotGate(CircuitElement):
    object_type = "NotGate"
    node_fields = {"inp1": "inp1", "output1": "output1"}

    def __init__(self, x, y, scope, direction="RIGHT", bit_width=1):
        super().__init__(x, y, scope, direction, bit_width)
        self.inp1 = self.make_node(-10, 0, NODE_INPUT)
        self.output1 = self.make_node(20, 0, NODE_OUTPUT)


class Buffer(CircuitElement):
    object_type = "Buffer"
    node_fields = {"inp1": "inp1", "reset": "reset", "output1": "output1"}

    def __init__(self, x, y, scope, direction="RIGHT", bit_width=1):
        super().__init__(x, y, scope, direction, bit_width)
        self.inp1 = self.make_node(-10, 0, NODE_INPUT)
        self.reset = self.make_node(0, 20, NODE_INPUT, bit_width=1)
        self.output1 = self.make_node(20, 0, NODE_OUTPUT)


class TriState(CircuitElement):
    object_type = "TriState"
    node_fields = {"inp1": "inp1", "state": "state", "output1": "output1"}

    def __init__(self, x, y, scope, direction="RIGHT", bit_width=1):
        super().__init__(x, y, scope, direction, bit_width)
        self.inp1 = self.make_node(-10, 0, NODE_INPUT)
        self.state = self.make_node(0, 0, NODE_INPUT, bit_width=1)
        self.output1 = self.make_node(20, 0, NODE_OUTPUT)


class MultiInputGate(CircuitElement):
    """Base for gates with a configurable number of inputs."""

    node_fields = {"inp": "inp", "output1": "output1"}
    value_fields = {"inputSize": "input_size"}

    def __init__(self, x, y, scope, direction="RIGHT", inputs=2, bit_width=1):
        super().__init__(x, y, scope, direction, bit_width)
        self.input_size = max(int(inputs), 2)
        self.inp = [
            self.make_node(-10, 10 * (2 * i - (self.input_size - 1)), NODE_INPUT)
            for i in range(self.input_size)
        ]
        self.output1 = self.make_node(20, 0, NODE_OUTPUT)


class AndGate(MultiInputGate):
    object_type = "AndGate"


class OrGate(MultiInputGate):
    object_type = "OrGate"


class NandGate(MultiInputGate):
    object_type = "NandGate"


class NorGate(MultiInputGate):
    object_type = "NorGate"


class XorGate(MultiInputGate):
    object_type = "XorGate"


class XnorGate(MultiInputGate):
    object_type = "XnorGate"


# --- Plexers and wiring helpers ---


class Multiplexer(CircuitElement):
    object_type = "Multiplexer"
    node_fields = {"inp": "inp", "output1": "output1", "controlSignalInput": "control_signal_input"}

    def __init__(self, x, y, scope, direction="RIGHT", bit_width=1, control_signal_size=1):
        super().__init__(x, y, scope, direction, bit_width)
        self.control_signal_size = max(int(control_signal_size), 1)
        input_count = 1 << self.control_signal_size
        self.inp = [
            self.make_node(-20, 10 * (2 * i - (input_count - 1)), NODE_INPUT)
            for i in range(input_count)
        ]
        self.output1 = self.make_node(20, 0, NODE_OUTPUT)
        self.control_signal_input = self.make_node(0, 10 * input_count, NODE_INPUT, bit_width=self.control_signal_size)


class Splitter(CircuitElement):
    """Splits a bus into narrower buses (or joins them, depending on wiring)."""

    object_type = "Splitter"
    default_propagation_delay = 0
    node_fields = {"inp1": "inp1", "outputs": "outputs"}

    def __init__(self, x, y, scope, direction="RIGHT", bit_width=2, bit_width_split=None):
        super().__init__(x, y, scope, direction, bit_width)
        if not bit_width_split:
            bit_width_split = [1] * int(bit_width)
        self.bit_width_split = list(bit_width_split)
        self.inp1 = self.make_node(-10, 10 * (len(self.bit_width_split) - 1), NODE_INPUT)
        self.outputs = [
            self.make_node(20, 20 * i, NODE_OUTPUT, bit_width=width)
            for i, width in enumerate(self.bit_width_split)
        ]


class Tunnel(CircuitElement):
    """Connects to every tunnel in the scope sharing its identifier."""

    object_type = "Tunnel"
    default_propagation_delay = 0
    node_fields = {"inp1": "inp1"}
    value_fields = {"identifier": "identifier"}

    def __init__(self, x, y, scope, direction="LEFT", bit_width=1, identifier=""):
        super().__init__(x, y, scope, direction, bit_width)
        self.identifier = identifier
        self.inp1 = self.make_node(0, 0, NODE_INPUT)


# --- Sequential elements ---


class FlipFlop(CircuitElement):
    """Shared layout for the edge-triggered flip-flops."""

    direction_fixed = True
    common_node_fields = {
        "qOutput": "q_output",
        "qInvOutput": "q_inv_output",
        "reset": "reset",
        "preset": "preset",
        "en": "en",
    }

    def __init__(self, x, y, scope, direction="RIGHT", bit_width=1):
        super().__init__(x, y, scope, direction, bit_width)
        self.q_output = self.make_node(20, -10, NODE_OUTPUT)
        self.q_inv_output = self.make_node(20, 10, NODE_OUTPUT)
        self.reset = self.make_node(10, 20, NODE_INPUT, bit_width=1)
        self.preset = self.make_node(0, 20, NODE_INPUT, bit_width=self.bit_width)
        self.en = self.make_node(-10, 20, NODE_INPUT, bit_width=1)


class DflipFlop(FlipFlop):
    object_type = "DflipFlop"
    node_fields = {"clockInp": "clock_inp", "dInp": "d_inp", **FlipFlop.common_node_fields}

    def __init__(self, x, y, scope, direction="RIGHT", bit_width=1):
        super().__init__(x, y, scope, direction, bit_width)
        self.clock_inp = self.make_node(-20, 10, NODE_INPUT, bit_width=1)
        self.d_inp = self.make_node(-20, -10, NODE_INPUT)


class TflipFlop(FlipFlop):
    object_type = "TflipFlop"
    node_fields = {"clockInp": "clock_inp", "dInp": "d_inp", **FlipFlop.common_node_fields}

    def __init__(self, x, y, scope, direction="RIGHT", bit_width=1):
        super().__init__(x, y, scope, direction, bit_width)
        self.clock_inp = self.make_node(-20, 10, NODE_INPUT, bit_width=1)
        self.d_inp = self.make_node(-20, -10, NODE_INPUT)


class JKflipFlop(FlipFlop):
    object_type = "JKflipFlop"
    node_fields = {"J": "j", "K": "k", "clockInp": "clock_inp", **FlipFlop.common_node_fields}

    def __init__(self, x, y, scope, direction="RIGHT", bit_width=1):
        super().__init__(x, y, scope, direction, bit_width)
        self.j = self.make_node(-20, -10, NODE_INPUT)
        self.k = self.make_node(-20, 10, NODE_INPUT)
        self.clock_inp = self.make_node(-20, 0, NODE_INPUT, bit_width=1)


class SRflipFlop(FlipFlop):
    object_type = "SRflipFlop"
    node_fields = {"S": "s", "R": "r", **FlipFlop.common_node_fields}

    def __init__(self, x, y, scope, direction="RIGHT", bit_width=1):
        super().__init__(x, y, scope, direction, bit_width)
        self.s = self.make_node(-20, -10, NODE_INPUT)
        self.r = self.make_node(-20, 10, NODE_INPUT)


# --- Memory ---


class Rom(CircuitElement):
    """A 16-byte read-only memory."""

    object_type = "Rom"
    direction_fixed = True
    node_fields = {"memAddr": "mem_addr", "en": "en", "dataOut": "data_out"}
    value_fields = {"data": "data"}

    def __init__(self, x, y, scope, direction="RIGHT", data=None):
        super().__init__(x, y, scope, direction, 8)
        self.data = list(data) if data else [0] * 16
        self.mem_addr = self.make_node(-40, 0, NODE_INPUT, bit_width=4)
        self.en = self.make_node(0, 40, NODE_INPUT, bit_width=1)
        self.data_out = self.make_node(40, 0, NODE_OUTPUT, bit_width=8)


class RAM(CircuitElement):
    """A read/write memory with a configurable address width."""

    object_type = "RAM"
    direction_fixed = True
    node_fields = {
        "address": "address",
        "dataIn": "data_in",
        "write": "write",
        "reset": "reset",
        "dataOut": "data_out",
    }
    value_fields = {"data": "data"}

    def __init__(self, x, y, scope, direction="RIGHT", bit_width=8, address_width=10, data=None):
        super().__init__(x, y, scope, direction, bit_width)
        self.address_width = int(address_width)
        self.data = list(data) if data else []
        self.address = self.make_node(-40, -20, NODE_INPUT, bit_width=self.address_width)
        self.data_in = self.make_node(-40, 0, NODE_INPUT)
        self.write = self.make_node(-40, 20, NODE_INPUT, bit_width=1)
        self.reset = self.make_node(0, 40, NODE_INPUT, bit_width=1)
        self.data_out = self.make_node(40, 0, NODE_OUTPUT)


# --- Annotations ---


class Text(CircuitElement):
    """Free text on the canvas; owns no nodes."""

    object_type = "Text"
    direction_fixed = True
    default_propagation_delay = 0
    value_fields = {"fontSize": "font_size"}

    def __init__(self, x, y, scope, label="", font_size=14):
        super().__init__(x, y, scope, "RIGHT", 1)
        self.label = label
        self.font_size = font_size


# Defined in document order; registry.MODULE_LIST fixes the load order.
ELEMENT_CLASSES: tuple[type[CircuitElement], ...] = (
    Input,
    Output,
    ConstantVal,
    Clock,
    NotGate,
    Buffer,
    TriState,
    AndGate,
    OrGate,
    NandGate,
    NorGate,
    XorGate,
    XnorGate,
    Multiplexer,
    Splitter,
    Tunnel,
    DflipFlop,
    TflipFlop,
    JKflipFlop,
    SRflipFlop,
    Rom,
    RAM,
    Text,
)
