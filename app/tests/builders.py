"""Builders for saved project documents used across the test suite."""


def make_node(x=0, y=0, node_type=2, connections=(), bit_width=1, label=""):
    """Helper to create a saved node record."""
    return {
        "x": x,
        "y": y,
        "type": node_type,
        "bitWidth": bit_width,
        "label": label,
        "connections": list(connections),
    }


def make_element(object_type, x=0, y=0, params=None, nodes=None, values=None, **extra):
    """Helper to create a saved element record."""
    custom = {"constructorParamaters": list(params or [])}
    if nodes is not None:
        custom["nodes"] = nodes
    if values is not None:
        custom["values"] = values
    record = {"objectType": object_type, "x": x, "y": y, "label": "", "customData": custom}
    record.update(extra)
    return record


def make_scope(scope_id, name=None, nodes=None, **elements):
    """Helper to create a saved scope document; keyword arguments are element lists by tag."""
    doc = {"id": scope_id, "allNodes": list(nodes or []), "wires": []}
    if name is not None:
        doc["name"] = name
    doc.update(elements)
    return doc


def make_project(*scopes, name="Test Project", **extra):
    """Helper to create a saved project document."""
    doc = {"name": name, "scopes": list(scopes)}
    doc.update(extra)
    return doc


def input_output_scope(scope_id="sub", name="Half", inputs=1, outputs=1, layout=None):
    """
    A scope with ``inputs`` Input pins wired straight to ``outputs`` Output pins.

    Node i is Input i's output node; node inputs + j is Output j's input node.
    Input 0 drives every output.
    """
    node_docs = []
    input_records = []
    output_records = []
    for i in range(inputs):
        connections = [inputs + j for j in range(outputs)] if i == 0 else []
        node_docs.append(make_node(10, 0, 1, connections))
        input_records.append(make_element("Input", 0, 40 * i, ["RIGHT", 1], nodes={"output1": i}))
    for j in range(outputs):
        node_docs.append(make_node(10, 0, 0, [0] if inputs else []))
        output_records.append(make_element("Output", 200, 40 * j, ["LEFT", 1], nodes={"inp1": inputs + j}))
    extra = {}
    if layout is not None:
        extra["layout"] = layout
    return make_scope(scope_id, name, node_docs, Input=input_records, Output=output_records, **extra)


def subcircuit_scope(scope_id="main", child_id="sub", name="Main"):
    """
    A scope that drives one subcircuit of ``child_id`` from an Input and reads it with an Output.

    Nodes: 0 Input.output1, 1 subcircuit input pin, 2 subcircuit output pin, 3 Output.inp1.
    """
    node_docs = [
        make_node(10, 0, 1, [1]),
        make_node(0, 20, 0, [0]),
        make_node(100, 20, 1, [3]),
        make_node(10, 0, 0, [2]),
    ]
    return make_scope(
        scope_id,
        name,
        node_docs,
        Input=[make_element("Input", 0, 0, ["RIGHT", 1], nodes={"output1": 0})],
        Output=[make_element("Output", 300, 0, ["LEFT", 1], nodes={"inp1": 3})],
        SubCircuit=[{"id": child_id, "x": 100, "y": 0, "inputNodes": [1], "outputNodes": [2]}],
    )
