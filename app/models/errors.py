"""Exceptions raised while rebuilding circuits from saved documents."""


class CorruptDocumentError(ValueError):
    """A saved document cannot be turned into a consistent circuit.

    Raised for problems that would leave a half-built scope behind, so the
    load is aborted instead of skipping the offending record.
    """


class UnknownElementTypeError(CorruptDocumentError):
    """An element record names a type tag that no element class handles."""

    def __init__(self, object_type: str):
        super().__init__(f"Unknown circuit element type '{object_type}'.")
        self.object_type = object_type


class SubcircuitReferenceError(CorruptDocumentError):
    """A subcircuit record references a circuit that has not been loaded yet."""

    def __init__(self, scope_id: str):
        super().__init__(
            f"Subcircuit references circuit '{scope_id}', which has not been loaded. "
            "Circuits must be listed after the subcircuits they use."
        )
        self.scope_id = scope_id
