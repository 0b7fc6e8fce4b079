from typing import NamedTuple


class TransformFunction(NamedTuple):
    """A self-contained script fragment and the name of the function it defines."""

    name: str
    source: str

    @property
    def is_empty(self) -> bool:
        return not self.source


# Identity transform: consumers leave their input unchanged
EMPTY_FUNCTION = TransformFunction("", "")


class PlayerFunctions(NamedTuple):
    """The functions extracted from one player script, in fixed role order."""

    decipher: TransformFunction = EMPTY_FUNCTION
    n_transform: TransformFunction = EMPTY_FUNCTION
