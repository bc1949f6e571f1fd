"""
Exceptions raised while generating code.
"""

from typing import Optional


class GenerationError(RuntimeError):
    """
    Base class for errors that make it impossible to generate code for a block tree.

    These indicate a corrupt or unsupported tree (or a bug in a handler), never a merely incomplete one: missing
    children are always tolerated and replaced by default values.
    """
    block_type = None
    block_id = None

    def __init__(self, message: str, block_type: Optional[str] = None, block_id: Optional[str] = None):
        super().__init__(message)
        self.block_type = block_type
        self.block_id = block_id

    def __str__(self) -> str:
        if self.block_type is None:
            return self.args[0]

        where = f"block '{self.block_type}'"
        if self.block_id is not None:
            where += f" (id {self.block_id!r})"

        return f"{self.args[0]} [in {where}]"


class UnsupportedBlockError(GenerationError):
    """
    Raised when there is no handler registered for a block type.
    """


class InvalidFieldValueError(GenerationError):
    """
    Raised when a field holds a value that a handler has no meaningful translation for (e.g. an unknown flow
    statement).
    """


class InvalidHandlerResultError(GenerationError):
    """
    Raised when a handler returns an expression where a statement was expected, or vice versa.
    """


class UnsupportedValueError(GenerationError):
    """
    Raised when a block is given a literal value that has no equivalent in Rust (e.g. a fractional step for a counting
    loop).
    """
