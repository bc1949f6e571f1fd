from dataclasses import dataclass
from typing import Optional, Tuple


@dataclass(frozen=True)
class EmitterOptions:
    """
    Holds options that control how code is generated for a block program.

    For safety, objects of this type are immutable. To "modify" the options, you can create an altered copy by calling
    the `derive` function, similar to how one would call `replace` for a named tuple.

    Attributes:
        indent: The text used for indenting one level of code inside loops, conditionals etc.
        loop_trap: If not None, a line of code that will be inserted at the top of every loop body, e.g. for bounding
            the number of iterations when running the generated code in a simulator. Any ``%1`` in the text is
            replaced by the quoted id of the loop block. The text should end with a newline.
        statement_prefix: If not None, a line of code that will be inserted before every statement (e.g. for
            highlighting the block being executed). Templated the same way as `loop_trap`.
        reserved_words: Extra identifiers that the generator must never use for variables or temporaries (on top of
            the target language keywords).
    """

    indent: str = '    '
    loop_trap: Optional[str] = None
    statement_prefix: Optional[str] = None
    reserved_words: Tuple[str, ...] = ()

    def derive(self, indent=None, loop_trap=None, statement_prefix=None, reserved_words=None,
               no_loop_trap=False, no_statement_prefix=False):
        """
        Creates a modified copy of these options (options are otherwise immutable).

        Args:
            indent: The new indent text (or None to leave it unchanged)
            loop_trap: The new loop trap template (or None to leave it unchanged)
            statement_prefix: The new statement prefix template (or None to leave it unchanged)
            reserved_words: Extra reserved words to add to the existing ones
            no_loop_trap: Disables the loop trap
            no_statement_prefix: Disables the statement prefix

        Returns:
            Options with the modifications performed.
        """
        def coalesce(a, b):
            return a if b is None else b

        return EmitterOptions(
            indent=coalesce(self.indent, indent),
            loop_trap=None if no_loop_trap else coalesce(self.loop_trap, loop_trap),
            statement_prefix=None if no_statement_prefix else coalesce(self.statement_prefix, statement_prefix),
            reserved_words=self.reserved_words + tuple(reserved_words or ()),
        )
