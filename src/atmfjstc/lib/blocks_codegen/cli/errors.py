"""
Error reporting for the command-line generator.

Errors that the user can fix (a malformed document, an unsupported block) are turned into `DescriptiveError`'s, for
which only the message is shown. Anything else is assumed to be a bug and is shown with a full trace.
"""

import sys
import traceback

from typing import NoReturn, ContextManager, List, Callable
from textwrap import dedent, indent
from functools import wraps
from contextlib import contextmanager

from atmfjstc.lib.blocks_codegen.cli.console import console


class DescriptiveError(RuntimeError):
    """
    An exception class for errors where it is clear from the message what happened and where, and the traceback is
    redundant.

    Only use this in the command-line layer. The library raises its own, more specific exceptions, which the CLI
    converts using `descriptive_errors`.
    """


def fail(message: str) -> NoReturn:
    """
    Shortcut for throwing a `DescriptiveError`.
    """
    raise DescriptiveError(dedent(message).strip())


@contextmanager
def descriptive_errors(*classes: type) -> ContextManager[None]:
    """
    Use ``with descriptive_errors(Exc1, Exc2, ...): <code>`` to transform all exceptions of a given kind into
    descriptive errors.
    """
    try:
        yield
    except BaseException as e:
        if isinstance(e, classes):
            exc = DescriptiveError(short_format_exception(e, follow_cause=False))
            exc.__cause__ = e.__cause__

            raise exc

        raise


def format_exception_head(exception: BaseException) -> str:
    """
    Formats the class and message of an exception (without the traceback), as Python's exception handler would.
    """
    return ''.join(traceback.format_exception_only(exception.__class__, exception)).rstrip()


def format_exception_trace(exception: BaseException) -> str:
    """
    Formats the traceback of an exception with a base indent of 0 and no ``'Traceback:'`` header.
    """
    return dedent(''.join(traceback.format_list(traceback.extract_tb(exception.__traceback__))).rstrip())


def pretty_print_exception(exception: BaseException, follow_cause: bool = True):
    """
    Prints an exception on the console: just the message for a `DescriptiveError`, the full trace for anything else.
    """
    if isinstance(exception, KeyboardInterrupt):
        console.print_warning("Stopped by user")
        return

    if isinstance(exception, DescriptiveError):
        console.print_error(short_format_exception(exception, follow_cause=follow_cause))
        return

    for index, cause in enumerate(_causal_chain(exception, follow_cause=follow_cause)):
        base_indent = '' if index == 0 else '  '

        if index > 0:
            console.print_error("Cause:", minor=True)

        console.print_error(indent(format_exception_head(cause), base_indent))
        console.print_error(base_indent + "Traceback:", minor=True)
        console.print_error(indent(format_exception_trace(cause), base_indent + '  '), minor=True)


def short_format_exception(exception: BaseException, follow_cause: bool = True) -> str:
    """
    Presents an exception by its message only (or its class name, if the message is empty).

    Exceptions in `__cause__` will also be followed and printed. Note that the return value may be multiline because
    of this.
    """
    causes = _causal_chain(exception, follow_cause)

    head = str(exception)
    if head == '':
        head = exception.__class__.__name__

    return '\n'.join([
        head,
        *(indent(short_format_exception(cause, follow_cause=False), '  ') for cause in causes[1:])
    ])


def _causal_chain(exception: BaseException, follow_cause: bool) -> List[BaseException]:
    result = [exception]

    while follow_cause and exception.__cause__ is not None:
        exception = exception.__cause__
        result.append(exception)

    return result


def pretty_unhandled() -> Callable:
    """
    Decorator for a main function that causes unhandled exceptions to be displayed in a pretty way.

    The program then exits with status 1 (or 130, if it was interrupted by the user). A `SystemExit` passes through
    unchanged.
    """

    def real_decorator(main_function):
        @wraps(main_function)
        def wrapper(*args, **kwargs):
            try:
                return main_function(*args, **kwargs)
            except SystemExit:
                raise
            except KeyboardInterrupt as e:
                pretty_print_exception(e)
                sys.exit(130)
            except BaseException as e:
                pretty_print_exception(e)
                sys.exit(1)

        return wrapper

    return real_decorator
