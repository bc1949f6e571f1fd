"""
Command-line front end: reads a serialized block program and writes the generated Rust code.
"""

import sys
import json
import logging

from argparse import ArgumentParser, Namespace
from pathlib import Path
from typing import List, Optional

import colorama
import jsonschema

from atmfjstc.lib.blocks_codegen.document import load_document_file, find_unknown_block_types, InvalidDocumentError
from atmfjstc.lib.blocks_codegen.emitter import CodeGenerator
from atmfjstc.lib.blocks_codegen.EmitterOptions import EmitterOptions
from atmfjstc.lib.blocks_codegen.errors import GenerationError
from atmfjstc.lib.blocks_codegen.registry import registry
from atmfjstc.lib.blocks_codegen.cli.console import console
from atmfjstc.lib.blocks_codegen.cli.errors import fail, descriptive_errors, pretty_unhandled


def build_argument_parser() -> ArgumentParser:
    parser = ArgumentParser(
        prog='blocks-codegen',
        description="Generates Rust source code from a block program saved in JSON format.",
    )

    parser.add_argument('input', metavar='INPUT', type=Path, help="The block program (JSON) to read")
    parser.add_argument(
        '-o', '--output', metavar='OUTPUT', type=Path, default=None,
        help="Write the generated code to this file instead of stdout",
    )
    parser.add_argument(
        '--indent', metavar='N', type=int, default=4,
        help="Number of spaces per indentation level (default: %(default)s)",
    )
    parser.add_argument(
        '--loop-trap', metavar='TEMPLATE', default=None,
        help="Code to insert at the top of every loop body. %%1 is replaced by the quoted id of the loop block.",
    )
    parser.add_argument(
        '--statement-prefix', metavar='TEMPLATE', default=None,
        help="Code to insert before every statement. %%1 is replaced by the quoted id of the block.",
    )
    parser.add_argument(
        '--reserve', metavar='NAME', action='append', default=[],
        help="Never use NAME for a variable or temporary (can be repeated)",
    )
    parser.add_argument('-v', '--verbose', action='store_true', help="Show debug messages")

    return parser


def setup_logging(raw_args: Namespace):
    logging.basicConfig(
        level='DEBUG' if raw_args.verbose else 'WARNING',
        style='{',
        format='[{asctime}] {levelname}: {message}',
    )


def options_from_args(raw_args: Namespace) -> EmitterOptions:
    if raw_args.indent < 0:
        fail(f"The indent must be a non-negative number of spaces, got {raw_args.indent}")

    return EmitterOptions(
        indent=' ' * raw_args.indent,
        loop_trap=_as_line(raw_args.loop_trap),
        statement_prefix=_as_line(raw_args.statement_prefix),
        reserved_words=tuple(raw_args.reserve),
    )


def _as_line(template: Optional[str]) -> Optional[str]:
    if template is None:
        return None

    return template if template.endswith('\n') else template + '\n'


@pretty_unhandled()
def main(argv: Optional[List[str]] = None):
    colorama.just_fix_windows_console()

    raw_args = build_argument_parser().parse_args(argv)
    setup_logging(raw_args)

    if raw_args.output is None:
        # The code goes to stdout, so keep our own chatter out of it
        console.disable_stdout()
    else:
        console.enable_stdout()

    options = options_from_args(raw_args)

    console.print_progress(f"Loading {raw_args.input}...")

    try:
        document = load_document_file(raw_args.input)
    except OSError as e:
        fail(f"Could not read {raw_args.input}: {e.strerror or e}")
    except json.JSONDecodeError as e:
        fail(f"{raw_args.input} is not valid JSON: {e}")
    except jsonschema.ValidationError as e:
        location = '/'.join(str(part) for part in e.absolute_path) or '(root)'
        fail(f"{raw_args.input} is not a valid block program: {e.message} (at {location})")
    except InvalidDocumentError as e:
        fail(f"{raw_args.input} is not a valid block program: {e}")

    unknown_types = find_unknown_block_types(document, registry.block_types())
    if len(unknown_types) > 0:
        fail(f"Unsupported block type(s) in {raw_args.input}: {', '.join(unknown_types)}")

    with descriptive_errors(GenerationError):
        code = CodeGenerator(options=options).generate(document)

    if raw_args.output is None:
        sys.stdout.write(code)
        sys.stdout.flush()
    else:
        try:
            raw_args.output.write_text(code, encoding='utf-8')
        except OSError as e:
            fail(f"Could not write {raw_args.output}: {e.strerror or e}")

        console.print_success(f"Generated {raw_args.output}")
