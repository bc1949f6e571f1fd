"""
Utilities for working with bits of generated code as plain text.
"""

import re

from typing import Optional


_LINE_RE = re.compile(r'[^\n]*\n|[^\n]+')
_TRAILING_BLANKS_RE = re.compile(r'[ \t]+\n')
_LEADING_BLANK_LINES_RE = re.compile(r'^(?:[ \t]*\n)+')
_FINAL_BLANK_LINES_RE = re.compile(r'\n\s+$')

_RUST_STRING_ESCAPES = {
    '\\': '\\\\',
    '"': '\\"',
    '\n': '\\n',
    '\r': '\\r',
    '\t': '\\t',
    '\0': '\\0',
}


def prefix_lines(text: str, prefix: str) -> str:
    """
    Adds a prefix (usually an indent) in front of every line in a text.

    A final newline is not considered to start a new line, so ``prefix_lines('a\\nb\\n', '  ')`` gives
    ``'  a\\n  b\\n'``. An empty text stays empty.

    Only ``'\\n'`` separates lines. Other line break characters (e.g. U+2028) may occur inside string literals and are
    left alone.
    """
    if text == '':
        return ''

    return ''.join(prefix + line for line in _LINE_RE.findall(text))


def quote_string(text: str) -> str:
    """
    Renders a string as a Rust string literal.
    """
    return '"' + ''.join(_RUST_STRING_ESCAPES.get(char, char) for char in text) + '"'


def inject_id(template: str, block_id: Optional[str]) -> str:
    """
    Replaces every ``%1`` in a template with the quoted id of a block.
    """
    return template.replace('%1', quote_string(block_id or ''))


def normalize_whitespace(code: str) -> str:
    """
    Cleans up a fully generated program: strips leading blank lines, collapses trailing blank lines into a single
    newline, and removes trailing spaces from all lines.
    """
    code = _LEADING_BLANK_LINES_RE.sub('', code, count=1)
    code = _FINAL_BLANK_LINES_RE.sub('\n', code, count=1)
    code = _TRAILING_BLANKS_RE.sub('\n', code)

    return code
