"""
Loading block programs from the editor's JSON serialization format.

The format looks like::

    {
        "blocks": {
            "languageVersion": 0,
            "blocks": [
                {
                    "type": "controls_repeat_ext",
                    "id": "a1b2",
                    "x": 20, "y": 20,
                    "inputs": {
                        "TIMES": {"shadow": {"type": "math_number", "fields": {"NUM": 10}}},
                        "DO": {"block": {"type": "...", "next": {"block": {"type": "..."}}}}
                    }
                }
            ]
        },
        "variables": [{"name": "i", "id": "v1"}]
    }

The data is validated against a JSON schema before being converted to `Block` objects.
"""

import json

from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Union

import jsonschema

from atmfjstc.lib.blocks_codegen.blocks import Block, BlockDocument


JSONSchema = Dict[str, Any]


def _obj(props: Optional[Dict[str, JSONSchema]] = None, optional: Optional[Dict[str, JSONSchema]] = None,
         open: bool = False) -> JSONSchema:
    props = props or {}
    optional = optional or {}

    schema = dict(
        type='object',
        properties={**props, **optional},
    )

    if len(props) > 0:
        schema['required'] = list(props.keys())
    if not open:
        schema['additionalProperties'] = False

    return schema


def _array(item_type: JSONSchema) -> JSONSchema:
    return dict(type='array', items=item_type)


def _map(value_type: JSONSchema) -> JSONSchema:
    return dict(type='object', additionalProperties=value_type)


def _ref(name: str) -> JSONSchema:
    return {'$ref': f'#/definitions/{name}'}


_STRING = dict(type='string')
_NON_EMPTY_STRING = dict(type='string', minLength=1)
_NUMBER = dict(type='number')
_BOOLEAN = dict(type='boolean')

_VARIABLE_REF = _obj(optional=dict(id=_STRING, name=_STRING, type=_STRING), open=True)

_FIELD_VALUE = dict(anyOf=[
    _STRING,
    _NUMBER,
    _BOOLEAN,
    dict(type='null'),
    _VARIABLE_REF,
])

_CONNECTION = _obj(optional=dict(block=_ref('block'), shadow=_ref('block')))

DOCUMENT_SCHEMA = dict(
    definitions=dict(
        block=_obj(
            props=dict(type=_NON_EMPTY_STRING),
            optional=dict(
                id=_STRING,
                x=_NUMBER,
                y=_NUMBER,
                fields=_map(_FIELD_VALUE),
                inputs=_map(_CONNECTION),
                next=_CONNECTION,
                extraState=dict(type=['object', 'string']),
                enabled=_BOOLEAN,
                disabledReasons=_array(_STRING),
            ),
            open=True,
        ),
    ),
    **_obj(
        optional=dict(
            blocks=_obj(
                props=dict(blocks=_array(_ref('block'))),
                optional=dict(languageVersion=dict(type='integer')),
            ),
            variables=_array(_obj(props=dict(name=_STRING), optional=dict(id=_STRING, type=_STRING))),
        ),
        open=True,
    )
)
"""JSON schema for a serialized workspace"""


class InvalidDocumentError(ValueError):
    """
    Raised for documents that are well-formed according to the schema but inconsistent, e.g. referring to an unknown
    variable id.
    """


def load_document(json_data: Any) -> BlockDocument:
    """
    Converts the JSON serialization of a workspace into a `BlockDocument`.

    Raises:
        jsonschema.exceptions.ValidationError: if the data does not match the document schema
        InvalidDocumentError: if the data is inconsistent
    """
    jsonschema.validate(json_data, DOCUMENT_SCHEMA)

    variables = json_data.get('variables', [])
    variable_names = {var['id']: var['name'] for var in variables if 'id' in var}

    loader = _BlockLoader(variable_names)

    return BlockDocument(
        blocks=tuple(loader.load(raw_block) for raw_block in json_data.get('blocks', {}).get('blocks', [])),
        variables=tuple(var['name'] for var in variables),
    )


def load_document_file(path: Union[str, Path]) -> BlockDocument:
    """
    Loads a `BlockDocument` from a JSON file. See `load_document` for the exceptions that may be raised.
    """
    with open(path, 'rt', encoding='utf-8') as f:
        return load_document(json.load(f))


class _BlockLoader:
    _variable_names: Dict[str, str] = None
    _type_counters: Dict[str, int] = None

    def __init__(self, variable_names: Dict[str, str]):
        self._variable_names = variable_names
        self._type_counters = dict()

    def load(self, raw_block: Dict[str, Any]) -> Block:
        block_type = raw_block['type']

        block_id = raw_block.get('id')
        if block_id is None:
            block_id = self._synthesize_id(block_type)

        inputs = dict()
        for name, connection in raw_block.get('inputs', {}).items():
            target = self._load_connection(connection)
            if target is not None:
                inputs[name] = target

        extra_state = raw_block.get('extraState', {})
        if not isinstance(extra_state, dict):
            # Some blocks serialize their extra state as an XML mutation string, which we have no use for
            extra_state = {}

        fields = {
            name: self._load_field_value(block_id, value) for name, value in raw_block.get('fields', {}).items()
        }

        return Block(
            type=block_type,
            id=block_id,
            fields=fields,
            inputs=inputs,
            next_block=self._load_connection(raw_block.get('next')),
            extra_state=extra_state,
            enabled=raw_block.get('enabled', True) and len(raw_block.get('disabledReasons', [])) == 0,
        )

    def _load_connection(self, connection: Optional[Dict[str, Any]]) -> Optional[Block]:
        if connection is None:
            return None

        # A real block always takes precedence over the shadow behind it
        raw_block = connection.get('block', connection.get('shadow'))

        return None if raw_block is None else self.load(raw_block)

    def _load_field_value(self, block_id: str, value: Any) -> Any:
        if not isinstance(value, dict):
            return value

        var_id = value.get('id')
        if var_id is not None:
            name = self._variable_names.get(var_id)
            if name is None:
                raise InvalidDocumentError(f"Block {block_id!r} refers to undeclared variable id {var_id!r}")

            return name

        if 'name' in value:
            return value['name']

        raise InvalidDocumentError(f"Block {block_id!r} has a variable field with neither an id nor a name")

    def _synthesize_id(self, block_type: str) -> str:
        self._type_counters[block_type] = self._type_counters.get(block_type, 0) + 1

        return f"{block_type}#{self._type_counters[block_type]}"


def find_unknown_block_types(document: BlockDocument, known_types: Iterable[str]) -> List[str]:
    """
    Returns the (sorted, unique) block types used in a document that are not among `known_types`.

    Useful for reporting all unsupported blocks at once, before attempting to generate code.
    """
    known = set(known_types)

    return sorted({block.type for block in document.iter_all_blocks() if block.type not in known})
