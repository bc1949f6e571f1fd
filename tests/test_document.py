import json
import os
import tempfile
import unittest

import jsonschema

from atmfjstc.lib.blocks_codegen.document import load_document, load_document_file, find_unknown_block_types, \
    InvalidDocumentError
from atmfjstc.lib.blocks_codegen.emitter import generate_code


SAMPLE_DOCUMENT = {
    'blocks': {
        'languageVersion': 0,
        'blocks': [
            {
                'type': 'controls_repeat_ext',
                'id': 'loop1',
                'x': 20, 'y': 20,
                'inputs': {
                    'TIMES': {'shadow': {'type': 'math_number', 'id': 'n1', 'fields': {'NUM': 10}}},
                    'DO': {
                        'block': {
                            'type': 'variables_set',
                            'id': 'set1',
                            'fields': {'VAR': {'id': 'v1'}},
                            'inputs': {
                                'VALUE': {
                                    'shadow': {'type': 'math_number', 'fields': {'NUM': 1}},
                                    'block': {'type': 'variables_get', 'fields': {'VAR': {'id': 'v2'}}},
                                },
                            },
                            'next': {'block': {'type': 'controls_flow_statements', 'fields': {'FLOW': 'BREAK'}}},
                        },
                    },
                },
            },
        ],
    },
    'variables': [{'name': 'count', 'id': 'v1'}, {'name': 'level', 'id': 'v2'}],
}


class LoadDocumentTest(unittest.TestCase):
    def test_structure(self):
        document = load_document(SAMPLE_DOCUMENT)

        self.assertEqual(document.variables, ('count', 'level'))
        self.assertEqual(len(document.blocks), 1)

        loop = document.blocks[0]
        self.assertEqual(loop.type, 'controls_repeat_ext')
        self.assertEqual(loop.id, 'loop1')
        self.assertEqual(loop.value_input('TIMES').get_field_value('NUM'), 10)

        body = loop.statement_input('DO')
        self.assertEqual([block.type for block in body], ['variables_set', 'controls_flow_statements'])
        self.assertEqual(body[0].get_field_value('VAR'), 'count')

    def test_block_wins_over_shadow(self):
        body = load_document(SAMPLE_DOCUMENT).blocks[0].statement_input('DO')

        self.assertEqual(body[0].value_input('VALUE').type, 'variables_get')
        self.assertEqual(body[0].value_input('VALUE').get_field_value('VAR'), 'level')

    def test_missing_ids_are_synthesized(self):
        body = load_document(SAMPLE_DOCUMENT).blocks[0].statement_input('DO')

        self.assertEqual(body[1].id, 'controls_flow_statements#1')
        self.assertEqual(body[0].value_input('VALUE').id, 'variables_get#1')

    def test_generate(self):
        self.assertEqual(
            generate_code(load_document(SAMPLE_DOCUMENT)),
            'let mut count = Default::default();\n'
            '\n'
            'for count2 in 0..10 {\n'
            '    count = level;\n'
            '    break;\n'
            '}\n'
        )

    def test_empty_document(self):
        document = load_document({})

        self.assertEqual(document.blocks, ())
        self.assertEqual(document.variables, ())

    def test_disabled_blocks(self):
        document = load_document({'blocks': {'blocks': [
            {'type': 'text', 'enabled': False},
            {'type': 'text', 'disabledReasons': ['ORPHANED_BLOCK']},
            {'type': 'text', 'disabledReasons': []},
        ]}})

        self.assertEqual([block.enabled for block in document.blocks], [False, False, True])

    def test_variable_by_name(self):
        document = load_document({'blocks': {'blocks': [
            {'type': 'variables_get', 'fields': {'VAR': {'name': 'speed'}}},
        ]}})

        self.assertEqual(document.blocks[0].get_field_value('VAR'), 'speed')

    def test_string_extra_state_is_ignored(self):
        document = load_document({'blocks': {'blocks': [
            {'type': 'controls_if', 'extraState': '<mutation elseif="1"></mutation>'},
        ]}})

        self.assertEqual(document.blocks[0].extra_state, {})

    def test_unknown_variable_id(self):
        with self.assertRaises(InvalidDocumentError):
            load_document({'blocks': {'blocks': [
                {'type': 'variables_get', 'fields': {'VAR': {'id': 'nope'}}},
            ]}})

    def test_schema_violations(self):
        for bad_document in [
            {'blocks': {'blocks': [{'id': 'no_type'}]}},
            {'blocks': {'blocks': [{'type': ''}]}},
            {'blocks': {'blocks': [{'type': 'text', 'inputs': {'A': {'blok': {}}}}]}},
            {'blocks': {'blocks': [{'type': 'text', 'enabled': 'yes'}]}},
            {'variables': [{'id': 'v1'}]},
            {'blocks': []},
        ]:
            with self.subTest(document=bad_document):
                with self.assertRaises(jsonschema.ValidationError):
                    load_document(bad_document)

    def test_load_file(self):
        with tempfile.TemporaryDirectory() as temp_dir:
            path = os.path.join(temp_dir, 'program.json')
            with open(path, 'wt', encoding='utf-8') as f:
                json.dump(SAMPLE_DOCUMENT, f)

            self.assertEqual(load_document_file(path), load_document(SAMPLE_DOCUMENT))


class FindUnknownBlockTypesTest(unittest.TestCase):
    def test_find(self):
        document = load_document({'blocks': {'blocks': [
            {'type': 'teleport', 'next': {'block': {'type': 'text', 'next': {'block': {'type': 'fly'}}}}},
            {'type': 'teleport'},
        ]}})

        self.assertEqual(find_unknown_block_types(document, ['text']), ['fly', 'teleport'])

    def test_none(self):
        self.assertEqual(find_unknown_block_types(load_document(SAMPLE_DOCUMENT), [
            'controls_repeat_ext', 'math_number', 'variables_set', 'variables_get', 'controls_flow_statements',
        ]), [])
