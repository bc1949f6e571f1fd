import io
import json
import os
import tempfile
import unittest

from unittest.mock import patch

from atmfjstc.lib.blocks_codegen.cli import main, build_argument_parser, options_from_args
from atmfjstc.lib.blocks_codegen.cli.errors import DescriptiveError


PROGRAM = {
    'blocks': {
        'blocks': [
            {
                'type': 'controls_whileUntil',
                'id': 'w1',
                'fields': {'MODE': 'UNTIL'},
                'inputs': {
                    'BOOL': {'block': {'type': 'variables_get', 'fields': {'VAR': {'id': 'v1'}}}},
                    'DO': {'block': {'type': 'wait', 'fields': {'DURATION': 1}}},
                },
            },
        ],
    },
    'variables': [{'name': 'done', 'id': 'v1'}],
}


class CliTest(unittest.TestCase):
    def setUp(self):
        self._temp_dir = tempfile.TemporaryDirectory()
        self.addCleanup(self._temp_dir.cleanup)

    def _write(self, name, content):
        path = os.path.join(self._temp_dir.name, name)
        with open(path, 'wt', encoding='utf-8') as f:
            f.write(content if isinstance(content, str) else json.dumps(content))

        return path

    def _run(self, *argv):
        stdout = io.StringIO()
        stderr = io.StringIO()

        with patch('sys.stdout', stdout), patch('sys.stderr', stderr):
            try:
                main(list(argv))
                exit_code = 0
            except SystemExit as e:
                exit_code = e.code

        return exit_code, stdout.getvalue(), stderr.getvalue()

    def test_generate_to_stdout(self):
        exit_code, stdout, _ = self._run(self._write('program.json', PROGRAM))

        self.assertEqual(exit_code, 0)
        self.assertEqual(stdout, 'while !done {\n    time::delay_secs(1);\n}\n')

    def test_generate_to_file(self):
        output_path = os.path.join(self._temp_dir.name, 'main.rs')

        exit_code, stdout, _ = self._run(self._write('program.json', PROGRAM), '-o', output_path)

        self.assertEqual(exit_code, 0)
        with open(output_path, 'rt', encoding='utf-8') as f:
            self.assertEqual(f.read(), 'while !done {\n    time::delay_secs(1);\n}\n')
        self.assertIn('Generated', stdout)

    def test_options(self):
        exit_code, stdout, _ = self._run(
            self._write('program.json', PROGRAM), '--indent', '2', '--loop-trap', 'trap(%1);',
            '--statement-prefix', 'hl(%1);'
        )

        self.assertEqual(exit_code, 0)
        self.assertEqual(
            stdout,
            'hl("w1");\n'
            'while !done {\n'
            '  trap("w1");\n'
            '  hl("wait#1");\n'
            '  time::delay_secs(1);\n'
            '}\n'
        )

    def test_reserve(self):
        exit_code, stdout, _ = self._run(self._write('program.json', PROGRAM), '--reserve', 'done')

        self.assertEqual(exit_code, 0)
        self.assertEqual(stdout, 'while !done2 {\n    time::delay_secs(1);\n}\n')

    def test_missing_file(self):
        exit_code, _, stderr = self._run(os.path.join(self._temp_dir.name, 'nope.json'))

        self.assertEqual(exit_code, 1)
        self.assertIn('Could not read', stderr)

    def test_invalid_json(self):
        exit_code, _, stderr = self._run(self._write('program.json', '{"blocks": '))

        self.assertEqual(exit_code, 1)
        self.assertIn('is not valid JSON', stderr)

    def test_schema_violation(self):
        exit_code, _, stderr = self._run(self._write('program.json', {'blocks': {'blocks': [{'id': 'x'}]}}))

        self.assertEqual(exit_code, 1)
        self.assertIn('is not a valid block program', stderr)
        self.assertIn('blocks/blocks/0', stderr)

    def test_unknown_variable(self):
        exit_code, _, stderr = self._run(self._write('program.json', {'blocks': {'blocks': [
            {'type': 'variables_get', 'fields': {'VAR': {'id': 'v9'}}},
        ]}}))

        self.assertEqual(exit_code, 1)
        self.assertIn("undeclared variable id 'v9'", stderr)

    def test_unsupported_blocks(self):
        exit_code, _, stderr = self._run(self._write('program.json', {'blocks': {'blocks': [
            {'type': 'teleport', 'next': {'block': {'type': 'fly'}}},
        ]}}))

        self.assertEqual(exit_code, 1)
        self.assertIn('Unsupported block type(s)', stderr)
        self.assertIn('fly, teleport', stderr)

    def test_generation_error(self):
        exit_code, stdout, stderr = self._run(self._write('program.json', {'blocks': {'blocks': [
            {'type': 'controls_flow_statements', 'id': 'f1', 'fields': {'FLOW': 'RETURN'}},
        ]}}))

        self.assertEqual(exit_code, 1)
        self.assertEqual(stdout, '')
        self.assertIn("Unknown flow statement: 'RETURN'", stderr)
        self.assertIn("(id 'f1')", stderr)
        self.assertNotIn('Traceback', stderr)

    def test_unexpected_error_shows_trace(self):
        with patch('atmfjstc.lib.blocks_codegen.cli.CodeGenerator.generate', side_effect=ValueError('boom')):
            exit_code, _, stderr = self._run(self._write('program.json', PROGRAM))

        self.assertEqual(exit_code, 1)
        self.assertIn('ValueError: boom', stderr)
        self.assertIn('Traceback:', stderr)

    def test_interrupted(self):
        with patch('atmfjstc.lib.blocks_codegen.cli.CodeGenerator.generate', side_effect=KeyboardInterrupt()):
            exit_code, _, stderr = self._run(self._write('program.json', PROGRAM))

        self.assertEqual(exit_code, 130)
        self.assertIn('Stopped by user', stderr)


class OptionsFromArgsTest(unittest.TestCase):
    def _options(self, *argv):
        return options_from_args(build_argument_parser().parse_args(['in.json', *argv]))

    def test_defaults(self):
        options = self._options()

        self.assertEqual(options.indent, '    ')
        self.assertIsNone(options.loop_trap)
        self.assertIsNone(options.statement_prefix)
        self.assertEqual(options.reserved_words, ())

    def test_templates_become_lines(self):
        options = self._options('--loop-trap', 'trap(%1);', '--statement-prefix', 'hl(%1);\n')

        self.assertEqual(options.loop_trap, 'trap(%1);\n')
        self.assertEqual(options.statement_prefix, 'hl(%1);\n')

    def test_reserve_repeated(self):
        self.assertEqual(self._options('--reserve', 'a', '--reserve', 'b').reserved_words, ('a', 'b'))

    def test_negative_indent(self):
        with self.assertRaises(DescriptiveError):
            self._options('--indent', '-1')
