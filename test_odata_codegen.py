#!/usr/bin/env python3
"""
Tests for the code generator pipeline and the command line entry point.
"""

import json
import os
import tempfile
import unittest
from io import StringIO
from pathlib import Path
from unittest.mock import patch, MagicMock

from odata_codegen_lib import CodeGenerator, GenerationPolicy, ParseError, ReadError, UnsupportedLanguageError
from odata_codegen import main
from metadata_samples import BUSINESS_CENTRAL, EXPECTED_BUSINESS_CENTRAL_TS

# Keep a developer's .env from leaking into the CLI tests
CLEAN_ENV = {
    "ODATA_METADATA_FILE": "",
    "ODATA_URL": "",
    "ODATA_SERVICE_URL": "",
    "ODATA_USER": "",
    "ODATA_USERNAME": "",
    "ODATA_PASS": "",
    "ODATA_PASSWORD": "",
    "ODATA_CODEGEN_POLICY": "",
}


class TempDirTestCase(unittest.TestCase):

    def setUp(self):
        self._temp_dir = tempfile.TemporaryDirectory()
        self.temp_dir = Path(self._temp_dir.name)
        self.metadata_file = self.temp_dir / "metadata.xml"
        self.metadata_file.write_bytes(BUSINESS_CENTRAL)

    def tearDown(self):
        self._temp_dir.cleanup()


class TestCodeGenerator(TempDirTestCase):

    def test_generate_file(self):
        self.assertEqual(CodeGenerator().generate_file(self.metadata_file), EXPECTED_BUSINESS_CENTRAL_TS)

    def test_run_writes_output_and_creates_directories(self):
        output = self.temp_dir / "generated" / "v2" / "schema.ts"
        written = CodeGenerator().run(output, input_path=self.metadata_file)
        self.assertEqual(written, output)
        self.assertEqual(output.read_text(encoding='utf-8'), EXPECTED_BUSINESS_CENTRAL_TS)
        # No temporary files left behind
        self.assertEqual(os.listdir(output.parent), ["schema.ts"])

    def test_run_twice_is_byte_identical(self):
        first = self.temp_dir / "first.ts"
        second = self.temp_dir / "second.ts"
        CodeGenerator().run(first, input_path=self.metadata_file)
        CodeGenerator().run(second, input_path=self.metadata_file)
        self.assertEqual(first.read_bytes(), second.read_bytes())

    def test_parse_error_writes_nothing(self):
        broken = self.temp_dir / "broken.xml"
        broken.write_bytes(b"<Edmx><DataServices>")
        output = self.temp_dir / "schema.ts"
        with self.assertRaises(ParseError):
            CodeGenerator().run(output, input_path=broken)
        self.assertFalse(output.exists())

    def test_read_error(self):
        with self.assertRaises(ReadError):
            CodeGenerator().generate_file(self.temp_dir / "missing.xml")

    def test_unknown_language_fails_before_reading(self):
        with self.assertRaises(UnsupportedLanguageError):
            CodeGenerator(language="java")

    def test_requires_a_source(self):
        with self.assertRaises(ValueError):
            CodeGenerator().load()

    def test_policy_is_used(self):
        generator = CodeGenerator(policy=GenerationPolicy(excluded_entities=["salesOrderLine"]))
        model = generator.parser.parse_file(self.metadata_file)
        self.assertEqual(generator.resolved_entities(model), ["company", "customer", "salesOrder"])

    def test_diagnostics_are_collected(self):
        generator = CodeGenerator()
        generator.generate_file(self.metadata_file)
        self.assertTrue(any("customer.blocked" in d for d in generator.diagnostics))
        self.assertTrue(any("salesOrder.sellingPostalAddress" in d for d in generator.diagnostics))

    @patch('requests.Session.get')
    def test_generate_service(self, mock_get):
        mock_response = MagicMock()
        mock_response.content = BUSINESS_CENTRAL
        mock_get.return_value = mock_response
        text = CodeGenerator().generate_service("https://api.example.com/v2.0", auth=("user", "pass"))
        self.assertEqual(text, EXPECTED_BUSINESS_CENTRAL_TS)


@patch.dict(os.environ, CLEAN_ENV)
@patch('odata_codegen.load_dotenv', MagicMock())
class TestCommandLine(TempDirTestCase):

    def test_generates_output_file(self):
        output = self.temp_dir / "out" / "schema.ts"
        exit_code = main([str(self.metadata_file), "-o", str(output)])
        self.assertEqual(exit_code, 0)
        self.assertEqual(output.read_text(encoding='utf-8'), EXPECTED_BUSINESS_CENTRAL_TS)

    def test_metadata_file_from_environment(self):
        output = self.temp_dir / "env.ts"
        with patch.dict(os.environ, {"ODATA_METADATA_FILE": str(self.metadata_file)}):
            exit_code = main(["--out", str(output)])
        self.assertEqual(exit_code, 0)
        self.assertTrue(output.exists())

    def test_policy_file(self):
        policy_file = self.temp_dir / "policy.json"
        policy_file.write_text(json.dumps({"extend_defaults": True, "excluded_entities": ["salesOrderLine"]}))
        output = self.temp_dir / "schema.ts"
        exit_code = main([str(self.metadata_file), "-o", str(output), "--policy", str(policy_file)])
        self.assertEqual(exit_code, 0)
        text = output.read_text(encoding='utf-8')
        self.assertIn("export const SalesOrder = z.object({", text)
        self.assertNotIn("export const SalesOrderLine", text)

    @patch('sys.stderr', new_callable=StringIO)
    def test_invalid_policy_file(self, mock_stderr):
        policy_file = self.temp_dir / "policy.json"
        policy_file.write_text('{"excluded_entities": "company"}')
        output = self.temp_dir / "schema.ts"
        exit_code = main([str(self.metadata_file), "-o", str(output), "--policy", str(policy_file)])
        self.assertEqual(exit_code, 1)
        self.assertIn("ERROR:", mock_stderr.getvalue())
        self.assertFalse(output.exists())

    @patch('sys.stderr', new_callable=StringIO)
    def test_missing_input(self, mock_stderr):
        output = self.temp_dir / "schema.ts"
        exit_code = main([str(self.temp_dir / "nope.xml"), "-o", str(output)])
        self.assertEqual(exit_code, 1)
        self.assertIn("Could not read metadata", mock_stderr.getvalue())
        self.assertFalse(output.exists())

    @patch('sys.stderr', new_callable=StringIO)
    def test_malformed_input(self, mock_stderr):
        broken = self.temp_dir / "broken.xml"
        broken.write_text("<Edmx>")
        output = self.temp_dir / "schema.ts"
        self.assertEqual(main([str(broken), "-o", str(output)]), 1)
        self.assertIn("not well-formed", mock_stderr.getvalue())
        self.assertFalse(output.exists())

    @patch('sys.stderr', new_callable=StringIO)
    def test_no_source(self, mock_stderr):
        self.assertEqual(main([]), 1)
        self.assertIn("No metadata source provided", mock_stderr.getvalue())

    @patch('sys.stderr', new_callable=StringIO)
    def test_file_and_service_are_exclusive(self, mock_stderr):
        self.assertEqual(main([str(self.metadata_file), "--service", "https://api.example.com"]), 1)
        self.assertIn("not both", mock_stderr.getvalue())

    @patch('sys.stdout', new_callable=StringIO)
    def test_trace_writes_nothing(self, mock_stdout):
        output = self.temp_dir / "schema.ts"
        exit_code = main([str(self.metadata_file), "-o", str(output), "--trace"])
        self.assertEqual(exit_code, 0)
        self.assertFalse(output.exists())
        trace = mock_stdout.getvalue()
        self.assertIn("Entities to Generate (3 total)", trace)
        self.assertIn("   - salesOrderLine", trace)
        self.assertIn("customer.blocked", trace)

    @patch('requests.Session.get')
    def test_service_with_credentials_from_environment(self, mock_get):
        mock_response = MagicMock()
        mock_response.content = BUSINESS_CENTRAL
        mock_get.return_value = mock_response
        output = self.temp_dir / "schema.ts"
        env = {"ODATA_URL": "https://api.example.com/v2.0", "ODATA_USER": "user", "ODATA_PASS": "secret"}
        with patch.dict(os.environ, env):
            exit_code = main(["-o", str(output)])
        self.assertEqual(exit_code, 0)
        self.assertEqual(mock_get.call_args.args[0], "https://api.example.com/v2.0/$metadata")
        self.assertEqual(output.read_text(encoding='utf-8'), EXPECTED_BUSINESS_CENTRAL_TS)

    @patch('sys.stderr', new_callable=StringIO)
    def test_unsupported_language_is_rejected_by_argparse(self, mock_stderr):
        with self.assertRaises(SystemExit) as ctx:
            main([str(self.metadata_file), "--lang", "java"])
        self.assertEqual(ctx.exception.code, 2)


if __name__ == '__main__':
    unittest.main()
