import json
import logging
import os
import tempfile
import textwrap
import unittest
from pathlib import Path
from unittest.mock import patch

from click.testing import CliRunner

from tagval import cli as cli_module
from tagval.cli import EXIT_BAD_INPUT, EXIT_CONFIGURATION, EXIT_INVALID, EXIT_VALID, _log_level, main
from tagval.core import config as config_module
from tagval.core.config import Config

MODELS = textwrap.dedent('''
    from dataclasses import dataclass
    from typing import Optional

    from tagval import rule


    @dataclass
    class Register:
        username: Optional[str] = rule("required")
        email: Optional[str] = rule("required|email")
        type: Optional[str] = rule("required|in:admin,user,guest")


    @dataclass
    class Broken:
        value: Optional[str] = rule("bogus_check")


    class NotARecord:
        pass
''')


class TestCheckCommand(unittest.TestCase):

    def setUp(self):
        self.runner = CliRunner()
        self.tmp_dir = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmp_dir.cleanup)
        self.models = Path(self.tmp_dir.name) / "models.py"
        self.models.write_text(MODELS, encoding="utf-8")

    def _document(self, payload: str) -> str:
        path = Path(self.tmp_dir.name) / "doc.json"
        path.write_text(payload, encoding="utf-8")
        return str(path)

    def _check(self, cls: str, *args: str, **kwargs):
        return self.runner.invoke(main, ["check", f"{self.models}:{cls}", *args], **kwargs)

    def test_valid_document(self):
        doc = self._document('{"username": "a", "email": "a@b.com", "type": "admin"}')
        result = self._check("Register", doc, "--json")
        self.assertEqual(result.exit_code, EXIT_VALID, result.output)
        self.assertTrue(json.loads(result.output)["valid"])

    def test_invalid_document(self):
        doc = self._document('{"username": "a", "email": "michaeljs.edu", "type": "admin"}')
        result = self._check("Register", doc, "--json")
        self.assertEqual(result.exit_code, EXIT_INVALID)
        error = json.loads(result.output)["error"]
        self.assertEqual(error["kind"], "InvalidFormat")
        self.assertEqual(error["field"], "email")
        self.assertEqual(error["rule"], "email")

    def test_reads_standard_input(self):
        result = self._check("Register", "--json", input='{"username": "a"}')
        self.assertEqual(result.exit_code, EXIT_INVALID)
        self.assertEqual(json.loads(result.output)["error"]["kind"], "MissingRequiredField")

    def test_empty_and_malformed_input(self):
        result = self._check("Register", "--json", input="{}")
        self.assertEqual(result.exit_code, EXIT_BAD_INPUT)
        self.assertEqual(json.loads(result.output)["error"]["kind"], "EmptyInputError")

        result = self._check("Register", "--json", input='{"username": }')
        self.assertEqual(result.exit_code, EXIT_BAD_INPUT)
        self.assertEqual(json.loads(result.output)["error"]["kind"], "DecodeError")

    def test_human_readable_output(self):
        result = self._check("Register", input='{"username": "a", "email": "a@b.com", "type": "root"}')
        self.assertEqual(result.exit_code, EXIT_INVALID)
        self.assertIn("NotInAllowedSet", result.output)

    def test_unknown_rule_keyword(self):
        result = self._check("Broken", input='{"value": "x"}')
        self.assertEqual(result.exit_code, EXIT_CONFIGURATION)

    def test_bad_targets(self):
        self.assertEqual(self._check("NotARecord", input="{}").exit_code, EXIT_CONFIGURATION)
        self.assertEqual(self._check("Missing", input="{}").exit_code, EXIT_CONFIGURATION)
        result = self.runner.invoke(main, ["check", "no_colon_here"], input="{}")
        self.assertEqual(result.exit_code, EXIT_CONFIGURATION)

    def test_alias(self):
        doc = self._document('{"username": "a", "email": "a@b.com", "type": "user"}')
        result = self.runner.invoke(main, ["c", f"{self.models}:Register", doc, "--json"])
        self.assertEqual(result.exit_code, EXIT_VALID, result.output)


class TestRulesCommand(unittest.TestCase):

    def test_lists_catalogue(self):
        result = CliRunner().invoke(main, ["rules"])
        self.assertEqual(result.exit_code, 0, result.output)
        for keyword in ("required", "email", "regex", "min"):
            self.assertIn(keyword, result.output)


class TestSettings(unittest.TestCase):

    def setUp(self):
        self.tmp_dir = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmp_dir.cleanup)
        patcher = patch.object(config_module, "USER_CONFIG_PATH", Path(self.tmp_dir.name) / "config.toml")
        patcher.start()
        self.addCleanup(patcher.stop)
        original = cli_module.console.no_color
        self.addCleanup(setattr, cli_module.console, "no_color", original)

    def test_colors_setting_controls_console(self):
        with patch.dict(os.environ, {"TAGVAL_COLORS": "false"}):
            result = CliRunner().invoke(main, ["rules"])
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertTrue(cli_module.console.no_color)

        with patch.dict(os.environ, {"TAGVAL_COLORS": "true"}):
            os.environ.pop("NO_COLOR", None)
            CliRunner().invoke(main, ["rules"])
        self.assertFalse(cli_module.console.no_color)

    def test_verbose_setting_is_the_default_log_level(self):
        config = Config.defaults()
        self.assertEqual(_log_level(False, False, config), logging.WARNING)
        self.assertEqual(_log_level(True, False, config), logging.INFO)
        config.set("verbose", True)
        self.assertEqual(_log_level(False, False, config), logging.INFO)
        self.assertEqual(_log_level(False, True, config), logging.DEBUG)

    def test_verbose_setting_from_environment(self):
        with patch.dict(os.environ, {"TAGVAL_VERBOSE": "yes"}):
            self.assertEqual(_log_level(False, False, Config()), logging.INFO)


if __name__ == '__main__':
    unittest.main()
