import os
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from tagval.core import config as config_module
from tagval.core.config import EMAIL_PATTERN, Config


class TestConfig(unittest.TestCase):

    def setUp(self):
        self.tmp_dir = tempfile.TemporaryDirectory()
        self.addCleanup(self.tmp_dir.cleanup)
        self.user_path = Path(self.tmp_dir.name) / "user" / "config.toml"
        patcher = patch.object(config_module, "USER_CONFIG_PATH", self.user_path)
        patcher.start()
        self.addCleanup(patcher.stop)

    def _write(self, name: str, text: str) -> Path:
        path = Path(self.tmp_dir.name) / name
        path.write_text(text, encoding="utf-8")
        return path

    def test_defaults(self):
        config = Config.defaults()
        self.assertEqual(config.get("metadata_key"), "validate")
        self.assertEqual(config.get("fallback_metadata_keys"), ["binding"])
        self.assertTrue(config.get("hoist_required"))
        self.assertEqual(config.get("predicates.email.pattern"), EMAIL_PATTERN)
        self.assertEqual(config.get("missing.key", "fallback"), "fallback")

    def test_defaults_are_not_shared(self):
        first = Config.defaults()
        first.set("predicates.email.pattern", "x")
        self.assertEqual(Config.defaults().get("predicates.email.pattern"), EMAIL_PATTERN)

    def test_file_config_is_merged(self):
        path = self._write("custom.toml", 'hoist_required = false\n[predicates.email]\npattern = "^x$"\n')
        with patch.dict(os.environ, {}, clear=True):
            config = Config(config_path=path)
        self.assertFalse(config.get("hoist_required"))
        self.assertEqual(config.get("predicates.email.pattern"), "^x$")
        self.assertEqual(config.get("metadata_key"), "validate")

    def test_broken_file_is_skipped(self):
        path = self._write("broken.toml", "this is = = not toml")
        with patch.dict(os.environ, {}, clear=True):
            config = Config(config_path=path)
        self.assertEqual(config.get("metadata_key"), "validate")

    def test_environment_overrides(self):
        env = {
            "TAGVAL_HOIST_REQUIRED": "no",
            "TAGVAL_FALLBACK_METADATA_KEYS": "binding, legacy",
            "TAGVAL_EMAIL_PATTERN": "^.+@.+$",
            "TAGVAL_METADATA_KEY": "rules",
        }
        path = self._write("custom.toml", "hoist_required = true\n")
        with patch.dict(os.environ, env, clear=True):
            config = Config(config_path=path)
        self.assertFalse(config.get("hoist_required"))
        self.assertEqual(config.get("fallback_metadata_keys"), ["binding", "legacy"])
        self.assertEqual(config.get("predicates.email.pattern"), "^.+@.+$")
        self.assertEqual(config.get("metadata_key"), "rules")

    def test_save_and_reset_user_config(self):
        config = Config.defaults()
        config.set("hoist_required", False)
        config.save_user_config()
        self.assertTrue(self.user_path.exists())

        with patch.dict(os.environ, {}, clear=True):
            reloaded = Config(config_path=self.user_path)
        self.assertFalse(reloaded.get("hoist_required"))

        self.assertTrue(Config.reset_user_config())
        self.assertFalse(self.user_path.exists())
        self.assertFalse(Config.reset_user_config())


if __name__ == '__main__':
    unittest.main()
