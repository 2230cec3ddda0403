import os
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from pyvalidity.core.config import Config


class TestConfig(unittest.TestCase):

    def test_defaults(self):
        config = Config(load_files=False)
        self.assertEqual(config.get("attributes.validate"), "data-validate")
        self.assertEqual(config.get("markup.error_class"), "has-error")
        self.assertEqual(config.malformed_spec_policy(), "skip")
        self.assertIsNone(config.get("no.such.key"))

    def test_defaults_are_not_shared(self):
        first = Config(load_files=False)
        first.set("rules.URL.protocols", ["https"])
        self.assertEqual(Config(load_files=False).get("rules.URL.protocols"), ["http", "https", "ftp"])

    def test_file_config_is_merged(self):
        with tempfile.NamedTemporaryFile("w", suffix=".toml", delete=False, encoding="utf-8") as tmp:
            tmp.write('malformed_spec = "fail"\n[markup]\nerror_class = "is-invalid"\n')
            path = tmp.name
        try:
            config = Config(config_path=Path(path))
        finally:
            os.remove(path)
        self.assertEqual(config.malformed_spec_policy(), "fail")
        self.assertEqual(config.get("markup.error_class"), "is-invalid")
        self.assertEqual(config.get("markup.label_class"), "control-label")

    @patch.dict(os.environ, {
        "VALIDITY_VERBOSE": "yes",
        "VALIDITY_FIELD_TAGS": "input, TEXTAREA",
        "VALIDITY_ERROR_CLASS": "is-invalid",
        "VALIDITY_MALFORMED_SPEC": "FAIL",
    })
    def test_environment_overrides(self):
        config = Config(load_files=False)
        self.assertTrue(config.get("verbose"))
        self.assertEqual(config.get("field_tags"), ["input", "textarea"])
        self.assertEqual(config.get("markup.error_class"), "is-invalid")
        self.assertEqual(config.malformed_spec_policy(), "fail")

    @patch.dict(os.environ, {"VALIDITY_MALFORMED_SPEC": "explode"})
    def test_invalid_policy_is_ignored(self):
        self.assertEqual(Config(load_files=False).malformed_spec_policy(), "skip")

    def test_unknown_policy_falls_back_to_skip(self):
        config = Config(load_files=False)
        config.set("malformed_spec", "explode")
        self.assertEqual(config.malformed_spec_policy(), "skip")

    def test_save_user_config(self):
        with tempfile.TemporaryDirectory() as tmp_dir:
            user_path = Path(tmp_dir) / "validity" / "config.toml"
            with patch("pyvalidity.core.config.USER_CONFIG_PATH", user_path):
                config = Config(load_files=False)
                config.set("malformed_spec", "fail")
                config.save_user_config()
                self.assertTrue(user_path.exists())
                reloaded = Config(config_path=user_path)
        self.assertEqual(reloaded.malformed_spec_policy(), "fail")

    def test_set_from_string_casts_to_the_stored_type(self):
        config = Config(load_files=False)
        config.set_from_string("colors", "off")
        config.set_from_string("rules.URL.protocols", "https, ftp")
        config.set_from_string("markup.label_class", "form-label")
        self.assertIs(config.get("colors"), False)
        self.assertEqual(config.get("rules.URL.protocols"), ["https", "ftp"])
        self.assertEqual(config.get("markup.label_class"), "form-label")

    def test_set_from_string_rejects_invalid_text(self):
        config = Config(load_files=False)
        with self.assertRaises(ValueError):
            config.set_from_string("verbose", "sometimes")
        with self.assertRaises(ValueError):
            config.set_from_string("markup", "x")
        with self.assertRaises(ValueError):
            config.set_from_string("colors.extra", "x")

    def test_reset_user_config(self):
        with tempfile.TemporaryDirectory() as tmp_dir:
            user_path = Path(tmp_dir) / "config.toml"
            with patch("pyvalidity.core.config.USER_CONFIG_PATH", user_path):
                self.assertFalse(Config.reset_user_config())
                user_path.write_text('malformed_spec = "fail"\n', encoding="utf-8")
                self.assertTrue(Config.reset_user_config())
                self.assertFalse(user_path.exists())


if __name__ == '__main__':
    unittest.main()
