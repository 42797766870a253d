import os
import shutil
import tempfile
import toml
import unittest
from unittest.mock import patch
from click.testing import CliRunner
from rgbstage import config
from rgbstage.commands.config import config as config_command
from rgbstage.errors import ConfigurationError
import json

class TestConfig(unittest.TestCase):

    def setUp(self):
        self.test_dir = tempfile.mkdtemp()
        self.config_path = os.path.join(self.test_dir, config.CONFIG_FILE)
        self.sample_config = {
            "sdk": {
                "project_dir": "vendor/librgb",
                "library_name": "rgb",
            },
            "platforms": {"mac": {"target": "aarch64-apple-darwin"}},
        }
        config.save_config(self.sample_config, path=self.test_dir)

    def tearDown(self):
        shutil.rmtree(self.test_dir)

    def test_load_config_not_found(self):
        """Test that loading a non-existent config returns an empty dict."""
        os.remove(self.config_path)
        cfg = config.load_config(path=self.test_dir)
        self.assertEqual(cfg, {})

    def test_save_and_load_config(self):
        """Test saving a config and then loading it back."""
        loaded_config = config.load_config(path=self.test_dir)
        self.assertEqual(loaded_config, self.sample_config)
        with open(self.config_path, "r") as f:
            self.assertEqual(toml.load(f), self.sample_config)

    def test_load_settings_merges_defaults_and_resolves_paths(self):
        settings = config.load_settings(path=self.test_dir)
        root = os.path.abspath(self.test_dir)
        self.assertEqual(settings["root"], root)
        self.assertEqual(settings["sdk"]["project_dir"], os.path.join(root, "vendor", "librgb"))
        self.assertEqual(settings["sdk"]["header"], "librgb.h")
        self.assertEqual(settings["staging"]["lib_dir"], os.path.join(root, "lib"))
        self.assertEqual(settings["staging"]["include_dir"], os.path.join(root, "include"))
        self.assertEqual(settings["platforms"], {"mac": {"target": "aarch64-apple-darwin"}})

    def test_load_settings_without_file(self):
        os.remove(self.config_path)
        settings = config.load_settings(path=self.test_dir)
        expected = os.path.normpath(os.path.join(os.path.abspath(self.test_dir), "..", "..", "librgb"))
        self.assertEqual(settings["sdk"]["project_dir"], expected)
        self.assertNotIn("root", config.DEFAULTS)

    def test_get_nested_value(self):
        runner = CliRunner()
        result = runner.invoke(config_command, ['get', 'sdk.project_dir'], obj={"path": self.test_dir})
        self.assertEqual(result.exit_code, 0)
        self.assertIn('vendor/librgb', result.output)

    def test_get_non_existent_value(self):
        runner = CliRunner()
        result = runner.invoke(config_command, ["get", "sdk.nonexistent"], obj={"path": self.test_dir})
        self.assertEqual(result.exit_code, 5)
        self.assertIn("Error: Key 'sdk.nonexistent' not found", result.output)

    def test_set_nested_value(self):
        runner = CliRunner()
        result = runner.invoke(config_command, ['set', 'staging.lib_dir', 'prebuilt'], obj={"path": self.test_dir})
        self.assertEqual(result.exit_code, 0)
        loaded_config = config.load_config(path=self.test_dir)
        self.assertEqual(loaded_config['staging']['lib_dir'], 'prebuilt')

    def test_unset_nested_value(self):
        runner = CliRunner()
        result = runner.invoke(config_command, ['unset', 'sdk.library_name'], obj={"path": self.test_dir})
        self.assertEqual(result.exit_code, 0)
        loaded_config = config.load_config(path=self.test_dir)
        self.assertNotIn('library_name', loaded_config['sdk'])

    def test_init_does_not_overwrite(self):
        runner = CliRunner()
        result = runner.invoke(config_command, ['init'], obj={"path": self.test_dir})
        self.assertEqual(result.exit_code, 0)
        self.assertEqual(config.load_config(path=self.test_dir), self.sample_config)

    def test_init_writes_defaults(self):
        os.remove(self.config_path)
        runner = CliRunner()
        result = runner.invoke(config_command, ['init'], obj={"path": self.test_dir})
        self.assertEqual(result.exit_code, 0)
        self.assertEqual(config.load_config(path=self.test_dir), config.DEFAULTS)

    def test_list_config(self):
        runner = CliRunner()
        with patch('rgbstage.config.logger'):
            result = runner.invoke(config_command, ['list'], obj={"path": self.test_dir})
        self.assertEqual(result.exit_code, 0)
        self.assertEqual(json.loads(result.output.strip()), self.sample_config)

    def test_malformed_config_is_fatal(self):
        with open(self.config_path, "w") as f:
            f.write('[staging]\nlib_dir = "custom_lib\n')
        with self.assertRaises(ConfigurationError) as ctx:
            config.load_settings(path=self.test_dir)
        self.assertEqual(ctx.exception.path, self.config_path)
        self.assertEqual(ctx.exception.exit_code, 5)

    def test_wrong_value_type_is_fatal(self):
        config.save_config({"module": {"sources": "src/wrap.cxx"}}, path=self.test_dir)
        with self.assertRaises(ConfigurationError) as ctx:
            config.load_settings(path=self.test_dir)
        self.assertIn("module.sources", str(ctx.exception))

    def test_coerce_value(self):
        self.assertEqual(config.coerce_value("module.sources", "src/wrap.cxx"), ["src/wrap.cxx"])
        self.assertEqual(config.coerce_value("module.sources", "a.cxx, b.cxx"), ["a.cxx", "b.cxx"])
        self.assertEqual(config.coerce_value("module.sources", '["a.cxx", "b.cxx"]'), ["a.cxx", "b.cxx"])
        self.assertEqual(config.coerce_value("module.target_name", "3"), "3")
        self.assertEqual(config.coerce_value("platforms.mac.target", "aarch64-apple-darwin"), "aarch64-apple-darwin")
        with self.assertRaises(ConfigurationError):
            config.coerce_value("module.sources", "[1, 2]")
        with self.assertRaises(ConfigurationError):
            config.coerce_value("sdk", "x")

    def test_set_list_value(self):
        runner = CliRunner()
        result = runner.invoke(config_command, ["set", "module.sources", "src/wrap.cxx"], obj={"path": self.test_dir})
        self.assertEqual(result.exit_code, 0, result.output)
        self.assertEqual(config.load_config(path=self.test_dir)["module"]["sources"], ["src/wrap.cxx"])
        self.assertEqual(config.load_settings(path=self.test_dir)["module"]["sources"], ["src/wrap.cxx"])

    def test_set_below_a_plain_value_fails_cleanly(self):
        runner = CliRunner()
        result = runner.invoke(config_command, ["set", "sdk.cargo.x", "y"], obj={"path": self.test_dir})
        self.assertEqual(result.exit_code, 5)
        self.assertIn("'sdk.cargo' is not a table", result.output)
        self.assertNotIn("Traceback", result.output)
        self.assertEqual(config.load_config(path=self.test_dir), self.sample_config)

    def test_set_save_failure_exits_non_zero(self):
        runner = CliRunner()
        with patch("rgbstage.config.toml.dump", side_effect=IOError("read-only file system")):
            result = runner.invoke(config_command, ["set", "sdk.cargo", "cargo-nightly"], obj={"path": self.test_dir})
        self.assertEqual(result.exit_code, 5)
        self.assertIn("read-only file system", result.output)
        self.assertEqual(config.load_config(path=self.test_dir), self.sample_config)
        self.assertFalse(os.path.exists(self.config_path + ".tmp"))

    def test_unset_missing_key_exits_non_zero(self):
        runner = CliRunner()
        result = runner.invoke(config_command, ["unset", "sdk.nonexistent"], obj={"path": self.test_dir})
        self.assertEqual(result.exit_code, 5)

if __name__ == "__main__":
    unittest.main()
