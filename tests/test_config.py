import os
import tempfile
import unittest
from unittest.mock import patch

from svreg.config import DEFAULT_SEARCH_PATHS, AnalyzerConfig, load_config
from svreg.errors import ConfigError


class TestLoadConfig(unittest.TestCase):

    def setUp(self):
        self.temp_dir = tempfile.TemporaryDirectory()
        self.env = patch.dict(os.environ, {}, clear=False)
        self.env.start()
        os.environ.pop("SVREG_VERIBLE_PATH", None)
        os.environ.pop("SVREG_LOG_LEVEL", None)

    def tearDown(self):
        self.env.stop()
        self.temp_dir.cleanup()

    def _write(self, text):
        path = os.path.join(self.temp_dir.name, "svreg.yaml")
        with open(path, "w") as fh:
            fh.write(text)
        return path

    def test_defaults(self):
        config = AnalyzerConfig()
        self.assertEqual(config.syntax_binary, "verible-verilog-syntax")
        self.assertEqual(config.extensions, [".v", ".sv"])
        self.assertEqual(config.jobs, 1)
        self.assertTrue(config.cache_enabled)

    def test_full_file(self):
        path = self._write(
            "syntax_binary: /opt/verible/bin/verible-verilog-syntax\n"
            "search_paths: [/tools/bin]\n"
            "timeout: 60\n"
            "extensions: [.v, sv, .svh]\n"
            "jobs: 4\n"
            "cache:\n"
            "  enabled: false\n"
            "  size: 10\n"
            "  ttl: 5\n"
            "logging:\n"
            "  level: info\n"
        )
        config = load_config(path)

        self.assertEqual(config.syntax_binary, "/opt/verible/bin/verible-verilog-syntax")
        self.assertEqual(config.search_paths, ["/tools/bin"] + DEFAULT_SEARCH_PATHS)
        self.assertEqual(config.timeout, 60.0)
        self.assertEqual(config.extensions, [".v", ".sv", ".svh"])
        self.assertEqual(config.jobs, 4)
        self.assertFalse(config.cache_enabled)
        self.assertEqual(config.cache_size, 10)
        self.assertEqual(config.cache_ttl, 5.0)
        self.assertEqual(config.log_level, "INFO")
        self.assertEqual(config.source_file, path)

    def test_empty_file(self):
        config = load_config(self._write(""))
        self.assertEqual(config.timeout, 30.0)

    def test_jobs_clamped(self):
        self.assertEqual(load_config(self._write("jobs: 0\n")).jobs, 1)

    def test_missing_explicit_file(self):
        with self.assertRaises(ConfigError):
            load_config(os.path.join(self.temp_dir.name, "absent.yaml"))

    def test_malformed_yaml(self):
        with self.assertRaises(ConfigError):
            load_config(self._write("timeout: [unclosed\n"))

    def test_top_level_must_be_mapping(self):
        with self.assertRaises(ConfigError):
            load_config(self._write("- a\n- b\n"))

    def test_wrong_type(self):
        with self.assertRaises(ConfigError) as ctx:
            load_config(self._write("timeout: soon\n"))
        self.assertIn("timeout", str(ctx.exception))

    def test_bool_is_not_a_number(self):
        with self.assertRaises(ConfigError):
            load_config(self._write("jobs: true\n"))

    def test_cache_size_must_be_positive(self):
        with self.assertRaises(ConfigError) as ctx:
            load_config(self._write("cache:\n  size: 0\n"))
        self.assertIn("cache.size", str(ctx.exception))

    def test_unknown_key_warns(self):
        with self.assertLogs("svreg.config", level="WARNING") as logs:
            load_config(self._write("colour: blue\n"))
        self.assertIn("colour", logs.output[0])

    def test_environment_overrides_file(self):
        path = self._write("syntax_binary: from-file\nlogging:\n  level: info\n")
        os.environ["SVREG_VERIBLE_PATH"] = "/env/verible-verilog-syntax"
        os.environ["SVREG_LOG_LEVEL"] = "debug"

        config = load_config(path)

        self.assertEqual(config.syntax_binary, "/env/verible-verilog-syntax")
        self.assertEqual(config.log_level, "DEBUG")

    @patch("svreg.config.discover_config_file", return_value=None)
    def test_no_file_found(self, mock_discover):
        config = load_config()
        self.assertIsNone(config.source_file)
        mock_discover.assert_called_once_with()


if __name__ == '__main__':
    unittest.main()
