import io
import json
import os
import unittest
from contextlib import redirect_stderr, redirect_stdout
from unittest.mock import MagicMock, patch

import regscan
from svreg.model import FLIP_FLOP, AnalysisResult, CandidateRegister, FileFailure, ModuleSummary

FIXTURES_DIR = os.path.join(os.path.dirname(__file__), "fixtures")


def sample_result():
    return AnalysisResult(
        registers=[CandidateRegister("counter", 32, 4, "top", "counter.sv", FLIP_FLOP, clock="clk")],
        modules=[ModuleSummary("top", "counter.sv", 1, 1)],
    )


class TestRegscanCLI(unittest.TestCase):

    def test_no_arguments_prints_help_and_returns_nonzero(self):
        """Calling main([]) should print help and return 1."""
        buf = io.StringIO()
        with redirect_stdout(buf):
            rc = regscan.main([])

        output = buf.getvalue()
        self.assertNotEqual(rc, 0)
        self.assertIn("Register inventory", output)
        self.assertIn("usage:", output)

    def test_analyze_arguments_parsed(self):
        parser = regscan.build_arg_parser()
        args = parser.parse_args([
            "--format", "json", "analyze", "rtl", "-r", "--pattern", "*.sv",
            "--module", "top", "--type", "registers", "--source", "slang", "-j", "4", "--no-cache",
        ])
        self.assertEqual(args.format, "json")
        self.assertTrue(args.recursive)
        self.assertEqual(args.pattern, "*.sv")
        self.assertEqual(args.module, "top")
        self.assertEqual(args.type, "registers")
        self.assertEqual(args.source, "slang")
        self.assertEqual(args.jobs, 4)
        self.assertTrue(args.no_cache)

    def test_defaults(self):
        args = regscan.build_arg_parser().parse_args(["analyze", "top.sv"])
        self.assertEqual(args.format, "markdown")
        self.assertEqual(args.type, "all")
        self.assertEqual(args.source, "verible")
        self.assertIsNone(args.jobs)

    def test_verbose_and_quiet_are_exclusive(self):
        with redirect_stderr(io.StringIO()):
            with self.assertRaises(SystemExit):
                regscan.build_arg_parser().parse_args(["-v", "-q", "analyze", "top.sv"])

    def test_missing_path_exits(self):
        with self.assertRaises(SystemExit) as ctx:
            regscan.main(["analyze", os.path.join(FIXTURES_DIR, "missing.sv")])
        self.assertIn("Path not found", str(ctx.exception.code))

    def test_directory_requires_recursive(self):
        with self.assertRaises(SystemExit) as ctx:
            regscan.main(["analyze", FIXTURES_DIR])
        self.assertIn("--recursive", str(ctx.exception.code))

    @patch("regscan.load_config")
    @patch("regscan.RegisterAnalyzer")
    def test_analyze_prints_report(self, mock_analyzer_cls, mock_load_config):
        mock_load_config.return_value = MagicMock(log_level=None)
        mock_analyzer_cls.return_value.analyze_path.return_value = sample_result()
        path = os.path.join(FIXTURES_DIR, "counter.sv")

        buf = io.StringIO()
        with redirect_stdout(buf):
            rc = regscan.main(["--format", "json", "analyze", path, "--module", "top"])

        self.assertEqual(rc, 0)
        mock_analyzer_cls.assert_called_once_with(config=mock_load_config.return_value, source_name="verible")
        mock_analyzer_cls.return_value.analyze_path.assert_called_once_with(
            path, recursive=False, pattern=None, module="top", jobs=None,
        )
        data = json.loads(buf.getvalue())
        self.assertEqual(data["totalBits"], 32)
        self.assertEqual(data["byType"], {"flip_flop": 1})

    @patch("regscan.load_config")
    @patch("regscan.RegisterAnalyzer")
    def test_no_cache_disables_cache(self, mock_analyzer_cls, mock_load_config):
        config = MagicMock(log_level=None, cache_enabled=True)
        mock_load_config.return_value = config
        mock_analyzer_cls.return_value.analyze_path.return_value = sample_result()

        with redirect_stdout(io.StringIO()):
            regscan.main(["analyze", os.path.join(FIXTURES_DIR, "counter.sv"), "--no-cache"])

        self.assertFalse(config.cache_enabled)

    @patch("regscan.load_config")
    @patch("regscan.RegisterAnalyzer")
    def test_type_selects_sections(self, mock_analyzer_cls, mock_load_config):
        mock_load_config.return_value = MagicMock(log_level=None)
        mock_analyzer_cls.return_value.analyze_path.return_value = sample_result()

        buf = io.StringIO()
        with redirect_stdout(buf):
            regscan.main(["analyze", os.path.join(FIXTURES_DIR, "counter.sv"), "--type", "modules"])

        output = buf.getvalue()
        self.assertIn("## Modules", output)
        self.assertNotIn("## Registers", output)

    @patch("regscan.load_config")
    @patch("regscan.RegisterAnalyzer")
    def test_only_failures_returns_nonzero(self, mock_analyzer_cls, mock_load_config):
        mock_load_config.return_value = MagicMock(log_level=None)
        mock_analyzer_cls.return_value.analyze_path.return_value = AnalysisResult(
            failures=[FileFailure("counter.sv", "verible-verilog-syntax not found")],
        )

        err = io.StringIO()
        with redirect_stdout(io.StringIO()), redirect_stderr(err):
            rc = regscan.main(["analyze", os.path.join(FIXTURES_DIR, "counter.sv")])

        self.assertEqual(rc, 1)
        self.assertIn("Warning: counter.sv: verible-verilog-syntax not found", err.getvalue())

    @patch("regscan.load_config")
    @patch("regscan.RegisterAnalyzer")
    def test_partial_failure_returns_zero(self, mock_analyzer_cls, mock_load_config):
        """One broken file among good ones still reports and exits 0."""
        mock_load_config.return_value = MagicMock(log_level=None)
        result = sample_result()
        result.failures.append(FileFailure("broken.sv", "syntax error"))
        mock_analyzer_cls.return_value.analyze_path.return_value = result

        err = io.StringIO()
        with redirect_stdout(io.StringIO()), redirect_stderr(err):
            rc = regscan.main(["analyze", os.path.join(FIXTURES_DIR, "counter.sv")])

        self.assertEqual(rc, 0)
        self.assertIn("Warning: broken.sv: syntax error", err.getvalue())

    def test_bad_config_exits(self):
        with self.assertRaises(SystemExit) as ctx:
            regscan.main([
                "--config", os.path.join(FIXTURES_DIR, "absent.yaml"),
                "analyze", os.path.join(FIXTURES_DIR, "counter.sv"),
            ])
        self.assertIn("Configuration file not found", str(ctx.exception.code))

    @patch("regscan.load_config")
    @patch("regscan.tree_source_registry")
    def test_version(self, mock_source_reg, mock_load_config):
        mock_load_config.return_value = MagicMock(log_level=None)
        source = MagicMock()
        source.name = "verible-verilog-syntax"
        source.version.return_value = "v0.0-3410-g398a8505"
        mock_source_reg.create.return_value = source
        mock_source_reg.keys.return_value = ["verible", "slang"]

        buf = io.StringIO()
        with redirect_stdout(buf):
            rc = regscan.main(["version"])

        self.assertEqual(rc, 0)
        mock_source_reg.create.assert_called_once_with("verible", config=mock_load_config.return_value)
        self.assertEqual(buf.getvalue().strip(), "verible-verilog-syntax v0.0-3410-g398a8505")


if __name__ == '__main__':
    unittest.main()
