import csv
import io
import json
import unittest

from svreg.model import FLIP_FLOP, LATCH, AnalysisResult, CandidateRegister, FileFailure, ModuleSummary
from svreg.renderers import (
    CsvTableRenderer,
    HtmlReportRenderer,
    JsonRenderer,
    MarkdownTableRenderer,
    renderer_registry,
)
from svreg.renderers.html import TEMPLATES_DIR


def sample_result():
    return AnalysisResult(
        registers=[
            CandidateRegister("count", 8, 4, "top", "top.sv", FLIP_FLOP, clock="clk", reset="rst_n"),
            CandidateRegister("hold", 4, 9, "top", "top.sv", LATCH),
        ],
        modules=[ModuleSummary("top", "top.sv", 1, 2)],
        failures=[FileFailure("bad.sv", "syntax error")],
    )


class TestRendererRegistry(unittest.TestCase):

    def test_all_formats_registered(self):
        for key in ("markdown", "csv", "json", "html"):
            self.assertIn(key, renderer_registry)

    def test_create(self):
        self.assertIsInstance(renderer_registry.create("json"), JsonRenderer)


class TestMarkdownRenderer(unittest.TestCase):

    def setUp(self):
        self.renderer = MarkdownTableRenderer()

    def test_register_table(self):
        table = self.renderer.render_register_table(sample_result().registers)
        lines = table.splitlines()

        self.assertEqual(lines[0], "| Register | Module | Type | Width | Clock | Reset | File | Line |")
        self.assertTrue(lines[1].startswith("|:"))
        self.assertEqual(lines[2], "| count | top | flip_flop | 8 | clk | rst_n | top.sv | 4 |")
        self.assertEqual(lines[3], "| hold | top | latch | 4 |  |  | top.sv | 9 |")

    def test_module_table(self):
        table = self.renderer.render_module_table(sample_result().modules)
        self.assertIn("| top | 2 | top.sv | 1 |", table)

    def test_summary(self):
        summary = self.renderer.render_summary(sample_result())
        self.assertIn("- Total registers: 2", summary)
        self.assertIn("- Total bits: 12", summary)
        self.assertIn("- flip_flop: 1", summary)
        self.assertIn("- latch: 1", summary)
        self.assertIn("- Failed files: 1", summary)

    def test_report_sections(self):
        report = self.renderer.render_report(sample_result())
        self.assertTrue(report.startswith("# Register Analysis"))
        self.assertIn("## Modules", report)
        self.assertIn("## Registers", report)
        self.assertIn("- `bad.sv`: syntax error", report)

    def test_report_modules_only(self):
        report = self.renderer.render_report(sample_result(), include_registers=False)
        self.assertIn("## Modules", report)
        self.assertNotIn("## Registers", report)


class TestCsvRenderer(unittest.TestCase):

    def setUp(self):
        self.renderer = CsvTableRenderer()

    def test_register_rows(self):
        rows = list(csv.reader(io.StringIO(self.renderer.render_register_table(sample_result().registers))))
        self.assertEqual(rows[0], ["Register", "Module", "Type", "Width", "Clock", "Reset", "File", "Line"])
        self.assertEqual(rows[1], ["count", "top", "flip_flop", "8", "clk", "rst_n", "top.sv", "4"])
        self.assertEqual(len(rows), 3)

    def test_quoting(self):
        reg = CandidateRegister("a", 1, 1, "m", "dir,with,commas/a.sv", FLIP_FLOP)
        rows = list(csv.reader(io.StringIO(self.renderer.render_register_table([reg]))))
        self.assertEqual(rows[1][6], "dir,with,commas/a.sv")

    def test_report_registers_only(self):
        report = self.renderer.render_report(sample_result(), include_modules=False)
        self.assertTrue(report.startswith("Register,"))
        self.assertNotIn("Registers,File", report)


class TestJsonRenderer(unittest.TestCase):

    def setUp(self):
        self.renderer = JsonRenderer()

    def test_full_report(self):
        data = json.loads(self.renderer.render_report(sample_result()))
        self.assertEqual(data["totalRegisters"], 2)
        self.assertEqual(data["totalBits"], 12)
        self.assertEqual(data["byType"], {"flip_flop": 1, "latch": 1})
        self.assertEqual(data["registers"][0]["clock"], "clk")
        self.assertEqual(data["failures"][0]["file"], "bad.sv")

    def test_modules_only(self):
        data = json.loads(self.renderer.render_report(sample_result(), include_registers=False))
        self.assertNotIn("registers", data)
        self.assertNotIn("byModule", data)
        self.assertEqual(data["modules"][0]["registerCount"], 2)

    def test_register_table(self):
        data = json.loads(self.renderer.render_register_table(sample_result().registers))
        self.assertEqual([r["name"] for r in data], ["count", "hold"])


class TestHtmlRenderer(unittest.TestCase):

    def setUp(self):
        self.renderer = HtmlReportRenderer()

    def test_register_rows_carry_classification(self):
        html = self.renderer.render_register_table(sample_result().registers)
        self.assertIn("register-table", html)
        self.assertIn('class="reg-flip_flop"', html)
        self.assertIn('class="reg-latch"', html)
        self.assertIn("top.sv:4", html)

    def test_html_escaping(self):
        reg = CandidateRegister("data<0>", 1, 1, "m&n", "a.sv", FLIP_FLOP)
        html = self.renderer.render_register_table([reg])
        self.assertIn("data&lt;0&gt;", html)
        self.assertIn("m&amp;n", html)
        self.assertNotIn("data<0>", html)

    def test_empty_tables(self):
        self.assertIn("No registers", self.renderer.render_register_table([]))
        self.assertIn("No modules", self.renderer.render_module_table([]))

    def test_full_page(self):
        page = self.renderer.render_report(sample_result())
        self.assertIn("<!DOCTYPE html>", page)
        self.assertIn("<title>Register Analysis</title>", page)
        self.assertIn('class="module-table"', page)
        self.assertIn('class="register-table"', page)
        self.assertIn("bad.sv", page)
        self.assertIn(self.renderer.css.splitlines()[0], page)

    def test_page_without_registers(self):
        page = self.renderer.render_report(sample_result(), include_registers=False)
        self.assertNotIn('class="register-table"', page)

    def test_templates_exist(self):
        self.assertTrue((TEMPLATES_DIR / "report_page.jinja2").is_file())
        self.assertTrue((TEMPLATES_DIR / "report_styles.css").is_file())


if __name__ == '__main__':
    unittest.main()
