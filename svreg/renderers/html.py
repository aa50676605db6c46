"""HTML report renderer.

Renders modules and registers as HTML tables and wraps them in a
standalone page built from a Jinja2 template.  Register rows carry a
CSS class per classification so flip-flops and latches stand out.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Optional

from jinja2 import Environment, FileSystemLoader

from ..model import AnalysisResult, CandidateRegister, ModuleSummary
from .base import ReportRenderer, renderer_registry

# Template directory
TEMPLATES_DIR = Path(__file__).parent / "templates"


@renderer_registry.register("html")
class HtmlReportRenderer(ReportRenderer):
    """Render results as a static HTML page with embedded CSS."""

    def __init__(self) -> None:
        """Initialize renderer with Jinja2 environment."""
        self._env = Environment(
            loader=FileSystemLoader(TEMPLATES_DIR),
            autoescape=False,
        )
        self._css: Optional[str] = None

    @property
    def css(self) -> str:
        """Load and cache CSS from template file."""
        if self._css is None:
            self._css = (TEMPLATES_DIR / "report_styles.css").read_text()
        return self._css

    def _escape_html(self, text: object) -> str:
        """Escape HTML special characters."""
        return (str(text)
                .replace("&", "&amp;")
                .replace("<", "&lt;")
                .replace(">", "&gt;")
                .replace('"', "&quot;"))

    def render_register_table(self, registers: Iterable[CandidateRegister]) -> str:
        rows = []
        for reg in registers:
            kind = self._escape_html(reg.classification)
            rows.append(f'''<tr class="reg-{kind}">
                <td class="reg-name">{self._escape_html(reg.name)}</td>
                <td>{self._escape_html(reg.module)}</td>
                <td class="reg-type">{kind}</td>
                <td class="reg-width">{reg.width}</td>
                <td>{self._escape_html(reg.clock or "")}</td>
                <td>{self._escape_html(reg.reset or "")}</td>
                <td class="reg-location">{self._escape_html(reg.file)}:{reg.line}</td>
            </tr>''')

        if not rows:
            return '<p class="empty">No registers</p>'

        rows_html = "\n".join(rows)
        return f'''<table class="register-table">
            <thead>
                <tr>
                    <th>Register</th>
                    <th>Module</th>
                    <th>Type</th>
                    <th>Width</th>
                    <th>Clock</th>
                    <th>Reset</th>
                    <th>Location</th>
                </tr>
            </thead>
            <tbody>
                {rows_html}
            </tbody>
        </table>'''

    def render_module_table(self, modules: Iterable[ModuleSummary]) -> str:
        rows = [
            f'''<tr>
                <td class="module-name">{self._escape_html(mod.name)}</td>
                <td>{mod.register_count}</td>
                <td class="module-location">{self._escape_html(mod.file)}:{mod.line}</td>
            </tr>'''
            for mod in modules
        ]

        if not rows:
            return '<p class="empty">No modules</p>'

        rows_html = "\n".join(rows)
        return f'''<table class="module-table">
            <thead>
                <tr>
                    <th>Module</th>
                    <th>Registers</th>
                    <th>Location</th>
                </tr>
            </thead>
            <tbody>
                {rows_html}
            </tbody>
        </table>'''

    def render_report(
        self,
        result: AnalysisResult,
        include_registers: bool = True,
        include_modules: bool = True,
    ) -> str:
        return self.render_full_page(
            "Register Analysis",
            result,
            self.render_module_table(result.modules) if include_modules else "",
            self.render_register_table(result.registers) if include_registers else "",
        )

    def render_full_page(self, title: str, result: AnalysisResult, modules_html: str, registers_html: str) -> str:
        """Render a complete HTML page with summary, modules and registers."""
        template = self._env.get_template("report_page.jinja2")
        return template.render(
            title=self._escape_html(title),
            css=self.css,
            total_registers=result.total_registers,
            total_bits=result.total_bits,
            by_type={self._escape_html(k): v for k, v in result.by_type.items()},
            failures=[(self._escape_html(f.file), self._escape_html(f.reason)) for f in result.failures],
            modules_html=modules_html,
            registers_html=registers_html,
        )
