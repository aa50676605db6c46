"""Error taxonomy and helpers for interpreting external tool output.

Every exception raised by the library derives from :class:`SvregError`
so that callers can catch library failures without masking unrelated
bugs.  Only :class:`ParseFailure` and the tool errors ever fail a whole
file; the remaining conditions are raised by small helpers and
immediately absorbed by their caller, which applies a documented
fallback (skip the module, default the width to 1, ignore the
assignment).

The module also knows how to pick apart the standard error stream of
the Verible tools: :func:`extract_warnings` collects warning lines and
:func:`describe_tool_error` turns known failure messages into a
:class:`ToolDiagnostic`.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List, Optional, Tuple


class SvregError(Exception):
    """Base class for all library errors."""


class ParseFailure(SvregError):
    """The tree dump did not yield a root node."""


class UnresolvedModuleName(SvregError):
    """A module declaration has no identifiable name leaf."""


class UnresolvedWidth(SvregError):
    """A packed dimension did not yield two numeric literals."""


class AssignmentTargetAmbiguous(SvregError):
    """An assignment has no identifiable leading identifier on its LHS."""


class ConfigError(SvregError):
    """Configuration file could not be loaded or is invalid."""


class ToolNotFoundError(SvregError):
    """The external syntax tool could not be located."""


class ToolExecutionError(SvregError):
    """The external syntax tool failed or timed out."""

    def __init__(self, message: str, exit_code: Optional[int] = None, stderr: str = "") -> None:
        super().__init__(message)
        self.exit_code = exit_code
        self.stderr = stderr


@dataclass
class ToolDiagnostic:
    """A structured interpretation of a tool's error output."""

    code: str
    message: str
    details: Dict[str, Any] = field(default_factory=dict)
    suggestion: Optional[str] = None


def extract_warnings(output: str) -> List[str]:
    """Return the stripped lines of ``output`` that carry a warning."""
    return [
        line.strip()
        for line in output.splitlines()
        if "Warning:" in line or "warning:" in line
    ]


def _syntax_error(m: "re.Match[str]", tool: str) -> ToolDiagnostic:
    return ToolDiagnostic(
        code="SYNTAX_ERROR",
        message=m.group(1),
        details={"file": m.group(2), "line": int(m.group(3)), "column": int(m.group(4))},
    )


def _invalid_flag(m: "re.Match[str]", tool: str) -> ToolDiagnostic:
    return ToolDiagnostic(
        code="INVALID_FLAG",
        message=f"Unknown flag: {m.group(1)}",
        suggestion=f"Check available flags with '{tool} --help'",
    )


def _file_not_found(m: "re.Match[str]", tool: str) -> ToolDiagnostic:
    return ToolDiagnostic(code="FILE_NOT_FOUND", message=f"File not found: {m.group(1)}")


def _invalid_argument(m: "re.Match[str]", tool: str) -> ToolDiagnostic:
    return ToolDiagnostic(code="INVALID_ARGUMENT", message=f"Invalid argument: {m.group(1)}")


_ERROR_PATTERNS: List[Tuple["re.Pattern[str]", Callable[["re.Match[str]", str], ToolDiagnostic]]] = [
    (re.compile(r"Error: (.+) at (.+):(\d+):(\d+)"), _syntax_error),
    (re.compile(r"Unknown flag: (.+)"), _invalid_flag),
    (re.compile(r"File not found: (.+)"), _file_not_found),
    (re.compile(r"Invalid argument: (.+)"), _invalid_argument),
]


def describe_tool_error(stderr: str, tool: str = "verible-verilog-syntax") -> Optional[ToolDiagnostic]:
    """Interpret the standard error output of a failed tool run.

    Args:
        stderr: Text written by the tool to its error stream.
        tool: Name of the tool, used in suggestions.

    Returns:
        A :class:`ToolDiagnostic` for the first recognised pattern, or
        ``None`` when nothing in ``stderr`` is recognised.
    """
    if not stderr:
        return None

    for pattern, handler in _ERROR_PATTERNS:
        m = pattern.search(stderr)
        if m:
            return handler(m, tool)

    if "Parse error" in stderr or "Syntax error" in stderr or "syntax error" in stderr:
        return ToolDiagnostic(
            code="PARSE_ERROR",
            message="Failed to parse input file",
            details={"stderr": stderr},
        )
    return None
