# java_grader/output_analyzer.py
"""
Pass/fail checks over the transcript captured from the student's program.

The last two checks only pass when the transcript shows the program reacting
to specific values from the scripted stdin in compiler.SYNTHETIC_INPUT:
the invalid menu choice "abc", and the oversized buy (1000 AAPL at 150,
i.e. 150000 required).
"""
from __future__ import annotations
from typing import List, Tuple, Callable
import re

from .models import TestResult

INVALID_CHOICE_MARKER = "abc"
OVERSIZED_BUY_MARKER = "150000"

ERROR_HANDLING_TEST = "Error Handling Test"


def _has(pattern: str) -> Callable[[str], bool]:
    rx = re.compile(pattern, re.IGNORECASE)
    return lambda out: rx.search(out) is not None


_ERROR_WORDING = _has(r"error|invalid|valid number|try again")
_FUNDS_WORDING = _has(r"insufficient|funds|required|available")


OUTPUT_CHECKS: List[Tuple[str, Callable[[str], bool], str]] = [
    ("Compilation Test",
     lambda out: "error:" not in out and "Exception" not in out,
     "Java files compiled without errors"),
    ("Execution Test",
     lambda out: "Exception" not in out,
     "Program runs and produces output"),
    ("Menu Display Test",
     _has(r"menu|choice|option|select"),
     "Menu system is displayed"),
    ("Transaction History Test",
     _has(r"transaction|history|record"),
     "Transaction history functionality works"),
    ("Portfolio Display Test",
     _has(r"portfolio|balance|total|value"),
     "Portfolio information is displayed"),
    ("User Input Test",
     _has(r"enter|input|choice|select"),
     "Program accepts user input"),
    (ERROR_HANDLING_TEST,
     lambda out: _ERROR_WORDING(out) and INVALID_CHOICE_MARKER in out,
     "Program handles invalid input (abc) with proper error message"),
    ("Insufficient Funds Test",
     lambda out: _FUNDS_WORDING(out) and OVERSIZED_BUY_MARKER in out,
     "Program validates insufficient funds for large purchases"),
]


def analyze_output(output: str) -> List[TestResult]:
    """Fixed-order checks; an empty transcript fails every one of them."""
    output = output or ""
    has_output = bool(output.strip())
    return [
        TestResult(name=name, success=has_output and check(output), description=description)
        for name, check, description in OUTPUT_CHECKS
    ]


def passed(test_results: List[TestResult], name: str) -> bool:
    return any(t.name == name and t.success for t in test_results)
