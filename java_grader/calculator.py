# java_grader/calculator.py
"""
Rubric scoring: four 25-point categories from the analyzer's probe groups.

One calculator, two schemes:
  - STRICT (default): rubric-literal weights, nothing for a missing probe,
    compile failure keeps 80% of every category, run failure keeps 95%.
  - LENIENT ("easy grading"): partial credit for missing probes, a flat
    allowance for accessors, retention 90% / 98%.

Returns a GradeBreakdown whose categories always sum to its total.
"""
from __future__ import annotations
from dataclasses import dataclass
from typing import Dict, List, Optional, Sequence, Tuple
import math

from .models import AnalysisReport, GradeBreakdown, TestResult

CATEGORY_MAX = 25
TOTAL_MAX = 100

# (probe name, points if present, points if absent)
Weight = Tuple[str, float, float]


@dataclass(frozen=True)
class CategoryRubric:
    weights: Tuple[Weight, ...]
    base: float = 0.0

    def score(self, probes: Dict[str, bool]) -> float:
        raw = self.base
        for name, if_true, if_false in self.weights:
            raw += if_true if probes.get(name, False) else if_false
        return raw


@dataclass(frozen=True)
class GradingScheme:
    name: str
    transaction_history: CategoryRubric
    portfolio_manager: CategoryRubric
    display: CategoryRubric
    standards: CategoryRubric
    compile_retention: float
    execution_retention: float

    def rubrics(self) -> List[Tuple[str, CategoryRubric]]:
        return [
            ("transactionHistory", self.transaction_history),
            ("portfolioManager", self.portfolio_manager),
            ("display", self.display),
            ("standards", self.standards),
        ]


def _each(names: Sequence[str], if_true: float, if_false: float = 0.0) -> Tuple[Weight, ...]:
    return tuple((n, if_true, if_false) for n in names)


_FIELDS = ["hasTickerField", "hasTransDateField", "hasTransTypeField", "hasQtyField", "hasCostBasisField"]
_CONSTRUCTORS = ["hasDefaultConstructor", "hasOverloadedConstructor"]
_ACCESSORS = [
    "hasTickerGetter", "hasTickerSetter", "hasTransDateGetter", "hasTransDateSetter",
    "hasTransTypeGetter", "hasTransTypeSetter", "hasQtyGetter", "hasQtySetter",
    "hasCostBasisGetter", "hasCostBasisSetter",
]
_MENU = [
    "hasMenuDisplay", "hasExitOption", "hasDepositOption", "hasWithdrawOption",
    "hasBuyOption", "hasSellOption", "hasHistoryOption", "hasPortfolioOption",
]
_LOGIC = [
    "hasDepositLogic", "hasWithdrawLogic", "hasBuyLogic", "hasSellLogic",
    "hasTransactionHistoryDisplay", "hasPortfolioDisplay",
]
_HISTORY_DISPLAY = ["hasNameInMenu", "hasNameInHistory", "hasHistoryHeader", "hasHistoryTable", "hasHistoryFormatting"]
_PORTFOLIO_DISPLAY = ["hasPortfolioHeader", "hasPortfolioTable", "hasPortfolioFormatting", "hasTimestamp"]
_VALIDATION = ["hasCashValidation", "hasWithdrawValidation", "hasStockValidation"]
_QUALITY = ["hasHeaderComments", "hasProperFormatting", "hasProperNaming"]
_BUSINESS = [
    "hasCashTransactionLogic", "hasStockTransactionLogic", "hasTickerCapitalization", "hasCostBasisLogic",
    "hasQuantityHandling", "hasTransactionTypeHandling", "hasPortfolioCalculation", "hasArrayListUsage",
]

STRICT = GradingScheme(
    name="strict",
    transaction_history=CategoryRubric(
        _each(_FIELDS, 1) + _each(_CONSTRUCTORS, 2.5) + _each(_ACCESSORS, 1) + _each(["hasToStringMethod"], 5)
    ),
    portfolio_manager=CategoryRubric(
        _each(["hasArrayListAttribute", "hasArrayListInitialization"], 2.5) + _each(_MENU, 1.25) + _each(_LOGIC, 1.67)
    ),
    display=CategoryRubric(_each(_HISTORY_DISPLAY, 2.5) + _each(_PORTFOLIO_DISPLAY, 3.125)),
    standards=CategoryRubric(
        _each(["hasTryCatch"], 1.6)
        + (("hasMenuErrorHandling", 1.6, -0.2),)
        + _each(_VALIDATION, 1.6)
        + _each(_QUALITY, 2.33)
        + _each(_BUSINESS, 1.25)
    ),
    compile_retention=0.8,
    execution_retention=0.95,
)

LENIENT = GradingScheme(
    name="lenient",
    transaction_history=CategoryRubric(
        _each(_FIELDS, 1, 0.7) + _each(_CONSTRUCTORS, 2.5, 1.5) + _each(["hasToStringMethod"], 5, 3),
        base=8,  # accessors are not probed individually in this scheme
    ),
    portfolio_manager=CategoryRubric(
        _each(["hasPortfolioManagerClass", "hasMainMethod", "hasArrayListAttribute", "hasMenuDisplay"], 5, 3)
        + _each(["hasExitOption", "hasDepositOption"], 2.5, 1.5)
    ),
    display=CategoryRubric(
        _each(["hasNameInMenu", "hasNameInHistory"], 8, 5) + _each(["hasHistoryHeader", "hasPortfolioHeader"], 4.5, 3)
    ),
    standards=CategoryRubric(
        _each(["hasTryCatch", "hasHeaderComments"], 8, 5)
        + _each(["hasTickerCapitalization", "hasTransactionTypeHandling"], 4.5, 3)
    ),
    compile_retention=0.9,
    execution_retention=0.98,
)

SCHEMES: Dict[str, GradingScheme] = {s.name: s for s in (STRICT, LENIENT)}


def get_scheme(name: Optional[str]) -> GradingScheme:
    if not name:
        return STRICT
    try:
        return SCHEMES[name.lower()]
    except KeyError:
        raise ValueError(f"Unknown grading scheme '{name}' (expected one of {sorted(SCHEMES)})") from None


def _round_half_up(x: float) -> int:
    # round(x, 6) strips float noise from summed fractional weights (e.g. 17.499999...)
    return int(math.floor(round(x, 6) + 0.5))


def _clamp(x: int, lo: int, hi: int) -> int:
    return max(lo, min(hi, x))


def _reconcile(scores: List[int], total: int) -> List[int]:
    """Make the category scores sum to total exactly, keeping each in [0, CATEGORY_MAX]."""
    current = sum(scores)
    if abs(current - total) > 1 and current > 0:
        factor = total / current
        scores = [_clamp(_round_half_up(s * factor), 0, CATEGORY_MAX) for s in scores]

    drift = total - sum(scores)
    i = 0
    while drift != 0:
        if drift > 0 and scores[i] < CATEGORY_MAX:
            scores[i] += 1; drift -= 1
        elif drift < 0 and scores[i] > 0:
            scores[i] -= 1; drift += 1
        i = (i + 1) % len(scores)
    return scores


def calculate_grade(
    analysis: AnalysisReport,
    compilation_success: bool,
    execution_success: bool,
    test_results: Optional[List[TestResult]] = None,
    scheme: GradingScheme = STRICT,
) -> GradeBreakdown:
    """
    Pure and deterministic. test_results is part of the calculator's
    interface but neither scheme weights it.
    """
    groups = analysis.groups()
    scores = [
        _clamp(_round_half_up(rubric.score(groups.get(key) or {})), 0, CATEGORY_MAX)
        for key, rubric in scheme.rubrics()
    ]

    if not compilation_success:
        scores = [_round_half_up(s * scheme.compile_retention) for s in scores]
    elif not execution_success:
        scores = [_round_half_up(s * scheme.execution_retention) for s in scores]

    total = _clamp(sum(scores), 0, TOTAL_MAX)
    scores = _reconcile(scores, total)

    th, pm, disp, std = scores
    return GradeBreakdown(
        transaction_history=th,
        portfolio_manager=pm,
        display=disp,
        standards=std,
        total=total,
    )
