# java_grader/analyzer.py
"""
Regex probe battery over the two submitted Java files.

Each probe is an independent boolean test: (name, pattern, flags, target).
Targets:
  - "transaction": TransactionHistory.java
  - "portfolio":   PortfolioManager.java (holds the menu loop and display code)
  - "both":        must match in both files

Probes are matched against raw source text, so a keyword inside a comment
counts. Empty text or an empty student name never matches.
"""
from __future__ import annotations
from typing import Dict, List, Tuple, Optional
import re

from .models import AnalysisReport

TRANSACTION, PORTFOLIO, BOTH = "transaction", "portfolio", "both"

# Placeholder pattern replaced by the escaped student name at analysis time
STUDENT_NAME = object()

I = re.IGNORECASE

_HEADER_COMMENT = r"/\*[\s\S]*?\*/|//.*header|//.*name|//.*date"

Probe = Tuple[str, object, int, str]

TRANSACTION_HISTORY_PROBES: List[Probe] = [
    ("hasTransactionHistoryClass", r"class\s+TransactionHistory", I, TRANSACTION),
    # any non-empty TransactionHistory file, whitespace included
    ("hasSeparateFile", r"[\s\S]", 0, TRANSACTION),
    # private attributes
    ("hasTickerField", r"private\s+String\s+ticker", I, TRANSACTION),
    ("hasTransDateField", r"private\s+String\s+transDate", I, TRANSACTION),
    ("hasTransTypeField", r"private\s+String\s+transType", I, TRANSACTION),
    ("hasQtyField", r"private\s+double\s+qty", I, TRANSACTION),
    ("hasCostBasisField", r"private\s+double\s+costBasis", I, TRANSACTION),
    # constructors
    ("hasDefaultConstructor", r"public\s+TransactionHistory\s*\(\s*\)", 0, TRANSACTION),
    ("hasOverloadedConstructor", r"public\s+TransactionHistory\s*\([^)]+\)", 0, TRANSACTION),
    # accessors, getter and setter tracked separately
    ("hasTickerGetter", r"public\s+String\s+getTicker\s*\(", I, TRANSACTION),
    ("hasTickerSetter", r"public\s+void\s+setTicker\s*\(", I, TRANSACTION),
    ("hasTransDateGetter", r"public\s+String\s+getTransDate\s*\(", I, TRANSACTION),
    ("hasTransDateSetter", r"public\s+void\s+setTransDate\s*\(", I, TRANSACTION),
    ("hasTransTypeGetter", r"public\s+String\s+getTransType\s*\(", I, TRANSACTION),
    ("hasTransTypeSetter", r"public\s+void\s+setTransType\s*\(", I, TRANSACTION),
    ("hasQtyGetter", r"public\s+double\s+getQty\s*\(", I, TRANSACTION),
    ("hasQtySetter", r"public\s+void\s+setQty\s*\(", I, TRANSACTION),
    ("hasCostBasisGetter", r"public\s+double\s+getCostBasis\s*\(", I, TRANSACTION),
    ("hasCostBasisSetter", r"public\s+void\s+setCostBasis\s*\(", I, TRANSACTION),
    ("hasToStringMethod", r"public\s+String\s+toString\s*\(", I, TRANSACTION),
    ("hasHeaderComments", _HEADER_COMMENT, I, TRANSACTION),
]

PORTFOLIO_MANAGER_PROBES: List[Probe] = [
    ("hasPortfolioManagerClass", r"class\s+PortfolioManager", I, PORTFOLIO),
    ("hasMainMethod", r"public\s+static\s+void\s+main\s*\(", 0, PORTFOLIO),
    # ArrayList<TransactionHistory> portfolioList
    ("hasArrayListAttribute", r"ArrayList\s*<\s*TransactionHistory\s*>\s+portfolioList", I, PORTFOLIO),
    ("hasArrayListInitialization", r"new\s+ArrayList\s*<\s*TransactionHistory\s*>\s*\(\s*\)", I, PORTFOLIO),
    # menu; option number and keyword in either order
    ("hasMenuDisplay", r"menu|choice|option|Enter option", I, PORTFOLIO),
    ("hasExitOption", r"0.*exit|exit.*0", I, PORTFOLIO),
    ("hasDepositOption", r"1.*deposit|deposit.*1", I, PORTFOLIO),
    ("hasWithdrawOption", r"2.*withdraw|withdraw.*2", I, PORTFOLIO),
    ("hasBuyOption", r"3.*buy|buy.*3", I, PORTFOLIO),
    ("hasSellOption", r"4.*sell|sell.*4", I, PORTFOLIO),
    ("hasHistoryOption", r"5.*history|history.*5", I, PORTFOLIO),
    ("hasPortfolioOption", r"6.*portfolio|portfolio.*6", I, PORTFOLIO),
    # transaction handling
    ("hasDepositLogic", r"deposit", I, PORTFOLIO),
    ("hasWithdrawLogic", r"withdraw", I, PORTFOLIO),
    ("hasBuyLogic", r"buy", I, PORTFOLIO),
    ("hasSellLogic", r"sell", I, PORTFOLIO),
    ("hasTransactionHistoryDisplay", r"transaction.*history|history.*transaction", I, PORTFOLIO),
    ("hasPortfolioDisplay", r"portfolio.*display|display.*portfolio", I, PORTFOLIO),
]

DISPLAY_PROBES: List[Probe] = [
    ("hasNameInMenu", STUDENT_NAME, I, PORTFOLIO),
    ("hasNameInHistory", STUDENT_NAME, I, PORTFOLIO),
    ("hasHistoryHeader", r"brokerage.*account|account.*brokerage", I, PORTFOLIO),
    ("hasHistoryTable", r"date.*ticker.*quantity.*cost.*basis.*trans.*type", I, PORTFOLIO),
    ("hasHistoryFormatting", r"===", 0, PORTFOLIO),
    ("hasPortfolioHeader", r"portfolio.*as.*of|as.*of.*portfolio", I, PORTFOLIO),
    ("hasPortfolioTable", r"ticker.*quantity", I, PORTFOLIO),
    ("hasPortfolioFormatting", r"===", 0, PORTFOLIO),
    # literal timestamps or the SimpleDateFormat patterns that print them
    ("hasTimestamp", r"\d{2}/\d{2}/\d{4}|\d{2}:\d{2}:\d{2}|MM/dd/yyyy|HH:mm:ss", 0, PORTFOLIO),
]

STANDARDS_PROBES: List[Probe] = [
    # error handling
    ("hasTryCatch", r"try\s*\{[\s\S]*?catch", I, PORTFOLIO),
    ("hasMenuErrorHandling",
     r"invalid.*(input|option|choice)|error.*message|valid number|try again", I, PORTFOLIO),
    ("hasCashValidation", r"enough.*cash|cash.*available|insufficient.*funds", I, PORTFOLIO),
    ("hasWithdrawValidation", r"withdraw.*amount|amount.*withdraw", I, PORTFOLIO),
    ("hasStockValidation", r"enough.*shares|shares.*available", I, PORTFOLIO),
    # code quality
    ("hasHeaderComments", _HEADER_COMMENT, I, BOTH),
    ("hasProperFormatting", r"public\s+class|private\s+\w+|public\s+\w+", 0, BOTH),
    ("hasProperNaming", r"[A-Z][a-zA-Z]*", 0, BOTH),
    # business logic
    ("hasCashTransactionLogic", r"cash.*transaction|transaction.*cash", I, PORTFOLIO),
    ("hasStockTransactionLogic", r"stock.*transaction|transaction.*stock", I, PORTFOLIO),
    ("hasTickerCapitalization", r"toUpperCase", I, PORTFOLIO),
    ("hasCostBasisLogic", r"cost.*basis|basis.*cost", I, PORTFOLIO),
    ("hasQuantityHandling", r"quantity|qty", I, PORTFOLIO),
    ("hasTransactionTypeHandling", r"BUY|SELL|DEPOSIT|WITHDRAW", I, PORTFOLIO),
    ("hasPortfolioCalculation", r"portfolio.*calculation|calculate.*portfolio", I, PORTFOLIO),
    ("hasArrayListUsage", r"portfolioList\.|\.add\(|\.get\(|\.size\(", I, PORTFOLIO),
]

PROBE_GROUPS: Dict[str, List[Probe]] = {
    "transactionHistory": TRANSACTION_HISTORY_PROBES,
    "portfolioManager": PORTFOLIO_MANAGER_PROBES,
    "display": DISPLAY_PROBES,
    "standards": STANDARDS_PROBES,
}


def probe_names(group: str) -> List[str]:
    return [name for name, _, _, _ in PROBE_GROUPS[group]]


def _matches(pattern: Optional[str], flags: int, text: str) -> bool:
    if not pattern or not text:
        return False
    return re.search(pattern, text, flags) is not None


def _evaluate(probe: Probe, texts: Dict[str, str], name_pattern: Optional[str]) -> bool:
    name, pattern, flags, target = probe
    if pattern is STUDENT_NAME:
        pattern = name_pattern
    if target == BOTH:
        return all(_matches(pattern, flags, t) for t in texts.values())
    return _matches(pattern, flags, texts[target])


def _run_group(probes: List[Probe], texts: Dict[str, str], name_pattern: Optional[str]) -> Dict[str, bool]:
    return {probe[0]: _evaluate(probe, texts, name_pattern) for probe in probes}


def analyze(transaction_source: str, portfolio_source: str, student_name: str) -> AnalysisReport:
    """
    Run every probe group against the two sources.
    Never raises; non-matching or empty input yields False probes.
    """
    transaction_source = transaction_source or ""
    portfolio_source = portfolio_source or ""
    name = (student_name or "").strip()
    name_pattern = re.escape(name) if name else None

    texts = {TRANSACTION: transaction_source, PORTFOLIO: portfolio_source}

    file_analysis = {
        "transactionSize": len(transaction_source),
        "portfolioSize": len(portfolio_source),
        "transactionLines": len(transaction_source.split("\n")),
        "portfolioLines": len(portfolio_source.split("\n")),
        "hasStudentName": _matches(name_pattern, I, transaction_source) or _matches(name_pattern, I, portfolio_source),
    }

    return AnalysisReport(
        transaction_history=_run_group(TRANSACTION_HISTORY_PROBES, texts, name_pattern),
        portfolio_manager=_run_group(PORTFOLIO_MANAGER_PROBES, texts, name_pattern),
        display=_run_group(DISPLAY_PROBES, texts, name_pattern),
        standards=_run_group(STANDARDS_PROBES, texts, name_pattern),
        file_analysis=file_analysis,
    )


def empty_report() -> AnalysisReport:
    """All-false report with every probe key present."""
    return analyze("", "", "")
