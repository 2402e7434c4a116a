# java_grader/feedback.py
"""
Human-readable feedback lines for one graded submission.

Section order is fixed: compilation, the four rubric categories, execution
status, the program transcript, the transcript checks, the score breakdown
and a closing band comment.
"""
from __future__ import annotations
from typing import List, Dict, Tuple

from .models import AnalysisReport, GradeBreakdown, TestResult
from .output_analyzer import ERROR_HANDLING_TEST, passed

FIELDS = [
    ("ticker (String)", "hasTickerField"),
    ("transDate (String)", "hasTransDateField"),
    ("transType (String)", "hasTransTypeField"),
    ("qty (double)", "hasQtyField"),
    ("costBasis (double)", "hasCostBasisField"),
]

ACCESSOR_PAIRS = [
    ("getTicker/setTicker", "hasTickerGetter", "hasTickerSetter"),
    ("getTransDate/setTransDate", "hasTransDateGetter", "hasTransDateSetter"),
    ("getTransType/setTransType", "hasTransTypeGetter", "hasTransTypeSetter"),
    ("getQty/setQty", "hasQtyGetter", "hasQtySetter"),
    ("getCostBasis/setCostBasis", "hasCostBasisGetter", "hasCostBasisSetter"),
]

MENU_OPTIONS = [
    ("Exit (0)", "hasExitOption"),
    ("Deposit Cash (1)", "hasDepositOption"),
    ("Withdraw Cash (2)", "hasWithdrawOption"),
    ("Buy Stock (3)", "hasBuyOption"),
    ("Sell Stock (4)", "hasSellOption"),
    ("Display Transaction History (5)", "hasHistoryOption"),
    ("Display Portfolio (6)", "hasPortfolioOption"),
]

LOGIC = [
    ("Deposit logic", "hasDepositLogic"),
    ("Withdraw logic", "hasWithdrawLogic"),
    ("Buy stock logic", "hasBuyLogic"),
    ("Sell stock logic", "hasSellLogic"),
    ("Transaction history display", "hasTransactionHistoryDisplay"),
    ("Portfolio display", "hasPortfolioDisplay"),
]

# (probe, line when present, line when absent)
DISPLAY_LINES = [
    ("hasNameInMenu", "Student name displayed in menu", "Student name missing from menu"),
    ("hasNameInHistory", "Student name displayed in transaction history", "Student name missing from transaction history"),
    ("hasHistoryHeader", "Transaction history header found", "Transaction history header missing"),
    ("hasHistoryTable", "Transaction history table format found", "Transaction history table format missing"),
    ("hasHistoryFormatting", "Transaction history separator lines found", "Transaction history separator lines missing"),
    ("hasPortfolioHeader", "Portfolio header found", "Portfolio header missing"),
    ("hasPortfolioTable", "Portfolio table format found", "Portfolio table format missing"),
    ("hasPortfolioFormatting", "Portfolio separator lines found", "Portfolio separator lines missing"),
    ("hasTimestamp", "Portfolio timestamp found", "Portfolio timestamp missing"),
]

VALIDATION_LINES = [
    ("hasCashValidation", "Cash validation for purchases implemented", "Cash validation for purchases missing"),
    ("hasWithdrawValidation", "Withdrawal amount validation implemented", "Withdrawal amount validation missing"),
    ("hasStockValidation", "Stock share validation for selling implemented", "Stock share validation for selling missing"),
    ("hasHeaderComments", "Header comments with name and date found", "Header comments with name and date missing"),
    ("hasProperFormatting", "Code properly formatted and readable", "Code formatting needs improvement"),
    ("hasProperNaming", "Class and variable naming follows Java conventions", "Class and variable naming needs improvement"),
    ("hasTickerCapitalization", "Ticker capitalization (toUpperCase) implemented", "Ticker capitalization missing"),
    ("hasTransactionTypeHandling", "Transaction type handling (BUY/SELL/DEPOSIT/WITHDRAW) found",
     "Transaction type handling missing"),
    ("hasArrayListUsage", "ArrayList methods (add, get, size) used", "ArrayList methods not properly used"),
]

BANDS: List[Tuple[int, str]] = [
    (90, "🎉 **EXCELLENT WORK!** Outstanding implementation that meets all requirements."),
    (80, "👍 **GOOD WORK!** Well implemented with minor issues."),
    (70, "👌 **SATISFACTORY.** Some improvements needed to meet all requirements."),
    (60, "⚠️ **NEEDS IMPROVEMENT.** Review requirements and implement missing features."),
]
LOWEST_BAND = "❌ **SIGNIFICANT IMPROVEMENTS NEEDED.** Major requirements missing."


def _mark(ok: bool) -> str:
    return "✅" if ok else "❌"


def _toggle(probes: Dict[str, bool], key: str, present: str, absent: str) -> str:
    ok = probes.get(key, False)
    return f"{_mark(ok)} {present if ok else absent}"


def band_comment(total: int) -> str:
    for threshold, text in BANDS:
        if total >= threshold:
            return text
    return LOWEST_BAND


def generate_feedback(
    analysis: AnalysisReport,
    grade: GradeBreakdown,
    compilation_success: bool,
    execution_success: bool,
    compilation_errors: str,
    execution_output: str,
    test_results: List[TestResult],
) -> List[str]:
    th = analysis.transaction_history
    pm = analysis.portfolio_manager
    disp = analysis.display
    std = analysis.standards
    test_results = test_results or []
    feedback: List[str] = []

    if compilation_success:
        feedback.append("✅ Code compiles successfully")
    else:
        feedback.append("❌ Compilation failed: " + (compilation_errors or "Unknown compilation error"))
        if compilation_errors and len(compilation_errors) > 200:
            feedback.append("📝 Full error details: " + compilation_errors)

    # --- TransactionHistory ---
    feedback.append("\n📋 **TRANSACTIONHISTORY CLASS (25 points)**")
    for label, key in FIELDS:
        found = th.get(key, False)
        feedback.append(f"{_mark(found)} Private field '{label}' {'found' if found else 'missing'}")
    feedback.append(_toggle(th, "hasDefaultConstructor", "Default constructor found", "Default constructor missing"))
    feedback.append(_toggle(th, "hasOverloadedConstructor", "Overloaded constructor found", "Overloaded constructor missing"))
    for label, getter, setter in ACCESSOR_PAIRS:
        g, s = th.get(getter, False), th.get(setter, False)
        if g and s:
            feedback.append(f"✅ {label} methods found")
        elif g or s:
            feedback.append(f"⚠️ {label} methods partially implemented")
        else:
            feedback.append(f"❌ {label} methods missing")
    feedback.append(_toggle(th, "hasToStringMethod", "toString method found", "toString method missing"))

    # --- PortfolioManager ---
    feedback.append("\n📊 **PORTFOLIOMANAGER CLASS (25 points)**")
    if pm.get("hasArrayListAttribute") and pm.get("hasArrayListInitialization"):
        feedback.append("✅ ArrayList<TransactionHistory> portfolioList properly declared and initialized")
    else:
        feedback.append("❌ ArrayList<TransactionHistory> portfolioList missing or not properly initialized")
    for label, key in MENU_OPTIONS:
        found = pm.get(key, False)
        feedback.append(f"{_mark(found)} Menu option '{label}' {'found' if found else 'missing'}")
    for label, key in LOGIC:
        found = pm.get(key, False)
        feedback.append(f"{_mark(found)} {label} {'implemented' if found else 'missing'}")

    # --- Display ---
    feedback.append("\n📱 **DISPLAY REQUIREMENTS (25 points)**")
    for key, present, absent in DISPLAY_LINES:
        feedback.append(_toggle(disp, key, present, absent))

    # --- Coding standards ---
    feedback.append("\n🔧 **CODING AND TESTING STANDARDS (25 points)**")
    feedback.append(_toggle(std, "hasTryCatch", "Try-catch error handling implemented", "Try-catch error handling missing"))
    # Verdict comes from the transcript check, not the static hasMenuErrorHandling probe
    if passed(test_results, ERROR_HANDLING_TEST):
        feedback.append("✅ Menu input error handling works correctly")
    else:
        feedback.append("❌ Menu input error handling missing or not working")
    for key, present, absent in VALIDATION_LINES:
        feedback.append(_toggle(std, key, present, absent))

    # --- Execution ---
    if execution_success:
        feedback.append("\n✅ **EXECUTION**: Program runs successfully")
    else:
        feedback.append("\n❌ **EXECUTION**: Program failed to run")

    if execution_output:
        feedback.append("\n📊 **ACTUAL PROGRAM OUTPUT:**")
        feedback.append("```")
        feedback.append(execution_output)
        feedback.append("```")

    if test_results:
        feedback.append("\n📊 **EXECUTION TEST RESULTS:**")
        for test in test_results:
            feedback.append(f"{_mark(test.success)} {test.name}: {test.description}")

    # --- Totals ---
    feedback.append("\n📊 **GRADE BREAKDOWN**")
    feedback.append(f"TransactionHistory Class: {grade.transaction_history}/25 points")
    feedback.append(f"PortfolioManager Class: {grade.portfolio_manager}/25 points")
    feedback.append(f"Display Requirements: {grade.display}/25 points")
    feedback.append(f"Coding Standards: {grade.standards}/25 points")
    feedback.append(f"\n🎯 **TOTAL SCORE: {grade.total}/100**")
    feedback.append("\n" + band_comment(grade.total))

    return feedback
