from java_grader.analyzer import analyze, empty_report
from java_grader.calculator import calculate_grade
from java_grader.feedback import band_comment, generate_feedback, BANDS, LOWEST_BAND
from java_grader.models import GradeBreakdown, TestResult
from java_grader.output_analyzer import analyze_output

OUTPUT = "  Brokerage Account\n\tEnter option: abc\nerror: invalid input  \n\n"


def _feedback(analysis=None, grade=None, compiled=True, ran=True, errors="", output="", tests=None):
    analysis = analysis or empty_report()
    grade = grade or calculate_grade(analysis, compiled, ran)
    tests = analyze_output(output) if tests is None else tests
    return generate_feedback(analysis, grade, compiled, ran, errors, output, tests)


def test_output_reproduced_verbatim():
    lines = _feedback(output=OUTPUT)

    i = lines.index(OUTPUT)
    assert lines[i - 1] == "```"
    assert lines[i + 1] == "```"


def test_no_output_block_when_program_printed_nothing():
    assert not any("ACTUAL PROGRAM OUTPUT" in line for line in _feedback(output=""))


def test_sections_in_order(sample_sources):
    transaction, portfolio = sample_sources
    analysis = analyze(transaction, portfolio, "Rikin Shah")
    lines = _feedback(analysis=analysis, output=OUTPUT)
    text = "\n".join(lines)

    assert lines[0] == "✅ Code compiles successfully"
    headings = [
        "TRANSACTIONHISTORY CLASS",
        "PORTFOLIOMANAGER CLASS",
        "DISPLAY REQUIREMENTS",
        "CODING AND TESTING STANDARDS",
        "**EXECUTION**",
        "ACTUAL PROGRAM OUTPUT",
        "EXECUTION TEST RESULTS",
        "GRADE BREAKDOWN",
        "TOTAL SCORE: 100/100",
    ]
    positions = [text.index(h) for h in headings]
    assert positions == sorted(positions)
    assert lines[-1] == "\n" + band_comment(100)


def test_compilation_failure_line_and_long_errors():
    short = _feedback(compiled=False, ran=False, errors="Missing class declaration")
    assert short[0] == "❌ Compilation failed: Missing class declaration"
    assert not any(line.startswith("📝") for line in short)

    long_errors = "X.java:1: error: ';' expected\n" * 10
    lines = _feedback(compiled=False, ran=False, errors=long_errors)
    assert lines[1] == "📝 Full error details: " + long_errors

    assert _feedback(compiled=False, ran=False)[0] == "❌ Compilation failed: Unknown compilation error"


def test_accessor_pair_partially_implemented():
    analysis = empty_report()
    analysis.transaction_history["hasQtyGetter"] = True
    lines = _feedback(analysis=analysis)

    assert "⚠️ getQty/setQty methods partially implemented" in lines
    assert "❌ getTicker/setTicker methods missing" in lines


def test_menu_error_line_follows_the_transcript_check():
    analysis = empty_report()
    analysis.standards["hasMenuErrorHandling"] = True
    failing = [TestResult("Error Handling Test", False, "")]
    assert "❌ Menu input error handling missing or not working" in _feedback(analysis=analysis, tests=failing)

    passing = [TestResult("Error Handling Test", True, "")]
    assert "✅ Menu input error handling works correctly" in _feedback(tests=passing)


def test_breakdown_lines():
    grade = GradeBreakdown(transaction_history=20, portfolio_manager=18, display=25, standards=10, total=73)
    lines = _feedback(grade=grade)

    assert "TransactionHistory Class: 20/25 points" in lines
    assert "Coding Standards: 10/25 points" in lines
    assert "\n🎯 **TOTAL SCORE: 73/100**" in lines


def test_band_thresholds():
    assert band_comment(100) == BANDS[0][1]
    assert band_comment(90) == BANDS[0][1]
    assert band_comment(89) == BANDS[1][1]
    assert band_comment(80) == BANDS[1][1]
    assert band_comment(70) == BANDS[2][1]
    assert band_comment(60) == BANDS[3][1]
    assert band_comment(59) == LOWEST_BAND
    assert band_comment(0) == LOWEST_BAND
