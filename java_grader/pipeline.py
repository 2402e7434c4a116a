# java_grader/pipeline.py
"""
End-to-end grading of one submission:
analyze -> compile/run -> check transcript -> score -> feedback.

grade_submission() is the only place unexpected errors are caught; they
turn into a zero-score result carrying a single explanatory feedback line.
"""
from __future__ import annotations
from datetime import datetime, timezone
from typing import Optional
import time
import uuid

from utils.logger import logger
from .analyzer import analyze, empty_report
from .calculator import GradingScheme, STRICT, calculate_grade
from .compiler import JavaCompiler
from .feedback import generate_feedback
from .models import (
    CompilationResult,
    GradeBreakdown,
    GradingResult,
    Submission,
    SubmissionInput,
    TestResult,
)
from .output_analyzer import analyze_output


def _error_result(message: str) -> GradingResult:
    return GradingResult(
        analysis=empty_report(),
        grades=GradeBreakdown(),
        test_results=[TestResult(name="System Error", success=False, description="Error during grading: " + message)],
        feedback=["❌ Error during grading: " + message],
        compilation=CompilationResult(
            compilation_success=False,
            compilation_errors=message,
            execution_success=False,
            execution_output="",
            source="error",
        ),
    )


def run_pipeline(
    submission: SubmissionInput,
    compiler: JavaCompiler,
    scheme: GradingScheme = STRICT,
) -> GradingResult:
    analysis = analyze(submission.transaction_source, submission.portfolio_source, submission.student_name)
    compilation = compiler.compile_and_run(submission.transaction_source, submission.portfolio_source)
    test_results = analyze_output(compilation.execution_output)
    grades = calculate_grade(
        analysis,
        compilation.compilation_success,
        compilation.execution_success,
        test_results,
        scheme=scheme,
    )
    feedback = generate_feedback(
        analysis,
        grades,
        compilation.compilation_success,
        compilation.execution_success,
        compilation.compilation_errors,
        compilation.execution_output,
        test_results,
    )
    return GradingResult(analysis, grades, test_results, feedback, compilation)


def new_submission_id() -> str:
    return f"session_{int(time.time() * 1000)}_{uuid.uuid4().hex[:8]}"


def grade_submission(
    submission: SubmissionInput,
    compiler: Optional[JavaCompiler] = None,
    scheme: GradingScheme = STRICT,
    store=None,
) -> GradingResult:
    """
    Grade one upload. If a store is given (see database.submission_store),
    the result is appended to it as a Submission.
    """
    compiler = compiler or JavaCompiler()
    logger.info(f"Grading submission for {submission.student_name} ({submission.student_email})")
    try:
        result = run_pipeline(submission, compiler, scheme)
    except Exception as e:
        logger.exception("Grading pipeline failed")
        result = _error_result(str(e))

    logger.info(
        f"{submission.student_name}: {result.grades.total}/100 "
        f"(compilation {'SUCCESS' if result.compilation.compilation_success else 'FAILED'}, "
        f"execution {'SUCCESS' if result.compilation.execution_success else 'FAILED'}, "
        f"via {result.compilation.source})"
    )

    if store is not None:
        store.append(Submission(
            id=new_submission_id(),
            student_name=submission.student_name,
            student_email=submission.student_email,
            timestamp=datetime.now(timezone.utc).isoformat(),
            result=result,
        ))
    return result
