# java_grader/__init__.py

from .analyzer import analyze
from .compiler import JavaCompiler, compile_and_run
from .output_analyzer import analyze_output
from .calculator import calculate_grade, GradingScheme, STRICT, LENIENT
from .feedback import generate_feedback
from .pipeline import grade_submission
from .models import (
    SubmissionInput,
    AnalysisReport,
    CompilationResult,
    TestResult,
    GradeBreakdown,
    GradingResult,
    Submission,
    StudentRecord,
)

__all__ = [
    "analyze",
    "JavaCompiler",
    "compile_and_run",
    "analyze_output",
    "calculate_grade",
    "GradingScheme",
    "STRICT",
    "LENIENT",
    "generate_feedback",
    "grade_submission",
    "SubmissionInput",
    "AnalysisReport",
    "CompilationResult",
    "TestResult",
    "GradeBreakdown",
    "GradingResult",
    "Submission",
    "StudentRecord",
]
