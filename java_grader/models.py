# java_grader/models.py
from dataclasses import dataclass, field, asdict
from typing import List, Dict, Any, NamedTuple


@dataclass(frozen=True)
class SubmissionInput:
    student_name: str
    student_email: str
    transaction_source: str      # TransactionHistory.java text
    portfolio_source: str        # PortfolioManager.java text


@dataclass
class AnalysisReport:
    transaction_history: Dict[str, bool] = field(default_factory=dict)
    portfolio_manager: Dict[str, bool] = field(default_factory=dict)
    display: Dict[str, bool] = field(default_factory=dict)
    standards: Dict[str, bool] = field(default_factory=dict)
    file_analysis: Dict[str, Any] = field(default_factory=dict)

    def groups(self) -> Dict[str, Dict[str, bool]]:
        """The four scored probe groups, keyed by their wire names."""
        return {
            "transactionHistory": self.transaction_history,
            "portfolioManager": self.portfolio_manager,
            "display": self.display,
            "standards": self.standards,
        }

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = {k: dict(v) for k, v in self.groups().items()}
        out["fileAnalysis"] = dict(self.file_analysis)
        return out

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AnalysisReport":
        return cls(
            transaction_history=dict(data.get("transactionHistory", {})),
            portfolio_manager=dict(data.get("portfolioManager", {})),
            display=dict(data.get("display", {})),
            standards=dict(data.get("standards", {})),
            file_analysis=dict(data.get("fileAnalysis", {})),
        )


@dataclass
class CompilationResult:
    compilation_success: bool
    compilation_errors: str = ""
    execution_success: bool = False
    execution_output: str = ""
    source: str = "local"        # local | <remote service name> | simulated | error

    def to_dict(self) -> Dict[str, Any]:
        return {
            "compilationSuccess": self.compilation_success,
            "compilationErrors": self.compilation_errors,
            "executionSuccess": self.execution_success,
            "executionOutput": self.execution_output,
            "source": self.source,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CompilationResult":
        return cls(
            compilation_success=bool(data.get("compilationSuccess", False)),
            compilation_errors=data.get("compilationErrors") or "",
            execution_success=bool(data.get("executionSuccess", False)),
            execution_output=data.get("executionOutput") or "",
            source=data.get("source", "local"),
        )


@dataclass
class TestResult:
    __test__ = False  # keep pytest from collecting this as a test class

    name: str
    success: bool
    description: str

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class GradeBreakdown:
    transaction_history: int = 0
    portfolio_manager: int = 0
    display: int = 0
    standards: int = 0
    total: int = 0

    def categories(self) -> List[int]:
        return [self.transaction_history, self.portfolio_manager, self.display, self.standards]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "transactionHistory": self.transaction_history,
            "portfolioManager": self.portfolio_manager,
            "display": self.display,
            "standards": self.standards,
            "total": self.total,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GradeBreakdown":
        return cls(
            transaction_history=int(data.get("transactionHistory", 0)),
            portfolio_manager=int(data.get("portfolioManager", 0)),
            display=int(data.get("display", 0)),
            standards=int(data.get("standards", 0)),
            total=int(data.get("total", 0)),
        )


class GradingResult(NamedTuple):
    analysis: AnalysisReport
    grades: GradeBreakdown
    test_results: List[TestResult]
    feedback: List[str]
    compilation: CompilationResult

    def to_dict(self) -> Dict[str, Any]:
        return {
            "analysis": self.analysis.to_dict(),
            "grades": self.grades.to_dict(),
            "testResults": [t.to_dict() for t in self.test_results],
            "feedback": list(self.feedback),
            **self.compilation.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GradingResult":
        return cls(
            analysis=AnalysisReport.from_dict(data.get("analysis", {})),
            grades=GradeBreakdown.from_dict(data.get("grades", {})),
            test_results=[TestResult(**t) for t in data.get("testResults", [])],
            feedback=list(data.get("feedback", [])),
            compilation=CompilationResult.from_dict(data),
        )


@dataclass
class Submission:
    id: str                      # session_<epoch ms>_<random hex>
    student_name: str
    student_email: str
    timestamp: str               # ISO-8601, UTC
    result: GradingResult

    @property
    def total(self) -> int:
        return self.result.grades.total

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "studentName": self.student_name,
            "studentEmail": self.student_email,
            "timestamp": self.timestamp,
            **self.result.to_dict(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Submission":
        return cls(
            id=data["id"],
            student_name=data.get("studentName", ""),
            student_email=data.get("studentEmail", ""),
            timestamp=data.get("timestamp", ""),
            result=GradingResult.from_dict(data),
        )


@dataclass
class StudentRecord:
    email: str
    name: str
    submission_count: int = 0
    best_score: int = 0
    first_submission: str = ""
    last_submission: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
