# java_grader/cli.py
import os
import json
import argparse

from dotenv import load_dotenv

from .calculator import SCHEMES, get_scheme
from .compiler import JavaCompiler
from .models import SubmissionInput
from .pipeline import grade_submission

load_dotenv()


def _read(path: str) -> str:
    with open(path, "r", encoding="utf-8", errors="replace") as f:
        return f.read()


def main(argv=None):
    ap = argparse.ArgumentParser(description="Grade a TransactionHistory/PortfolioManager Java submission.")
    sub = ap.add_subparsers(dest="cmd", required=True)

    p_grade = sub.add_parser("grade", help="Analyze, compile, run and score one submission.")
    p_grade.add_argument("transaction_history", help="Path to TransactionHistory.java")
    p_grade.add_argument("portfolio_manager", help="Path to PortfolioManager.java")
    p_grade.add_argument("--name", required=True, help='Student name as it should appear in the program, e.g. "Rikin Shah"')
    p_grade.add_argument("--email", default="", help="Student email")
    p_grade.add_argument("--scheme", choices=sorted(SCHEMES), default=os.getenv("GRADER_SCHEME", "strict"),
                         help="Grading scheme (default: strict)")
    p_grade.add_argument("--json", dest="json_out", help="Also write the full result as JSON to this path")
    p_grade.add_argument("--no-local", action="store_true", help="Skip the local JDK even if installed")
    p_grade.add_argument("--no-remote", action="store_true", help="Skip remote compile services")

    args = ap.parse_args(argv)

    if args.cmd == "grade":
        submission = SubmissionInput(
            student_name=args.name,
            student_email=args.email,
            transaction_source=_read(args.transaction_history),
            portfolio_source=_read(args.portfolio_manager),
        )
        compiler = JavaCompiler(use_local=not args.no_local, use_remote=not args.no_remote)
        result = grade_submission(submission, compiler=compiler, scheme=get_scheme(args.scheme))

        for line in result.feedback:
            print(line)

        if args.json_out:
            with open(args.json_out, "w", encoding="utf-8") as f:
                json.dump(result.to_dict(), f, ensure_ascii=False, indent=2)
            print(f"Result saved → {args.json_out}")
        return result.grades.total


if __name__ == "__main__":
    main()
