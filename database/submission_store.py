# File: database/submission_store.py
"""
Where graded submissions go. The grading pipeline receives a store
instead of touching global state:

  store.append(submission)
  store.list()                 oldest first
  store.find(submission_id)
  store.find_by_email(email)
  store.students()             per-student roll-up, most recent first
"""
from __future__ import annotations
from typing import Dict, List, Optional
import threading
from contextlib import contextmanager

import psycopg2.pool
from psycopg2.extras import RealDictCursor, Json

from java_grader.models import Submission, StudentRecord
from .db_connection import get_db_params


class SubmissionStore:

    def append(self, submission: Submission) -> Submission:
        raise NotImplementedError

    def list(self) -> List[Submission]:
        raise NotImplementedError

    def find(self, submission_id: str) -> Optional[Submission]:
        return next((s for s in self.list() if s.id == submission_id), None)

    def find_by_email(self, email: str) -> List[Submission]:
        return [s for s in self.list() if s.student_email == email]

    def students(self) -> List[StudentRecord]:
        by_email: Dict[str, StudentRecord] = {}
        for sub in self.list():
            rec = by_email.get(sub.student_email)
            if rec is None:
                rec = StudentRecord(
                    email=sub.student_email,
                    name=sub.student_name,
                    first_submission=sub.timestamp,
                )
                by_email[sub.student_email] = rec
            rec.name = sub.student_name  # latest name wins
            rec.submission_count += 1
            rec.best_score = max(rec.best_score, sub.total)
            rec.last_submission = sub.timestamp
        return sorted(by_email.values(), key=lambda r: r.last_submission, reverse=True)


class InMemorySubmissionStore(SubmissionStore):
    """Process-local store; appends from concurrent requests are serialized."""

    def __init__(self):
        self._submissions: List[Submission] = []
        self._lock = threading.Lock()

    def append(self, submission: Submission) -> Submission:
        with self._lock:
            self._submissions.append(submission)
        return submission

    def list(self) -> List[Submission]:
        with self._lock:
            return list(self._submissions)


class PostgresSubmissionStore(SubmissionStore):
    """
    Submissions as JSONB rows in PostgreSQL. The full record is kept in
    `record`; the other columns exist for lookups and the student roll-up.

    Every call checks out its own pooled connection, so concurrent appends
    on one store never share a transaction.
    """
    _pool = None

    def __init__(self, conn_params: Optional[dict] = None):
        if PostgresSubmissionStore._pool is None:
            if conn_params is None:
                conn_params = get_db_params()
            PostgresSubmissionStore._pool = psycopg2.pool.SimpleConnectionPool(1, 20, **conn_params)

        self.initialize_schema()

    @contextmanager
    def _connection(self):
        conn = PostgresSubmissionStore._pool.getconn()
        try:
            yield conn
        finally:
            PostgresSubmissionStore._pool.putconn(conn)

    def initialize_schema(self):
        """Creates the submissions table and its indexes."""
        with self._connection() as conn:
            with conn.cursor() as cur:
                cur.execute("""
                CREATE TABLE IF NOT EXISTS submissions (
                    id VARCHAR PRIMARY KEY,
                    student_name VARCHAR NOT NULL, student_email VARCHAR NOT NULL,
                    submitted_at TIMESTAMP WITH TIME ZONE NOT NULL,
                    total_score INTEGER NOT NULL,
                    compilation_success BOOLEAN NOT NULL DEFAULT FALSE,
                    execution_success BOOLEAN NOT NULL DEFAULT FALSE,
                    record JSONB NOT NULL,
                    created_at TIMESTAMP WITH TIME ZONE DEFAULT CURRENT_TIMESTAMP
                );""")
                cur.execute("CREATE INDEX IF NOT EXISTS idx_sub_email ON submissions (student_email);")
                cur.execute("CREATE INDEX IF NOT EXISTS idx_sub_submitted ON submissions (submitted_at DESC);")
            conn.commit()

    def _fetch(self, query: str, params: tuple = None) -> List[dict]:
        with self._connection() as conn:
            with conn.cursor(cursor_factory=RealDictCursor) as cur:
                cur.execute(query, params)
                return cur.fetchall()

    def append(self, submission: Submission) -> Submission:
        with self._connection() as conn:
            try:
                with conn.cursor() as cur:
                    cur.execute(
                        """
                        INSERT INTO submissions (id, student_name, student_email, submitted_at, total_score,
                            compilation_success, execution_success, record)
                        VALUES (%s, %s, %s, %s, %s, %s, %s, %s);
                        """,
                        (
                            submission.id,
                            submission.student_name,
                            submission.student_email,
                            submission.timestamp,
                            submission.total,
                            submission.result.compilation.compilation_success,
                            submission.result.compilation.execution_success,
                            Json(submission.to_dict()),
                        ),
                    )
                conn.commit()
                return submission
            except Exception:
                conn.rollback()
                raise

    def list(self) -> List[Submission]:
        rows = self._fetch("SELECT record FROM submissions ORDER BY submitted_at ASC;")
        return [Submission.from_dict(r["record"]) for r in rows]

    def find(self, submission_id: str) -> Optional[Submission]:
        rows = self._fetch("SELECT record FROM submissions WHERE id = %s;", (submission_id,))
        return Submission.from_dict(rows[0]["record"]) if rows else None

    def find_by_email(self, email: str) -> List[Submission]:
        rows = self._fetch(
            "SELECT record FROM submissions WHERE student_email = %s ORDER BY submitted_at ASC;",
            (email,),
        )
        return [Submission.from_dict(r["record"]) for r in rows]

    def students(self) -> List[StudentRecord]:
        rows = self._fetch("""
            SELECT student_email AS email,
                   (ARRAY_AGG(student_name ORDER BY submitted_at DESC))[1] AS name,
                   COUNT(*) AS submission_count,
                   MAX(total_score) AS best_score,
                   MIN(submitted_at) AS first_submission,
                   MAX(submitted_at) AS last_submission
            FROM submissions
            GROUP BY student_email
            ORDER BY MAX(submitted_at) DESC;
        """)
        return [
            StudentRecord(
                email=r["email"],
                name=r["name"],
                submission_count=int(r["submission_count"]),
                best_score=int(r["best_score"]),
                first_submission=r["first_submission"].isoformat(),
                last_submission=r["last_submission"].isoformat(),
            )
            for r in rows
        ]
