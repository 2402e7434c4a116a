import threading
from datetime import datetime, timezone

import psycopg2.pool
import pytest

from database.submission_store import PostgresSubmissionStore
from java_grader.analyzer import empty_report
from java_grader.models import CompilationResult, GradeBreakdown, GradingResult, Submission


class FakeDatabase:
    def __init__(self):
        self.committed = []
        self.queries = []
        self.rows = []
        self.on_insert = None


class FakeCursor:
    def __init__(self, conn):
        self.conn = conn
        self._rows = []

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def execute(self, query, params=None):
        db = self.conn.db
        db.queries.append((query, params))
        if query.strip().startswith("INSERT"):
            self.conn.pending.append(params)
            if db.on_insert:
                db.on_insert(params)
        elif query.strip().startswith("SELECT"):
            self._rows = db.rows

    def fetchall(self):
        return list(self._rows)


class FakeConnection:
    def __init__(self, db):
        self.db = db
        self.pending = []
        self.commits = 0
        self.rollbacks = 0

    def cursor(self, cursor_factory=None):
        return FakeCursor(self)

    def commit(self):
        self.db.committed.extend(self.pending)
        self.pending = []
        self.commits += 1

    def rollback(self):
        self.pending = []
        self.rollbacks += 1


class FakePool:
    def __init__(self, db):
        self.db = db
        self.handed_out = []
        self.returned = []

    def getconn(self):
        conn = FakeConnection(self.db)
        self.handed_out.append(conn)
        return conn

    def putconn(self, conn):
        self.returned.append(conn)


@pytest.fixture
def db(monkeypatch):
    database = FakeDatabase()
    pools = []

    def make_pool(minconn, maxconn, **params):
        pool = FakePool(database)
        pools.append(pool)
        return pool

    monkeypatch.setattr(psycopg2.pool, "SimpleConnectionPool", make_pool)
    monkeypatch.setattr(PostgresSubmissionStore, "_pool", None)
    database.pools = pools
    return database


def _submission(sid, email="ann@x.edu", total=88):
    result = GradingResult(
        analysis=empty_report(),
        grades=GradeBreakdown(22, 22, 22, 22, total),
        test_results=[],
        feedback=["✅ Code compiles successfully"],
        compilation=CompilationResult(True, "", False, "partial output", source="local"),
    )
    return Submission(sid, "Ann", email, "2024-01-01T10:00:00+00:00", result)


def test_schema_created_on_first_use(db):
    PostgresSubmissionStore(conn_params={"host": "db"})

    statements = [q for q, _ in db.queries]
    assert any("CREATE TABLE IF NOT EXISTS submissions" in q for q in statements)
    assert any("idx_sub_email" in q for q in statements)
    pool = db.pools[0]
    assert pool.returned == pool.handed_out
    assert pool.handed_out[0].commits == 1


def test_append_commits_row(db):
    store = PostgresSubmissionStore(conn_params={})
    sub = _submission("session_1")

    assert store.append(sub) is sub

    [row] = db.committed
    assert row[:7] == ("session_1", "Ann", "ann@x.edu", "2024-01-01T10:00:00+00:00", 88, True, False)
    assert row[7].adapted == sub.to_dict()
    pool = db.pools[0]
    assert len(pool.returned) == len(pool.handed_out)


def test_failed_append_rolls_back_and_reraises(db):
    store = PostgresSubmissionStore(conn_params={})

    def reject(params):
        raise RuntimeError("duplicate key value violates unique constraint")

    db.on_insert = reject
    with pytest.raises(RuntimeError):
        store.append(_submission("session_1"))

    assert db.committed == []
    conn = db.pools[0].handed_out[-1]
    assert conn.rollbacks == 1
    assert conn in db.pools[0].returned


def test_concurrent_appends_do_not_share_a_transaction(db):
    store = PostgresSubmissionStore(conn_params={})
    a_written = threading.Event()
    b_done = threading.Event()
    errors = []

    def fail_a(params):
        if params[0] == "A":
            a_written.set()
            b_done.wait(timeout=5)
            raise RuntimeError("duplicate key value violates unique constraint")

    db.on_insert = fail_a

    def append_a():
        try:
            store.append(_submission("A"))
        except RuntimeError as e:
            errors.append(e)

    t = threading.Thread(target=append_a)
    t.start()
    assert a_written.wait(timeout=5)
    store.append(_submission("B"))
    b_done.set()
    t.join(timeout=5)

    assert [row[0] for row in db.committed] == ["B"]
    assert len(errors) == 1


def test_list_and_find_rebuild_submissions(db):
    store = PostgresSubmissionStore(conn_params={})
    sub = _submission("session_1")
    db.rows = [{"record": sub.to_dict()}]

    [loaded] = store.list()
    assert loaded.id == "session_1"
    assert loaded.result.grades == sub.result.grades
    assert loaded.result.compilation == sub.result.compilation
    assert store.find("session_1").student_email == "ann@x.edu"
    assert store.find_by_email("ann@x.edu")[0].total == 88

    db.rows = []
    assert store.find("missing") is None


def test_students_roll_up_mapping(db):
    store = PostgresSubmissionStore(conn_params={})
    first = datetime(2024, 1, 1, 10, 0, tzinfo=timezone.utc)
    last = datetime(2024, 1, 3, 10, 0, tzinfo=timezone.utc)
    db.rows = [{
        "email": "ann@x.edu",
        "name": "Ann Lee",
        "submission_count": 3,
        "best_score": 85,
        "first_submission": first,
        "last_submission": last,
    }]

    [record] = store.students()

    assert record.name == "Ann Lee"
    assert record.submission_count == 3
    assert record.best_score == 85
    assert record.first_submission == "2024-01-01T10:00:00+00:00"
    assert record.last_submission == "2024-01-03T10:00:00+00:00"
    assert "GROUP BY student_email" in db.queries[-1][0]
