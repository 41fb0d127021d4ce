"""SQLite document stores for users, roadmaps, and job requirements.

Only used when DATA_PROVIDER=sqlite. Each entity is one JSON document per row;
the few columns next to ``doc`` exist only for lookups. Writes replace the
whole document, so concurrent writers resolve as last-write-wins.

PySecure-4-Minimal:
- Use parameterized queries.
- Ensure connections are closed via context managers.
- Avoid logging sensitive data.
- Create DB directory if missing; initialize schema on first connect.
"""
from __future__ import annotations

import sqlite3
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, List, Optional

from pydantic import TypeAdapter

from career_coach.core.config import get_settings
from career_coach.core.errors import PersistenceError
from career_coach.core.logging import get_logger
from career_coach.models.domain import Candidate, JobRequirement, Roadmap, User

logger = get_logger(__name__)

_user_adapter: TypeAdapter[User] = TypeAdapter(User)


def _ensure_schema(conn: sqlite3.Connection) -> None:
    """Create the document tables used by this backend instance."""
    conn.executescript(
        """
        CREATE TABLE IF NOT EXISTS users (
            id TEXT PRIMARY KEY,
            kind TEXT NOT NULL,
            doc TEXT NOT NULL
        );

        -- candidate_id is not unique: the candidate's roadmap_id decides which row is current
        CREATE TABLE IF NOT EXISTS roadmaps (
            id TEXT PRIMARY KEY,
            candidate_id TEXT NOT NULL,
            created_at TEXT NOT NULL,
            doc TEXT NOT NULL
        );
        CREATE INDEX IF NOT EXISTS idx_roadmaps_candidate ON roadmaps(candidate_id);

        CREATE TABLE IF NOT EXISTS job_requirements (
            id TEXT PRIMARY KEY,
            recruiter_id TEXT NOT NULL,
            company TEXT NOT NULL,
            position TEXT NOT NULL,
            doc TEXT NOT NULL
        );
        """
    )
    conn.commit()


@contextmanager
def get_conn(db_path: Optional[str] = None) -> Iterator[sqlite3.Connection]:
    """Open a connection with the schema in place; sqlite failures become PersistenceError."""
    path = Path(db_path or get_settings().db_path)
    path.parent.mkdir(parents=True, exist_ok=True)
    try:
        # Use check_same_thread=False to prevent thread-affinity errors under TestClient.
        conn = sqlite3.connect(str(path), check_same_thread=False)
    except sqlite3.DatabaseError as exc:
        logger.error(f"SQLite connect failed: {exc.__class__.__name__}")
        raise PersistenceError() from exc
    try:
        _ensure_schema(conn)
        yield conn
    except sqlite3.DatabaseError as exc:
        logger.error(f"SQLite operation failed: {exc.__class__.__name__}")
        raise PersistenceError() from exc
    finally:
        conn.close()


def fetch_all(conn: sqlite3.Connection, query: str, params: Iterable[Any]) -> list[dict[str, Any]]:
    conn.row_factory = sqlite3.Row
    cur = conn.execute(query, list(params))
    rows = cur.fetchall()
    return [dict(r) for r in rows]


def fetch_one(conn: sqlite3.Connection, query: str, params: Iterable[Any]) -> Optional[dict[str, Any]]:
    conn.row_factory = sqlite3.Row
    cur = conn.execute(query, list(params))
    row = cur.fetchone()
    return dict(row) if row else None


def execute(conn: sqlite3.Connection, query: str, params: Iterable[Any]) -> int:
    cur = conn.execute(query, list(params))
    conn.commit()
    return cur.rowcount


# PUBLIC_INTERFACE
def reset_tables(db_path: Optional[str] = None) -> None:
    """Drop all rows from every table; intended for test isolation."""
    with get_conn(db_path) as conn:
        conn.execute("DELETE FROM roadmaps")
        conn.execute("DELETE FROM job_requirements")
        conn.execute("DELETE FROM users")
        conn.commit()


class SqliteUserStore:
    def __init__(self, db_path: Optional[str] = None) -> None:
        self.db_path = db_path

    def get_user(self, user_id: str) -> Optional[User]:
        with get_conn(self.db_path) as conn:
            row = fetch_one(conn, "SELECT doc FROM users WHERE id = ?", (user_id,))
        return _user_adapter.validate_json(row["doc"]) if row else None

    def get_candidate(self, candidate_id: str) -> Optional[Candidate]:
        user = self.get_user(candidate_id)
        return user if isinstance(user, Candidate) else None

    def get_resume_analysis(self, candidate_id: str) -> Optional[Dict[str, Any]]:
        candidate = self.get_candidate(candidate_id)
        if candidate is None or candidate.resume is None:
            return None
        return candidate.resume.analysis

    def save_user(self, user: User) -> None:
        with get_conn(self.db_path) as conn:
            execute(
                conn,
                "INSERT OR REPLACE INTO users (id, kind, doc) VALUES (?, ?, ?)",
                (user.id, user.kind, user.model_dump_json()),
            )


class SqliteRoadmapStore:
    def __init__(self, db_path: Optional[str] = None) -> None:
        self.db_path = db_path

    def get(self, roadmap_id: str) -> Optional[Roadmap]:
        with get_conn(self.db_path) as conn:
            row = fetch_one(conn, "SELECT doc FROM roadmaps WHERE id = ?", (roadmap_id,))
        return Roadmap.model_validate_json(row["doc"]) if row else None

    def list_for_candidate(self, candidate_id: str) -> List[Roadmap]:
        with get_conn(self.db_path) as conn:
            rows = fetch_all(
                conn,
                "SELECT doc FROM roadmaps WHERE candidate_id = ? ORDER BY created_at",
                (candidate_id,),
            )
        return [Roadmap.model_validate_json(r["doc"]) for r in rows]

    def save(self, roadmap: Roadmap) -> None:
        with get_conn(self.db_path) as conn:
            execute(
                conn,
                "INSERT OR REPLACE INTO roadmaps (id, candidate_id, created_at, doc) VALUES (?, ?, ?, ?)",
                (roadmap.id, roadmap.candidate_id, roadmap.created_at.isoformat(), roadmap.model_dump_json()),
            )

    def delete(self, roadmap_id: str) -> bool:
        with get_conn(self.db_path) as conn:
            return execute(conn, "DELETE FROM roadmaps WHERE id = ?", (roadmap_id,)) > 0

    def delete_for_candidate(self, candidate_id: str) -> int:
        with get_conn(self.db_path) as conn:
            return execute(conn, "DELETE FROM roadmaps WHERE candidate_id = ?", (candidate_id,))


class SqliteJobRequirementStore:
    def __init__(self, db_path: Optional[str] = None) -> None:
        self.db_path = db_path

    def add(self, requirement: JobRequirement) -> None:
        with get_conn(self.db_path) as conn:
            execute(
                conn,
                "INSERT OR REPLACE INTO job_requirements (id, recruiter_id, company, position, doc) VALUES (?, ?, ?, ?, ?)",
                (
                    requirement.id,
                    requirement.recruiter_id,
                    requirement.company,
                    requirement.position,
                    requirement.model_dump_json(),
                ),
            )

    def find_by_company_and_position(self, company: str, position: str) -> List[JobRequirement]:
        # instr() instead of LIKE so '%' or '_' in a target name match literally
        with get_conn(self.db_path) as conn:
            rows = fetch_all(
                conn,
                "SELECT doc FROM job_requirements "
                "WHERE instr(lower(company), lower(?)) > 0 AND instr(lower(position), lower(?)) > 0",
                (company.strip(), position.strip()),
            )
        return [JobRequirement.model_validate_json(r["doc"]) for r in rows]

    def list_for_recruiter(self, recruiter_id: str) -> List[JobRequirement]:
        with get_conn(self.db_path) as conn:
            rows = fetch_all(conn, "SELECT doc FROM job_requirements WHERE recruiter_id = ?", (recruiter_id,))
        return [JobRequirement.model_validate_json(r["doc"]) for r in rows]
