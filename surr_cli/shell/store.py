"""SQLite-backed storage for profiles and saved queries."""

from __future__ import annotations

import sqlite3
from typing import Sequence

from surr_cli.shared.exceptions import ConflictError, DatabaseError, NotFoundError

from .types import Profile, SavedQuery


class LocalStore:
    """Profile and saved-query persistence over a single owned connection.

    Names are unique by convention: every insert checks for an existing row first
    so callers get a domain error instead of a duplicate.
    """

    def __init__(self, connection: sqlite3.Connection) -> None:
        self._connection = connection

    # ------------------------------------------------------------------
    # Profiles

    def profile_exists(self, name: str) -> bool:
        row = self._fetchone("SELECT pid FROM Profile WHERE Idx = ?", (name,))
        return row is not None

    def insert_profile(self, profile: Profile) -> None:
        if self.profile_exists(profile.name):
            raise ConflictError("Profile name exists.")
        self._write(
            """
            INSERT INTO Profile (Idx, Host, Sch, DBUser, NS, DB, Date)
            VALUES (?, ?, ?, ?, ?, ?, datetime('now', 'localtime'))
            """,
            (
                profile.name,
                profile.host,
                profile.schema,
                profile.user,
                profile.namespace,
                profile.database,
            ),
        )

    def delete_profile(self, name: str) -> None:
        if not self.profile_exists(name):
            raise NotFoundError("Profile does not exist.")
        self._write("DELETE FROM Profile WHERE Idx = ?", (name,))

    def get_profile(self, name: str) -> Profile:
        row = self._fetchone(
            "SELECT pid, Idx, Host, Sch, DBUser, NS, DB, Date FROM Profile WHERE Idx = ? ORDER BY pid",
            (name,),
        )
        if row is None:
            raise NotFoundError(f"No profile named '{name}'.")
        return _profile_from_row(row)

    def list_profiles(self) -> Sequence[Profile]:
        rows = self._fetchall("SELECT pid, Idx, Host, Sch, DBUser, NS, DB, Date FROM Profile ORDER BY pid")
        return [_profile_from_row(row) for row in rows]

    # ------------------------------------------------------------------
    # Saved queries

    def query_exists(self, name: str) -> bool:
        row = self._fetchone("SELECT qid FROM SQuery WHERE Idx = ?", (name,))
        return row is not None

    def insert_query(self, query: SavedQuery) -> None:
        if self.query_exists(query.name):
            raise ConflictError("Query name exists.")
        self._write("INSERT INTO SQuery (Idx, Query) VALUES (?, ?)", (query.name, query.text))

    def delete_query(self, name: str) -> None:
        if not self.query_exists(name):
            raise NotFoundError("Query does not exist.")
        self._write("DELETE FROM SQuery WHERE Idx = ?", (name,))

    def get_query_text(self, name: str) -> str:
        row = self._fetchone("SELECT Query FROM SQuery WHERE Idx = ? ORDER BY qid", (name,))
        if row is None:
            raise NotFoundError("Query does not exist.")
        return str(row[0])

    def list_queries(self) -> Sequence[SavedQuery]:
        rows = self._fetchall("SELECT qid, Idx, Query FROM SQuery ORDER BY qid")
        return [SavedQuery(id=int(row[0]), name=str(row[1]), text=str(row[2])) for row in rows]

    # ------------------------------------------------------------------
    # Internal helpers

    def _fetchone(self, sql: str, params: tuple[object, ...] = ()) -> sqlite3.Row | None:
        try:
            return self._connection.execute(sql, params).fetchone()
        except sqlite3.Error as exc:
            raise DatabaseError(f"Local store error: {exc}") from exc

    def _fetchall(self, sql: str, params: tuple[object, ...] = ()) -> list[sqlite3.Row]:
        try:
            return self._connection.execute(sql, params).fetchall()
        except sqlite3.Error as exc:
            raise DatabaseError(f"Local store error: {exc}") from exc

    def _write(self, sql: str, params: tuple[object, ...]) -> None:
        try:
            with self._connection:
                self._connection.execute(sql, params)
        except sqlite3.Error as exc:
            raise DatabaseError(f"Local store error: {exc}") from exc


def _profile_from_row(row: sqlite3.Row) -> Profile:
    return Profile(
        id=int(row[0]),
        name=str(row[1]),
        host=str(row[2]),
        schema=str(row[3]),
        user=str(row[4]),
        namespace=str(row[5]),
        database=str(row[6]),
        created_at=str(row[7]),
    )
