import sqlite3
import tempfile
from types import SimpleNamespace

import pytest

from mixtape.db.connection import run_migrations


class Seeder:
    """Writes and reads rows with raw sqlite3, bypassing the repositories under test."""

    def __init__(self, db_path: str) -> None:
        self.db_path = db_path

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self.db_path)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA foreign_keys=ON")
        return conn

    def _insert(self, sql: str, params: tuple) -> int:
        conn = self._connect()
        try:
            cursor = conn.execute(sql, params)
            conn.commit()
            return cursor.lastrowid
        finally:
            conn.close()

    def user(self, login: str, role: str = "listener", display_name: str | None = None) -> int:
        return self._insert(
            "INSERT INTO users (login, display_name, role) VALUES (?, ?, ?)",
            (login, display_name, role),
        )

    def asset(self, user_id: int, title: str, published: bool = True) -> int:
        return self._insert(
            "INSERT INTO assets (user_id, title, published) VALUES (?, ?, ?)",
            (user_id, title, int(published)),
        )

    def playlist(self, user_id: int, title: str, is_mix: bool = True) -> int:
        return self._insert(
            "INSERT INTO playlists (user_id, title, is_mix) VALUES (?, ?, ?)",
            (user_id, title, int(is_mix)),
        )

    def track(self, playlist_id: int, asset_id: int, user_id: int) -> int:
        return self._insert(
            "INSERT INTO tracks (playlist_id, asset_id, user_id) VALUES (?, ?, ?)",
            (playlist_id, asset_id, user_id),
        )

    def submission(
        self,
        artist_id: int,
        dj_id: int,
        asset_id: int,
        playlist_id: int,
        status: str = "pending",
        message: str | None = None,
    ) -> int:
        return self._insert(
            """
            INSERT INTO submissions (artist_id, dj_id, asset_id, playlist_id, status, message)
            VALUES (?, ?, ?, ?, ?, ?)
            """,
            (artist_id, dj_id, asset_id, playlist_id, status, message),
        )

    def reject_track_inserts(self, reason: str = "track rejected") -> None:
        """Install a trigger that aborts every insert into tracks with the given reason."""
        conn = self._connect()
        try:
            conn.execute(
                f"""
                CREATE TRIGGER reject_track_inserts BEFORE INSERT ON tracks
                BEGIN SELECT RAISE(ABORT, '{reason}'); END
                """
            )
            conn.commit()
        finally:
            conn.close()

    def count(self, table: str, **where) -> int:
        clause = " AND ".join(f"{column} = ?" for column in where) or "1 = 1"
        conn = self._connect()
        try:
            row = conn.execute(
                f"SELECT COUNT(*) FROM {table} WHERE {clause}", tuple(where.values())
            ).fetchone()
            return row[0]
        finally:
            conn.close()

    def get(self, table: str, row_id: int) -> dict | None:
        conn = self._connect()
        try:
            row = conn.execute(f"SELECT * FROM {table} WHERE id = ?", (row_id,)).fetchone()
            return dict(row) if row else None
        finally:
            conn.close()


@pytest.fixture
def db_path():
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        path = f.name
    run_migrations(path)
    return path


@pytest.fixture
def seed(db_path):
    return Seeder(db_path)


@pytest.fixture
def world(seed):
    """An artist and a DJ with a mixtape, plus the people and things tests poke at."""
    artist = seed.user("artist_one", role="artist", display_name="Artist User")
    other_artist = seed.user("artist_two", role="artist", display_name="Other Artist")
    dj = seed.user("dj_one", role="dj", display_name="DJ User")
    other_dj = seed.user("dj_two", role="dj", display_name="Other DJ")
    listener = seed.user("listener_one", role="listener", display_name="Listener User")
    return SimpleNamespace(
        artist=artist,
        other_artist=other_artist,
        dj=dj,
        other_dj=other_dj,
        listener=listener,
        mixtape=seed.playlist(dj, "DJ's Hot Mixtape", is_mix=True),
        album=seed.playlist(dj, "DJ's Album", is_mix=False),
        listener_mix=seed.playlist(listener, "Listener's Mix", is_mix=True),
        other_mixtape=seed.playlist(other_dj, "Other DJ's Mixtape", is_mix=True),
        asset=seed.asset(artist, "Test Track by artist_one"),
        second_asset=seed.asset(artist, "Another Track"),
        draft_asset=seed.asset(artist, "Unreleased Demo", published=False),
        other_asset=seed.asset(other_artist, "Other Artist's Track"),
    )
