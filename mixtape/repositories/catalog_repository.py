import sqlite3
from datetime import datetime

from mixtape.db.connection import transaction
from mixtape.models.catalog import Asset, Playlist, User
from mixtape.repositories.base import AbstractCatalogRepository


def parse_timestamp(value: str | None) -> datetime | None:
    return datetime.fromisoformat(value) if value else None


def _user_from_row(row: sqlite3.Row) -> User:
    return User(
        id=row["id"],
        login=row["login"],
        display_name=row["display_name"],
        role=row["role"],
        created_at=parse_timestamp(row["created_at"]),
    )


def _asset_from_row(row: sqlite3.Row) -> Asset:
    return Asset(
        id=row["id"],
        user_id=row["user_id"],
        title=row["title"],
        published=bool(row["published"]),
        created_at=parse_timestamp(row["created_at"]),
    )


def _playlist_from_row(row: sqlite3.Row) -> Playlist:
    return Playlist(
        id=row["id"],
        user_id=row["user_id"],
        title=row["title"],
        is_mix=bool(row["is_mix"]),
        created_at=parse_timestamp(row["created_at"]),
    )


class CatalogRepository(AbstractCatalogRepository):
    """Read access to the users, assets and playlists owned by the wider application."""

    def __init__(self, db_path: str) -> None:
        self._db_path = db_path

    def get_user(self, user_id: int) -> User | None:
        with transaction(self._db_path) as conn:
            row = conn.execute("SELECT * FROM users WHERE id = ?", (user_id,)).fetchone()
        return _user_from_row(row) if row else None

    def get_playlist(self, playlist_id: int) -> Playlist | None:
        with transaction(self._db_path) as conn:
            row = conn.execute("SELECT * FROM playlists WHERE id = ?", (playlist_id,)).fetchone()
        return _playlist_from_row(row) if row else None

    def list_published_assets(self, user_id: int) -> list[Asset]:
        with transaction(self._db_path) as conn:
            rows = conn.execute(
                "SELECT * FROM assets WHERE user_id = ? AND published = 1 ORDER BY title, id",
                (user_id,),
            ).fetchall()
        return [_asset_from_row(row) for row in rows]

    def get_published_asset(self, user_id: int, asset_id: int) -> Asset | None:
        with transaction(self._db_path) as conn:
            row = conn.execute(
                "SELECT * FROM assets WHERE id = ? AND user_id = ? AND published = 1",
                (asset_id, user_id),
            ).fetchone()
        return _asset_from_row(row) if row else None
