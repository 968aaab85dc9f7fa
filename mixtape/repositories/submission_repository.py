import logging
import sqlite3

from mixtape.db.connection import transaction
from mixtape.models.catalog import Asset, Playlist, User
from mixtape.models.submission import Submission, SubmissionDetail, SubmissionStatus
from mixtape.repositories.base import AbstractSubmissionRepository, TrackAppendError
from mixtape.repositories.catalog_repository import parse_timestamp

logger = logging.getLogger(__name__)

# Submission columns plus the artist, dj, asset and playlist rows in a single
# query, so listing never does per-row lookups.
_DETAIL_SELECT = """
    SELECT s.id, s.artist_id, s.dj_id, s.asset_id, s.playlist_id,
           s.status, s.message, s.created_at, s.updated_at,
           ar.login AS artist_login, ar.display_name AS artist_display_name,
           ar.role AS artist_role,
           dj.login AS dj_login, dj.display_name AS dj_display_name,
           dj.role AS dj_role,
           a.user_id AS asset_user_id, a.title AS asset_title,
           a.published AS asset_published,
           p.user_id AS playlist_user_id, p.title AS playlist_title,
           p.is_mix AS playlist_is_mix
    FROM submissions s
    JOIN users ar ON ar.id = s.artist_id
    JOIN users dj ON dj.id = s.dj_id
    JOIN assets a ON a.id = s.asset_id
    JOIN playlists p ON p.id = s.playlist_id
"""

_NEWEST_FIRST = "ORDER BY s.created_at DESC, s.id DESC"


def _submission_from_row(row: sqlite3.Row) -> Submission:
    return Submission(
        id=row["id"],
        artist_id=row["artist_id"],
        dj_id=row["dj_id"],
        asset_id=row["asset_id"],
        playlist_id=row["playlist_id"],
        status=row["status"],
        message=row["message"],
        created_at=parse_timestamp(row["created_at"]),
        updated_at=parse_timestamp(row["updated_at"]),
    )


def _detail_from_row(row: sqlite3.Row) -> SubmissionDetail:
    return SubmissionDetail(
        submission=_submission_from_row(row),
        artist=User(
            id=row["artist_id"],
            login=row["artist_login"],
            display_name=row["artist_display_name"],
            role=row["artist_role"],
        ),
        dj=User(
            id=row["dj_id"],
            login=row["dj_login"],
            display_name=row["dj_display_name"],
            role=row["dj_role"],
        ),
        asset=Asset(
            id=row["asset_id"],
            user_id=row["asset_user_id"],
            title=row["asset_title"],
            published=bool(row["asset_published"]),
        ),
        playlist=Playlist(
            id=row["playlist_id"],
            user_id=row["playlist_user_id"],
            title=row["playlist_title"],
            is_mix=bool(row["playlist_is_mix"]),
        ),
    )


class SubmissionRepository(AbstractSubmissionRepository):
    def __init__(self, db_path: str) -> None:
        self._db_path = db_path

    def insert(self, submission: Submission) -> Submission:
        with transaction(self._db_path) as conn:
            cursor = conn.execute(
                """
                INSERT INTO submissions
                    (artist_id, dj_id, asset_id, playlist_id, status, message)
                VALUES (?, ?, ?, ?, ?, ?)
                """,
                (
                    submission.artist_id,
                    submission.dj_id,
                    submission.asset_id,
                    submission.playlist_id,
                    submission.status,
                    submission.message,
                ),
            )
            submission_id = cursor.lastrowid
        return self.get(submission_id)

    def get(self, submission_id: int) -> Submission | None:
        with transaction(self._db_path) as conn:
            row = conn.execute(
                "SELECT * FROM submissions WHERE id = ?", (submission_id,)
            ).fetchone()
        return _submission_from_row(row) if row else None

    def get_received(self, dj_id: int, submission_id: int) -> Submission | None:
        with transaction(self._db_path) as conn:
            row = conn.execute(
                "SELECT * FROM submissions WHERE id = ? AND dj_id = ?",
                (submission_id, dj_id),
            ).fetchone()
        return _submission_from_row(row) if row else None

    def list_sent(self, artist_id: int) -> list[SubmissionDetail]:
        with transaction(self._db_path) as conn:
            rows = conn.execute(
                f"{_DETAIL_SELECT} WHERE s.artist_id = ? {_NEWEST_FIRST}",
                (artist_id,),
            ).fetchall()
        return [_detail_from_row(row) for row in rows]

    def list_received(self, dj_id: int, status: str | None = None) -> list[SubmissionDetail]:
        query = f"{_DETAIL_SELECT} WHERE s.dj_id = ?"
        params: tuple = (dj_id,)
        if status is not None:
            query += " AND s.status = ?"
            params += (status,)
        with transaction(self._db_path) as conn:
            rows = conn.execute(f"{query} {_NEWEST_FIRST}", params).fetchall()
        return [_detail_from_row(row) for row in rows]

    def update_status(self, submission_id: int, status: str) -> Submission:
        with transaction(self._db_path) as conn:
            conn.execute(
                """
                UPDATE submissions
                SET status = ?, updated_at = CURRENT_TIMESTAMP
                WHERE id = ?
                """,
                (status, submission_id),
            )
        return self.get(submission_id)

    def approve(self, submission_id: int) -> tuple[Submission, bool]:
        try:
            with transaction(self._db_path) as conn:
                conn.execute(
                    """
                    UPDATE submissions
                    SET status = ?, updated_at = CURRENT_TIMESTAMP
                    WHERE id = ?
                    """,
                    (SubmissionStatus.APPROVED.value, submission_id),
                )
                row = conn.execute(
                    """
                    SELECT s.asset_id, s.playlist_id, p.user_id AS owner_id
                    FROM submissions s
                    JOIN playlists p ON p.id = s.playlist_id
                    WHERE s.id = ?
                    """,
                    (submission_id,),
                ).fetchone()
                if row is None:
                    raise TrackAppendError(f"Playlist not found for submission {submission_id}")
                # UNIQUE(playlist_id, asset_id) makes the append idempotent even
                # when two approvals race; rowcount is 0 if the asset was already there.
                cursor = conn.execute(
                    """
                    INSERT INTO tracks (playlist_id, asset_id, user_id, position)
                    SELECT ?, ?, ?, COALESCE(MAX(position), 0) + 1
                    FROM tracks WHERE playlist_id = ?
                    ON CONFLICT(playlist_id, asset_id) DO NOTHING
                    """,
                    (row["playlist_id"], row["asset_id"], row["owner_id"], row["playlist_id"]),
                )
                track_added = cursor.rowcount == 1
        except sqlite3.IntegrityError as exc:
            logger.warning("[submissions] track append failed | id=%s | error=%s", submission_id, exc)
            raise TrackAppendError(str(exc)) from exc
        return self.get(submission_id), track_added
