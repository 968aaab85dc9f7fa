from abc import ABC, abstractmethod

from mixtape.models.catalog import Asset, Playlist, User
from mixtape.models.submission import Submission, SubmissionDetail


class TrackAppendError(Exception):
    """The track row for an approved submission could not be written."""


class AbstractCatalogRepository(ABC):
    @abstractmethod
    def get_user(self, user_id: int) -> User | None:
        """Return the user with the given id, or None."""

    @abstractmethod
    def get_playlist(self, playlist_id: int) -> Playlist | None:
        """Return the playlist with the given id, or None."""

    @abstractmethod
    def list_published_assets(self, user_id: int) -> list[Asset]:
        """Return the user's published assets ordered by title."""

    @abstractmethod
    def get_published_asset(self, user_id: int, asset_id: int) -> Asset | None:
        """Return the asset only if it is published and owned by the user."""


class AbstractSubmissionRepository(ABC):
    @abstractmethod
    def insert(self, submission: Submission) -> Submission:
        """Insert a submission. Returns it as stored, with id and timestamps."""

    @abstractmethod
    def get(self, submission_id: int) -> Submission | None:
        """Return the submission with the given id, or None."""

    @abstractmethod
    def get_received(self, dj_id: int, submission_id: int) -> Submission | None:
        """Return the submission only if it is addressed to the given DJ."""

    @abstractmethod
    def list_sent(self, artist_id: int) -> list[SubmissionDetail]:
        """Submissions sent by the artist, newest first, with related rows loaded."""

    @abstractmethod
    def list_received(self, dj_id: int, status: str | None = None) -> list[SubmissionDetail]:
        """Submissions addressed to the DJ, optionally filtered by status, newest first."""

    @abstractmethod
    def update_status(self, submission_id: int, status: str) -> Submission:
        """Overwrite the status of a submission."""

    @abstractmethod
    def approve(self, submission_id: int) -> tuple[Submission, bool]:
        """
        Mark the submission approved and append its asset to the playlist in one
        transaction. Returns (submission, track_added); track_added is False when
        the asset was already on the playlist. Raises TrackAppendError if the
        track cannot be written, in which case nothing is changed.
        """
