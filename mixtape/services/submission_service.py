import logging
from dataclasses import replace

from mixtape.config import settings
from mixtape.models.catalog import Playlist, User
from mixtape.models.submission import Submission, SubmissionDetail, SubmissionStatus, full_messages
from mixtape.repositories.base import (
    AbstractCatalogRepository,
    AbstractSubmissionRepository,
    TrackAppendError,
)
from mixtape.schemas.submission import (
    AssetSummary,
    FlashResponse,
    PlaylistSummary,
    SubmissionCreate,
    SubmissionDraft,
    SubmissionForm,
    SubmissionResponse,
    UserSummary,
)

logger = logging.getLogger(__name__)

ARTIST_SUBMIT_ALERT = "Only artists can submit tracks."
ARTIST_LIST_ALERT = "Only artists can view their submissions."
DJ_ALERT = "Only DJs can manage submissions."
MIXTAPE_ALERT = "Target mixtape not found, is not a mixtape, or the owner is not a DJ."

SUBMITTED_NOTICE = "Track submitted successfully."
TRACK_ADDED_NOTICE = "Submission approved and track added to mixtape."
TRACK_PRESENT_NOTICE = "Submission approved. Track was already in the mixtape."


def playlist_path(playlist_id: int) -> str:
    return f"/playlists/{playlist_id}"


class SubmissionError(Exception):
    def __init__(self, message: str, redirect_to: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.redirect_to = redirect_to


class NotAuthenticated(SubmissionError):
    pass


class NotAuthorized(SubmissionError):
    pass


class SubmissionNotFound(SubmissionError):
    pass


class SubmissionInvalid(SubmissionError):
    def __init__(
        self,
        message: str,
        errors: dict[str, list[str]],
        redirect_to: str | None = None,
        assets: list[AssetSummary] | None = None,
    ) -> None:
        super().__init__(message, redirect_to)
        self.errors = errors
        self.assets = assets


class TrackAppendFailed(SubmissionError):
    pass


class SubmissionService:
    def __init__(
        self,
        repository: AbstractSubmissionRepository,
        catalog: AbstractCatalogRepository,
    ) -> None:
        self._repository = repository
        self._catalog = catalog

    def authenticate(self, user_id: str | int | None) -> User:
        """
        Resolve the caller forwarded by the session layer. A missing,
        non-numeric or unknown id raises NotAuthenticated.
        """
        if isinstance(user_id, str):
            try:
                user_id = int(user_id)
            except ValueError:
                logger.info("[submissions] malformed caller id | value=%r", user_id)
                user_id = None
        user = self._catalog.get_user(user_id) if user_id is not None else None
        if user is None:
            raise NotAuthenticated("You must be logged in to do that.", redirect_to=settings.LOGIN_PATH)
        return user

    def _require_artist(self, user: User, alert: str) -> None:
        if not user.is_artist:
            logger.info("[submissions] artist role required | user=%s | role=%s", user.id, user.role)
            raise NotAuthorized(alert, redirect_to=settings.ROOT_PATH)

    def _require_dj(self, user: User) -> None:
        if not user.is_dj:
            logger.info("[submissions] dj role required | user=%s | role=%s", user.id, user.role)
            raise NotAuthorized(DJ_ALERT, redirect_to=settings.ROOT_PATH)

    def _find_mixtape(self, playlist_id: int) -> tuple[Playlist, User]:
        """Return the target playlist and its DJ owner, or raise NotAuthorized."""
        playlist = self._catalog.get_playlist(playlist_id)
        owner = self._catalog.get_user(playlist.user_id) if playlist else None
        if playlist is None or not playlist.is_mix or owner is None or not owner.is_dj:
            logger.info("[submissions] invalid mixtape target | playlist=%s", playlist_id)
            raise NotAuthorized(MIXTAPE_ALERT, redirect_to=settings.ROOT_PATH)
        return playlist, owner

    def _artist_assets(self, user: User) -> list[AssetSummary]:
        return [
            AssetSummary.model_validate(asset)
            for asset in self._catalog.list_published_assets(user.id)
        ]

    def new_submission_form(self, user: User, playlist_id: int) -> SubmissionForm:
        self._require_artist(user, ARTIST_SUBMIT_ALERT)
        playlist, dj = self._find_mixtape(playlist_id)
        return SubmissionForm(
            playlist=PlaylistSummary.model_validate(playlist),
            dj=UserSummary.model_validate(dj),
            submission=SubmissionDraft(
                playlist_id=playlist.id,
                dj_id=dj.id,
                status=SubmissionStatus.PENDING.value,
            ),
            assets=self._artist_assets(user),
        )

    def create_submission(
        self, user: User, playlist_id: int, payload: SubmissionCreate
    ) -> FlashResponse:
        """
        Create a pending submission from the caller to the playlist's DJ.
        The dj and playlist are always taken from the resolved playlist, and
        the asset must be one of the caller's published assets.
        """
        self._require_artist(user, ARTIST_SUBMIT_ALERT)
        playlist, dj = self._find_mixtape(playlist_id)

        submission = Submission(
            artist_id=user.id,
            dj_id=dj.id,
            asset_id=payload.asset_id,
            playlist_id=playlist.id,
            message=payload.message,
        )
        errors = submission.validate()
        if payload.asset_id is not None and self._catalog.get_published_asset(user.id, payload.asset_id) is None:
            errors.setdefault("asset", []).append("must exist")
        if errors:
            logger.info("[submissions] create rejected | artist=%s | errors=%s", user.id, errors)
            raise SubmissionInvalid(
                f"Could not submit track. {', '.join(full_messages(errors))}",
                errors=errors,
                assets=self._artist_assets(user),
            )

        stored = self._repository.insert(submission)
        logger.info(
            "[submissions] created | id=%s | artist=%s | dj=%s | playlist=%s | asset=%s",
            stored.id, stored.artist_id, stored.dj_id, stored.playlist_id, stored.asset_id,
        )
        return FlashResponse(
            status="ok",
            message=SUBMITTED_NOTICE,
            redirect_to=playlist_path(playlist.id),
            submission=SubmissionResponse.model_validate(stored),
        )

    def list_sent(self, user: User) -> list[SubmissionDetail]:
        self._require_artist(user, ARTIST_LIST_ALERT)
        return self._repository.list_sent(user.id)

    def list_pending(self, user: User) -> list[SubmissionDetail]:
        self._require_dj(user)
        return self._repository.list_received(user.id, status=SubmissionStatus.PENDING.value)

    def update_status(self, user: User, submission_id: int, status: str | None) -> FlashResponse:
        """
        Move one of the DJ's submissions to a new status.
        Approval also appends the asset to the playlist, unless it is already
        there; both writes commit together or not at all.
        """
        self._require_dj(user)
        submission = self._repository.get_received(user.id, submission_id)
        if submission is None:
            raise SubmissionNotFound("Submission not found.", redirect_to=settings.DJ_QUEUE_PATH)

        candidate = replace(submission, status=status or "")
        errors = candidate.validate()
        if errors:
            raise SubmissionInvalid(
                f"Failed to update submission status: {', '.join(full_messages(errors))}",
                errors=errors,
                redirect_to=settings.DJ_QUEUE_PATH,
            )

        if candidate.is_approved:
            try:
                updated, track_added = self._repository.approve(submission.id)
            except TrackAppendError as exc:
                raise TrackAppendFailed(
                    f"Could not approve submission, failed to add track to mixtape: {exc}.",
                    redirect_to=settings.DJ_QUEUE_PATH,
                ) from exc
            notice = TRACK_ADDED_NOTICE if track_added else TRACK_PRESENT_NOTICE
        else:
            updated = self._repository.update_status(submission.id, candidate.status)
            notice = f"Submission status updated to {updated.status}."

        logger.info(
            "[submissions] status changed | id=%s | from=%s | to=%s",
            submission.id, submission.status, updated.status,
        )
        return FlashResponse(
            status="ok",
            message=notice,
            redirect_to=settings.DJ_QUEUE_PATH,
            submission=SubmissionResponse.model_validate(updated),
        )
