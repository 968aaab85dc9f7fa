from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum

from mixtape.models.catalog import Asset, Playlist, User

REFERENCE_FIELDS = ("artist_id", "dj_id", "asset_id", "playlist_id")


class SubmissionStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"

    @classmethod
    def values(cls) -> list[str]:
        return [member.value for member in cls]


@dataclass
class Submission:
    artist_id: int | None
    dj_id: int | None
    asset_id: int | None
    playlist_id: int | None
    status: str = SubmissionStatus.PENDING.value
    message: str | None = None
    id: int | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    @property
    def is_pending(self) -> bool:
        return self.status == SubmissionStatus.PENDING.value

    @property
    def is_approved(self) -> bool:
        return self.status == SubmissionStatus.APPROVED.value

    def validate(self) -> dict[str, list[str]]:
        """
        Return field -> error messages. Empty dict means the submission is valid.
        Only presence and the status enum are checked; ownership of the asset
        and playlist is established by whoever builds the submission.
        """
        errors: dict[str, list[str]] = {}
        for name in REFERENCE_FIELDS:
            if getattr(self, name) is None:
                errors.setdefault(name.removesuffix("_id"), []).append("can't be blank")
        if not self.status:
            errors.setdefault("status", []).append("can't be blank")
        elif self.status not in SubmissionStatus.values():
            errors.setdefault("status", []).append("is not included in the list")
        return errors


@dataclass
class SubmissionDetail:
    """A submission with its artist, dj, asset and playlist loaded alongside."""

    submission: Submission
    artist: User
    dj: User
    asset: Asset
    playlist: Playlist


def full_messages(errors: dict[str, list[str]]) -> list[str]:
    """Render field errors as sentences, e.g. {"asset": ["must exist"]} -> ["Asset must exist"]."""
    return [
        f"{name.replace('_', ' ').capitalize()} {message}"
        for name, messages in errors.items()
        for message in messages
    ]
