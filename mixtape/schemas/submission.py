from datetime import datetime

from pydantic import BaseModel, ConfigDict, field_validator

from mixtape.models.submission import SubmissionDetail


class SubmissionCreate(BaseModel):
    # dj_id and playlist_id come from the route's playlist, never from the body.
    asset_id: int | None = None
    message: str | None = None

    @field_validator("message")
    @classmethod
    def blank_message_is_none(cls, v: str | None) -> str | None:
        if v is None or not v.strip():
            return None
        return v


class SubmissionStatusUpdate(BaseModel):
    status: str | None = None


class UserSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    login: str
    display_name: str | None = None
    role: str


class AssetSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str


class PlaylistSummary(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    user_id: int
    title: str
    is_mix: bool


class SubmissionResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    artist_id: int
    dj_id: int
    asset_id: int
    playlist_id: int
    status: str
    message: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None


class SubmissionDetailResponse(SubmissionResponse):
    artist: UserSummary
    dj: UserSummary
    asset: AssetSummary
    playlist: PlaylistSummary

    @classmethod
    def from_detail(cls, detail: SubmissionDetail) -> "SubmissionDetailResponse":
        base = SubmissionResponse.model_validate(detail.submission)
        return cls(
            **base.model_dump(),
            artist=UserSummary.model_validate(detail.artist),
            dj=UserSummary.model_validate(detail.dj),
            asset=AssetSummary.model_validate(detail.asset),
            playlist=PlaylistSummary.model_validate(detail.playlist),
        )


class SubmissionDraft(BaseModel):
    playlist_id: int
    dj_id: int
    asset_id: int | None = None
    message: str | None = None
    status: str


class SubmissionForm(BaseModel):
    playlist: PlaylistSummary
    dj: UserSummary
    submission: SubmissionDraft
    assets: list[AssetSummary]


class FlashResponse(BaseModel):
    """Outcome of a request: a notice or alert plus where the client should go next."""

    status: str
    message: str
    redirect_to: str | None = None
    errors: dict[str, list[str]] | None = None
    submission: SubmissionResponse | None = None
    assets: list[AssetSummary] | None = None
