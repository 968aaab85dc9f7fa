from fastapi import APIRouter, Depends, Header, Request, status

from mixtape.models.catalog import User
from mixtape.schemas.submission import (
    FlashResponse,
    SubmissionCreate,
    SubmissionDetailResponse,
    SubmissionForm,
    SubmissionStatusUpdate,
)
from mixtape.services.submission_service import SubmissionService

router = APIRouter()


def get_service(request: Request) -> SubmissionService:
    return request.app.state.submission_service


def current_user(
    x_user_id: str | None = Header(None),
    service: SubmissionService = Depends(get_service),
) -> User:
    """The session layer forwards the logged-in user's id in X-User-Id."""
    return service.authenticate(x_user_id)


@router.get("/health")
async def health() -> dict:
    return {"status": "ok"}


@router.get("/playlists/{playlist_id}/submissions/new", response_model=SubmissionForm)
def new_submission(
    playlist_id: int,
    user: User = Depends(current_user),
    service: SubmissionService = Depends(get_service),
) -> SubmissionForm:
    return service.new_submission_form(user, playlist_id)


@router.post(
    "/playlists/{playlist_id}/submissions",
    response_model=FlashResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_submission(
    playlist_id: int,
    payload: SubmissionCreate,
    user: User = Depends(current_user),
    service: SubmissionService = Depends(get_service),
) -> FlashResponse:
    return service.create_submission(user, playlist_id, payload)


@router.get("/my_submissions", response_model=list[SubmissionDetailResponse])
def my_submissions(
    user: User = Depends(current_user),
    service: SubmissionService = Depends(get_service),
) -> list[SubmissionDetailResponse]:
    return [SubmissionDetailResponse.from_detail(d) for d in service.list_sent(user)]


@router.get("/dj/submissions", response_model=list[SubmissionDetailResponse])
def dj_submissions(
    user: User = Depends(current_user),
    service: SubmissionService = Depends(get_service),
) -> list[SubmissionDetailResponse]:
    return [SubmissionDetailResponse.from_detail(d) for d in service.list_pending(user)]


@router.patch("/dj/submissions/{submission_id}", response_model=FlashResponse)
def update_dj_submission(
    submission_id: int,
    payload: SubmissionStatusUpdate,
    user: User = Depends(current_user),
    service: SubmissionService = Depends(get_service),
) -> FlashResponse:
    return service.update_status(user, submission_id, payload.status)
