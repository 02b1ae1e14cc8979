"""
Form drafts router.

Server-side drafts of the observation forms, one per user and form.
"""

from fastapi import APIRouter, Depends, Path, Request

from obsdesk.dependencies.auth import CurrentSession, get_current_session
from obsdesk.schemas.drafts import Draft, DraftUpdate
from obsdesk.services.draft_store import FormDraftStore
from obsdesk.utils.rate_limit import DEFAULT_LIMIT, limiter

router = APIRouter(
    prefix="/drafts",
    tags=["drafts"],
    responses={401: {"description": "Unauthorized"}},
)

FORM_PATTERN = r"^[a-z0-9_-]{1,50}$"


def get_draft_store(request: Request) -> FormDraftStore:
    """The application's draft store."""
    return request.app.state.draft_store


def _response(form: str, draft: dict) -> Draft:
    return Draft(form=form, data=draft["data"], last_updated=draft["last_updated"])


@router.get("/{form}", response_model=Draft)
@limiter.limit(DEFAULT_LIMIT)
async def read_draft(
    request: Request,
    form: str = Path(..., pattern=FORM_PATTERN, description="Form name, e.g. first-card"),
    session: CurrentSession = Depends(get_current_session),
    store: FormDraftStore = Depends(get_draft_store)
):
    """Current draft; an expired draft comes back reset."""
    return _response(form, store.get(store.draft_key(session.user_id, form)))


@router.put("/{form}", response_model=Draft)
@limiter.limit(DEFAULT_LIMIT)
async def replace_draft(
    request: Request,
    body: DraftUpdate,
    form: str = Path(..., pattern=FORM_PATTERN, description="Form name, e.g. first-card"),
    session: CurrentSession = Depends(get_current_session),
    store: FormDraftStore = Depends(get_draft_store)
):
    """Replace the whole draft."""
    return _response(form, store.set(store.draft_key(session.user_id, form), body.data))


@router.patch("/{form}", response_model=Draft)
@limiter.limit(DEFAULT_LIMIT)
async def merge_draft(
    request: Request,
    body: DraftUpdate,
    form: str = Path(..., pattern=FORM_PATTERN, description="Form name, e.g. first-card"),
    session: CurrentSession = Depends(get_current_session),
    store: FormDraftStore = Depends(get_draft_store)
):
    """Merge fields into the draft."""
    return _response(form, store.update_fields(store.draft_key(session.user_id, form), body.data))


@router.delete("/{form}", response_model=Draft)
@limiter.limit(DEFAULT_LIMIT)
async def reset_draft(
    request: Request,
    form: str = Path(..., pattern=FORM_PATTERN, description="Form name, e.g. first-card"),
    session: CurrentSession = Depends(get_current_session),
    store: FormDraftStore = Depends(get_draft_store)
):
    """Reset the draft to empty."""
    return _response(form, store.reset(store.draft_key(session.user_id, form)))
