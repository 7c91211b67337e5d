"""
API v1 routes.

Defines the invite-gated signup endpoint.
"""

from fastapi import APIRouter, BackgroundTasks, Depends, Form, Header, HTTPException, status
from fastapi.responses import JSONResponse, RedirectResponse, Response

from src.api.dependencies import get_outbox_dispatcher, get_registration_service
from src.api.models import ErrorResponse, RegisterErrorResponse
from src.domain.exceptions import AccountCreationFailed
from src.domain.outbox import OutboxDispatcher
from src.domain.registration import RegistrationService
from src.domain.results import RegistrationRejected

router = APIRouter(tags=["v1"])


@router.post(
    "/register",
    status_code=status.HTTP_303_SEE_OTHER,
    response_class=RedirectResponse,
    responses={
        303: {"description": "Account created; redirect to onboarding with session cookies"},
        400: {"model": RegisterErrorResponse, "description": "Validation or policy rejection"},
        409: {"model": ErrorResponse, "description": "Account could not be created"},
    },
    summary="Register a new user",
    description="Submit a username and password from the signup form. "
    "The Referer must carry a valid `invite` query parameter.",
)
def register(
    background_tasks: BackgroundTasks,
    username: str | None = Form(None),
    password: str | None = Form(None),
    referer: str | None = Header(None),
    service: RegistrationService = Depends(get_registration_service),
    dispatcher: OutboxDispatcher = Depends(get_outbox_dispatcher),
) -> Response:
    """
    Register a new user and sign them in.

    - **username**: Desired username (becomes `username@<mail domain>`)
    - **password**: Password (minimum 8 characters)

    On success the welcome email is delivered after the response is sent.
    """
    try:
        result = service.register(username, password, referer)
    except AccountCreationFailed:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="Registration failed",
        ) from None

    if isinstance(result, RegistrationRejected):
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": result.message},
        )

    response = RedirectResponse(url=result.target, status_code=status.HTTP_303_SEE_OTHER)
    for cookie in result.cookies:
        response.set_cookie(
            key=cookie.name,
            value=cookie.value,
            expires=cookie.expires,
            path=cookie.path,
            httponly=cookie.httponly,
            samesite="lax",
        )
    background_tasks.add_task(dispatcher.dispatch_pending)
    return response
