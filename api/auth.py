"""Authentication router.

Login, registration, logout, the current-user lookup and profile updates.
Successful login and registration bind a new server-side session to the
user; user payloads never include the password hash.
"""

from fastapi import APIRouter, Depends, Request, Response

from core.logger import get_logger
from core.session import (
    RequestContext,
    SessionStore,
    end_session,
    get_session_store,
    require_context,
    start_session,
)
from database.deps import get_store
from database.store import RecordStore
from schemas.common import MessageResponse
from schemas.user_schema import (
    LoginRequest,
    RegisterRequest,
    UpdateAllergiesRequest,
    UpdateProfileRequest,
    UserResponse,
)
from services.auth_service import auth_service

logger = get_logger("api.auth")
router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/login", response_model=UserResponse)
def login(
    payload: LoginRequest,
    request: Request,
    response: Response,
    store: RecordStore = Depends(get_store),
    sessions: SessionStore = Depends(get_session_store),
):
    """Check credentials and start a session.

    Raises:
        AuthenticationError: If the username is unknown or the password is wrong.
    """
    user = auth_service.authenticate(store, payload.username, payload.password)
    start_session(request, response, sessions, user)
    return UserResponse(user=user.to_public())


@router.post("/register", response_model=UserResponse, status_code=201)
def register(
    payload: RegisterRequest,
    request: Request,
    response: Response,
    store: RecordStore = Depends(get_store),
    sessions: SessionStore = Depends(get_session_store),
):
    """Create an account and log the new user in.

    Raises:
        ValidationError: If the passwords don't match.
        DuplicateError: If the username or email is taken.
    """
    user = auth_service.register(store, payload)
    start_session(request, response, sessions, user)
    return UserResponse(user=user.to_public())


@router.post("/logout", response_model=MessageResponse)
def logout(request: Request, response: Response, sessions: SessionStore = Depends(get_session_store)):
    end_session(request, response, sessions)
    return MessageResponse(message="Logged out successfully")


@router.get("/current-user", response_model=UserResponse)
def current_user(ctx: RequestContext = Depends(require_context)):
    return UserResponse(user=ctx.principal.to_public())


@router.put("/update-profile", response_model=UserResponse)
def update_profile(payload: UpdateProfileRequest, ctx: RequestContext = Depends(require_context)):
    """Change display name, email or password of the logged-in user."""
    user = auth_service.update_profile(ctx.store, ctx.principal, payload)
    return UserResponse(user=user.to_public())


@router.put("/update-allergies", response_model=UserResponse)
def update_allergies(payload: UpdateAllergiesRequest, ctx: RequestContext = Depends(require_context)):
    """Replace the logged-in user's allergy list."""
    user = auth_service.update_allergies(ctx.store, ctx.principal, payload.allergies)
    return UserResponse(user=user.to_public())
