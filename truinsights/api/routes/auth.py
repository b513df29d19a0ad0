"""
Auth endpoints: sign in, inspect and end a session.
"""

import logging

from fastapi import APIRouter, Depends

from truinsights.api.deps import Services, get_services, require_session
from truinsights.core.models import ErrorResponse, Session, SignInRequest

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"], responses={401: {"model": ErrorResponse}})


@router.post("/sign-in", response_model=Session)
async def sign_in(body: SignInRequest, services: Services = Depends(get_services)):
    """Exchange email and password for an access token."""
    session = await services.auth.sign_in(body.email, body.password)
    logger.info("User %s signed in", session.user_id)
    return session


@router.get("/session", response_model=Session)
async def current_session(session: Session = Depends(require_session)):
    return session


@router.post("/sign-out", status_code=204)
async def sign_out(
    session: Session = Depends(require_session),
    services: Services = Depends(get_services),
):
    """Revoke the caller's access token."""
    await services.auth.sign_out(session.access_token)
    logger.info("User %s signed out", session.user_id)
