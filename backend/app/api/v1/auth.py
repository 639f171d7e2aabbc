"""Auth API endpoints — register, login, logout, current user."""

import logging

from fastapi import APIRouter, Depends, HTTPException, Request, Response
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.base import get_db
from app.models.user import User
from app.schemas.user import UserLogin, UserRead, UserRegister
from app.services.auth_service import (
    AccountDeactivated,
    EmailAlreadyRegistered,
    RegistrationError,
    authenticate_user,
    register_user,
)
from app.dependencies.auth import require_user_api

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=UserRead, status_code=201)
async def register(
    request: Request,
    data: UserRegister,
    db: AsyncSession = Depends(get_db),
):
    """Create an account and log it in."""
    try:
        user = await register_user(db, data.email, data.display_name, data.password)
    except EmailAlreadyRegistered as e:
        raise HTTPException(status_code=409, detail=str(e))
    except RegistrationError as e:
        raise HTTPException(status_code=400, detail=str(e))

    request.session["user_id"] = str(user.id)
    logger.info("Registered user %s", user.id)
    return user


@router.post("/login", response_model=UserRead)
async def login(
    request: Request,
    data: UserLogin,
    db: AsyncSession = Depends(get_db),
):
    try:
        user = await authenticate_user(db, data.email, data.password)
    except AccountDeactivated as e:
        raise HTTPException(status_code=403, detail=str(e))

    if not user:
        raise HTTPException(status_code=401, detail="Invalid email or password")

    request.session["user_id"] = str(user.id)
    return user


@router.post("/logout", status_code=204)
async def logout(request: Request):
    request.session.clear()
    return Response(status_code=204)


@router.get("/me", response_model=UserRead)
async def me(user: User = Depends(require_user_api)):
    return user
