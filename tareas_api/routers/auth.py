from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from tareas_api.database import get_db
from tareas_api.schemas.auth import (
    LoginRequest,
    LoginResponse,
    LoginUser,
    RegisterRequest,
    RegisterResponse,
    RegisteredUser,
)
from tareas_api.services import auth_service

router = APIRouter(tags=["auth"])


@router.post("/register", response_model=RegisterResponse, status_code=201)
async def register(request: RegisterRequest, db: AsyncSession = Depends(get_db)):
    """Register a new account with email and password."""
    try:
        user = await auth_service.register_user(
            db=db,
            email=request.email,
            password=request.password,
        )
    except ValueError as e:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e),
        )
    await db.commit()

    return RegisterResponse(
        message="User registered successfully",
        user=RegisteredUser.model_validate(user),
        token=auth_service.issue_token(user),
    )


@router.post("/login", response_model=LoginResponse)
async def login(request: LoginRequest, db: AsyncSession = Depends(get_db)):
    """Sign in with email and password."""
    try:
        user = await auth_service.login_with_email(
            db=db,
            email=request.email,
            password=request.password,
        )
    except ValueError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
        )

    return LoginResponse(
        message="Login successful",
        user=LoginUser.model_validate(user),
        token=auth_service.issue_token(user),
    )
