from typing import List

from fastapi import APIRouter, Depends, Response, status
from sqlalchemy.orm import Session

from config import settings
from database import get_db
from modules.auth.dependencies import get_client_ip, get_current_principal
from modules.auth.schemas.auth_schemas import (
    BranchResponse, DivisionResponse, LoginRequest, Principal, RegisterRequest,
    RegisterResponse, TokenResponse, UserResponse, UserSummary
)
from modules.auth.services.auth_service import AuthService
from modules.auth.session import clear_session_cookie, set_session_cookie
from modules.users.models.organization import Branch, Division

router = APIRouter(prefix="/api/auth", tags=["authentication"])

@router.post("/register", response_model=RegisterResponse, status_code=status.HTTP_201_CREATED)
def register_user(
    user_data: RegisterRequest,
    db: Session = Depends(get_db),
    ip: str = Depends(get_client_ip),
):
    """Self-registration; the account always starts as NON_IT"""
    user = AuthService.register_user(db, user_data, ip=ip)
    return RegisterResponse(message="Registrasi berhasil", user=UserSummary.model_validate(user))

@router.post("/login", response_model=TokenResponse)
def login(
    login_data: LoginRequest,
    response: Response,
    db: Session = Depends(get_db),
    ip: str = Depends(get_client_ip),
):
    user = AuthService.authenticate_user(db, login_data.email, login_data.password, ip=ip)
    token = AuthService.create_session_token(AuthService.principal_for(user))
    set_session_cookie(response, token)

    return TokenResponse(
        access_token=token,
        token_type="bearer",
        expires_in=settings.session_max_age_seconds,
        user=UserResponse.model_validate(user),
    )

@router.post("/logout")
def logout(response: Response):
    clear_session_cookie(response)
    return {"success": True}

@router.get("/session", response_model=Principal)
def get_session(principal: Principal = Depends(get_current_principal)):
    """Principal carried by the current session token"""
    return principal

@router.get("/divisions", response_model=List[DivisionResponse])
def list_divisions(db: Session = Depends(get_db)):
    return db.query(Division).order_by(Division.name).all()

@router.get("/branches", response_model=List[BranchResponse])
def list_branches(db: Session = Depends(get_db)):
    return db.query(Branch).order_by(Branch.name).all()
