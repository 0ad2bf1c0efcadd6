"""Authentication routes: register, login, me."""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from ..dependencies import get_auth_service, get_current_claims
from .schemas import AuthResponse, LoginRequest, RegisterRequest
from .service import AuthService

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", status_code=201)
def register(body: RegisterRequest, service: AuthService = Depends(get_auth_service)):
    user_id = service.register(body.full_name, body.email, body.password, body.role)
    return JSONResponse(
        {"userId": user_id, "message": "Account created successfully."},
        status_code=201,
    )


@router.post("/login")
def login(body: LoginRequest, service: AuthService = Depends(get_auth_service)):
    result = service.login(body.email, body.password)
    response = AuthResponse(token=result.token, user_id=result.user_id, email=result.email, role=result.role)
    return JSONResponse(response.model_dump(by_alias=True))


@router.get("/me")
def me(claims: dict = Depends(get_current_claims)):
    return JSONResponse({"claims": claims})
