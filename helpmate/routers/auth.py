# helpmate/routers/auth.py
from fastapi import APIRouter, Depends
from helpmate.dependencies import get_account_service, get_current_actor
from helpmate.models import Actor
from helpmate.schemas.user import LoginRequest, RegisterRequest
from helpmate.services.accounts import AccountService

router = APIRouter(prefix="/api/auth", tags=["Auth"])


@router.post("/register", status_code=201)
async def register(data: RegisterRequest, accounts: AccountService = Depends(get_account_service)):
    result = await accounts.register(data)
    return {"message": "User created successfully", "token": result.token, "user": result.user}


@router.post("/login")
async def login(data: LoginRequest, accounts: AccountService = Depends(get_account_service)):
    result = await accounts.login(data.email, data.password)
    return {"message": "Login successful", "token": result.token, "user": result.user}


@router.get("/me")
async def read_me(
    actor: Actor = Depends(get_current_actor),
    accounts: AccountService = Depends(get_account_service),
):
    return await accounts.get_user(actor)
