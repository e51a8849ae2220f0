# helpmate/dependencies.py
from fastapi import Depends, Request
from fastapi.security import OAuth2PasswordBearer
from motor.motor_asyncio import AsyncIOMotorDatabase
from helpmate import config
from helpmate.models import Actor
from helpmate.services.accounts import AccountService
from helpmate.services.attachments import AttachmentStore
from helpmate.services.tickets import TicketService
from helpmate.stores.users import UserStore

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/api/auth/login")


async def get_db(request: Request) -> AsyncIOMotorDatabase:
    return request.app.state.db


def get_account_service(db: AsyncIOMotorDatabase = Depends(get_db)) -> AccountService:
    return AccountService(UserStore(db))


def get_ticket_service(db: AsyncIOMotorDatabase = Depends(get_db)) -> TicketService:
    return TicketService.from_database(db)


def get_attachment_store() -> AttachmentStore:
    return AttachmentStore(config.UPLOAD_DIR, config.MAX_ATTACHMENT_BYTES)


async def get_current_actor(
    token: str = Depends(oauth2_scheme),
    accounts: AccountService = Depends(get_account_service),
) -> Actor:
    return await accounts.resolve_actor(token)
