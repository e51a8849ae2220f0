# helpmate/services/accounts.py
import logging
from helpmate.auth import create_access_token, decode_access_token, get_password_hash, verify_password
from helpmate.errors import Unauthenticated
from helpmate.models import Actor, User
from helpmate.schemas.user import AuthResult, RegisterRequest
from helpmate.stores.users import UserStore

logger = logging.getLogger(__name__)


class AccountService:
    """Registration, login and turning a bearer token back into an actor."""

    def __init__(self, users: UserStore):
        self.users = users

    async def register(self, data: RegisterRequest) -> AuthResult:
        user = await self.users.create(
            name=data.name,
            email=data.email,
            password_hash=get_password_hash(data.password),
            role=data.role,
        )
        logger.info("Registered user %s with role %s", user.id, user.role.value)
        return AuthResult(token=create_access_token(user), user=user)

    async def login(self, email: str, password: str) -> AuthResult:
        user = await self.users.find_by_email(email)
        # same answer for unknown email and wrong password
        if not user or not verify_password(password, user.password_hash):
            logger.warning("Failed login for %s", email)
            raise Unauthenticated("Invalid credentials")
        return AuthResult(token=create_access_token(user), user=user)

    async def resolve_actor(self, token: str) -> Actor:
        payload = decode_access_token(token)
        user = await self.users.find_by_id(payload["sub"])
        if user is None:
            raise Unauthenticated("User not found")
        # the stored role wins over the one baked into the token
        return Actor(id=user.id, email=user.email, role=user.role)

    async def get_user(self, actor: Actor) -> User:
        user = await self.users.find_by_id(actor.id)
        if user is None:
            raise Unauthenticated("User not found")
        return user
