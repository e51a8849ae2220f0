from datetime import timedelta

import pytest

from helpmate.auth import create_access_token, decode_access_token, get_password_hash
from helpmate.errors import Conflict, Unauthenticated
from helpmate.models import Role
from helpmate.schemas.user import RegisterRequest
from helpmate.seed import DEMO_PASSWORD, seed_demo_users
from helpmate.services.accounts import AccountService


@pytest.fixture
def accounts(user_store):
    return AccountService(user_store)


def register_form(email="jane@example.com", role=Role.USER):
    return RegisterRequest(name="Jane", email=email, password="s3cret", role=role)


class TestRegister:
    async def test_register_issues_token(self, accounts):
        result = await accounts.register(register_form())

        payload = decode_access_token(result.token)
        assert payload["sub"] == result.user.id
        assert payload["email"] == "jane@example.com"
        assert payload["role"] == "user"
        assert result.user.password_hash != "s3cret"

    async def test_duplicate_email_conflict(self, accounts, db):
        await accounts.register(register_form())
        with pytest.raises(Conflict):
            await accounts.register(register_form())
        assert await db["users"].count_documents({}) == 1


class TestLogin:
    async def test_login_with_right_password(self, accounts):
        registered = await accounts.register(register_form())
        result = await accounts.login("jane@example.com", "s3cret")
        assert result.user.id == registered.user.id

    @pytest.mark.parametrize("email,password", [("jane@example.com", "wrong"), ("nobody@example.com", "s3cret")])
    async def test_bad_credentials(self, accounts, email, password):
        await accounts.register(register_form())
        with pytest.raises(Unauthenticated) as excinfo:
            await accounts.login(email, password)
        assert excinfo.value.message == "Invalid credentials"


class TestResolveActor:
    async def test_role_comes_from_stored_user(self, accounts, db):
        result = await accounts.register(register_form())
        await db["users"].update_one({"email": "jane@example.com"}, {"$set": {"role": "admin"}})

        actor = await accounts.resolve_actor(result.token)

        assert actor.id == result.user.id
        assert actor.role == Role.ADMIN

    async def test_expired_token(self, accounts, user_store):
        user = await user_store.create("Old", "old@example.com", get_password_hash("pw"), Role.USER)
        token = create_access_token(user, expires_delta=timedelta(seconds=-5))
        with pytest.raises(Unauthenticated):
            await accounts.resolve_actor(token)

    async def test_garbage_token(self, accounts):
        with pytest.raises(Unauthenticated):
            await accounts.resolve_actor("not.a.jwt")

    async def test_deleted_user(self, accounts, db):
        result = await accounts.register(register_form())
        await db["users"].delete_many({})
        with pytest.raises(Unauthenticated):
            await accounts.resolve_actor(result.token)


async def test_seed_demo_users_only_on_empty_database(db, accounts):
    assert await seed_demo_users(db) == 2
    assert await seed_demo_users(db) == 0

    result = await accounts.login("admin@example.com", DEMO_PASSWORD)
    assert result.user.role == Role.ADMIN
