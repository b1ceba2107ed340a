"""
Tests for the credential store: registration, activation, login and profile.
"""

import pytest

from auth.password import verify_password
from core.errors import ActivationMismatch, DuplicateEmail, InvalidCredentials, NotFound
from core.task_service import TaskService
from core.user_service import UserService, generate_activation_code
from database.models import User
from database.store import Collection
from utils.schemas import Identity


async def _register(users: UserService, email="a@x.com", password="pw", **extra) -> int:
    return await users.register(
        email=email,
        password=password,
        first_name=extra.pop("first_name", "Ada"),
        last_name=extra.pop("last_name", "Lovelace"),
        **extra,
    )


async def _identity(session, email="a@x.com") -> Identity:
    user = await Collection(session, User).find_one(email=email)
    return Identity(id=str(user.id), email=user.email)


class TestActivationCode:
    def test_code_is_six_digits(self):
        for _ in range(200):
            assert 100000 <= generate_activation_code() <= 999999


class TestRegister:
    @pytest.mark.asyncio
    async def test_register_creates_unverified_user(self, session, tokens):
        users = UserService(session, tokens)
        code = await _register(users, address="12 Road", image="1-me.png")

        user = await Collection(session, User).find_one(email="a@x.com")
        assert 100000 <= code <= 999999
        assert user.activation_code == code
        assert user.is_verified is False
        assert user.address == "12 Road"
        assert user.image == "1-me.png"
        assert user.password_hash != "pw"
        assert verify_password("pw", user.password_hash)

    @pytest.mark.asyncio
    async def test_duplicate_email_rejected_and_original_kept(self, session, tokens):
        users = UserService(session, tokens)
        code = await _register(users)

        with pytest.raises(DuplicateEmail):
            await _register(users, password="other", first_name="Mallory")

        user = await Collection(session, User).find_one(email="a@x.com")
        assert user.first_name == "Ada"
        assert user.activation_code == code
        assert verify_password("pw", user.password_hash)
        assert len(await Collection(session, User).find(email="a@x.com")) == 1


class TestActivate:
    @pytest.mark.asyncio
    async def test_matching_code_verifies(self, session, tokens):
        users = UserService(session, tokens)
        code = await _register(users)

        await users.activate("a@x.com", code)

        user = await users.get_profile(await _identity(session))
        assert user.is_verified is True

    @pytest.mark.asyncio
    async def test_wrong_code_leaves_user_unverified(self, session, tokens):
        users = UserService(session, tokens)
        code = await _register(users)
        wrong = code + 1 if code < 999999 else code - 1

        with pytest.raises(ActivationMismatch):
            await users.activate("a@x.com", wrong)

        user = await users.get_profile(await _identity(session))
        assert user.is_verified is False

    @pytest.mark.asyncio
    async def test_code_for_other_email_rejected(self, session, tokens):
        users = UserService(session, tokens)
        code = await _register(users)
        await _register(users, email="b@x.com")

        with pytest.raises(ActivationMismatch):
            await users.activate("nobody@x.com", code)

    @pytest.mark.asyncio
    async def test_code_still_accepted_after_use(self, session, tokens):
        users = UserService(session, tokens)
        code = await _register(users)

        await users.activate("a@x.com", code)
        await users.activate("a@x.com", code)


class TestAuthenticate:
    @pytest.mark.asyncio
    async def test_login_allowed_before_activation(self, session, tokens):
        users = UserService(session, tokens)
        await _register(users)

        user, token = await users.authenticate("a@x.com", "pw")

        assert user.is_verified is False
        claims = tokens.verify(token)
        assert claims["id"] == str(user.id)
        assert claims["email"] == "a@x.com"

    @pytest.mark.asyncio
    async def test_wrong_password(self, session, tokens):
        users = UserService(session, tokens)
        await _register(users)

        with pytest.raises(InvalidCredentials):
            await users.authenticate("a@x.com", "nope")

    @pytest.mark.asyncio
    async def test_unknown_email(self, session, tokens):
        users = UserService(session, tokens)
        with pytest.raises(InvalidCredentials):
            await users.authenticate("ghost@x.com", "pw")


class TestProfile:
    @pytest.mark.asyncio
    async def test_update_only_touches_supplied_fields(self, session, tokens):
        users = UserService(session, tokens)
        await _register(users, address="Old street")
        identity = await _identity(session)

        user = await users.update_profile(
            identity, {"first_name": "Grace", "last_name": None, "address": None},
        )

        assert user.first_name == "Grace"
        assert user.last_name == "Lovelace"
        assert user.address == "Old street"
        assert verify_password("pw", user.password_hash)

    @pytest.mark.asyncio
    async def test_new_password_is_hashed(self, session, tokens):
        users = UserService(session, tokens)
        await _register(users)
        identity = await _identity(session)

        user = await users.update_profile(identity, {}, new_password="fresh")

        assert user.password_hash != "fresh"
        assert verify_password("fresh", user.password_hash)
        await users.authenticate("a@x.com", "fresh")
        with pytest.raises(InvalidCredentials):
            await users.authenticate("a@x.com", "pw")

    @pytest.mark.asyncio
    async def test_email_and_flags_cannot_be_changed(self, session, tokens):
        users = UserService(session, tokens)
        await _register(users)
        identity = await _identity(session)
        task = await TaskService(session).create(identity, "t1", "d1")

        user = await users.update_profile(
            identity,
            {"email": "evil@x.com", "is_verified": True, "activation_code": 1},
        )

        assert user.email == "a@x.com"
        assert user.is_verified is False
        owned = await TaskService(session).get_one(identity, str(task.id))
        assert owned.creator_email == "a@x.com"

    @pytest.mark.asyncio
    async def test_image_reference_replaced(self, session, tokens):
        users = UserService(session, tokens)
        await _register(users, image="1-old.png")
        identity = await _identity(session)

        user = await users.update_profile(identity, {}, image="2-new.png")

        assert user.image == "2-new.png"

    @pytest.mark.asyncio
    async def test_get_profile_returns_own_record(self, session, tokens):
        users = UserService(session, tokens)
        await _register(users)
        await _register(users, email="b@x.com", first_name="Bob")

        user = await users.get_profile(await _identity(session, "b@x.com"))

        assert user.email == "b@x.com"
        assert user.first_name == "Bob"

    @pytest.mark.asyncio
    async def test_profile_of_unknown_id(self, session, tokens):
        users = UserService(session, tokens)
        ghost = Identity(id="00000000-0000-0000-0000-000000000000", email="ghost@x.com")

        with pytest.raises(NotFound):
            await users.get_profile(ghost)
        with pytest.raises(NotFound):
            await users.update_profile(ghost, {"first_name": "Boo"})
