import pytest

from recipes.accounts import AccountService
from recipes.errors import BadInput


def test_register_hashes_password(user_storage):
    accounts = AccountService(user_storage)

    accounts.register("cook@example.com", "secret-pass")

    user = user_storage.get_user("cook@example.com")
    assert user.password != "secret-pass"
    assert user.role == "ROLE_USER"


@pytest.mark.parametrize(
    "email,password",
    [("not-an-email", "secret-pass"), ("cook@example.com", "short"), (None, None)],
)
def test_register_rejects_invalid_credentials(user_storage, email, password):
    with pytest.raises(BadInput):
        AccountService(user_storage).register(email, password)

    assert not user_storage.user_exists("cook@example.com")


def test_register_rejects_duplicate_email(user_storage):
    accounts = AccountService(user_storage)
    accounts.register("cook@example.com", "secret-pass")

    with pytest.raises(BadInput):
        accounts.register("cook@example.com", "another-pass")


def test_authenticate(user_storage):
    accounts = AccountService(user_storage)
    accounts.register("cook@example.com", "secret-pass")

    assert accounts.authenticate("cook@example.com", "secret-pass") == "cook@example.com"
    assert accounts.authenticate("cook@example.com", "wrong-pass") is None
    assert accounts.authenticate("nobody@example.com", "secret-pass") is None
