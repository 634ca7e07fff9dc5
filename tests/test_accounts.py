"""Tests for users, loyalty and admin user management."""

import pytest

from moonbeam.accounts import Rewards, UserDirectory, UserRole
from moonbeam.errors import InvalidOption, PermissionDenied, UserNotFound


@pytest.fixture
def directory(clock):
    return UserDirectory(clock=clock)


@pytest.fixture
def admin(directory):
    user = directory.sign_up("boss@moonbeam.test", "Ada")
    user.role = UserRole.ADMIN
    return user


class TestSignUpAndLogin:
    def test_sign_up(self, directory, clock):
        user = directory.sign_up("sam@example.com", " Sam ", "Lee")
        assert user.full_name == "Sam Lee"
        assert user.role is UserRole.CUSTOMER
        assert user.created_at == clock.now
        assert directory.get(user.user_id) is user

    def test_sign_up_existing_email_returns_account(self, directory):
        first = directory.sign_up("sam@example.com", "Sam")
        again = directory.sign_up("SAM@example.com", "Other")
        assert again is first
        assert len(directory.all_users()) == 1

    def test_sign_up_requires_name(self, directory):
        with pytest.raises(ValueError):
            directory.sign_up("sam@example.com", "  ")

    def test_login_creates_account_from_email(self, directory):
        user = directory.login("robin@example.com")
        assert user.first_name == "Robin"

    def test_login_deactivated(self, directory, admin):
        user = directory.login("robin@example.com")
        directory.toggle_active(admin, user.user_id)
        with pytest.raises(PermissionDenied):
            directory.login("robin@example.com")

    def test_unknown_user(self, directory):
        with pytest.raises(UserNotFound):
            directory.get("user-missing")


class TestRewards:
    def test_credit_stars(self, directory):
        user = directory.login("robin@example.com")
        directory.credit_stars(user.user_id, 29)
        assert user.rewards.stars == 29
        assert user.rewards.stars_to_next_reward == 21

    def test_negative_credit(self):
        with pytest.raises(ValueError):
            Rewards().credit(-1)

    def test_favorites_toggle(self, directory):
        user = directory.login("robin@example.com")
        assert user.toggle_favorite("caffe-latte") is True
        assert user.is_favorite("caffe-latte")
        assert user.toggle_favorite("caffe-latte") is False
        assert user.favorite_items == []


class TestAdmin:
    def test_update_role(self, directory, admin):
        user = directory.login("robin@example.com")
        directory.update_role(admin, user.user_id, "staff")
        assert user.role is UserRole.STAFF

    def test_update_role_invalid(self, directory, admin):
        user = directory.login("robin@example.com")
        with pytest.raises(InvalidOption):
            directory.update_role(admin, user.user_id, "owner")

    def test_non_admin_denied(self, directory):
        user = directory.login("robin@example.com")
        other = directory.login("kim@example.com")
        with pytest.raises(PermissionDenied):
            directory.update_role(user, other.user_id, "admin")
        with pytest.raises(PermissionDenied):
            directory.delete_user(user, other.user_id)

    def test_admin_cannot_remove_self(self, directory, admin):
        with pytest.raises(PermissionDenied):
            directory.toggle_active(admin, admin.user_id)
        with pytest.raises(PermissionDenied):
            directory.delete_user(admin, admin.user_id)

    def test_delete_user(self, directory, admin):
        user = directory.login("robin@example.com")
        directory.delete_user(admin, user.user_id)
        assert directory.find_by_email("robin@example.com") is None
