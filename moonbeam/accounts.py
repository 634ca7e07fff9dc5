"""Users, loyalty rewards, favorites and admin user management."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Protocol
from uuid import uuid4

from moonbeam.clock import Clock, utc_now
from moonbeam.config import STARS_PER_REWARD
from moonbeam.errors import PermissionDenied, UserNotFound
from moonbeam.models import PaymentMethod, coerce_option

logger = logging.getLogger(__name__)


class UserRole(str, Enum):
    CUSTOMER = "customer"
    STAFF = "staff"
    ADMIN = "admin"


class RewardTier(str, Enum):
    GREEN = "green"
    GOLD = "gold"
    PLATINUM = "platinum"


@dataclass(frozen=True)
class Reward:
    reward_id: str
    name: str
    stars_required: int
    description: str
    expires_at: datetime | None = None


@dataclass
class Rewards:
    stars: int = 0
    tier: RewardTier = RewardTier.GREEN
    stars_to_next_reward: int = STARS_PER_REWARD
    available_rewards: list[Reward] = field(default_factory=list)

    def credit(self, stars: int) -> None:
        if stars < 0:
            raise ValueError("stars must not be negative")
        self.stars += stars
        self.stars_to_next_reward = max(0, self.stars_to_next_reward - stars)


@dataclass
class User:
    user_id: str
    first_name: str
    last_name: str
    email: str
    role: UserRole = UserRole.CUSTOMER
    is_active: bool = True
    created_at: datetime | None = None
    last_login_at: datetime | None = None
    phone: str | None = None
    rewards: Rewards = field(default_factory=Rewards)
    favorite_items: list[str] = field(default_factory=list)
    favorite_locations: list[str] = field(default_factory=list)
    order_ids: list[str] = field(default_factory=list)
    payment_methods: list[PaymentMethod] = field(default_factory=list)
    default_payment_method: str | None = None

    @property
    def is_admin(self) -> bool:
        return self.role is UserRole.ADMIN

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()

    def is_favorite(self, item_id: str) -> bool:
        return item_id in self.favorite_items

    def toggle_favorite(self, item_id: str) -> bool:
        """Flip an item in/out of favorites and return whether it is now a favorite."""
        if item_id in self.favorite_items:
            self.favorite_items.remove(item_id)
            return False
        self.favorite_items.append(item_id)
        return True

    def payment_method(self, method_id: str | None = None) -> PaymentMethod | None:
        """Look up a saved payment method, the default one when no id is given."""
        wanted = method_id or self.default_payment_method
        for method in self.payment_methods:
            if method.method_id == wanted:
                return method
        return None


class UserRepository(Protocol):
    def save_user(self, user: User) -> None: ...

    def delete_user(self, user_id: str) -> None: ...


def new_user_id() -> str:
    return f"user-{uuid4().hex[:12]}"


class UserDirectory:
    """
    All known users, with the admin operations over them.

    Also acts as the loyalty ledger for checkout (``credit_stars``).
    """

    def __init__(self, users: list[User] | None = None, store: UserRepository | None = None, clock: Clock = utc_now):
        self.store = store
        self.clock = clock
        self._users: dict[str, User] = {user.user_id: user for user in users or []}

    def _persist(self, user: User) -> None:
        if self.store is not None:
            self.store.save_user(user)

    def all_users(self) -> list[User]:
        return list(self._users.values())

    def get(self, user_id: str) -> User:
        try:
            return self._users[user_id]
        except KeyError:
            raise UserNotFound(user_id) from None

    def find_by_email(self, email: str) -> User | None:
        wanted = email.strip().lower()
        for user in self._users.values():
            if user.email.lower() == wanted:
                return user
        return None

    def sign_up(self, email: str, first_name: str, last_name: str = "") -> User:
        """Create a customer account, or return the existing one for that email."""
        if not email.strip() or not first_name.strip():
            raise ValueError("email and first name are required")
        existing = self.find_by_email(email)
        if existing is not None:
            existing.last_login_at = self.clock()
            self._persist(existing)
            return existing
        user = User(
            user_id=new_user_id(),
            first_name=first_name.strip(),
            last_name=last_name.strip(),
            email=email.strip(),
            created_at=self.clock(),
            last_login_at=self.clock(),
        )
        self._users[user.user_id] = user
        self._persist(user)
        logger.info("user created user_id=%s", user.user_id)
        return user

    def login(self, email: str) -> User:
        """Log in by email, creating an account named after the address when unknown."""
        if not email.strip():
            raise ValueError("email is required")
        existing = self.find_by_email(email)
        if existing is not None:
            if not existing.is_active:
                raise PermissionDenied("log in", "account is deactivated")
            existing.last_login_at = self.clock()
            self._persist(existing)
            return existing
        local_part = email.strip().split("@")[0]
        return self.sign_up(email, local_part[:1].upper() + local_part[1:])

    def credit_stars(self, user_id: str, stars: int) -> User:
        user = self.get(user_id)
        user.rewards.credit(stars)
        self._persist(user)
        return user

    def _require_admin(self, actor: User, action: str) -> None:
        if not actor.is_admin:
            logger.warning("denied action=%s actor=%s", action, actor.user_id)
            raise PermissionDenied(action, "admin role required")

    def update_role(self, actor: User, user_id: str, role: UserRole | str) -> User:
        self._require_admin(actor, "change roles")
        user = self.get(user_id)
        user.role = coerce_option(UserRole, role, "user role")
        if user is not actor and user.user_id == actor.user_id:
            actor.role = user.role
        self._persist(user)
        logger.info("role changed user_id=%s role=%s by=%s", user_id, user.role.value, actor.user_id)
        return user

    def toggle_active(self, actor: User, user_id: str) -> User:
        self._require_admin(actor, "deactivate users")
        if actor.user_id == user_id:
            raise PermissionDenied("deactivate users", "admins cannot deactivate themselves")
        user = self.get(user_id)
        user.is_active = not user.is_active
        self._persist(user)
        return user

    def delete_user(self, actor: User, user_id: str) -> None:
        self._require_admin(actor, "delete users")
        if actor.user_id == user_id:
            raise PermissionDenied("delete users", "admins cannot delete themselves")
        self.get(user_id)
        del self._users[user_id]
        if self.store is not None:
            self.store.delete_user(user_id)
        logger.info("user deleted user_id=%s by=%s", user_id, actor.user_id)
