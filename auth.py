"""
auth.py
Authentication utilities (bcrypt hashing, verify, signup, login, change password).
"""

from __future__ import annotations

import logging
import uuid
from datetime import datetime

import bcrypt

import config
import db
import store
import subscriptions
import utils
from models import UserProfile

logger = logging.getLogger(__name__)


class AuthError(ValueError):
    pass


def _to_bcrypt_secret(password: str) -> bytes:
    """
    bcrypt only uses the first 72 BYTES of the password.
    We truncate to 72 bytes to avoid ValueError and to make behavior explicit.
    """
    pw = password.encode("utf-8")
    if len(pw) > 72:
        pw = pw[:72]
    return pw


def hash_password(password: str) -> str:
    """
    Returns a bcrypt hash as a UTF-8 string (stored in SQLite).
    """
    secret = _to_bcrypt_secret(password)
    salt = bcrypt.gensalt(rounds=12)
    hashed = bcrypt.hashpw(secret, salt)
    return hashed.decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    secret = _to_bcrypt_secret(password)
    stored = password_hash.encode("utf-8")
    return bcrypt.checkpw(secret, stored)


def signup(email: str, display_name: str, password: str, now: datetime) -> UserProfile:
    """
    Create an account on a fresh trial, plus the starter "Freelance" income category
    with project tracking switched on.
    """
    errors = utils.validate_signup_inputs(display_name, email, password)
    if errors:
        raise AuthError(" ".join(errors))
    email = email.strip()
    if store.get_profile_by_email(email):
        logger.warning("Signup rejected, email already registered: %s", email)
        raise AuthError("This email address is already in use.")

    profile = subscriptions.new_trial_profile(uuid.uuid4().hex, email, display_name.strip(), now)
    store.create_profile(profile, hash_password(password))
    store.add_income_category(
        profile.uid,
        "Freelance",
        description="Income from freelance projects and similar work.",
        has_project_tracking=True,
    )
    return profile


def login(email: str, password: str) -> UserProfile | None:
    stored = store.get_password_hash(email)
    if not stored or not verify_password(password, stored):
        logger.warning("Failed login for %s", email)
        return None
    return store.get_profile_by_email(email)


def change_password(uid: str, new_password: str) -> None:
    if len(new_password) < 6:
        raise AuthError("Password must be at least 6 characters.")
    store.set_password_hash(uid, hash_password(new_password))
    profile = store.get_profile(uid)
    if profile and profile.is_admin:
        db.clear_force_password_change()


def is_super_admin(profile: UserProfile | None) -> bool:
    if profile is None:
        return False
    return profile.is_admin or profile.email.lower() == config.SUPER_ADMIN_EMAIL.lower()


def ensure_admin(now: datetime) -> None:
    """
    Insert the default super-admin if none exists and force a password change on first login.
    """
    if store.get_profile_by_email(config.SUPER_ADMIN_EMAIL):
        if db.get_setting("force_password_change") is None:
            db.set_setting("force_password_change", "0")
        return

    admin = subscriptions.new_trial_profile(uuid.uuid4().hex, config.SUPER_ADMIN_EMAIL, "Admin", now, is_admin=True)
    store.create_profile(admin, hash_password(config.DEFAULT_ADMIN_PASSWORD))
    db.set_setting("force_password_change", "1")
    logger.info("Seeded default admin %s", config.SUPER_ADMIN_EMAIL)
