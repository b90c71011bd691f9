"""
Admin credential checks.

Clients send a SHA-256 hex digest of the admin password as their proof. The
server stores a bcrypt hash of that digest and compares against it on every
call; nothing is cached between calls.
"""
import hashlib
from typing import Optional

import bcrypt

from portfolio.core.config import settings
from portfolio.core.logging_config import log_error, log_warning


def hash_password_client(password: str) -> str:
    """SHA-256 hex digest, the form a client sends as its proof."""
    return hashlib.sha256(password.encode("utf-8")).hexdigest()


def hash_password_for_storage(password: str, rounds: int = 12) -> str:
    """bcrypt hash of the client proof, suitable for ADMIN_PASSWORD_HASH."""
    proof = hash_password_client(password)
    return bcrypt.hashpw(proof.encode("utf-8"), bcrypt.gensalt(rounds=rounds)).decode("utf-8")


def is_authorized(credential_proof: Optional[str], stored_hash: Optional[str] = None) -> bool:
    """Return True when the proof matches the configured admin hash."""
    if not credential_proof:
        return False
    expected = stored_hash if stored_hash is not None else settings.admin_password_hash
    if not expected:
        log_warning("ADMIN_PASSWORD_HASH not configured; rejecting admin request")
        return False
    try:
        return bcrypt.checkpw(credential_proof.encode("utf-8"), expected.encode("utf-8"))
    except ValueError as exc:
        log_error(exc)
        return False
