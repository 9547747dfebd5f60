"""
PassVault - Identity Provider

Email + password accounts kept in the document store.

Sign-in flow:
    1. Look up the account by email
    2. scrypt(password, account salt) -> account key -> HKDF subkeys
    3. Compare SHA-256(auth_key) with the stored verifier (constant time)
    4. On success, hand back a Session holding the content key

Listeners registered with on_auth_state_changed() are told about every
sign-in and sign-out, mirroring how hosted auth SDKs publish session state.
"""

import base64
import logging
import re
import time
import uuid
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from . import config, crypto
from .store import DocumentStore


logger = logging.getLogger(__name__)

_EMAIL_RE = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")

AuthListener = Callable[[Optional["Session"]], None]


class AuthError(Exception):
    """
    Sign-up / sign-in failure.

    Attributes:
        code: Machine-readable reason, e.g. "auth/invalid-credential"
    """

    def __init__(self, code: str, message: str):
        super().__init__(message)
        self.code = code


@dataclass
class Session:
    """Opaque handle for a signed-in user. The data key never leaves memory."""
    uid: str
    email: str
    data_key: bytes = field(repr=False)
    signed_in_at: float = field(default_factory=time.time)


class IdentityProvider:
    """
    Local identity provider.

    Usage:
        auth = IdentityProvider(store)
        unsubscribe = auth.on_auth_state_changed(lambda s: print(s))
        session = auth.sign_up("alice@example.com", "hunter22")
        auth.sign_out()
        session = auth.sign_in("alice@example.com", "hunter22")
        unsubscribe()
    """

    def __init__(self, store: DocumentStore):
        self.store = store
        self._session: Optional[Session] = None
        self._listeners: List[AuthListener] = []

    @property
    def current_session(self) -> Optional[Session]:
        return self._session

    def sign_up(self, email: str, password: str) -> Session:
        """
        Create an account and sign it in.

        Raises:
            AuthError: invalid email, weak password, or email already registered
        """
        email = _normalize_email(email)
        if not _EMAIL_RE.match(email):
            raise AuthError("auth/invalid-email", "The email address is badly formatted.")
        if len(password) < config.MIN_ACCOUNT_PASSWORD_LENGTH:
            raise AuthError(
                "auth/weak-password",
                f"Password should be at least {config.MIN_ACCOUNT_PASSWORD_LENGTH} characters."
            )
        if self.store.find(config.ACCOUNTS_COLLECTION, 'email', email):
            raise AuthError("auth/email-already-in-use",
                            "The email address is already in use by another account.")

        uid = str(uuid.uuid4())
        salt = crypto.new_salt()
        subkeys = crypto.derive_subkeys(crypto.derive_account_key(password, salt))

        self.store.add(config.ACCOUNTS_COLLECTION, {
            'uid': uid,
            'email': email,
            'kdf': "scrypt",
            'kdf_params': {"N": crypto.SCRYPT_N, "r": crypto.SCRYPT_R, "p": crypto.SCRYPT_P},
            'salt': base64.b64encode(salt).decode('ascii'),
            'verifier': base64.b64encode(crypto.auth_verifier(subkeys['auth_key'])).decode('ascii'),
        })
        logger.info("Created account %s", uid)

        return self._start_session(uid, email, subkeys['content_key'])

    def sign_in(self, email: str, password: str) -> Session:
        """
        Raises:
            AuthError: "auth/invalid-credential" for unknown email or wrong password
        """
        email = _normalize_email(email)
        matches = self.store.find(config.ACCOUNTS_COLLECTION, 'email', email)
        if not matches:
            logger.info("Sign-in failed: unknown email")
            raise _invalid_credential()

        account = matches[0].data
        salt = base64.b64decode(account['salt'])
        subkeys = crypto.derive_subkeys(crypto.derive_account_key(password, salt))
        expected = base64.b64decode(account['verifier'])

        if not crypto.constant_compare(crypto.auth_verifier(subkeys['auth_key']), expected):
            logger.info("Sign-in failed for account %s", account['uid'])
            raise _invalid_credential()

        return self._start_session(account['uid'], email, subkeys['content_key'])

    def sign_out(self) -> None:
        if self._session is None:
            return
        logger.info("Signed out account %s", self._session.uid)
        self._session = None
        self._notify()

    def on_auth_state_changed(self, callback: AuthListener) -> Callable[[], None]:
        """
        Subscribe to session changes.

        The callback runs once right away with the current session (or None),
        then after every sign-in / sign-out.

        Returns:
            Function that removes the subscription
        """
        self._listeners.append(callback)
        self._call(callback, self._session)

        def unsubscribe() -> None:
            if callback in self._listeners:
                self._listeners.remove(callback)

        return unsubscribe

    # =========================================================================
    # INTERNAL HELPERS
    # =========================================================================

    def _start_session(self, uid: str, email: str, data_key: bytes) -> Session:
        self._session = Session(uid=uid, email=email, data_key=data_key)
        logger.info("Signed in account %s", uid)
        self._notify()
        return self._session

    def _notify(self) -> None:
        for listener in list(self._listeners):
            self._call(listener, self._session)

    def _call(self, listener: AuthListener, session: Optional[Session]) -> None:
        # A broken listener must not undo a sign-in that already happened
        try:
            listener(session)
        except Exception:
            logger.exception("Auth state listener %r failed", listener)


def _normalize_email(email: str) -> str:
    return (email or "").strip().lower()


def _invalid_credential() -> AuthError:
    return AuthError("auth/invalid-credential", "Invalid email or password.")
