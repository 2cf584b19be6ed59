"""Auth service: registration, login, token issuance and rotation, logout.

The service holds no mutable state. Everything it persists goes through an
``AuthStore``; everything it signs goes through a ``TokenCodec``. Failures
the caller should handle are raised as ``AuthError`` subclasses. Where
several causes share one public error (unknown email vs. wrong password,
bad signature vs. revoked refresh token) the cause is logged, never
returned.
"""

from __future__ import annotations

import secrets
from collections.abc import Callable
from datetime import UTC, datetime
from functools import lru_cache
from typing import TYPE_CHECKING
from uuid import UUID

import structlog

from hirescreen.auth.errors import (
    AccountDeactivated,
    CompanyDeactivated,
    CompanyNotFound,
    DuplicateUser,
    InvalidCredentials,
    InvalidPassword,
    InvalidRefreshToken,
    InvalidToken,
    UserNotFound,
    UserNotInCompany,
)
from hirescreen.auth.models import (
    AccessClaims,
    AuthResult,
    TokenPair,
    UserRecord,
    UserRole,
    UserView,
)
from hirescreen.auth.passwords import hash_password, password_fits, verify_password
from hirescreen.auth.tokens import TokenCodec
from hirescreen.config import AuthConfig

if TYPE_CHECKING:
    from hirescreen.store.base import AuthStore

log = structlog.get_logger(__name__)

ACCESS = "access"
REFRESH = "refresh"


def _now_utc() -> datetime:
    return datetime.now(UTC)


@lru_cache(maxsize=None)
def _dummy_hash(rounds: int) -> str:
    # Checked against when the email is unknown so both login failures cost one bcrypt check.
    return hash_password(secrets.token_urlsafe(16), rounds=rounds)


class AuthService:
    """Identity and session lifecycle operations."""

    def __init__(
        self,
        store: AuthStore,
        config: AuthConfig,
        codec: TokenCodec | None = None,
        clock: Callable[[], datetime] = _now_utc,
    ) -> None:
        self._store = store
        self._config = config
        self._codec = codec or TokenCodec(config.jwt_algorithm)
        self._clock = clock

    # ------------------------------------------------------------------
    # Registration
    # ------------------------------------------------------------------

    async def register(
        self,
        email: str,
        password: str,
        first_name: str,
        last_name: str,
        company_id: UUID,
        role: UserRole | None = None,
    ) -> AuthResult:
        """Create a user in an existing company and issue its first token pair."""
        if await self._store.find_user_by_email(email) is not None:
            raise DuplicateUser()

        if await self._store.find_company_by_id(company_id) is None:
            raise CompanyNotFound()

        user = await self._store.create_user(
            email=email,
            password_hash=self._hash(password),
            first_name=first_name,
            last_name=last_name,
            company_id=company_id,
            role=role or UserRole.RECRUITER,
        )
        log.info("user_registered", user_id=str(user.id), company_id=str(company_id))

        tokens = await self.generate_tokens(user.id)
        return AuthResult(user=user.view(), tokens=tokens)

    async def register_company(
        self,
        name: str,
        domain: str,
        admin_email: str,
        admin_password: str,
        admin_first_name: str,
        admin_last_name: str,
    ) -> AuthResult:
        """Create a company together with its first ADMIN user.

        Both rows are written in one store call, so a rejected admin leaves no
        company behind.
        """
        if await self._store.find_user_by_email(admin_email) is not None:
            raise DuplicateUser()

        user = await self._store.create_company_with_admin(
            name=name,
            domain=domain,
            email=admin_email,
            password_hash=self._hash(admin_password),
            first_name=admin_first_name,
            last_name=admin_last_name,
        )
        log.info("company_created", company_id=str(user.company_id), domain=domain)
        log.info("user_registered", user_id=str(user.id), company_id=str(user.company_id))

        tokens = await self.generate_tokens(user.id)
        return AuthResult(user=user.view(), tokens=tokens)

    def _hash(self, password: str) -> str:
        if not password_fits(password):
            raise InvalidPassword()
        return hash_password(password, rounds=self._config.bcrypt_rounds)

    # ------------------------------------------------------------------
    # Sessions
    # ------------------------------------------------------------------

    async def login(self, email: str, password: str) -> AuthResult:
        user = await self._store.find_user_by_email(email)
        if user is None:
            verify_password(password, _dummy_hash(self._config.bcrypt_rounds))
            log.info("login_rejected", reason="unknown_email")
            raise InvalidCredentials()

        if not verify_password(password, user.password_hash):
            log.info("login_rejected", reason="wrong_password", user_id=str(user.id))
            raise InvalidCredentials()

        if not user.is_active:
            raise AccountDeactivated()

        if user.company is None or not user.company.is_active:
            raise CompanyDeactivated()

        now = self._clock()
        await self._store.update_user_last_login(user.id, now)
        user.last_login = now

        tokens = await self.generate_tokens(user.id)
        log.info("login_succeeded", user_id=str(user.id))
        return AuthResult(user=user.view(), tokens=tokens)

    async def refresh_token(self, presented_token: str) -> AuthResult:
        """Exchange a refresh token for a new pair. The presented token is consumed."""
        verification = self._codec.verify(presented_token, self._config.refresh_token_secret)
        if not verification.ok:
            log.info("refresh_rejected", reason=verification.error.value)
            raise InvalidRefreshToken()

        claims = verification.claims
        if claims.get("type") != REFRESH:
            log.info("refresh_rejected", reason="wrong_token_type")
            raise InvalidRefreshToken()

        stored = await self._store.find_refresh_token_by_token(presented_token)
        if stored is None:
            log.info("refresh_rejected", reason="not_in_store", user_id=claims.get("sub"))
            raise InvalidRefreshToken()

        if stored.expires_at <= self._clock():
            log.info("refresh_rejected", reason="expired_in_store", user_id=str(stored.user_id))
            raise InvalidRefreshToken()

        if claims.get("sub") != str(stored.user_id) or stored.user is None:
            log.warning("refresh_rejected", reason="subject_mismatch", user_id=str(stored.user_id))
            raise InvalidRefreshToken()

        # Losing a concurrent rotation race means the row is already gone.
        if not await self._store.delete_refresh_token_by_id(stored.id):
            log.warning("refresh_rejected", reason="already_consumed", user_id=str(stored.user_id))
            raise InvalidRefreshToken()

        tokens = await self.generate_tokens(stored.user_id)
        log.info("refresh_rotated", user_id=str(stored.user_id))
        return AuthResult(user=stored.user.view(), tokens=tokens)

    async def logout(self, refresh_token: str) -> int:
        deleted = await self._store.delete_refresh_tokens_by_token(refresh_token)
        log.info("logout", tokens_deleted=deleted)
        return deleted

    async def logout_all(self, user_id: UUID) -> int:
        deleted = await self._store.delete_refresh_tokens_by_user_id(user_id)
        log.info("logout_all", user_id=str(user_id), tokens_deleted=deleted)
        return deleted

    # ------------------------------------------------------------------
    # Administration
    # ------------------------------------------------------------------

    async def set_user_active(
        self, actor: AccessClaims, user_id: UUID, active: bool
    ) -> UserView:
        """Activate or deactivate a user of the actor's company.

        Deactivation also revokes every refresh token of the target.
        """
        target = await self._store.find_user_by_id(user_id, include_company=False)
        if target is None or target.company_id != actor.company_id:
            raise UserNotInCompany()

        user = await self._store.update_user_active(user_id, active)
        if user is None:
            raise UserNotInCompany()

        revoked = 0
        if not active:
            revoked = await self._store.delete_refresh_tokens_by_user_id(user_id)
        log.info(
            "user_status_changed",
            user_id=str(user_id),
            actor_id=str(actor.user_id),
            active=active,
            tokens_deleted=revoked,
        )
        return user.view()

    # ------------------------------------------------------------------
    # Access tokens
    # ------------------------------------------------------------------

    async def verify_token(self, access_token: str) -> AccessClaims:
        """Verify an access token and confirm its user and company are still active."""
        verification = self._codec.verify(access_token, self._config.access_token_secret)
        if not verification.ok:
            log.debug("access_token_rejected", reason=verification.error.value)
            raise InvalidToken()

        claims = verification.claims
        if claims.get("type") != ACCESS:
            raise InvalidToken()

        try:
            decoded = AccessClaims(
                user_id=UUID(claims["sub"]),
                email=claims["email"],
                role=UserRole(claims["role"]),
                company_id=UUID(claims["company"]),
            )
        except (KeyError, ValueError) as exc:
            raise InvalidToken() from exc

        user = await self._store.find_user_by_id(decoded.user_id, include_company=True)
        if user is None or not user.is_active or user.company is None or not user.company.is_active:
            log.info("access_token_rejected", reason="inactive_or_missing", user_id=str(decoded.user_id))
            raise InvalidToken()

        return decoded

    async def generate_tokens(self, user_id: UUID) -> TokenPair:
        """Issue an access token and a persisted refresh token for ``user_id``."""
        user = await self._store.find_user_by_id(user_id, include_company=False)
        if user is None:
            log.error("token_generation_for_missing_user", user_id=str(user_id))
            raise UserNotFound()

        issued_at = self._clock()
        access = self._codec.sign(
            self._access_claims(user),
            self._config.access_token_secret,
            self._config.access_token_ttl,
            issued_at=issued_at,
        )
        refresh = self._codec.sign(
            {"sub": str(user.id), "type": REFRESH, "jti": secrets.token_hex(16)},
            self._config.refresh_token_secret,
            self._config.refresh_token_ttl,
            issued_at=issued_at,
        )
        await self._store.create_refresh_token(
            token=refresh,
            user_id=user.id,
            expires_at=issued_at + self._config.refresh_token_ttl,
        )
        return TokenPair(access_token=access, refresh_token=refresh)

    @staticmethod
    def _access_claims(user: UserRecord) -> dict[str, str]:
        return {
            "sub": str(user.id),
            "email": user.email,
            "role": user.role.value,
            "company": str(user.company_id),
            "type": ACCESS,
        }
