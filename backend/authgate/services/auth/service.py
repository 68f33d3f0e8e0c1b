# authgate/services/auth/service.py
from __future__ import annotations

import logging

from authgate.models.credentials import AuthProvider, Credentials
from authgate.models.user import User
from authgate.services._shared.base import BaseService, ServiceContext
from authgate.services._shared.errors import (
    AuthenticationError,
    ConflictError,
    InactiveAccountError,
    InvalidSecurityCodeError,
    NotFoundError,
    TooManyRequestsError,
    ValidationFailedError,
)
from authgate.services._shared.ports import (
    CodeDelivery,
    CodePurpose,
    DeviceRegistry,
    DeviceView,
    SecurityCodeTicket,
)
from authgate.services.auth.dto import (
    LoginIn,
    PasswordResetIn,
    RegisterIn,
    SecurityCodeIn,
    SocialProfileIn,
    TokenPairOut,
    UserOut,
)
from authgate.services.auth.security_code import SecurityCodePolicy, generate_security_code
from authgate.services.tokens.issuer import DeviceInfo, TokenIssuer

log = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 8


def check_password_policy(password: str) -> None:
    """
    Enforce the local password rules.

    :raises ValidationFailedError: If shorter than 8 characters or containing spaces.
    """
    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValidationFailedError(
            f"Password must be at least {MIN_PASSWORD_LENGTH} characters long."
        )
    if any(ch.isspace() for ch in password):
        raise ValidationFailedError("Password must not contain spaces.")


class AuthService(BaseService):
    """
    Entry points that produce a device's *first* token pair.

    Every successful sign-in registers the device (replacing a same-named
    device of the same user), mints a refresh token, then an access token,
    and stores both on the device record.

    Account activation and password reset go through single-use security
    codes; the plain code only leaves the service through ``delivery`` and
    the returned :class:`SecurityCodeTicket`.
    """

    def __init__(
        self,
        *,
        issuer: TokenIssuer,
        registry: DeviceRegistry,
        codes: SecurityCodePolicy | None = None,
        delivery: CodeDelivery | None = None,
        ctx: ServiceContext | None = None,
    ) -> None:
        """
        Initialize the service with its dependencies.

        :param issuer: Mints access/refresh tokens.
        :param registry: Device registry the new device is recorded in.
        :param codes: Security code lifetime, quota and activation switch.
        :param delivery: Channel issued codes are sent through. Without one
            the caller is responsible for the returned tickets.
        """
        super().__init__(ctx=ctx)
        self.issuer = issuer
        self.registry = registry
        self.codes = codes or SecurityCodePolicy()
        self.delivery = delivery

    # ------------------------------------------------------------------ #
    # Registration
    # ------------------------------------------------------------------ #

    def register_local(self, dto: RegisterIn) -> UserOut:
        """
        Create a user with local (password) credentials.

        The user is activated immediately unless the code policy requires
        activation, in which case an activation code is issued and delivered.

        :raises ValidationFailedError: If the password breaks the policy.
        :raises ConflictError: If the email is already used by any credentials.
        """
        check_password_policy(dto.password)
        activated = not self.codes.require_activation
        ticket: SecurityCodeTicket | None = None
        with self.rw_uow() as uow:
            if uow.credentials.exists_by_email(dto.email):
                raise ConflictError("Credentials", "email already registered")
            user = uow.users.add(User(name=dto.name, activated=activated))
            creds = Credentials(user_id=user.id, email=dto.email, provider=AuthProvider.LOCAL)
            creds.password = dto.password
            uow.credentials.add(creds)
            if not activated:
                ticket = self._issue_code(creds, CodePurpose.ACTIVATION)
            out = UserOut(id=user.id, name=user.name, email=creds.email, activated=activated)
        log.info("auth.registered", extra={"user_id": out.id})
        if ticket is not None:
            self._deliver(ticket)
        return out

    # ------------------------------------------------------------------ #
    # Activation
    # ------------------------------------------------------------------ #

    def activate_account(self, dto: SecurityCodeIn) -> UserOut:
        """
        Activate the account behind ``dto.credentials_id``.

        :raises NotFoundError: If the credentials do not exist.
        :raises ConflictError: If the account is already active.
        :raises InvalidSecurityCodeError: If the code is wrong or expired.
        """
        with self.rw_uow() as uow:
            creds = uow.credentials.get(dto.credentials_id)
            if creds is None:
                raise NotFoundError("Account", dto.credentials_id)
            user = creds.user
            if user.activated:
                raise ConflictError("Account", "already activated")
            if not creds.security_code_matches(dto.code, now=self.now_utc()):
                raise InvalidSecurityCodeError()
            user.activated = True
            creds.clear_security_code()
            out = UserOut(id=user.id, name=user.name, email=creds.email, activated=True)
        log.info("auth.activated", extra={"user_id": out.id})
        return out

    def request_activation_code(self, email: str) -> SecurityCodeTicket:
        """
        Issue a new activation code for an inactive local account.

        :raises NotFoundError: If no local credentials use ``email``.
        :raises ConflictError: If the account is already active.
        :raises TooManyRequestsError: If the daily code quota is used up.
        """
        with self.rw_uow() as uow:
            creds = uow.credentials.get_by_email(email, AuthProvider.LOCAL)
            if creds is None:
                raise NotFoundError("Account", email)
            if creds.user.activated:
                raise ConflictError("Account", "already activated")
            ticket = self._issue_code(creds, CodePurpose.ACTIVATION)
        self._deliver(ticket)
        return ticket

    # ------------------------------------------------------------------ #
    # Password reset
    # ------------------------------------------------------------------ #

    def request_password_reset(self, email: str) -> SecurityCodeTicket:
        """
        Issue a password reset code for an active local account.

        :raises NotFoundError: If no credentials use ``email``.
        :raises InactiveAccountError: If the account is not activated.
        :raises ValidationFailedError: If the account signs in through a
            social provider and therefore has no password.
        :raises TooManyRequestsError: If the daily code quota is used up.
        """
        with self.rw_uow() as uow:
            creds = uow.credentials.get_by_email(email)
            if creds is None:
                raise NotFoundError("Account", email)
            if not creds.user.activated:
                raise InactiveAccountError()
            if not creds.is_local:
                raise ValidationFailedError(
                    f"This account signs in with {creds.provider.value}; "
                    "its password cannot be reset."
                )
            ticket = self._issue_code(creds, CodePurpose.PASSWORD_RESET)
        self._deliver(ticket)
        return ticket

    def check_reset_code(self, dto: SecurityCodeIn) -> bool:
        """Return whether ``dto.code`` would currently be accepted by :meth:`reset_password`."""
        with self.ro_uow() as uow:
            creds = uow.credentials.get(dto.credentials_id)
            return creds is not None and self._reset_code_accepted(creds, dto.code)

    def reset_password(self, dto: PasswordResetIn) -> None:
        """
        Replace the password and consume the reset code.

        Signed-in devices are left untouched.

        :raises ValidationFailedError: If the new password breaks the policy.
        :raises InvalidSecurityCodeError: If the code is wrong, expired or
            does not belong to an active local account.
        """
        check_password_policy(dto.password)
        with self.rw_uow() as uow:
            creds = uow.credentials.get(dto.credentials_id)
            if creds is None or not self._reset_code_accepted(creds, dto.code):
                raise InvalidSecurityCodeError()
            creds.password = dto.password
            creds.clear_security_code()
            user_id = creds.user_id
        log.info("auth.password_reset", extra={"user_id": user_id})

    # ------------------------------------------------------------------ #
    # Login
    # ------------------------------------------------------------------ #

    def login(self, dto: LoginIn, device: DeviceInfo) -> TokenPairOut:
        """
        Verify a password and open a session for ``device``.

        :raises AuthenticationError: On unknown email, wrong password, or an
            account created through a social provider.
        :raises InactiveAccountError: If the account is not activated.
        """
        with self.ro_uow() as uow:
            creds = uow.credentials.get_by_email(dto.email)
            if creds is None:
                raise AuthenticationError()
            if not creds.is_local:
                raise AuthenticationError(
                    f"This account signs in with {creds.provider.value}."
                )
            if not creds.verify_password(dto.password):
                raise AuthenticationError()
            user = creds.user
            if not user.activated:
                raise InactiveAccountError()
            user_id, name, email, credentials_id = user.id, user.name, creds.email, creds.id

        return self._open_session(
            user_id=user_id,
            display_name=name,
            email=email,
            credentials_id=credentials_id,
            device=device,
        )

    def login_with_social_profile(
        self,
        profile: SocialProfileIn,
        device: DeviceInfo,
        *,
        create_account: bool = False,
    ) -> TokenPairOut:
        """
        Sign in with a profile a social provider has already verified.

        When no credentials exist for ``(email, provider)`` and
        ``create_account`` is set, a user and provider credentials are created
        first, unless another sign-in method already owns the email.

        :raises ValidationFailedError: If ``profile.provider`` is ``local``.
        :raises NotFoundError: If no account exists and ``create_account`` is false.
        :raises ConflictError: If the email belongs to another sign-in method.
        :raises InactiveAccountError: If the account is not activated.
        """
        if profile.provider == AuthProvider.LOCAL:
            raise ValidationFailedError("Social sign-in requires a social provider.")

        with self.rw_uow() as uow:
            creds = uow.credentials.get_by_email(profile.email, profile.provider)
            if creds is None:
                if not create_account:
                    raise NotFoundError("Account", profile.email)
                if uow.credentials.exists_by_email(profile.email):
                    raise ConflictError(
                        "Credentials", "email already registered with another sign-in method"
                    )
                display_name = profile.name.strip() or profile.email.split("@", 1)[0]
                user = uow.users.add(User(name=display_name, activated=True))
                creds = uow.credentials.add(
                    Credentials(user_id=user.id, email=profile.email, provider=profile.provider)
                )
                log.info(
                    "auth.social_account_created",
                    extra={"user_id": user.id, "reason": profile.provider.value},
                )
            user = creds.user
            if not user.activated:
                raise InactiveAccountError()
            user_id, name, email, credentials_id = user.id, user.name, creds.email, creds.id

        return self._open_session(
            user_id=user_id,
            display_name=name,
            email=email,
            credentials_id=credentials_id,
            device=device,
        )

    # ------------------------------------------------------------------ #
    # Session management
    # ------------------------------------------------------------------ #

    def logout(self, device_id: int) -> bool:
        """Delete the device record, revoking both of its tokens."""
        removed = self.registry.delete(device_id)
        log.info("auth.logout", extra={"device_id": device_id, "decision": str(removed)})
        return removed

    def list_devices(self, user_id: int) -> list[DeviceView]:
        return self.registry.list_for_user(user_id)

    def whoami(self, user_id: int) -> UserOut:
        """
        Return the public view of a user.

        :raises NotFoundError: If the user no longer exists.
        """
        with self.ro_uow() as uow:
            user = uow.users.get(user_id)
            if user is None:
                raise NotFoundError("User", user_id)
            creds = uow.credentials.primary_for_user(user.id)
            return UserOut(
                id=user.id,
                name=user.name,
                email=creds.email if creds is not None else None,
                activated=bool(user.activated),
            )

    # ------------------------------------------------------------------ #
    # Internals
    # ------------------------------------------------------------------ #

    def _issue_code(self, creds: Credentials, purpose: CodePurpose) -> SecurityCodeTicket:
        now = self.now_utc()
        if creds.security_code_quota_reached(now=now, limit=self.codes.daily_limit):
            raise TooManyRequestsError(
                f"At most {self.codes.daily_limit} security codes can be requested per day."
            )
        code = generate_security_code()
        creds.set_security_code(code, now=now, ttl=self.codes.ttl)
        return SecurityCodeTicket(
            purpose=purpose,
            credentials_id=creds.id,
            email=creds.email,
            name=creds.user.name,
            code=code,
            expires_at=now + self.codes.ttl,
        )

    def _deliver(self, ticket: SecurityCodeTicket) -> None:
        if self.delivery is not None:
            self.delivery.deliver(ticket)

    def _reset_code_accepted(self, creds: Credentials, code: str) -> bool:
        return (
            creds.is_local
            and bool(creds.user.activated)
            and creds.security_code_matches(code, now=self.now_utc())
        )

    def _open_session(
        self,
        *,
        user_id: int,
        display_name: str,
        email: str | None,
        credentials_id: int | None,
        device: DeviceInfo,
    ) -> TokenPairOut:
        view = self.registry.create_or_replace(
            name=device.name,
            signature=device.signature,
            user_id=user_id,
            credentials_id=credentials_id,
        )
        refresh = self.issuer.issue_refresh_token(
            device=DeviceInfo(name=view.name, signature=view.signature),
            device_id=view.device_id,
            user_id=user_id,
        )
        access = self.issuer.issue_access_token(
            user_id=user_id,
            display_name=display_name,
            email=email,
            device_id=view.device_id,
        )
        self.registry.update_tokens(view.device_id, access_token=access, refresh_token=refresh)
        log.info("auth.login", extra={"user_id": user_id, "device_id": view.device_id})
        return TokenPairOut(access_token=access, refresh_token=refresh, device_id=view.device_id)
