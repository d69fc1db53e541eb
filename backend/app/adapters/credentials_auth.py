from typing import Any, Callable, Dict, Mapping, Optional

from pydantic import BaseModel, Field, ValidationError
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool

from app.db import SessionLocal
from app.repositories.user_repo import UserRepository
from app.utils.logs import get_logger
from app.utils.security import verify_password

log = get_logger("auth", "AUTH")

# failure kinds carried on AuthError.type
CREDENTIALS_SIGNIN = "CredentialsSignin"
CALLBACK_ROUTE_ERROR = "CallbackRouteError"
CONFIGURATION = "Configuration"


class AuthError(Exception):
    """Authentication-framework failure, discriminated by `type`."""

    def __init__(self, type: str, message: Optional[str] = None):
        self.type = type
        super().__init__(message or type)


class Credentials(BaseModel):
    email: str = Field(..., pattern=r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
    password: str = Field(..., min_length=6)


class CredentialsProvider:
    """
    Email/password provider. authorize() returns the public user fields, or None
    when the credentials are malformed, unknown, or the password doesn't match.
    """

    id = "credentials"

    def __init__(self, session_factory: Callable[[], Session] = SessionLocal):
        self.session_factory = session_factory

    def authorize(self, form_data: Mapping[str, Any]) -> Optional[Dict[str, str]]:
        try:
            creds = Credentials.model_validate(dict(form_data))
        except ValidationError:
            return None
        with self.session_factory() as db:
            user = UserRepository(db).get_by_email(creds.email)
            if not user or not verify_password(creds.password, user.password):
                return None
            return {"id": user.id, "name": user.name, "email": user.email}


_providers: Dict[str, Any] = {CredentialsProvider.id: CredentialsProvider()}


async def sign_in(provider: str, form_data: Mapping[str, Any]) -> Dict[str, str]:
    """
    Verify credentials with the named provider and return the signed-in user.

    Raises AuthError(CONFIGURATION) for an unknown provider,
    AuthError(CREDENTIALS_SIGNIN) when the provider rejects the credentials,
    and AuthError(CALLBACK_ROUTE_ERROR) when the provider itself blows up.
    """
    p = _providers.get(provider)
    if p is None:
        raise AuthError(CONFIGURATION, f"Unknown provider: {provider}")
    try:
        user = await run_in_threadpool(p.authorize, form_data)
    except Exception as e:
        log.exception("provider %s failed during authorize", provider)
        raise AuthError(CALLBACK_ROUTE_ERROR, "Provider error") from e
    if not user:
        raise AuthError(CREDENTIALS_SIGNIN, "Invalid credentials")
    log.info("signed in user id=%s via %s", user["id"], provider)
    return user
