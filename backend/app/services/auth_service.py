from typing import Any, Awaitable, Callable, Mapping, Optional, Union

from app.adapters import credentials_auth
from app.adapters.credentials_auth import CREDENTIALS_SIGNIN, AuthError
from app.config import settings
from app.schemas.action_state import Redirect
from app.utils.logs import get_logger

log = get_logger("auth.action", "AUTH")

SignIn = Callable[[str, Mapping[str, Any]], Awaitable[Any]]


async def authenticate(
    prev_state: Optional[str],
    form_data: Mapping[str, Any],
    sign_in: Optional[SignIn] = None,
) -> Union[str, Redirect]:
    """
    Sign in with the credentials provider, passing the form through untouched.

    Known AuthError kinds become a message for the login form. Anything that
    isn't an AuthError is re-raised for the outer error handler.
    """
    sign_in = sign_in or credentials_auth.sign_in
    try:
        await sign_in("credentials", form_data)
    except AuthError as e:
        log.warning(f"sign-in failed: type={e.type} error={e}")
        if e.type == CREDENTIALS_SIGNIN:
            return "Invalid credentials."
        return "Something went wrong."

    return Redirect(path=settings.LOGIN_REDIRECT_PATH)
