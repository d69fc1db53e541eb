from typing import Dict, List, Optional, Union

from pydantic import BaseModel


class ActionState(BaseModel):
    """What a form action hands back for the form to re-render."""

    message: Optional[str] = None
    errors: Optional[Dict[str, List[str]]] = None


class Redirect(BaseModel):
    """Navigate to `path`; the caller decides how (HTTP 303, client router, ...)."""

    path: str


ActionResult = Union[ActionState, Redirect]
