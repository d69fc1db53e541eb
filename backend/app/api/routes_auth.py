from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse, RedirectResponse

from app.schemas.action_state import Redirect
from app.services.auth_service import authenticate

router = APIRouter(tags=["auth"])


@router.post("/login", summary="Sign in with email and password")
async def login(request: Request):
    form = await request.form()
    result = await authenticate(None, form)
    if isinstance(result, Redirect):
        return RedirectResponse(result.path, status_code=303)
    return JSONResponse({"message": result}, status_code=401)
