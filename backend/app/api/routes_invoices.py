from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query, Request
from fastapi.responses import JSONResponse, RedirectResponse
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool

from app.adapters.path_cache import PathCache, path_cache
from app.config import settings
from app.db import get_db
from app.repositories.customer_repo import CustomerRepository
from app.repositories.invoice_repo import InvoiceRepository, PersistenceError
from app.schemas.action_state import ActionResult, Redirect
from app.services.invoice_actions import InvoiceActions

router = APIRouter(prefix="/dashboard", tags=["invoices"])


def get_path_cache() -> PathCache:
    return path_cache


def get_invoice_actions(
    db: Session = Depends(get_db), cache: PathCache = Depends(get_path_cache)
) -> InvoiceActions:
    return InvoiceActions(InvoiceRepository(db), cache=cache)


def _to_response(result: ActionResult, status_code: int = 400):
    if isinstance(result, Redirect):
        return RedirectResponse(result.path, status_code=303)
    return JSONResponse(result.model_dump(exclude_none=True), status_code=status_code)


@router.get("/invoices", summary="List invoices")
async def list_invoices(
    query: Optional[str] = Query(None, description="search term"),
    page: int = Query(1, ge=1),
    db: Session = Depends(get_db),
    cache: PathCache = Depends(get_path_cache),
):
    repo = InvoiceRepository(db)

    def _render():
        return {
            "invoices": [r.model_dump() for r in repo.fetch_filtered_invoices(query, page)],
            "total_pages": repo.fetch_invoices_pages(query),
        }

    try:
        return await run_in_threadpool(
            cache.get_or_render, settings.INVOICES_PATH, _render, (query or "", page)
        )
    except PersistenceError:
        raise HTTPException(status_code=500, detail="Failed to fetch invoices")


@router.post("/invoices/create", summary="Create invoice from form")
async def create_invoice(request: Request, actions: InvoiceActions = Depends(get_invoice_actions)):
    form = await request.form()
    result = await actions.create_invoice(None, form)
    return _to_response(result)


@router.get("/invoices/{invoice_id}", summary="Get invoice for the edit form")
async def get_invoice(invoice_id: str, db: Session = Depends(get_db)):
    repo = InvoiceRepository(db)
    try:
        inv = await run_in_threadpool(repo.fetch_invoice_by_id, invoice_id)
    except PersistenceError:
        raise HTTPException(status_code=500, detail="Failed to fetch invoice")
    if not inv:
        raise HTTPException(status_code=404, detail="Invoice not found")
    return inv.model_dump(mode="json")


@router.post("/invoices/{invoice_id}/edit", summary="Update invoice from form")
async def update_invoice(
    invoice_id: str, request: Request, actions: InvoiceActions = Depends(get_invoice_actions)
):
    form = await request.form()
    result = await actions.update_invoice(invoice_id, None, form)
    return _to_response(result)


@router.post("/invoices/{invoice_id}/delete", summary="Delete invoice")
async def delete_invoice(invoice_id: str, actions: InvoiceActions = Depends(get_invoice_actions)):
    # no redirect: callers stay on the list and re-fetch it
    result = await actions.delete_invoice(invoice_id)
    return result.model_dump(exclude_none=True)


@router.get("/customers", summary="Customers for the invoice form selector")
async def list_customers(db: Session = Depends(get_db)):
    repo = CustomerRepository(db)
    try:
        customers = await run_in_threadpool(repo.fetch_customers)
    except PersistenceError:
        raise HTTPException(status_code=500, detail="Failed to fetch customers")
    return [c.model_dump() for c in customers]
