from datetime import datetime, timezone
from typing import Any, Mapping, Optional, Tuple, Type

from starlette.concurrency import run_in_threadpool

from app.adapters.path_cache import path_cache
from app.config import settings
from app.repositories.invoice_repo import InvoiceRepository, PersistenceError
from app.schemas.action_state import ActionResult, ActionState, Redirect
from app.schemas.invoice_schema import (
    CreateInvoice,
    InvoiceFields,
    InvoiceValidationError,
    UpdateInvoice,
    parse,
    safe_parse,
    to_cents,
)
from app.utils.logs import get_logger

log = get_logger("invoices", "INVOICES")

LENIENT = "lenient"
STRICT = "strict"


class InvoiceActions:
    """
    Form actions for the invoices dashboard: validate -> persist -> invalidate -> respond.

    The repository and cache are injected so tests can swap in fakes. Each action
    returns either an ActionState for the form to re-render or a Redirect.
    """

    def __init__(
        self,
        repo: InvoiceRepository,
        cache=None,
        validation_mode: Optional[str] = None,
    ):
        self.repo = repo
        self.cache = cache if cache is not None else path_cache
        self.validation_mode = validation_mode or settings.VALIDATION_MODE
        if self.validation_mode not in (LENIENT, STRICT):
            raise ValueError(f"Unknown validation mode: {self.validation_mode}")

    def _today(self) -> str:
        return datetime.now(timezone.utc).date().isoformat()

    def _validate(
        self, schema: Type[InvoiceFields], form_data: Mapping[str, Any], verb: str
    ) -> Tuple[Optional[InvoiceFields], Optional[ActionState]]:
        if self.validation_mode == STRICT:
            try:
                return parse(schema, form_data), None
            except InvoiceValidationError as e:
                log.warning(f"{verb} rejected: {e.field_errors}")
                return None, ActionState(message=f"Failed to {verb} the invoice")

        data, errors = safe_parse(schema, form_data)
        if errors:
            return None, ActionState(
                errors=errors, message=f"Missing fields. Failed to {verb} the invoice."
            )
        return data, None

    def _done(self) -> Redirect:
        self.cache.revalidate_path(settings.INVOICES_PATH)
        return Redirect(path=settings.INVOICES_PATH)

    async def create_invoice(self, prev_state: Any, form_data: Mapping[str, Any]) -> ActionResult:
        data, state = self._validate(CreateInvoice, form_data, "create")
        if state:
            return state

        amount_cents = to_cents(data.amount)
        try:
            await run_in_threadpool(
                self.repo.insert_invoice,
                data.customer_id,
                amount_cents,
                data.status.value,
                self._today(),
            )
        except PersistenceError:
            log.exception("insert failed")
            return ActionState(message="Failed to create the invoice")

        return self._done()

    async def update_invoice(
        self, invoice_id: str, prev_state: Any, form_data: Mapping[str, Any]
    ) -> ActionResult:
        data, state = self._validate(UpdateInvoice, form_data, "update")
        if state:
            return state

        try:
            # date is fixed at creation and never rewritten
            await run_in_threadpool(
                self.repo.update_invoice,
                invoice_id,
                data.customer_id,
                to_cents(data.amount),
                data.status.value,
            )
        except PersistenceError:
            log.exception(f"update failed for invoice {invoice_id}")
            return ActionState(message="Failed to update the invoice")

        return self._done()

    async def delete_invoice(self, invoice_id: str) -> ActionState:
        try:
            await run_in_threadpool(self.repo.delete_invoice, invoice_id)
        except PersistenceError:
            log.exception(f"delete failed for invoice {invoice_id}")
            return ActionState(message="Failed to delete the invoice")

        self.cache.revalidate_path(settings.INVOICES_PATH)
        return ActionState(message="Deleted Invoice")
