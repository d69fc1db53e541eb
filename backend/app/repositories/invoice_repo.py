import math
from decimal import Decimal
from typing import List, Optional
from uuid import uuid4

from sqlalchemy import String, cast, delete, func, insert, or_, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.config import settings
from app.models.customer import Customer
from app.models.invoice import Invoice
from app.schemas.invoice_schema import InvoiceEdit, InvoiceRow
from app.utils.logs import get_logger

log = get_logger("invoices.repo", "INVOICE-REPO")


class PersistenceError(Exception):
    """A driver-level fault (constraint, connection, timeout) while talking to the database."""
    pass


class InvoiceRepository:
    """
    Gateway over the invoices table. Each write is exactly one parameterized
    statement committed on its own; nothing is batched or retried.
    """

    def __init__(self, db: Session):
        self.db = db

    def _write(self, stmt):
        try:
            result = self.db.execute(stmt)
            self.db.commit()
            return result
        except (SQLAlchemyError, OverflowError) as e:
            # OverflowError: the driver rejected a bound integer too wide for the column
            self.db.rollback()
            raise PersistenceError(str(e)) from e

    def insert_invoice(self, customer_id: str, amount_cents: int, status: str, date: str) -> str:
        invoice_id = str(uuid4())
        stmt = insert(Invoice).values(
            id=invoice_id, customer_id=customer_id, amount=amount_cents, status=status, date=date
        )
        self._write(stmt)
        log.debug(f"insert_invoice(): id={invoice_id} amount={amount_cents}")
        return invoice_id

    def update_invoice(self, invoice_id: str, customer_id: str, amount_cents: int, status: str) -> None:
        # no rowcount check: updating a missing id is a silent no-op
        stmt = (
            update(Invoice)
            .where(Invoice.id == invoice_id)
            .values(customer_id=customer_id, amount=amount_cents, status=status)
        )
        self._write(stmt)

    def delete_invoice(self, invoice_id: str) -> None:
        self._write(delete(Invoice).where(Invoice.id == invoice_id))

    # --- read side (list + edit pages) ---

    def _search(self, query: Optional[str]):
        stmt = select(
            Invoice.id,
            Invoice.customer_id,
            Customer.name,
            Customer.email,
            Customer.image_url,
            Invoice.amount,
            Invoice.date,
            Invoice.status,
        ).join(Customer, Invoice.customer_id == Customer.id)
        if query:
            like = f"%{query}%"
            stmt = stmt.where(
                or_(
                    Customer.name.ilike(like),
                    Customer.email.ilike(like),
                    cast(Invoice.amount, String).ilike(like),
                    Invoice.date.ilike(like),
                    Invoice.status.ilike(like),
                )
            )
        return stmt

    def fetch_filtered_invoices(self, query: Optional[str] = None, page: int = 1) -> List[InvoiceRow]:
        size = settings.ITEMS_PER_PAGE
        stmt = (
            self._search(query)
            .order_by(Invoice.date.desc(), Invoice.id)
            .offset((page - 1) * size)
            .limit(size)
        )
        try:
            rows = self.db.execute(stmt).all()
        except SQLAlchemyError as e:
            raise PersistenceError(str(e)) from e
        return [InvoiceRow.model_validate(dict(r._mapping)) for r in rows]

    def fetch_invoices_pages(self, query: Optional[str] = None) -> int:
        stmt = select(func.count()).select_from(self._search(query).subquery())
        try:
            total = self.db.execute(stmt).scalar() or 0
        except SQLAlchemyError as e:
            raise PersistenceError(str(e)) from e
        return math.ceil(total / settings.ITEMS_PER_PAGE)

    def fetch_invoice_by_id(self, invoice_id: str) -> Optional[InvoiceEdit]:
        try:
            inv = self.db.get(Invoice, invoice_id)
        except SQLAlchemyError as e:
            raise PersistenceError(str(e)) from e
        if not inv:
            return None
        return InvoiceEdit(
            id=inv.id,
            customer_id=inv.customer_id,
            amount=Decimal(inv.amount) / 100,
            status=inv.status,
        )
