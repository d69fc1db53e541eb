# backend/app/schemas/invoice_schema.py
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Dict, List, Mapping, Optional, Tuple, Type, TypeVar

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic_core import PydanticCustomError

from app.models.invoice import InvoiceStatus

CUSTOMER_REQUIRED = "Select a customer"
AMOUNT_GT_ZERO = "Enter an amount greater than 0"
STATUS_REQUIRED = "Select an invoice status"

# amounts are stored as cents in a 32-bit integer column
MAX_AMOUNT_CENTS = 2_147_483_647
AMOUNT_TOO_LARGE = "Enter an amount no greater than 21474836.47"


def to_cents(amount: Decimal) -> int:
    return int((amount * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


class InvoiceFields(BaseModel):
    """
    Fields a user may submit for an invoice. Values arrive as strings from a form;
    `amount` is coerced to a Decimal and `status` to InvoiceStatus.
    Missing fields are validated too (validate_default) so each one reports its own message.
    """

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    customer_id: str = Field(None, alias="customerId", validate_default=True)
    amount: Decimal = Field(None, validate_default=True)
    status: InvoiceStatus = Field(None, validate_default=True)

    @field_validator("customer_id", mode="before")
    @classmethod
    def _customer_required(cls, v):
        if not isinstance(v, str) or not v.strip():
            raise PydanticCustomError("customer_required", CUSTOMER_REQUIRED)
        return v

    @field_validator("amount", mode="before")
    @classmethod
    def _amount_positive(cls, v):
        try:
            amount = Decimal(str(v).strip()) if v is not None else None
        except (InvalidOperation, ValueError):
            amount = None
        if amount is None or not amount.is_finite() or amount <= 0:
            raise PydanticCustomError("amount_gt_zero", AMOUNT_GT_ZERO)
        # compare before rounding so huge exponents never reach quantize
        if amount * 100 > MAX_AMOUNT_CENTS:
            raise PydanticCustomError("amount_too_large", AMOUNT_TOO_LARGE)
        # sub-cent amounts round to 0 cents
        if to_cents(amount) <= 0:
            raise PydanticCustomError("amount_gt_zero", AMOUNT_GT_ZERO)
        return amount

    @field_validator("status", mode="before")
    @classmethod
    def _status_known(cls, v):
        if v not in [s.value for s in InvoiceStatus]:
            raise PydanticCustomError("status_required", STATUS_REQUIRED)
        return v


class InvoiceForm(InvoiceFields):
    """Full shape of an invoice record; id and date are never taken from user input."""

    id: str
    date: str


class CreateInvoice(InvoiceFields):
    pass


class UpdateInvoice(InvoiceFields):
    pass


class InvoiceValidationError(Exception):
    """Raised by strict parsing; carries the same per-field messages safe parsing returns."""

    def __init__(self, field_errors: Dict[str, List[str]]):
        self.field_errors = field_errors
        super().__init__(f"Invalid invoice fields: {sorted(field_errors)}")


S = TypeVar("S", bound=InvoiceFields)


def _field_errors(exc: ValidationError) -> Dict[str, List[str]]:
    errors: Dict[str, List[str]] = {}
    for err in exc.errors():
        field = str(err["loc"][0]) if err["loc"] else "_"
        errors.setdefault(field, []).append(err["msg"])
    return errors


def safe_parse(
    schema: Type[S], form_data: Mapping[str, str]
) -> Tuple[Optional[S], Optional[Dict[str, List[str]]]]:
    """Return (record, None) on success or (None, field_errors) on failure. Never raises."""
    try:
        return schema.model_validate(dict(form_data)), None
    except ValidationError as e:
        return None, _field_errors(e)


def parse(schema: Type[S], form_data: Mapping[str, str]) -> S:
    try:
        return schema.model_validate(dict(form_data))
    except ValidationError as e:
        raise InvoiceValidationError(_field_errors(e)) from e


class InvoiceRow(BaseModel):
    """Invoice joined with its customer, as the list page shows it."""

    model_config = ConfigDict(from_attributes=True)
    id: str
    customer_id: str
    name: str
    email: str
    image_url: Optional[str] = None
    amount: int
    date: str
    status: str


class InvoiceEdit(BaseModel):
    """Invoice as the edit form needs it; amount is in currency units, not cents."""

    id: str
    customer_id: str
    amount: Decimal
    status: str


class CustomerField(BaseModel):
    model_config = ConfigDict(from_attributes=True)
    id: str
    name: str
