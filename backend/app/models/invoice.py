import enum
from uuid import uuid4

from app.db import Base
from sqlalchemy import Column, ForeignKey, Integer, String
from sqlalchemy.orm import relationship

from app.models.customer import Customer  # noqa: F401


class InvoiceStatus(str, enum.Enum):
    PENDING = "pending"
    PAID = "paid"


class Invoice(Base):
    __tablename__ = "invoices"
    id = Column(String(36), primary_key=True, default=lambda: str(uuid4()))
    customer_id = Column(
        String(36),
        ForeignKey("customers.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    amount = Column(Integer, nullable=False)  # cents
    status = Column(String(16), nullable=False)  # pending, paid
    date = Column(String(10), nullable=False)  # YYYY-MM-DD

    customer = relationship("Customer", back_populates="invoices")

    def __repr__(self):
        return f"<Invoice id={self.id} customer_id={self.customer_id} amount={self.amount} status={self.status}>"
