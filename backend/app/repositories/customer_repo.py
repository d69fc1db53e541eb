from typing import List

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.models.customer import Customer
from app.repositories.invoice_repo import PersistenceError
from app.schemas.invoice_schema import CustomerField


class CustomerRepository:
    def __init__(self, db: Session):
        self.db = db

    def fetch_customers(self) -> List[CustomerField]:
        try:
            rows = self.db.execute(select(Customer).order_by(Customer.name)).scalars().all()
        except SQLAlchemyError as e:
            raise PersistenceError(str(e)) from e
        return [CustomerField.model_validate(c) for c in rows]

    def create(self, name: str, email: str, image_url: str = None) -> Customer:
        c = Customer(name=name, email=email, image_url=image_url)
        self.db.add(c)
        self.db.flush()
        return c
