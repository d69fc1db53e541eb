#!/usr/bin/env python3
"""
Seed a demo user, customers and invoices so the dashboard has something to show.
Safe to run repeatedly: the user is upserted by email, customers by email, and
invoices are only added when the table is empty.

Usage:
    python scripts/seed_dashboard.py --email user@nextmail.com --password 123456
"""
import argparse
import os
import sys

# allow running from repo/scripts
sys.path.append(os.path.abspath(os.path.join(os.path.dirname(__file__), "..")))

from sqlalchemy import select

from app.db import SessionLocal, init_db
from app.models.customer import Customer
from app.models.invoice import Invoice
from app.repositories.customer_repo import CustomerRepository
from app.repositories.user_repo import UserRepository
from app.utils.security import get_password_hash

CUSTOMERS = [
    {"name": "Evil Rabbit", "email": "evil@rabbit.com", "image_url": "/customers/evil-rabbit.png"},
    {"name": "Delba de Oliveira", "email": "delba@oliveira.com", "image_url": "/customers/delba-de-oliveira.png"},
    {"name": "Lee Robinson", "email": "lee@robinson.com", "image_url": "/customers/lee-robinson.png"},
    {"name": "Michael Novotny", "email": "michael@novotny.com", "image_url": "/customers/michael-novotny.png"},
]

# (customer email, amount in cents, status, date)
INVOICES = [
    ("evil@rabbit.com", 15795, "pending", "2022-12-06"),
    ("delba@oliveira.com", 20348, "pending", "2022-11-14"),
    ("lee@robinson.com", 3040, "paid", "2022-10-29"),
    ("michael@novotny.com", 44800, "paid", "2023-09-10"),
    ("evil@rabbit.com", 34577, "pending", "2023-08-05"),
    ("delba@oliveira.com", 54246, "pending", "2023-07-16"),
    ("lee@robinson.com", 666, "pending", "2023-06-27"),
    ("michael@novotny.com", 32545, "paid", "2023-06-09"),
]


def seed(email: str, password: str, name: str = "User"):
    init_db()
    db = SessionLocal()
    try:
        UserRepository(db).create_or_update(name=name, email=email, password_hash=get_password_hash(password))

        customer_repo = CustomerRepository(db)
        by_email = {}
        for ent in CUSTOMERS:
            c = db.execute(select(Customer).where(Customer.email == ent["email"])).scalars().first()
            if not c:
                c = customer_repo.create(**ent)
            by_email[c.email] = c

        created = 0
        if not db.execute(select(Invoice.id).limit(1)).first():
            for cust_email, amount, status, date in INVOICES:
                db.add(Invoice(customer_id=by_email[cust_email].id, amount=amount, status=status, date=date))
                created += 1

        db.commit()
        print(f"Seeded user {email}, {len(by_email)} customers, {created} invoices")
    except Exception:
        db.rollback()
        raise
    finally:
        db.close()


if __name__ == "__main__":
    parser = argparse.ArgumentParser()
    parser.add_argument("--email", default="user@nextmail.com")
    parser.add_argument("--password", default="123456")
    parser.add_argument("--name", default="User")
    args = parser.parse_args()
    seed(args.email, args.password, args.name)
