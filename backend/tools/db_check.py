import sqlite3
import sys

DB = sys.argv[1] if len(sys.argv) > 1 else "dev.db"
INVOICE_ID = sys.argv[2] if len(sys.argv) > 2 else None

conn = sqlite3.connect(DB)
cur = conn.cursor()

print("=== Invoices ===")
if INVOICE_ID:
    cur.execute(
        "SELECT i.id, c.name, i.amount, i.status, i.date FROM invoices i JOIN customers c ON c.id = i.customer_id WHERE i.id=?",
        (INVOICE_ID,),
    )
else:
    cur.execute(
        "SELECT i.id, c.name, i.amount, i.status, i.date FROM invoices i JOIN customers c ON c.id = i.customer_id ORDER BY i.date DESC LIMIT 20"
    )
for r in cur.fetchall():
    print(
        {
            "id": r[0],
            "customer": r[1],
            "amount": f"{r[2] / 100:.2f}",
            "status": r[3],
            "date": r[4],
        }
    )

print("\n=== Customers ===")
cur.execute("SELECT id, name, email FROM customers ORDER BY name")
for r in cur.fetchall():
    print(r)

print("\n=== Users ===")
cur.execute("SELECT id, name, email FROM users ORDER BY email")
for r in cur.fetchall():
    print(r)

conn.close()
