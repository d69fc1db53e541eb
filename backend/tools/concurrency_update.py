import argparse
import concurrent.futures
import os

import requests

BASE = os.environ.get("DASHBOARD_BASE", "http://127.0.0.1:8000")


def update_task(i, invoice_id, customer_id, amount, status):
    form = {"customerId": customer_id, "amount": amount, "status": status}
    try:
        r = requests.post(
            f"{BASE}/dashboard/invoices/{invoice_id}/edit",
            data=form,
            allow_redirects=False,
            timeout=10,
        )
        return (i, "update", r.status_code, amount)
    except Exception as e:
        return (i, "update", "ERR", str(e))


def delete_task(i, invoice_id):
    try:
        r = requests.post(f"{BASE}/dashboard/invoices/{invoice_id}/delete", timeout=10)
        return (i, "delete", r.status_code, r.text)
    except Exception as e:
        return (i, "delete", "ERR", str(e))


def run_update_concurrent(workers, invoice_id, customer_id, status):
    """Fire `workers` updates at one invoice; whichever statement lands last wins."""
    print(f"Running update test: workers={workers}, invoice={invoice_id}")
    with concurrent.futures.ThreadPoolExecutor(max_workers=workers) as ex:
        futures = [
            ex.submit(update_task, i, invoice_id, customer_id, f"{i + 1}.00", status)
            for i in range(workers)
        ]
        results = [f.result() for f in futures]
    for r in results:
        print(r)
    r = requests.get(f"{BASE}/dashboard/invoices/{invoice_id}", timeout=10)
    print("Final state:", r.status_code, r.text)


def run_mixed_concurrent(workers, invoice_id, customer_id, status):
    print(f"Running update/delete test: workers={workers}, invoice={invoice_id}")
    with concurrent.futures.ThreadPoolExecutor(max_workers=workers) as ex:
        futures = []
        for i in range(workers):
            if i % 2:
                futures.append(ex.submit(delete_task, i, invoice_id))
            else:
                futures.append(ex.submit(update_task, i, invoice_id, customer_id, f"{i + 1}.00", status))
        for f in futures:
            print(f.result())


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Concurrent update/delete against one invoice.")
    sub = parser.add_subparsers(dest="mode", required=True)

    for name in ("update", "mixed"):
        p = sub.add_parser(name)
        p.add_argument("--invoice", required=True)
        p.add_argument("--customer", required=True)
        p.add_argument("--status", default="pending")
        p.add_argument("--workers", type=int, default=8)

    args = parser.parse_args()

    if args.mode == "update":
        run_update_concurrent(args.workers, args.invoice, args.customer, args.status)
    elif args.mode == "mixed":
        run_mixed_concurrent(args.workers, args.invoice, args.customer, args.status)
