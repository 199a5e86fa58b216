"""
CementOps Load Test — Locust Script
====================================
Simulates depot dispatchers booking orders during the morning loading rush,
plus a handful of managers watching the control tower.

Usage:
    CUSTOMER_ID=<uuid> DEPOT_ID=<uuid> \
    locust -f locust_tests/locustfile.py --host=http://localhost:8000 \
           --users=300 --spawn-rate=30 --run-time=5m --headless

Seed one customer with a generous credit limit and one depot first, then
export their IDs. Dispatcher and manager accounts are created on the fly.
"""

import os
import random
import uuid
from locust import HttpUser, task, between, events
from locust.exception import StopUser

CUSTOMER_ID = os.environ.get("CUSTOMER_ID", "")
DEPOT_ID    = os.environ.get("DEPOT_ID", "")

CEMENT_TYPES = ["Dangote 42.5R", "BUA 42.5", "Lafarge Supaset", "Dangote 32.5"]
MANAGER_PHONE    = os.environ.get("MANAGER_PHONE", "+2348000000002")
MANAGER_PASSWORD = os.environ.get("MANAGER_PASSWORD", "Test@1234")


class Dispatcher(HttpUser):
    """
    A depot dispatcher: books orders, checks the board, looks for free trucks.
    Tasks weighted to match a loading-bay shift.
    """
    wait_time = between(0.5, 2.0)
    token     = None
    phone     = None

    def on_start(self):
        """Register and log in at the start of each simulated session."""
        self.phone = "+234" + str(random.randint(7000000000, 9099999999))
        self._order_ids = []
        self.client.post(
            "/api/auth/register/",
            json={
                "phone":     self.phone,
                "full_name": f"Dispatcher {uuid.uuid4().hex[:6]}",
                "password":  "Loading@2024",
            },
            name="/api/auth/register/",
        )
        resp = self.client.post(
            "/api/auth/login/",
            json={"phone": self.phone, "password": "Loading@2024"},
            name="/api/auth/login/",
        )
        if resp.status_code == 200:
            self.token = resp.json().get("access")
        else:
            raise StopUser()

    def _headers(self):
        return {"Authorization": f"Bearer {self.token}"} if self.token else {}

    # ── Tasks (weighted) ──────────────────────────────────────────────────────

    @task(5)
    def create_order(self):
        """Most common action: a customer rings in and the dispatcher books it."""
        if not (CUSTOMER_ID and DEPOT_ID):
            return
        resp = self.client.post(
            "/api/orders/",
            json={
                "order_type":        "depot_dispatch",
                "customer":          CUSTOMER_ID,
                "depot":             DEPOT_ID,
                "cement_type":       random.choice(CEMENT_TYPES),
                "quantity":          str(random.choice([300, 600, 900])),
                "unit":              "bags",
                "cement_sale_price": str(random.randint(5200, 6100)),
                "delivery_address":  "Site office, Kano",
            },
            headers=self._headers(),
            name="/api/orders/",
        )
        if resp.status_code == 201:
            self._order_ids.append(resp.json().get("id"))

    @task(4)
    def list_orders(self):
        """Board refresh, filtered the way the dispatch screen does it."""
        self.client.get(
            "/api/orders/",
            params={"status": random.choice(["requested", "dispatched", "delivered"])},
            headers=self._headers(),
            name="/api/orders/?status",
        )

    @task(3)
    def order_metrics(self):
        self.client.get("/api/orders/metrics/", headers=self._headers(), name="/api/orders/metrics/")

    @task(2)
    def available_units(self):
        """Dispatcher looks for a free truck before loading."""
        self.client.get("/api/fleet/available/", headers=self._headers(), name="/api/fleet/available/")

    @task(2)
    def order_detail(self):
        if not self._order_ids:
            return
        order_id = random.choice(self._order_ids)
        self.client.get(f"/api/orders/{order_id}/", headers=self._headers(), name="/api/orders/[id]/")

    @task(1)
    def health_check(self):
        """Simulates monitoring pings; the probe must stay fast under load."""
        self.client.get("/api/health/deep/", name="/api/health/deep/")


class ControlTowerManager(HttpUser):
    """
    Managers on the control tower (fewer, but heavier report queries).
    """
    wait_time = between(2, 5)
    token     = None
    weight    = 1   # roughly 1 manager per 10 dispatchers

    def on_start(self):
        resp = self.client.post(
            "/api/auth/login/",
            json={"phone": MANAGER_PHONE, "password": MANAGER_PASSWORD},
        )
        if resp.status_code == 200:
            self.token = resp.json().get("access")
        else:
            raise StopUser()

    def _h(self):
        return {"Authorization": f"Bearer {self.token}"}

    @task(3)
    def dashboard(self):
        self.client.get("/api/admin/dashboard/summary/", headers=self._h(), name="/api/admin/dashboard/")

    @task(2)
    def dual_stream(self):
        self.client.get("/api/analytics/dual-stream/", headers=self._h(), name="/api/analytics/dual-stream/")

    @task(1)
    def customer_aging(self):
        self.client.get("/api/analytics/customers/aging/", headers=self._h(), name="/api/analytics/aging/")

    @task(1)
    def fleet_status(self):
        self.client.get("/api/analytics/fleet/status/", headers=self._h(), name="/api/analytics/fleet/")


# ── Run summary; non-zero exit when the order API misbehaves ──────────────────
FAILURE_BUDGET = 0.01
P95_BUDGET_MS  = 800


@events.test_stop.add_listener
def on_test_stop(environment, **kwargs):
    total = environment.stats.total
    failure_ratio = total.num_failures / max(total.num_requests, 1)
    p95 = total.get_response_time_percentile(0.95) or 0

    print("\n=== CementOps order API under load ===")
    print(f"{'requests':<14}{total.num_requests}")
    print(f"{'failure rate':<14}{failure_ratio:.2%}")
    print(f"{'median / p95':<14}{total.median_response_time:.0f}ms / {p95:.0f}ms")
    for name, method in (("/api/orders/", "POST"), ("/api/orders/?status", "GET"), ("/api/fleet/available/", "GET")):
        entry = environment.stats.entries.get((name, method))
        if entry:
            print(f"  {name:<28}{entry.avg_response_time:.0f}ms avg over {entry.num_requests}")

    if failure_ratio > FAILURE_BUDGET or p95 > P95_BUDGET_MS:
        print("Dispatch board would lag at this load")
        environment.process_exit_code = 1
