"""
Locust Load Test Suite

Run scenarios:
  locust -f locustfile.py --tags concurrency  # Test double booking
  locust -f locustfile.py --tags throughput   # Test catalog cache
  locust -f locustfile.py --tags edge         # Test bad input
  locust -f locustfile.py                     # All tests

Assumes courts, equipment and pricing rules are already seeded.
"""

import random
import string
from datetime import date, timedelta
from locust import HttpUser, task, between, tag, events

# Shared state
COURT_IDS = []
CONTESTED_DATE = (date.today() + timedelta(days=14)).isoformat()


def random_email():
    return f"load_{random.randint(10000, 99999)}@test.com"


def random_username():
    return "u_" + "".join(random.choices(string.ascii_lowercase, k=8))


def random_window():
    start = random.randint(6, 20)
    end = min(start + random.randint(1, 2), 22)
    return f"{start:02d}:00", f"{end:02d}:00"


@events.test_start.add_listener
def on_test_start(environment, **kwargs):
    print("\n" + "=" * 60)
    print(f"Contested date for concurrency test: {CONTESTED_DATE}")
    print("=" * 60)


class _AuthenticatedUser(HttpUser):
    abstract = True

    def on_start(self):
        email = random_email()
        self.client.post("/api/v1/auth/register", json={
            "email": email,
            "username": random_username(),
            "password": "loadtest123",
        })

        resp = self.client.post("/api/v1/auth/login", json={
            "email": email,
            "password": "loadtest123",
        })

        if resp.status_code == 200:
            self.headers = {"Authorization": f"Bearer {resp.json()['access_token']}"}
        else:
            self.headers = {}

        if not COURT_IDS:
            resp = self.client.get("/api/v1/courts")
            if resp.status_code == 200:
                COURT_IDS.extend(c["id"] for c in resp.json())


class ConcurrencyUser(_AuthenticatedUser):
    """
    TEST 1: Concurrency - everyone wants 18:00-19:00 on the same court

    Run: locust -f locustfile.py --tags concurrency -u 100 -r 50 --run-time 30s

    After test, verify no overlaps:
      SELECT court_id, booking_date, start_time, COUNT(*) FROM bookings
      WHERE status = 'confirmed' GROUP BY 1, 2, 3 HAVING COUNT(*) > 1;
    Should return no rows.
    """
    wait_time = between(0, 0.1)

    @tag("concurrency")
    @task
    def book_contested_slot(self):
        if not COURT_IDS or not self.headers:
            return

        with self.client.post("/api/v1/bookings/",
            json={
                "court_id": COURT_IDS[0],
                "booking_date": CONTESTED_DATE,
                "start_time": "18:00",
                "end_time": "19:00",
            },
            headers=self.headers,
            catch_response=True
        ) as resp:
            if resp.status_code in (201, 409):
                resp.success()  # 409: slot already taken
            else:
                resp.failure(f"Unexpected: {resp.status_code}")


class ThroughputUser(HttpUser):
    """
    TEST 2: Throughput - Cache effectiveness

    Run twice:
      1. With Redis: locust -f locustfile.py --tags throughput -u 100 -r 20 --run-time 60s
      2. Without Redis: REDIS_ENABLED=false, run again

    Compare avg response time, requests/sec and P95/P99 latency.
    """
    wait_time = between(0.1, 0.5)

    @tag("throughput", "read")
    @task(10)
    def list_courts_cached(self):
        self.client.get("/api/v1/courts", name="/api/v1/courts [cached]")

    @tag("throughput", "read")
    @task(5)
    def list_pricing_rules_cached(self):
        self.client.get("/api/v1/pricing-rules", name="/api/v1/pricing-rules [cached]")

    @tag("throughput", "read")
    @task(3)
    def slot_grid(self):
        """Live bookings, never cached."""
        if COURT_IDS:
            self.client.get(
                f"/api/v1/courts/{random.choice(COURT_IDS)}/slots?booking_date={CONTESTED_DATE}",
                name="/api/v1/courts/{id}/slots",
            )

    @tag("throughput")
    @task(1)
    def health_check(self):
        self.client.get("/health")


class EdgeCaseUser(_AuthenticatedUser):
    """
    TEST 3: Edge cases - Bad input handling

    Run: locust -f locustfile.py --tags edge -u 20 -r 5 --run-time 30s

    System should NOT crash, return proper error codes.
    """
    wait_time = between(0.5, 1.5)

    def _expect(self, expected, **kwargs):
        with self.client.post("/api/v1/bookings/", catch_response=True, **kwargs) as resp:
            if resp.status_code in expected:
                resp.success()
            else:
                resp.failure(f"Expected {expected}, got {resp.status_code}")

    @tag("edge")
    @task
    def invalid_court_id(self):
        self._expect((404,), headers=self.headers, json={
            "court_id": 999999,
            "booking_date": CONTESTED_DATE,
            "start_time": "10:00",
            "end_time": "11:00",
        })

    @tag("edge")
    @task
    def reversed_range(self):
        self._expect((422,), headers=self.headers, json={
            "court_id": COURT_IDS[0] if COURT_IDS else 1,
            "booking_date": CONTESTED_DATE,
            "start_time": "12:00",
            "end_time": "10:00",
        })

    @tag("edge")
    @task
    def past_date(self):
        self._expect((400, 404), headers=self.headers, json={
            "court_id": COURT_IDS[0] if COURT_IDS else 1,
            "booking_date": "2020-01-01",
            "start_time": "10:00",
            "end_time": "11:00",
        })

    @tag("edge")
    @task
    def zero_equipment(self):
        self._expect((422,), headers=self.headers, json={
            "court_id": COURT_IDS[0] if COURT_IDS else 1,
            "booking_date": CONTESTED_DATE,
            "start_time": "10:00",
            "end_time": "11:00",
            "equipment": [{"equipment_id": 1, "quantity": 0}],
        })

    @tag("edge")
    @task
    def malformed_json(self):
        self._expect((400, 422), headers=self.headers, data="not json at all")

    @tag("edge")
    @task
    def missing_auth(self):
        self._expect((401,), json={
            "court_id": 1,
            "booking_date": CONTESTED_DATE,
            "start_time": "10:00",
            "end_time": "11:00",
        })


class RealisticUser(_AuthenticatedUser):
    """
    TEST 4: Realistic mixed workload

    Run: locust -f locustfile.py -u 200 -r 20 --run-time 120s

    Mostly browsing slot grids and quotes, occasional bookings.
    """
    wait_time = between(1, 3)

    def _pick(self):
        booking_date = (date.today() + timedelta(days=random.randint(1, 30))).isoformat()
        start, end = random_window()
        return random.choice(COURT_IDS), booking_date, start, end

    @task(40)
    def browse_slots(self):
        if COURT_IDS:
            court_id, booking_date, _, _ = self._pick()
            self.client.get(
                f"/api/v1/courts/{court_id}/slots?booking_date={booking_date}",
                name="/api/v1/courts/{id}/slots",
            )

    @task(20)
    def quote(self):
        if COURT_IDS:
            court_id, booking_date, start, end = self._pick()
            self.client.post("/api/v1/quotes/", json={
                "court_id": court_id,
                "booking_date": booking_date,
                "start_time": start,
                "end_time": end,
            })

    @task(10)
    def book_court(self):
        if COURT_IDS and self.headers:
            court_id, booking_date, start, end = self._pick()
            with self.client.post("/api/v1/bookings/",
                json={
                    "court_id": court_id,
                    "booking_date": booking_date,
                    "start_time": start,
                    "end_time": end,
                },
                headers=self.headers,
                catch_response=True
            ) as resp:
                if resp.status_code in (201, 409):
                    resp.success()
                else:
                    resp.failure(f"Unexpected: {resp.status_code}")

    @task(3)
    def my_bookings(self):
        if self.headers:
            self.client.get("/api/v1/bookings/", headers=self.headers)
