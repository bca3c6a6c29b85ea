"""
Locust Load Test Suite

Run scenarios:
  locust -f locustfile.py --tags concurrency  # Many attendees, few slots
  locust -f locustfile.py --tags throughput   # Public event reads
  locust -f locustfile.py --tags edge         # Bad input
  locust -f locustfile.py                     # All tests
"""

import random
import string
import uuid
from locust import HttpUser, task, between, tag, events
from datetime import datetime, timezone, timedelta

PASSWORD = "LoadTest1!"

# Shared state
EVENT_IDS = []
CONCURRENCY_EVENT_ID = None


def random_username():
    return "load" + "".join(random.choices(string.ascii_lowercase + string.digits, k=8))


def random_attendee(event_id):
    token = uuid.uuid4().hex[:12]
    return {
        "firstName": "Load",
        "lastName": token,
        "email": f"{token}@load.test",
        "phone": f"+1{random.randint(10**9, 10**10 - 1)}",
        "company": "Locust",
        "eventId": event_id,
    }


def future_date(days):
    return (datetime.now(timezone.utc) + timedelta(days=days)).isoformat()


def admin_session(client):
    """Register and log in a fresh admin; returns auth headers or {}."""
    username = random_username()
    client.post("/api/v1/admin/register", json={"username": username, "password": PASSWORD})
    resp = client.post("/api/v1/admin/login", json={"username": username, "password": PASSWORD})
    if resp.status_code != 200:
        return {}
    return {"Authorization": f"Bearer {resp.json()['data']['accessToken']}"}


@events.test_start.add_listener
def on_test_start(environment, **kwargs):
    print("\n" + "=" * 60)
    print("SETUP: first ConcurrencyUser creates a 10-slot event")
    print("=" * 60)


class ConcurrencyUser(HttpUser):
    """
    TEST 1: Concurrency - 100 attendees -> 10 slots

    Run: locust -f locustfile.py --tags concurrency -u 100 -r 50 --run-time 30s

    After test, verify:
      SELECT COUNT(*) FROM registrations WHERE event_id = X;
      SELECT registrations, capacity FROM events WHERE id = X;
    Both counts must match and be <= 10
    """
    wait_time = between(0, 0.1)

    def on_start(self):
        global CONCURRENCY_EVENT_ID
        if CONCURRENCY_EVENT_ID:
            return

        headers = admin_session(self.client)
        if not headers:
            return
        resp = self.client.post(
            "/api/v1/events/",
            json={"name": "Concurrency Test Event", "date": future_date(30), "venue": "Test", "capacity": 10},
            headers=headers,
        )
        if resp.status_code == 201:
            CONCURRENCY_EVENT_ID = resp.json()["data"]["id"]
            print(f"\nCreated event {CONCURRENCY_EVENT_ID} with 10 slots\n")

    @tag("concurrency")
    @task
    def register_for_limited_event(self):
        """All attendees fight for the same 10 slots."""
        if not CONCURRENCY_EVENT_ID:
            return

        with self.client.post(
            "/api/v1/registrations/",
            json=random_attendee(CONCURRENCY_EVENT_ID),
            catch_response=True,
        ) as resp:
            if resp.status_code in (201, 409):
                resp.success()  # 409: event full
            else:
                resp.failure(f"Unexpected: {resp.status_code}")


class ThroughputUser(HttpUser):
    """
    TEST 2: Throughput - public event detail reads

    Run: locust -f locustfile.py --tags throughput -u 100 -r 20 --run-time 60s
    """
    wait_time = between(0.1, 0.5)

    @tag("throughput", "read")
    @task(10)
    def get_event_detail(self):
        if EVENT_IDS:
            self.client.get(f"/api/v1/events/{random.choice(EVENT_IDS)}", name="/api/v1/events/{id}")

    @tag("throughput")
    @task(1)
    def health_check(self):
        self.client.get("/health")


class EdgeCaseUser(HttpUser):
    """
    TEST 3: Edge cases - Bad input handling

    Run: locust -f locustfile.py --tags edge -u 20 -r 5 --run-time 30s

    System should NOT crash, return proper error codes.
    """
    wait_time = between(0.5, 1.5)

    def expect(self, resp, codes):
        if resp.status_code in codes:
            resp.success()
        else:
            resp.failure(f"Expected {codes}, got {resp.status_code}")

    @tag("edge")
    @task
    def unknown_event(self):
        with self.client.post(
            "/api/v1/registrations/", json=random_attendee(999999), catch_response=True
        ) as resp:
            self.expect(resp, (404,))

    @tag("edge")
    @task
    def missing_fields(self):
        with self.client.post(
            "/api/v1/registrations/", json={"eventId": 1, "firstName": "Only"}, catch_response=True
        ) as resp:
            self.expect(resp, (400,))

    @tag("edge")
    @task
    def malformed_json(self):
        with self.client.post(
            "/api/v1/registrations/",
            data="not json at all",
            headers={"Content-Type": "application/json"},
            catch_response=True,
        ) as resp:
            self.expect(resp, (400,))

    @tag("edge")
    @task
    def missing_auth(self):
        with self.client.post(
            "/api/v1/events/",
            json={"name": "x", "date": future_date(1), "venue": "y"},
            catch_response=True,
        ) as resp:
            self.expect(resp, (401,))


class RealisticUser(HttpUser):
    """
    TEST 4: Realistic mixed workload

    Run: locust -f locustfile.py -u 200 -r 20 --run-time 120s

    Simulates real traffic:
      - Mostly viewing events
      - Some registrations
      - Rare event creation by admins
    """
    wait_time = between(1, 3)

    def on_start(self):
        self.headers = admin_session(self.client)

    @task(50)
    def view_event(self):
        if EVENT_IDS:
            self.client.get(f"/api/v1/events/{random.choice(EVENT_IDS)}", name="/api/v1/events/{id}")

    @task(15)
    def register(self):
        if EVENT_IDS:
            self.client.post("/api/v1/registrations/", json=random_attendee(random.choice(EVENT_IDS)))

    @task(5)
    def list_own_events(self):
        if self.headers:
            self.client.get("/api/v1/events/", headers=self.headers)

    @task(3)
    def create_event(self):
        if not self.headers:
            return
        resp = self.client.post(
            "/api/v1/events/",
            json={
                "name": f"Event {random.randint(1, 10000)}",
                "date": future_date(random.randint(1, 90)),
                "venue": "Venue",
                "capacity": random.randint(10, 500),
            },
            headers=self.headers,
        )
        if resp.status_code == 201:
            EVENT_IDS.append(resp.json()["data"]["id"])
