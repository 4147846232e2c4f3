"""
Locust Load Test Suite

Run against a seeded redis-backed server (python -m app.seed --admin-email ...).

Run scenarios:
  locust -f locustfile.py --tags burst        # Same car booked by many buyers at once
  locust -f locustfile.py --tags browse       # Catalog and analytics reads
  locust -f locustfile.py --tags edge         # Bad input
  locust -f locustfile.py                     # All tests
"""

import os
import random
import string
from datetime import date, timedelta

from locust import HttpUser, between, events, tag, task

CAR_IDS = []
BURST_CAR_ID = "honda-city"
ADMIN_EMAIL = os.environ.get("LOAD_ADMIN_EMAIL", "")
ADMIN_PASSWORD = os.environ.get("LOAD_ADMIN_PASSWORD", "admin123")


def random_email():
    suffix = "".join(random.choices(string.ascii_lowercase + string.digits, k=10))
    return f"load_{suffix}@test.com"


def random_phone():
    return "9" + "".join(random.choices(string.digits, k=9))


def register_buyer(client):
    """Register a fresh buyer and return auth headers, or {} on failure."""
    password = "test123"
    email = random_email()
    resp = client.post("/api/v1/auth/register", json={
        "fullName": "Load Tester",
        "phoneNumber": random_phone(),
        "email": email,
        "password": password,
        "confirmPassword": password,
    })
    if resp.status_code != 201:
        return {}
    return {"Authorization": f"Bearer {resp.json()['accessToken']}"}


def booking_form(car_id, variant):
    return {
        "carId": car_id,
        "fullName": "Load Tester",
        "phoneNumber": random_phone(),
        "emailAddress": random_email(),
        "preferredVariant": variant,
        "bookingDate": (date.today() + timedelta(days=random.randint(1, 30))).isoformat(),
        "city": "Mumbai",
        "paymentPreference": random.choice(["cash", "finance", "lease"]),
        "agreedToTerms": True,
    }


@events.test_start.add_listener
def on_test_start(environment, **kwargs):
    print("\n" + "=" * 60)
    print(f"Burst target: {BURST_CAR_ID}")
    print("=" * 60)


class BurstUser(HttpUser):
    """
    TEST 1: Burst - 100 buyers book the same car

    Run: locust -f locustfile.py --tags burst -u 100 -r 50 --run-time 30s

    Every booking gets its own key, so every request should be a 201 and
    GET /api/v1/bookings/all should list one booking per success.
    """
    wait_time = between(0, 0.1)

    def on_start(self):
        self.headers = register_buyer(self.client)

    @tag("burst")
    @task
    def book_same_car(self):
        if not self.headers:
            return

        with self.client.post(
            "/api/v1/bookings/",
            json=booking_form(BURST_CAR_ID, "White"),
            headers=self.headers,
            catch_response=True,
        ) as resp:
            if resp.status_code == 201:
                resp.success()
            else:
                resp.failure(f"Unexpected: {resp.status_code}")


class BrowseUser(HttpUser):
    """
    TEST 2: Read throughput - catalog plus reconciled booking reads

    Run: locust -f locustfile.py --tags browse -u 100 -r 20 --run-time 60s

    Compare P95/P99 for /cars/ against /bookings/all as the bookings tree
    grows; the latter reconciles every record on each request.
    """
    wait_time = between(0.1, 0.5)

    def on_start(self):
        self.admin_headers = {}
        if ADMIN_EMAIL:
            resp = self.client.post("/api/v1/auth/login", json={
                "email": ADMIN_EMAIL,
                "password": ADMIN_PASSWORD,
            })
            if resp.status_code == 200:
                self.admin_headers = {"Authorization": f"Bearer {resp.json()['accessToken']}"}

    @tag("browse", "read")
    @task(10)
    def list_cars(self):
        resp = self.client.get("/api/v1/cars/")
        if resp.status_code == 200:
            for car in resp.json():
                if car["id"] not in CAR_IDS:
                    CAR_IDS.append(car["id"])

    @tag("browse", "read")
    @task(5)
    def view_car(self):
        if CAR_IDS:
            car_id = random.choice(CAR_IDS)
            self.client.get(f"/api/v1/cars/{car_id}", name="/api/v1/cars/{id}")
            self.client.post("/api/v1/interactions/", json={"featureId": car_id, "action": "view"})

    @tag("browse", "admin")
    @task(2)
    def admin_bookings(self):
        if self.admin_headers:
            self.client.get("/api/v1/bookings/all", headers=self.admin_headers)

    @tag("browse", "admin")
    @task(1)
    def admin_analytics(self):
        if self.admin_headers:
            self.client.get("/api/v1/analytics/cars", headers=self.admin_headers)

    @tag("browse")
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

    def on_start(self):
        self.headers = register_buyer(self.client)

    def _expect(self, resp, codes):
        if resp.status_code in codes:
            resp.success()
        else:
            resp.failure(f"Expected {codes}, got {resp.status_code}")

    @tag("edge")
    @task
    def unknown_car(self):
        with self.client.post("/api/v1/bookings/",
            json=booking_form("no-such-car", "White"),
            headers=self.headers,
            catch_response=True,
        ) as resp:
            self._expect(resp, [404])

    @tag("edge")
    @task
    def unknown_variant(self):
        with self.client.post("/api/v1/bookings/",
            json=booking_form(BURST_CAR_ID, "Purple"),
            headers=self.headers,
            catch_response=True,
        ) as resp:
            self._expect(resp, [400])

    @tag("edge")
    @task
    def terms_not_agreed(self):
        with self.client.post("/api/v1/bookings/",
            json={**booking_form(BURST_CAR_ID, "White"), "agreedToTerms": False},
            headers=self.headers,
            catch_response=True,
        ) as resp:
            self._expect(resp, [400])

    @tag("edge")
    @task
    def bad_phone(self):
        with self.client.post("/api/v1/bookings/",
            json={**booking_form(BURST_CAR_ID, "White"), "phoneNumber": "12-34"},
            headers=self.headers,
            catch_response=True,
        ) as resp:
            self._expect(resp, [422])

    @tag("edge")
    @task
    def malformed_json(self):
        with self.client.post("/api/v1/bookings/",
            data="not json at all",
            headers=self.headers,
            catch_response=True,
        ) as resp:
            self._expect(resp, [400, 422])

    @tag("edge")
    @task
    def missing_auth(self):
        with self.client.post("/api/v1/bookings/",
            json=booking_form(BURST_CAR_ID, "White"),
            catch_response=True,
        ) as resp:
            self._expect(resp, [401])

    @tag("edge")
    @task
    def buyer_on_admin_route(self):
        with self.client.get("/api/v1/bookings/all",
            headers=self.headers,
            catch_response=True,
        ) as resp:
            self._expect(resp, [403])


class RealisticUser(HttpUser):
    """
    TEST 4: Realistic mixed workload

    Run: locust -f locustfile.py -u 200 -r 20 --run-time 120s

    Simulates real traffic:
      - Mostly browsing
      - Some bookings and cancellations
      - Occasional contact messages
    """
    wait_time = between(1, 3)

    def on_start(self):
        self.headers = register_buyer(self.client)
        self.booking_ids = []

    @task(50)
    def browse_cars(self):
        resp = self.client.get("/api/v1/cars/")
        if resp.status_code == 200:
            for car in resp.json():
                if car["id"] not in CAR_IDS:
                    CAR_IDS.append(car["id"])

    @task(20)
    def view_car(self):
        if CAR_IDS:
            self.client.get(f"/api/v1/cars/{random.choice(CAR_IDS)}", name="/api/v1/cars/{id}")

    @task(10)
    def book_car(self):
        if not (CAR_IDS and self.headers):
            return
        car = self.client.get(f"/api/v1/cars/{random.choice(CAR_IDS)}", name="/api/v1/cars/{id}")
        if car.status_code != 200:
            return
        variants = car.json().get("variants") or ["Any"]
        resp = self.client.post("/api/v1/bookings/",
            json=booking_form(car.json()["id"], random.choice(variants)),
            headers=self.headers)
        if resp.status_code == 201:
            self.booking_ids.append(resp.json()["id"])

    @task(5)
    def my_bookings(self):
        if self.headers:
            self.client.get("/api/v1/bookings/", headers=self.headers)

    @task(2)
    def cancel_booking(self):
        if self.booking_ids:
            booking_id = self.booking_ids.pop()
            self.client.delete(f"/api/v1/bookings/{booking_id}",
                headers=self.headers,
                name="/api/v1/bookings/{id}")

    @task(1)
    def contact(self):
        self.client.post("/api/v1/contact/", json={
            "fullName": "Load Tester",
            "phone": random_phone(),
            "email": random_email(),
            "message": "Is this car available for a test drive?",
        }, headers=self.headers)
