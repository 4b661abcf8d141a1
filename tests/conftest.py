"""Shared fixtures: an in-memory stand-in for the storage layer and sample users/requests."""
import copy
import uuid
from datetime import datetime, timedelta, timezone

import pytest

from donorlink import database
from donorlink.config import settings
from donorlink.matching.geo import distance_between
from donorlink.timeutils import parse_timestamp

BANGALORE = {
    "coordinates": [77.5946, 12.9716],
    "address": "12 MG Road, Bangalore",
    "city": "Bangalore",
    "state": "Karnataka",
}
MYSORE = {
    "coordinates": [76.6394, 12.2958],
    "address": "4 Sayyaji Rao Road, Mysore",
    "city": "Mysore",
    "state": "Karnataka",
}
MUMBAI = {
    "coordinates": [72.8777, 19.0760],
    "address": "21 Marine Drive, Mumbai",
    "city": "Mumbai",
    "state": "Maharashtra",
}


class FakeDatabase:
    """Dict-backed replacement for the donorlink.database query functions."""

    def __init__(self):
        self.users = {}
        self.requests = {}
        self.updates = []

    def add_user(self, **fields) -> dict:
        user = {
            "id": str(uuid.uuid4()),
            "is_available": True,
            "is_verified": False,
            "total_donations": 0,
            "rating": 5,
            "last_donation": None,
            "created_at": datetime.now(timezone.utc).isoformat(),
            **fields,
        }
        self.users[user["id"]] = user
        return user

    def add_request(self, **fields) -> dict:
        record = {
            "id": str(uuid.uuid4()),
            "status": "active",
            "responses": [],
            "notified_donors": [],
            "fraud_check": {"score": 0, "factors": [], "is_reviewed": False},
            "created_at": datetime.now(timezone.utc).isoformat(),
            **fields,
        }
        self.requests[record["id"]] = record
        return record

    # users

    def get_user(self, user_id):
        user = self.users.get(user_id)
        return copy.deepcopy(user) if user else None

    def get_user_by_email(self, email):
        for user in self.users.values():
            if user.get("email") == email:
                return {"id": user["id"]}
        return None

    def insert_user(self, user):
        return copy.deepcopy(self.add_user(**user))

    def update_user(self, user_id, updates):
        if user_id not in self.users:
            return None
        self.users[user_id].update(copy.deepcopy(updates))
        return copy.deepcopy(self.users[user_id])

    def list_users(self, role=None, verified=None, search=None, limit=20, offset=0):
        users = [u for u in self.users.values()
                 if (role is None or u.get("role") == role)
                 and (verified is None or u.get("is_verified") == verified)]
        return copy.deepcopy(users[offset:offset + limit])

    def list_donors(self, blood_group=None, city=None, state=None, available=True, limit=20, offset=0):
        donors = [u for u in self.users.values()
                  if u.get("role") == "donor" and u.get("is_available") == available
                  and (blood_group is None or u.get("blood_group") == blood_group)]
        return copy.deepcopy(donors[offset:offset + limit])

    def find_nearby_donors(self, coordinates, radius_km, blood_groups=None, limit=50):
        found = []
        for user in self.users.values():
            if user.get("role") != "donor" or not user.get("is_available"):
                continue
            if blood_groups is not None and user.get("blood_group") not in blood_groups:
                continue
            if distance_between(coordinates, user["location"]["coordinates"]) <= radius_km:
                found.append(copy.deepcopy(user))
        return found[:limit]

    def fetch_user_summaries(self):
        return copy.deepcopy(list(self.users.values()))

    # blood requests

    def insert_blood_request(self, record):
        return copy.deepcopy(self.add_request(**copy.deepcopy(record)))

    def get_blood_request(self, request_id):
        record = self.requests.get(request_id)
        return copy.deepcopy(record) if record else None

    def update_blood_request(self, request_id, updates):
        self.updates.append((request_id, copy.deepcopy(updates)))
        if request_id not in self.requests:
            return None
        self.requests[request_id].update(copy.deepcopy(updates))
        return copy.deepcopy(self.requests[request_id])

    def count_requests_since(self, requester_id, since):
        return sum(
            1 for r in self.requests.values()
            if r.get("requester_id") == requester_id and parse_timestamp(r["created_at"]) >= since
        )

    def list_blood_requests(self, status=None, blood_groups=None, urgency=None, min_fraud_score=None,
                            order_by="priority", limit=10, offset=0):
        found = [r for r in self.requests.values()
                 if (status is None or r.get("status") == status)
                 and (blood_groups is None or r.get("blood_group") in blood_groups)
                 and (urgency is None or r.get("urgency") == urgency)
                 and (min_fraud_score is None or r["fraud_check"]["score"] >= min_fraud_score)]
        key = "priority" if order_by == "priority" else "created_at"
        found.sort(key=lambda r: r.get(key) or 0, reverse=True)
        return copy.deepcopy(found[offset:offset + limit])

    def list_flagged_requests(self, min_score, limit=10):
        found = [r for r in self.requests.values()
                 if r["fraud_check"]["score"] > min_score and not r["fraud_check"]["is_reviewed"]]
        return copy.deepcopy(found[:limit])

    def find_nearby_requests(self, coordinates, radius_km, blood_groups=None, status="active", limit=20,
                             urgency=None):
        found = [r for r in self.requests.values()
                 if r.get("status") == status
                 and (blood_groups is None or r.get("blood_group") in blood_groups)
                 and (urgency is None or r.get("urgency") == urgency)
                 and distance_between(coordinates, r["location"]["coordinates"]) <= radius_km]
        found.sort(key=lambda r: r.get("priority") or 0, reverse=True)
        return copy.deepcopy(found[:limit])

    def fetch_request_summaries(self, since=None):
        return copy.deepcopy([r for r in self.requests.values()
                              if since is None or parse_timestamp(r["created_at"]) >= since])


QUERY_FUNCTIONS = [
    "get_user", "get_user_by_email", "insert_user", "update_user", "list_users", "list_donors",
    "find_nearby_donors", "fetch_user_summaries", "insert_blood_request", "get_blood_request",
    "update_blood_request", "count_requests_since", "list_blood_requests", "list_flagged_requests",
    "find_nearby_requests", "fetch_request_summaries",
]


@pytest.fixture
def fake_db(monkeypatch):
    fake = FakeDatabase()
    for name in QUERY_FUNCTIONS:
        monkeypatch.setattr(database, name, getattr(fake, name))
    monkeypatch.setattr(settings, "disable_notifications", True)
    monkeypatch.setattr(settings, "sms_enabled", False)
    monkeypatch.setattr(settings, "notification_delay_seconds", 0)
    return fake


@pytest.fixture
def requester():
    return {
        "id": "requester-1",
        "name": "Asha Rao",
        "email": "asha@example.com",
        "phone": "9876543210",
        "role": "requester",
        "location": copy.deepcopy(BANGALORE),
    }


@pytest.fixture
def clean_request():
    """A request with nothing suspicious about it, filed from the requester's home city."""
    return {
        "patient_name": "Ravi Kumar",
        "blood_group": "B+",
        "units_needed": 2,
        "urgency": "critical",
        "hospital": {
            "name": "Manipal Hospital",
            "address": "98 HAL Airport Road, Bangalore",
            "phone": "+918025024444",
        },
        "location": copy.deepcopy(BANGALORE),
        "contact_info": {"primary_phone": "9876543210"},
        "medical_reason": "Scheduled cardiac bypass surgery, patient needs cross-matched units",
        "doctor_info": {"name": "Dr. Menon", "phone": "+919845012345"},
        "required_by": (datetime.now(timezone.utc) + timedelta(hours=5)).isoformat(),
    }


@pytest.fixture
def daytime():
    return datetime(2026, 10, 12, 14, 0, 0).astimezone()
