"""
Generate realistic donors, requesters and blood requests with planted fraud patterns.
Outputs to data/users.csv and data/blood_requests.csv
"""
import pandas as pd
import numpy as np
import uuid
import random
from datetime import datetime, timedelta
import os
import json

random.seed(42)
np.random.seed(42)

OUTPUT_DIR = os.path.dirname(os.path.abspath(__file__))

CITIES = {
    "Bangalore": {"state": "Karnataka", "lat": 12.9716, "lng": 77.5946},
    "Mysore": {"state": "Karnataka", "lat": 12.2958, "lng": 76.6394},
    "Chennai": {"state": "Tamil Nadu", "lat": 13.0827, "lng": 80.2707},
    "Hyderabad": {"state": "Telangana", "lat": 17.3850, "lng": 78.4867},
    "Mumbai": {"state": "Maharashtra", "lat": 19.0760, "lng": 72.8777},
    "Pune": {"state": "Maharashtra", "lat": 18.5204, "lng": 73.8567},
}

# Approximate population frequencies
BLOOD_GROUPS = ["O+", "B+", "A+", "AB+", "O-", "B-", "A-", "AB-"]
BLOOD_WEIGHTS = [0.37, 0.32, 0.22, 0.07, 0.008, 0.006, 0.005, 0.001]

HOSPITALS = ["St. John's Medical College", "Apollo Hospital", "Manipal Hospital",
             "Fortis Hospital", "KEM Hospital", "Ruby Hall Clinic", "Narayana Health"]

REASONS = [
    "Scheduled cardiac bypass surgery, patient needs cross-matched units",
    "Post-partum haemorrhage after delivery, ongoing transfusion support required",
    "Chemotherapy induced thrombocytopenia, weekly transfusion schedule",
    "Road traffic accident with internal bleeding, patient in ICU",
    "Thalassemia major patient on regular transfusion protocol",
    "Hip replacement surgery planned, two units to be kept ready",
]
GENERIC_REASONS = ["Emergency surgery please help", "Accident, urgent need", "Blood loss emergency"]

URGENCIES = ["low", "medium", "high", "critical"]


def random_offset(lat, lng, km_radius=10):
    """Add random offset to coordinates within km_radius."""
    offset_lat = random.uniform(-km_radius / 111, km_radius / 111)
    offset_lng = random.uniform(-km_radius / 111, km_radius / 111)
    return lat + offset_lat, lng + offset_lng


def random_phone():
    return f"+91{random.randint(7000000000, 9999999999)}"


def make_location(city_name):
    city = CITIES[city_name]
    lat, lng = random_offset(city["lat"], city["lng"])
    return {
        "coordinates": [round(lng, 6), round(lat, 6)],
        "address": f"{random.randint(1, 400)} Main Road, {city_name}",
        "city": city_name,
        "state": city["state"],
    }


def generate_users(n_donors=300, n_requesters=60):
    users = []
    base_time = datetime(2026, 8, 1, 9, 0, 0)
    for i in range(n_donors):
        city = random.choice(list(CITIES))
        last_donation = None
        if random.random() < 0.6:
            last_donation = (base_time + timedelta(days=random.randint(0, 75))).isoformat()
        users.append({
            "id": str(uuid.uuid4()),
            "name": f"Donor {i:04d}",
            "email": f"donor{i:04d}@example.com",
            "phone": random_phone(),
            "role": "donor",
            "blood_group": np.random.choice(BLOOD_GROUPS, p=np.array(BLOOD_WEIGHTS) / sum(BLOOD_WEIGHTS)),
            "location": json.dumps(make_location(city)),
            "is_available": random.random() < 0.85,
            "last_donation": last_donation,
            "is_verified": random.random() < 0.7,
            "total_donations": int(np.random.poisson(3)),
            "rating": round(random.uniform(3.5, 5.0), 1),
        })
    for i in range(n_requesters):
        city = random.choice(list(CITIES))
        users.append({
            "id": str(uuid.uuid4()),
            "name": f"Requester {i:03d}",
            "email": f"requester{i:03d}@example.com",
            "phone": random_phone(),
            "role": "requester",
            "blood_group": None,
            "location": json.dumps(make_location(city)),
            "is_available": True,
            "last_donation": None,
            "is_verified": random.random() < 0.5,
            "total_donations": 0,
            "rating": 5,
        })
    return users


def generate_request(requester, created_at, city_name=None, fraudulent=False):
    home = json.loads(requester["location"])
    city_name = city_name or home["city"]
    location = make_location(city_name)
    urgency = random.choice(URGENCIES)
    hours_ahead = {"critical": (3, 8), "high": (8, 30), "medium": (24, 96), "low": (72, 400)}[urgency]
    required_by = created_at + timedelta(hours=random.uniform(*hours_ahead))

    contact_phone = requester["phone"]
    doctor_phone = random_phone()
    hospital_phone = random_phone()
    hospital_name = random.choice(HOSPITALS)
    hospital_address = f"{random.randint(1, 200)} Hospital Road, {city_name}"
    reason = random.choice(REASONS)

    if fraudulent:
        pattern = random.choice(["fake_contact", "generic", "far_future"])
        if pattern == "fake_contact":
            contact_phone = random.choice(["1111111111", "1234567890", "9999999999"])
            hospital_phone = doctor_phone
        elif pattern == "generic":
            hospital_name = random.choice(["City Hospital", "General Hospital", "Clinic"])
            hospital_address = "Near bus stand"
            reason = random.choice(GENERIC_REASONS)
        else:
            required_by = created_at + timedelta(days=random.randint(35, 60))

    return {
        "request_ref": f"REQ-{uuid.uuid4().hex[:10].upper()}",
        "requester_id": requester["id"],
        "created_at": created_at.isoformat(),
        "patient_name": f"Patient {random.randint(100, 999)}",
        "blood_group": np.random.choice(BLOOD_GROUPS, p=np.array(BLOOD_WEIGHTS) / sum(BLOOD_WEIGHTS)),
        "units_needed": int(min(10, max(1, np.random.poisson(2)))),
        "urgency": urgency,
        "hospital": json.dumps({"name": hospital_name, "address": hospital_address, "phone": hospital_phone}),
        "location": json.dumps(location),
        "contact_info": json.dumps({"primary_phone": contact_phone}),
        "medical_reason": reason,
        "doctor_info": json.dumps({"name": f"Dr. {random.choice(['Rao', 'Iyer', 'Shah', 'Menon'])}",
                                   "phone": doctor_phone}),
        "required_by": required_by.isoformat(),
        "is_fraudulent": fraudulent,
    }


def generate_requests(users, n_normal=400):
    requesters = [u for u in users if u["role"] == "requester"]
    base_time = datetime(2026, 10, 1, 7, 0, 0)
    requests = []

    for _ in range(n_normal):
        requester = random.choice(requesters)
        created_at = base_time + timedelta(minutes=random.randint(0, 60 * 24 * 16))
        requests.append(generate_request(requester, created_at))

    # Burst requesters: many requests in one day
    for requester in random.sample(requesters, 4):
        start = base_time + timedelta(days=random.randint(2, 14))
        for k in range(random.randint(4, 7)):
            requests.append(generate_request(requester, start + timedelta(hours=k * 3), fraudulent=True))

    # Requests filed far from the requester's registered city
    for requester in random.sample(requesters, 6):
        home_city = json.loads(requester["location"])["city"]
        far_city = random.choice([c for c in CITIES if CITIES[c]["state"] != CITIES[home_city]["state"]])
        created_at = base_time + timedelta(days=random.randint(0, 15), hours=random.choice([0, 1, 2, 23]))
        requests.append(generate_request(requester, created_at, city_name=far_city, fraudulent=True))

    # Fabricated details
    for _ in range(25):
        requester = random.choice(requesters)
        created_at = base_time + timedelta(minutes=random.randint(0, 60 * 24 * 16))
        requests.append(generate_request(requester, created_at, fraudulent=True))

    requests.sort(key=lambda r: r["created_at"])
    return requests


def main():
    users = generate_users()
    requests = generate_requests(users)

    users_path = os.path.join(OUTPUT_DIR, "users.csv")
    requests_path = os.path.join(OUTPUT_DIR, "blood_requests.csv")
    pd.DataFrame(users).to_csv(users_path, index=False)
    df = pd.DataFrame(requests)
    df.to_csv(requests_path, index=False)

    print(f"Generated {len(users)} users -> {users_path}")
    print(f"Generated {len(df)} blood requests ({int(df['is_fraudulent'].sum())} planted fraud) -> {requests_path}")


if __name__ == "__main__":
    main()
