"""Seed generated users and blood requests into Supabase, scoring each request on the way in."""
import pandas as pd
import json
import os
import sys
from collections import defaultdict
from datetime import datetime, timedelta

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from donorlink.database import get_supabase
from donorlink.pipeline.intake import build_request_record

DATA_DIR = os.path.dirname(os.path.abspath(__file__))
JSON_COLUMNS = ["location", "hospital", "contact_info", "doctor_info"]
REQUEST_FIELDS = ["patient_name", "blood_group", "units_needed", "urgency", "hospital", "location",
                  "contact_info", "medical_reason", "doctor_info", "required_by"]


def load_csv(name: str) -> list[dict]:
    df = pd.read_csv(os.path.join(DATA_DIR, name), dtype={"phone": str})
    records = df.to_dict("records")
    for record in records:
        for key, value in record.items():
            if not isinstance(value, str) and pd.isna(value):
                record[key] = None
        for column in JSON_COLUMNS:
            if isinstance(record.get(column), str):
                record[column] = json.loads(record[column])
    return records


def prior_counts(history: list[datetime], created_at: datetime) -> dict:
    def since(span):
        return sum(1 for t in history if created_at - span <= t < created_at)
    return {
        "last_24h": since(timedelta(hours=24)),
        "last_7d": since(timedelta(days=7)),
        "last_30d": since(timedelta(days=30)),
    }


def seed(batch_size: int = 50):
    client = get_supabase()

    users = load_csv("users.csv")
    print(f"Loaded {len(users)} users")
    for i in range(0, len(users), batch_size):
        batch = users[i:i + batch_size]
        try:
            client.table("users").insert(batch).execute()
            print(f"  Inserted users {min(i + batch_size, len(users))}/{len(users)}")
        except Exception as e:
            print(f"  Error on user batch {i // batch_size + 1}: {e}")

    users_by_id = {u["id"]: u for u in users}
    requests = load_csv("blood_requests.csv")
    print(f"Loaded {len(requests)} blood requests")

    history = defaultdict(list)
    flagged = 0
    records = []
    for row in sorted(requests, key=lambda r: r["created_at"]):
        requester = users_by_id[row["requester_id"]]
        created_at = datetime.fromisoformat(row["created_at"])
        payload = {k: row[k] for k in REQUEST_FIELDS}
        payload["units_needed"] = int(payload["units_needed"])

        record, assessment = build_request_record(
            payload, requester, counts=prior_counts(history[requester["id"]], created_at), now=created_at
        )
        record["created_at"] = created_at.astimezone().isoformat()
        records.append(record)
        history[requester["id"]].append(created_at)
        if assessment["score"] > 50:
            flagged += 1

    for i in range(0, len(records), batch_size):
        try:
            client.table("blood_requests").insert(records[i:i + batch_size]).execute()
            print(f"  Inserted requests {min(i + batch_size, len(records))}/{len(records)}")
        except Exception as e:
            print(f"  Error on request batch {i // batch_size + 1}: {e}")

    print(f"\nSeeding complete! {len(users)} users, {len(records)} requests ({flagged} flagged for review).")


if __name__ == "__main__":
    seed()
