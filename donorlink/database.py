from supabase import create_client, Client
from donorlink.config import settings
from datetime import datetime
from typing import Optional

_client: Optional[Client] = None

USER_PUBLIC_FIELDS = (
    "id, name, email, phone, role, blood_group, location, is_available, last_donation, "
    "is_verified, total_donations, rating, created_at"
)


def get_supabase() -> Client:
    global _client
    if _client is None:
        _client = create_client(settings.supabase_url, settings.supabase_key)
    return _client


# ---- users ----

def get_user(user_id: str) -> Optional[dict]:
    client = get_supabase()
    result = client.table("users").select("*").eq("id", user_id).limit(1).execute()
    return result.data[0] if result.data else None


def get_user_by_email(email: str) -> Optional[dict]:
    client = get_supabase()
    result = client.table("users").select("id").eq("email", email).limit(1).execute()
    return result.data[0] if result.data else None


def insert_user(user: dict) -> dict:
    client = get_supabase()
    result = client.table("users").insert(user).execute()
    return result.data[0]


def update_user(user_id: str, updates: dict) -> Optional[dict]:
    client = get_supabase()
    result = client.table("users").update(updates).eq("id", user_id).execute()
    return result.data[0] if result.data else None


def list_users(role: Optional[str] = None, verified: Optional[bool] = None,
               search: Optional[str] = None, limit: int = 20, offset: int = 0) -> list[dict]:
    client = get_supabase()
    query = client.table("users").select(USER_PUBLIC_FIELDS)
    if role:
        query = query.eq("role", role)
    if verified is not None:
        query = query.eq("is_verified", verified)
    if search:
        query = query.or_(f"name.ilike.%{search}%,email.ilike.%{search}%")
    result = query.order("created_at", desc=True).range(offset, offset + limit - 1).execute()
    return result.data


def list_donors(blood_group: Optional[str] = None, city: Optional[str] = None,
                state: Optional[str] = None, available: bool = True,
                limit: int = 20, offset: int = 0) -> list[dict]:
    client = get_supabase()
    query = client.table("users").select(
        "id, name, blood_group, location, total_donations, rating, last_donation"
    ).eq("role", "donor").eq("is_available", available)
    if blood_group:
        query = query.eq("blood_group", blood_group)
    if city:
        query = query.ilike("location->>city", f"%{city}%")
    if state:
        query = query.ilike("location->>state", f"%{state}%")
    result = (query.order("total_donations", desc=True).order("rating", desc=True)
              .range(offset, offset + limit - 1).execute())
    return result.data


def find_nearby_donors(coordinates: list[float], radius_km: float,
                       blood_groups: Optional[list[str]] = None, limit: int = 50) -> list[dict]:
    """Available donors within radius_km of [lng, lat], nearest first."""
    client = get_supabase()
    result = client.rpc("find_nearby_donors", {
        "p_lng": coordinates[0],
        "p_lat": coordinates[1],
        "p_radius_m": radius_km * 1000,
        "p_blood_groups": blood_groups,
        "p_limit": limit,
    }).execute()
    return result.data or []


def fetch_user_summaries() -> list[dict]:
    client = get_supabase()
    result = client.table("users").select(
        "role, blood_group, is_available, total_donations, rating, location, created_at"
    ).execute()
    return result.data or []


# ---- blood requests ----

def insert_blood_request(record: dict) -> dict:
    client = get_supabase()
    result = client.table("blood_requests").insert(record).execute()
    return result.data[0]


def get_blood_request(request_id: str) -> Optional[dict]:
    client = get_supabase()
    result = client.table("blood_requests").select("*").eq("id", request_id).limit(1).execute()
    return result.data[0] if result.data else None


def update_blood_request(request_id: str, updates: dict) -> Optional[dict]:
    client = get_supabase()
    result = client.table("blood_requests").update(updates).eq("id", request_id).execute()
    return result.data[0] if result.data else None


def count_requests_since(requester_id: str, since: datetime) -> int:
    client = get_supabase()
    result = client.table("blood_requests").select("id", count="exact").eq(
        "requester_id", requester_id
    ).gte("created_at", since.isoformat()).execute()
    return result.count or 0


def list_blood_requests(status: Optional[str] = None, blood_groups: Optional[list[str]] = None,
                        urgency: Optional[str] = None, min_fraud_score: Optional[int] = None,
                        order_by: str = "priority", limit: int = 10, offset: int = 0) -> list[dict]:
    client = get_supabase()
    query = client.table("blood_requests").select("*")
    if status:
        query = query.eq("status", status)
    if blood_groups is not None:
        query = query.in_("blood_group", blood_groups)
    if urgency:
        query = query.eq("urgency", urgency)
    if min_fraud_score is not None:
        query = query.gte("fraud_check->score", min_fraud_score)
    if order_by == "priority":
        query = query.order("priority", desc=True)
    query = query.order("created_at", desc=True)
    result = query.range(offset, offset + limit - 1).execute()
    return result.data


def list_flagged_requests(min_score: int, limit: int = 10) -> list[dict]:
    """Unreviewed requests scoring above min_score, highest first."""
    client = get_supabase()
    result = client.table("blood_requests").select("*").gt(
        "fraud_check->score", min_score
    ).eq("fraud_check->is_reviewed", False).order(
        "fraud_check->score", desc=True
    ).limit(limit).execute()
    return result.data


def find_nearby_requests(coordinates: list[float], radius_km: float,
                         blood_groups: Optional[list[str]] = None, status: str = "active",
                         limit: int = 20, urgency: Optional[str] = None) -> list[dict]:
    """Requests within radius_km of [lng, lat], by priority then recency."""
    client = get_supabase()
    result = client.rpc("find_nearby_requests", {
        "p_lng": coordinates[0],
        "p_lat": coordinates[1],
        "p_radius_m": radius_km * 1000,
        "p_blood_groups": blood_groups,
        "p_status": status,
        "p_limit": limit,
        "p_urgency": urgency,
    }).execute()
    return result.data or []


def fetch_request_summaries(since: Optional[datetime] = None) -> list[dict]:
    client = get_supabase()
    query = client.table("blood_requests").select("status, fraud_check, responses, created_at")
    if since is not None:
        query = query.gte("created_at", since.isoformat())
    result = query.execute()
    return result.data or []
