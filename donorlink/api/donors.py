"""Donor search and directory API endpoints."""
from fastapi import APIRouter, Depends, Query
from typing import Optional

from donorlink import database
from donorlink.api.deps import get_current_user, get_optional_user
from donorlink.config import settings
from donorlink.matching.eligibility import with_eligibility
from donorlink.models.blood_request import BloodGroup

router = APIRouter()


@router.get("/nearby")
def nearby_donors(
    lat: float = Query(ge=-90, le=90),
    lng: float = Query(ge=-180, le=180),
    blood_group: Optional[BloodGroup] = None,
    radius: int = Query(default=20, ge=1, le=100),
    user: dict = Depends(get_current_user),
):
    """Available donors within radius km, with donation eligibility."""
    groups = [blood_group.value] if blood_group else None
    donors = database.find_nearby_donors([lng, lat], radius, groups, settings.max_donors_notified)
    data = [with_eligibility(d) for d in donors]
    return {"donors": data, "count": len(data)}


@router.get("/")
def donor_directory(
    limit: int = Query(default=20, ge=1, le=50),
    offset: int = Query(default=0, ge=0),
    blood_group: Optional[BloodGroup] = None,
    city: Optional[str] = None,
    state: Optional[str] = None,
    available: bool = True,
    user: Optional[dict] = Depends(get_optional_user),
):
    """Public directory; callers with an identity also see last donation and eligibility."""
    donors = database.list_donors(
        blood_group=blood_group.value if blood_group else None,
        city=city.strip() if city else None,
        state=state.strip() if state else None,
        available=available,
        limit=limit,
        offset=offset,
    )
    if user:
        data = [with_eligibility(d) for d in donors]
    else:
        data = [{k: v for k, v in d.items() if k != "last_donation"} for d in donors]
    return {"donors": data, "count": len(data), "limit": limit, "offset": offset}


@router.get("/stats")
def donor_stats():
    users = database.fetch_user_summaries()
    donors = [u for u in users if u.get("role") == "donor"]

    ratings = [d.get("rating") for d in donors if d.get("rating") is not None]
    overall = {
        "total_donors": len(donors),
        "available_donors": sum(1 for d in donors if d.get("is_available")),
        "total_donations": sum(d.get("total_donations") or 0 for d in donors),
        "avg_rating": round(sum(ratings) / len(ratings), 2) if ratings else 0,
    }

    by_group = {}
    for d in donors:
        group = d.get("blood_group") or "Unknown"
        if group not in by_group:
            by_group[group] = {"blood_group": group, "count": 0, "available": 0}
        by_group[group]["count"] += 1
        if d.get("is_available"):
            by_group[group]["available"] += 1

    by_state = {}
    for d in donors:
        state = (d.get("location") or {}).get("state", "Unknown")
        by_state[state] = by_state.get(state, 0) + 1
    top_states = sorted(by_state.items(), key=lambda x: x[1], reverse=True)[:10]

    return {
        "overall": overall,
        "by_blood_group": sorted(by_group.values(), key=lambda x: x["blood_group"]),
        "by_location": [{"state": s, "count": c} for s, c in top_states],
    }
