"""Admin API endpoints: platform overview, moderation and fraud review."""
from datetime import datetime, timedelta, timezone
from fastapi import APIRouter, Depends, HTTPException, Query
from typing import Optional

from donorlink import database
from donorlink.api.deps import require_role
from donorlink.config import settings
from donorlink.models.blood_request import (
    BatchAnalyzeRequest, BloodGroup, FraudReview, RequestStatus, StatusUpdate, Urgency,
)
from donorlink.models.user import Role, VerifyUser
from donorlink.pipeline.processor import batch_analyze

router = APIRouter(dependencies=[Depends(require_role("admin"))])


@router.get("/dashboard")
def admin_dashboard():
    users = database.fetch_user_summaries()
    requests = database.fetch_request_summaries()

    user_stats = {"donors": 0, "requesters": 0, "admins": 0}
    for u in users:
        key = f"{u.get('role')}s"
        user_stats[key] = user_stats.get(key, 0) + 1

    request_stats = {"active": 0, "fulfilled": 0, "expired": 0, "cancelled": 0}
    for r in requests:
        status = r.get("status", "active")
        request_stats[status] = request_stats.get(status, 0) + 1

    return {
        "users": user_stats,
        "requests": request_stats,
        "recent_requests": database.list_blood_requests(order_by="created_at", limit=10),
        "fraudulent_requests": database.list_flagged_requests(settings.admin_alert_threshold, limit=10),
        "total_users": sum(user_stats.values()),
        "total_requests": sum(request_stats.values()),
    }


@router.get("/users")
def list_users(
    limit: int = Query(default=20, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
    role: Optional[Role] = None,
    verified: Optional[bool] = None,
    search: Optional[str] = None,
):
    users = database.list_users(
        role=role.value if role else None,
        verified=verified,
        search=search.strip() if search else None,
        limit=limit,
        offset=offset,
    )
    return {"users": users, "count": len(users), "limit": limit, "offset": offset}


@router.get("/requests")
def list_requests(
    limit: int = Query(default=20, ge=1, le=100),
    offset: int = Query(default=0, ge=0),
    status: Optional[RequestStatus] = None,
    urgency: Optional[Urgency] = None,
    blood_group: Optional[BloodGroup] = None,
    fraud_score: Optional[int] = Query(default=None, ge=0, le=100),
):
    """All requests, newest first; fraud_score keeps requests scoring at least that much."""
    requests = database.list_blood_requests(
        status=status.value if status else None,
        urgency=urgency.value if urgency else None,
        blood_groups=[blood_group.value] if blood_group else None,
        min_fraud_score=fraud_score,
        order_by="created_at",
        limit=limit,
        offset=offset,
    )
    return {"requests": requests, "count": len(requests), "limit": limit, "offset": offset}


@router.put("/users/{user_id}/verify")
def verify_user(user_id: str, body: VerifyUser):
    user = database.update_user(user_id, {"is_verified": body.is_verified})
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    return {"message": f"User {'verified' if body.is_verified else 'unverified'} successfully", "user": user}


@router.put("/requests/{request_id}/review-fraud")
def review_fraud(request_id: str, review: FraudReview, admin: dict = Depends(require_role("admin"))):
    """Record an admin review. Score and factors are left exactly as scored."""
    blood_request = database.get_blood_request(request_id)
    if not blood_request:
        raise HTTPException(status_code=404, detail="Blood request not found")

    fraud_check = dict(blood_request.get("fraud_check") or {})
    fraud_check["is_reviewed"] = review.is_reviewed
    fraud_check["reviewed_by"] = admin["id"]
    fraud_check["review_date"] = datetime.now(timezone.utc).isoformat()
    if review.review_notes:
        fraud_check["review_notes"] = review.review_notes.strip()

    updated = database.update_blood_request(request_id, {"fraud_check": fraud_check})
    return {"message": "Fraud review updated successfully", "blood_request": updated}


@router.put("/requests/{request_id}/status")
def update_request_status(request_id: str, body: StatusUpdate):
    updated = database.update_blood_request(request_id, {"status": body.status.value})
    if not updated:
        raise HTTPException(status_code=404, detail="Blood request not found")
    return {"message": "Blood request status updated successfully", "blood_request": updated}


@router.delete("/users/{user_id}")
def deactivate_user(user_id: str):
    """Soft delete: the account is made unavailable and its email freed."""
    user = database.get_user(user_id)
    if not user:
        raise HTTPException(status_code=404, detail="User not found")
    if user.get("role") == "admin":
        raise HTTPException(status_code=400, detail="Cannot delete admin users")

    stamp = int(datetime.now(timezone.utc).timestamp() * 1000)
    database.update_user(user_id, {
        "is_available": False,
        "email": f"deleted_{stamp}_{user.get('email')}",
    })
    return {"message": "User deactivated successfully"}


@router.post("/requests/analyze")
def analyze_requests(body: BatchAnalyzeRequest):
    """Re-run fraud analysis on stored requests without changing them."""
    return {"results": batch_analyze(body.request_ids)}


@router.get("/analytics")
def analytics():
    since = datetime.now(timezone.utc) - timedelta(days=30)
    users = database.fetch_user_summaries()
    recent_requests = database.fetch_request_summaries(since=since)
    all_requests = database.fetch_request_summaries()

    user_growth = {}
    for u in users:
        day = (u.get("created_at") or "")[:10]
        if not day or day < since.date().isoformat():
            continue
        key = (day, u.get("role"))
        user_growth[key] = user_growth.get(key, 0) + 1

    request_trends = {}
    for r in recent_requests:
        key = ((r.get("created_at") or "")[:10], r.get("status"))
        request_trends[key] = request_trends.get(key, 0) + 1

    with_responses = sum(1 for r in recent_requests if r.get("responses"))
    total_responses = sum(len(r.get("responses") or []) for r in recent_requests)

    scores = [(r.get("fraud_check") or {}).get("score", 0) for r in all_requests]
    fraud_stats = {
        "high_fraud": sum(1 for s in scores if s > 70),
        "medium_fraud": sum(1 for s in scores if 30 < s <= 70),
        "low_fraud": sum(1 for s in scores if s <= 30),
        "reviewed": sum(1 for r in all_requests if (r.get("fraud_check") or {}).get("is_reviewed")),
    }

    return {
        "user_growth": [
            {"date": d, "role": role, "count": c} for (d, role), c in sorted(user_growth.items(), key=lambda x: x[0][0])
        ],
        "request_trends": [
            {"date": d, "status": s, "count": c} for (d, s), c in sorted(request_trends.items(), key=lambda x: x[0][0])
        ],
        "response_rates": {
            "total_requests": len(recent_requests),
            "requests_with_responses": with_responses,
            "total_responses": total_responses,
        },
        "fraud_stats": fraud_stats,
        "score_distribution": scores,
    }
