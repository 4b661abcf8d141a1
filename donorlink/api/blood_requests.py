"""Blood request API endpoints."""
import logging
from datetime import datetime, timezone
from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Query
from typing import Optional

from donorlink import database
from donorlink.api.deps import get_current_user, require_role
from donorlink.config import settings
from donorlink.matching.compatibility import compatible_recipient_groups, can_donate_to
from donorlink.matching.eligibility import can_donate
from donorlink.models.blood_request import (
    BloodGroup, BloodRequestCreate, BloodRequestUpdate, DonorResponseCreate, RequestStatus, Urgency,
)
from donorlink.notifications.dispatcher import run_donor_fanout, run_response_notification
from donorlink.notifications.gate import should_notify_donors, fraud_warning
from donorlink.pipeline.intake import build_request_record, apply_request_update

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/", status_code=201)
def create_blood_request(
    payload: BloodRequestCreate,
    background_tasks: BackgroundTasks,
    user: dict = Depends(require_role("requester", "admin")),
):
    """Score, prioritize and store a request, then notify nearby donors unless it looks fraudulent."""
    record, assessment = build_request_record(payload.model_dump(mode="json"), user)
    saved = database.insert_blood_request(record)

    score = assessment["score"]
    if should_notify_donors(score):
        background_tasks.add_task(run_donor_fanout, saved)
    else:
        logger.warning("Donor notifications suppressed for request %s (fraud score %d)", saved.get("id"), score)

    return {
        "message": "Blood request created successfully",
        "blood_request": saved,
        "fraud_warning": fraud_warning(score),
    }


@router.get("/")
def list_blood_requests(
    limit: int = Query(default=10, ge=1, le=50),
    offset: int = Query(default=0, ge=0),
    blood_group: Optional[BloodGroup] = None,
    urgency: Optional[Urgency] = None,
    status: RequestStatus = RequestStatus.active,
    lat: Optional[float] = Query(default=None, ge=-90, le=90),
    lng: Optional[float] = Query(default=None, ge=-180, le=180),
    radius: int = Query(default=20, ge=1, le=100),
    user: dict = Depends(get_current_user),
):
    """List requests by priority. Donors without a blood group filter only see requests they can give to."""
    if blood_group:
        groups = [blood_group.value]
    elif user.get("role") == "donor" and user.get("blood_group"):
        groups = compatible_recipient_groups(user["blood_group"])
    else:
        groups = None

    if lat is not None and lng is not None:
        nearby = database.find_nearby_requests(
            [lng, lat], radius, groups, status=status.value, limit=offset + limit,
            urgency=urgency.value if urgency else None,
        )
        data = nearby[offset:offset + limit]
    else:
        data = database.list_blood_requests(
            status=status.value,
            blood_groups=groups,
            urgency=urgency.value if urgency else None,
            limit=limit,
            offset=offset,
        )

    return {"data": data, "count": len(data), "limit": limit, "offset": offset}


@router.get("/nearby")
def nearby_blood_requests(
    radius: int = Query(default=20, ge=1, le=100),
    donor: dict = Depends(require_role("donor")),
):
    """Active requests near the donor that their blood group can serve."""
    location = donor.get("location") or {}
    if not location.get("coordinates"):
        raise HTTPException(status_code=400, detail="Donor location not set. Please update your profile.")

    groups = compatible_recipient_groups(donor.get("blood_group"))
    nearby = database.find_nearby_requests(
        location["coordinates"], radius, groups, limit=settings.max_nearby_requests
    )
    return {
        "nearby_requests": nearby,
        "donor": {
            "blood_group": donor.get("blood_group"),
            "location": location,
            "can_donate": can_donate(donor),
        },
    }


@router.get("/{request_id}")
def get_blood_request(request_id: str, user: dict = Depends(get_current_user)):
    blood_request = database.get_blood_request(request_id)
    if not blood_request:
        raise HTTPException(status_code=404, detail="Blood request not found")
    return blood_request


@router.post("/{request_id}/respond")
def respond_to_request(
    request_id: str,
    response: DonorResponseCreate,
    background_tasks: BackgroundTasks,
    donor: dict = Depends(require_role("donor")),
):
    blood_request = database.get_blood_request(request_id)
    if not blood_request:
        raise HTTPException(status_code=404, detail="Blood request not found")
    if blood_request.get("status") != "active":
        raise HTTPException(status_code=400, detail="This blood request is no longer active")
    if not can_donate_to(donor.get("blood_group"), blood_request["blood_group"]):
        raise HTTPException(status_code=400, detail="Your blood group is not compatible with this request")

    responses = blood_request.get("responses") or []
    if any(r.get("donor_id") == donor["id"] for r in responses):
        raise HTTPException(status_code=400, detail="You have already responded to this request")

    responses = responses + [{
        "donor_id": donor["id"],
        "message": response.message,
        "status": response.status.value,
        "response_date": datetime.now(timezone.utc).isoformat(),
    }]
    updated = database.update_blood_request(request_id, {"responses": responses})

    background_tasks.add_task(run_response_notification, updated or blood_request, donor, response.status.value)

    return {"message": "Response submitted successfully", "blood_request": updated}


@router.put("/{request_id}")
def update_blood_request(
    request_id: str,
    updates: BloodRequestUpdate,
    user: dict = Depends(get_current_user),
):
    """Owners and admins may edit urgency, contact info, deadline and status."""
    blood_request = database.get_blood_request(request_id)
    if not blood_request:
        raise HTTPException(status_code=404, detail="Blood request not found")
    if blood_request.get("requester_id") != user["id"] and user.get("role") != "admin":
        raise HTTPException(status_code=403, detail="Not authorized to update this blood request")

    changes = apply_request_update(blood_request, updates.model_dump(mode="json", exclude_none=True))
    if not changes:
        return {"message": "Nothing to update", "blood_request": blood_request}

    updated = database.update_blood_request(request_id, changes)
    return {"message": "Blood request updated successfully", "blood_request": updated}
