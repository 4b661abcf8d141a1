"""User profile API endpoints."""
from fastapi import APIRouter, Depends, HTTPException

from donorlink import database
from donorlink.api.deps import get_current_user
from donorlink.matching.eligibility import with_eligibility
from donorlink.models.user import UserCreate, UserUpdate

router = APIRouter()


@router.post("/", status_code=201)
def register_user(user: UserCreate):
    """Register a donor or requester profile."""
    if database.get_user_by_email(user.email.lower()):
        raise HTTPException(status_code=400, detail="User with this email already exists")

    data = user.model_dump(mode="json")
    data["email"] = data["email"].lower()
    data.update({
        "is_available": True,
        "is_verified": False,
        "total_donations": 0,
        "rating": 5,
        "last_donation": None,
    })
    created = database.insert_user(data)
    return {"message": "User registered successfully", "user": created}


@router.get("/me")
def get_profile(user: dict = Depends(get_current_user)):
    if user.get("role") == "donor":
        return with_eligibility(user)
    return user


@router.put("/me")
def update_profile(updates: UserUpdate, user: dict = Depends(get_current_user)):
    """Email, role, blood group and verification cannot be changed here."""
    changes = updates.model_dump(mode="json", exclude_none=True)
    if not changes:
        return {"message": "Nothing to update", "user": user}
    updated = database.update_user(user["id"], changes)
    if not updated:
        raise HTTPException(status_code=404, detail="User not found")
    return {"message": "Profile updated successfully", "user": updated}
