"""Caller identity for API routes."""
from fastapi import Depends, Header, HTTPException
from typing import Optional

from donorlink import database


def get_current_user(x_user_id: Optional[str] = Header(default=None)) -> dict:
    if not x_user_id:
        raise HTTPException(status_code=401, detail="No user id provided")
    user = database.get_user(x_user_id)
    if not user:
        raise HTTPException(status_code=401, detail="User not found")
    return user


def get_optional_user(x_user_id: Optional[str] = Header(default=None)) -> Optional[dict]:
    if not x_user_id:
        return None
    return database.get_user(x_user_id)


def require_role(*roles: str):
    def checker(user: dict = Depends(get_current_user)) -> dict:
        if user.get("role") not in roles:
            raise HTTPException(status_code=403, detail=f"Access denied. Required roles: {', '.join(roles)}")
        return user
    return checker
