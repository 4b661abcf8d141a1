"""FastAPI application entry point."""
import logging
from datetime import datetime, timezone
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from donorlink.api import users, blood_requests, donors, admin
from donorlink.config import settings

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(
    title="DonorLink Blood Donation API",
    description="Blood request coordination with donor matching and fraud screening",
    version="1.0.0",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.frontend_url, "http://localhost:8501"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(users.router, prefix="/api/users", tags=["Users"])
app.include_router(blood_requests.router, prefix="/api/blood-requests", tags=["Blood Requests"])
app.include_router(donors.router, prefix="/api/donors", tags=["Donors"])
app.include_router(admin.router, prefix="/api/admin", tags=["Admin"])


@app.get("/api/health")
def health_check():
    return {
        "status": "healthy",
        "service": "donorlink",
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
