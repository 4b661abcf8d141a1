"""DonorLink Admin Dashboard - Main App."""
import streamlit as st
import httpx
import os

st.set_page_config(
    page_title="DonorLink - Admin",
    page_icon="🩸",
    layout="wide",
    initial_sidebar_state="expanded",
)

API_URL = os.getenv("API_URL", "http://localhost:8000")
ADMIN_USER_ID = os.getenv("ADMIN_USER_ID", "")


def get_api(endpoint: str):
    """Helper to call the FastAPI backend as the configured admin."""
    try:
        response = httpx.get(f"{API_URL}{endpoint}", headers={"X-User-Id": ADMIN_USER_ID}, timeout=10)
        return response.json()
    except Exception as e:
        return {"error": str(e)}


# Sidebar
st.sidebar.title("🩸 DonorLink")
st.sidebar.markdown("**Admin Console**")
st.sidebar.divider()

health = get_api("/api/health")
status_emoji = "🟢" if health.get("status") == "healthy" else "🔴"
st.sidebar.markdown(f"**API**: {status_emoji} {health.get('status', 'unreachable')}")
if not ADMIN_USER_ID:
    st.sidebar.warning("Set ADMIN_USER_ID to load admin data")

# Main content
st.title("🩸 DonorLink Admin Overview")
st.markdown("Blood request coordination, donor matching and fraud screening")

data = get_api("/api/admin/dashboard")
if "users" in data:
    users = data["users"]
    requests = data["requests"]

    col1, col2, col3, col4 = st.columns(4)
    with col1:
        st.metric("Total Users", f"{data.get('total_users', 0):,}",
                  delta=f"{users.get('donors', 0)} donors")
    with col2:
        st.metric("Requesters", users.get("requesters", 0))
    with col3:
        st.metric("Total Requests", f"{data.get('total_requests', 0):,}",
                  delta=f"{requests.get('active', 0)} active")
    with col4:
        flagged = len(data.get("fraudulent_requests", []))
        st.metric("Unreviewed High-Risk", flagged, delta_color="inverse")

    st.markdown("#### Requests by Status")
    cols = st.columns(4)
    for col, status in zip(cols, ["active", "fulfilled", "expired", "cancelled"]):
        with col:
            st.markdown(f"**{status.title()}**: {requests.get(status, 0)}")

    st.divider()
    st.subheader("Recent Requests")
    recent = data.get("recent_requests", [])
    if recent:
        st.dataframe(
            [
                {
                    "Patient": r.get("patient_name"),
                    "Blood Group": r.get("blood_group"),
                    "Urgency": r.get("urgency"),
                    "Status": r.get("status"),
                    "Priority": r.get("priority"),
                    "Fraud Score": (r.get("fraud_check") or {}).get("score", 0),
                    "Created": (r.get("created_at") or "")[:16],
                }
                for r in recent
            ],
            use_container_width=True,
        )
    else:
        st.info("No blood requests yet.")
else:
    st.error(f"Could not load dashboard: {data.get('detail') or data.get('error', 'unknown error')}")

st.divider()
st.info("👈 Use the sidebar to open the fraud review queue and analytics pages.")
