"""Fraud review queue for flagged blood requests."""
import streamlit as st
import httpx
import pandas as pd
import os

API_URL = os.getenv("API_URL", "http://localhost:8000")
HEADERS = {"X-User-Id": os.getenv("ADMIN_USER_ID", "")}


def get_api(endpoint: str):
    try:
        response = httpx.get(f"{API_URL}{endpoint}", headers=HEADERS, timeout=10)
        return response.json()
    except Exception:
        return {"error": "API unavailable"}


def put_api(endpoint: str, payload: dict):
    try:
        response = httpx.put(f"{API_URL}{endpoint}", headers=HEADERS, json=payload, timeout=10)
        return response.json()
    except Exception:
        return {"error": "API unavailable"}


st.set_page_config(page_title="Fraud Review", page_icon="🚨", layout="wide")
st.title("🚨 Fraud Review Queue")

min_score = st.slider("Minimum fraud score", min_value=0, max_value=100, value=50, step=5)
show_reviewed = st.checkbox("Include reviewed requests", value=False)

result = get_api(f"/api/admin/requests?fraud_score={min_score}&limit=100")
flagged = result.get("requests", [])
if not show_reviewed:
    flagged = [r for r in flagged if not (r.get("fraud_check") or {}).get("is_reviewed")]

if "error" in result or "detail" in result:
    st.error(f"Could not load requests: {result.get('detail') or result.get('error')}")
elif flagged:
    st.caption(f"{len(flagged)} requests scoring {min_score}+")
    for req in sorted(flagged, key=lambda r: (r.get("fraud_check") or {}).get("score", 0), reverse=True):
        check = req.get("fraud_check") or {}
        score = check.get("score", 0)

        if score >= 70:
            color = "🔴"
        elif score >= 40:
            color = "🟠"
        else:
            color = "🟡"

        location = req.get("location") or {}
        hospital = req.get("hospital") or {}
        with st.expander(
            f"{color} Score: {score}/100 | {req.get('blood_group')} | {req.get('urgency', '').upper()} | "
            f"{location.get('city', 'N/A')} | {hospital.get('name', 'N/A')}"
        ):
            col1, col2 = st.columns(2)
            with col1:
                st.markdown(f"**Request ID**: `{req.get('id')}`")
                st.markdown(f"**Patient**: {req.get('patient_name')}")
                st.markdown(f"**Units**: {req.get('units_needed')}")
                st.markdown(f"**Required by**: {req.get('required_by')}")
                st.markdown(f"**Priority**: {req.get('priority')}")
            with col2:
                st.markdown(f"**Hospital**: {hospital.get('name')} ({hospital.get('phone')})")
                st.markdown(f"**Address**: {hospital.get('address')}")
                st.markdown(f"**Contact**: {(req.get('contact_info') or {}).get('primary_phone')}")
                st.markdown(f"**Reason**: {req.get('medical_reason')}")

            factors = check.get("factors", [])
            if factors:
                st.markdown("**Contributing Factors:**")
                st.dataframe(pd.DataFrame(factors), use_container_width=True, hide_index=True)

            if check.get("is_reviewed"):
                st.success(f"Reviewed {check.get('review_date', '')[:16]}: {check.get('review_notes', '')}")
            else:
                notes = st.text_input("Review notes", key=f"notes-{req.get('id')}")
                if st.button("Mark reviewed", key=f"review-{req.get('id')}"):
                    outcome = put_api(f"/api/admin/requests/{req.get('id')}/review-fraud",
                                      {"is_reviewed": True, "review_notes": notes or None})
                    st.info(outcome.get("message", outcome.get("detail", "Review failed")))
else:
    st.info("No flagged requests at this threshold.")
