"""Platform analytics and fraud score visualizations."""
import streamlit as st
import httpx
import plotly.express as px
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


st.set_page_config(page_title="Analytics", page_icon="📊", layout="wide")
st.title("📊 Platform Analytics")

analytics = get_api("/api/admin/analytics")
if "fraud_stats" not in analytics:
    st.error("Could not load analytics. Ensure the API is running and ADMIN_USER_ID is set.")
    st.stop()

# === Fraud buckets ===
stats = analytics["fraud_stats"]
c1, c2, c3, c4 = st.columns(4)
with c1:
    st.metric("High (>70)", stats.get("high_fraud", 0))
with c2:
    st.metric("Medium (31-70)", stats.get("medium_fraud", 0))
with c3:
    st.metric("Low (≤30)", stats.get("low_fraud", 0))
with c4:
    st.metric("Reviewed", stats.get("reviewed", 0))

st.divider()

col1, col2 = st.columns(2)

# === Score distribution ===
with col1:
    st.subheader("Fraud Score Distribution")
    scores = analytics.get("score_distribution", [])
    if scores:
        fig = px.histogram(
            pd.DataFrame({"score": scores}),
            x="score",
            nbins=20,
            color_discrete_sequence=["#dc2626"],
            labels={"score": "Fraud Score"},
        )
        fig.add_vline(x=50, line_dash="dash", annotation_text="warning")
        fig.add_vline(x=80, line_dash="dash", annotation_text="notifications suppressed")
        fig.update_layout(height=380)
        st.plotly_chart(fig, use_container_width=True)
    else:
        st.info("No scored requests yet.")

# === Response rates ===
with col2:
    st.subheader("Donor Response (last 30 days)")
    rates = analytics.get("response_rates", {})
    total = rates.get("total_requests", 0)
    answered = rates.get("requests_with_responses", 0)
    if total:
        fig = px.pie(
            names=["With responses", "No responses"],
            values=[answered, total - answered],
            color_discrete_sequence=["#059669", "#d1d5db"],
        )
        fig.update_layout(height=380)
        st.plotly_chart(fig, use_container_width=True)
        st.caption(f"{rates.get('total_responses', 0)} responses across {total} requests")
    else:
        st.info("No requests in the last 30 days.")

st.divider()

# === Request trends ===
st.subheader("Requests per Day by Status")
trends = analytics.get("request_trends", [])
if trends:
    df_trends = pd.DataFrame(trends)
    fig = px.bar(df_trends, x="date", y="count", color="status", barmode="stack")
    fig.update_layout(height=380)
    st.plotly_chart(fig, use_container_width=True)
else:
    st.info("No request activity in the last 30 days.")

# === User growth ===
st.subheader("New Users per Day")
growth = analytics.get("user_growth", [])
if growth:
    df_growth = pd.DataFrame(growth)
    fig = px.line(df_growth, x="date", y="count", color="role", markers=True)
    fig.update_layout(height=340)
    st.plotly_chart(fig, use_container_width=True)
else:
    st.info("No new users in the last 30 days.")
