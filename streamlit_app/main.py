"""
Certflow - Streamlit Verifier Dashboard
Project review and certificate request processing
"""

import streamlit as st
import requests
import pandas as pd
from datetime import datetime
import plotly.graph_objects as go

from certflow.core.config import get_settings

settings = get_settings()

# Page configuration
st.set_page_config(
    page_title="Certflow Verifier Dashboard",
    page_icon="🌿",
    layout="wide",
    initial_sidebar_state="expanded"
)

# Sidebar configuration
st.sidebar.title("⚙️ Configuration")
api_url = st.sidebar.text_input("API Base URL", value=settings.api_base_url, key="api_url")
verifier_id = st.sidebar.number_input("Acting verifier ID", value=1, step=1, min_value=1, key="verifier_id")

# Draft review state lives only in this browser session
if "selected_project" not in st.session_state:
    st.session_state.selected_project = None
if "flash" not in st.session_state:
    st.session_state.flash = None


# API helper functions
def make_request(method: str, endpoint: str, data=None):
    """Make request to API"""
    try:
        url = f"{st.session_state.api_url}{endpoint}"
        if method == "GET":
            response = requests.get(url, timeout=10)
        elif method == "POST":
            response = requests.post(url, json=data, timeout=10)
        else:
            raise ValueError(f"Unsupported method {method}")

        response.raise_for_status()
        return response.json() if response.text else {}
    except requests.exceptions.RequestException as e:
        detail = str(e)
        if e.response is not None:
            try:
                detail = e.response.json().get("detail", detail)
            except ValueError:
                pass
        st.error(f"API Error: {detail}")
        return None


def submit_decision(endpoint: str, payload: dict) -> None:
    """Send a decision, remember the outcome message and reload."""
    result = make_request("POST", endpoint, payload)
    if result:
        st.session_state.flash = (result.get("message", "Done"), result.get("warnings", []))
        st.session_state.selected_project = None
        st.rerun()


# Main title
st.title("🌿 Verifier Dashboard")
st.markdown("**Review environmental projects and process certificate requests**")

if st.session_state.flash:
    message, warnings = st.session_state.flash
    st.success(f"✅ {message}")
    for warning in warnings:
        st.warning(f"⚠️ {warning}")
    st.session_state.flash = None

dashboard = make_request("GET", "/reports/verifier/dashboard") or {}
stats = dashboard.get("stats", {})

# Navigation tabs
tab1, tab2, tab3, tab4 = st.tabs(["📊 Overview", "📝 Pending Projects", "🏅 Certificate Requests", "🔍 Health"])

# ============ OVERVIEW TAB ============
with tab1:
    col1, col2, col3, col4 = st.columns(4)
    with col1:
        st.metric("⏳ Pending Reviews", stats.get("pending_reviews", 0))
    with col2:
        st.metric("✅ Verified", stats.get("verified_projects", 0))
    with col3:
        st.metric("❌ Rejected", stats.get("rejected_projects", 0))
    with col4:
        st.metric("📋 Total Reviewed", stats.get("total_reviewed", 0))

    outcome_data = {
        "Verified": stats.get("verified_projects", 0),
        "Rejected": stats.get("rejected_projects", 0),
    }
    outcome_data = {k: v for k, v in outcome_data.items() if v > 0}

    if outcome_data:
        st.subheader("Review Outcomes")
        fig = go.Figure(data=[go.Pie(
            labels=list(outcome_data.keys()),
            values=list(outcome_data.values()),
            marker=dict(colors=["#00cc96", "#ff6b6b"])
        )])
        fig.update_layout(height=400)
        st.plotly_chart(fig, width="stretch")

# ============ PENDING PROJECTS TAB ============
with tab2:
    st.header("Pending Project Reviews")

    if st.button("🔄 Refresh Projects"):
        st.rerun()

    pending_projects = dashboard.get("pending_projects", [])
    if not pending_projects:
        st.info("No projects awaiting review")

    for project in pending_projects:
        submitter = project.get("submitter") or {}
        with st.container(border=True):
            col1, col2 = st.columns([3, 1])
            with col1:
                st.subheader(project.get("title", ""))
                st.caption(
                    f"📍 {project.get('location', '')} | "
                    f"{project.get('area_hectares', 0):.2f} ha | "
                    f"{project.get('estimated_credits', 0):.0f} estimated credits"
                )
                st.write(project.get("description", ""))
                st.caption(
                    f"Submitted by {submitter.get('full_name', 'unknown')}"
                    f"{' (' + submitter['organization'] + ')' if submitter.get('organization') else ''}"
                    f" on {project.get('submitted_at', '')[:10]}"
                )
            with col2:
                st.markdown(f"`{project.get('status', '')}`")

            if st.session_state.selected_project == project["id"]:
                notes = st.text_area(
                    "Verification notes",
                    key=f"notes_{project['id']}",
                    placeholder="Add your verification notes..."
                )
                col1, col2, col3 = st.columns(3)
                with col1:
                    if st.button("✅ Verify", key=f"verify_{project['id']}"):
                        submit_decision(f"/projects/{project['id']}/decision", {
                            "decision": "verified",
                            "notes": notes,
                            "verifier_id": int(verifier_id)
                        })
                with col2:
                    if st.button("❌ Reject", key=f"reject_{project['id']}"):
                        submit_decision(f"/projects/{project['id']}/decision", {
                            "decision": "rejected",
                            "notes": notes,
                            "verifier_id": int(verifier_id)
                        })
                with col3:
                    if st.button("Cancel", key=f"cancel_{project['id']}"):
                        st.session_state.selected_project = None
                        st.rerun()
            elif st.button("👁️ Review", key=f"review_{project['id']}"):
                st.session_state.selected_project = project["id"]
                st.rerun()

# ============ CERTIFICATE REQUESTS TAB ============
with tab3:
    st.header("Certificate Requests")
    st.markdown("Approve or reject certificate requests from verified projects")

    pending_requests = dashboard.get("pending_requests", [])
    if pending_requests:
        df = pd.DataFrame([
            {
                "ID": r.get("id"),
                "Project": (r.get("project") or {}).get("title", "-"),
                "Location": (r.get("project") or {}).get("location", "-"),
                "Credits": (r.get("project") or {}).get("estimated_credits", 0),
                "Requester": (r.get("requester") or {}).get("full_name", "-"),
                "Role": (r.get("requester") or {}).get("role", "-"),
                "Requested": r.get("requested_at", "")[:10]
            }
            for r in pending_requests
        ])
        st.dataframe(df, width="stretch", hide_index=True)

        for request in pending_requests:
            project = request.get("project") or {}
            col1, col2, col3 = st.columns([3, 1, 1])
            with col1:
                st.write(f"Request #{request['id']} - {project.get('title', 'unknown project')}")
            with col2:
                if st.button("✅ Approve", key=f"approve_req_{request['id']}"):
                    submit_decision(f"/certificate-requests/{request['id']}/decision", {
                        "decision": "approved",
                        "processor_id": int(verifier_id)
                    })
            with col3:
                if st.button("❌ Reject", key=f"reject_req_{request['id']}"):
                    submit_decision(f"/certificate-requests/{request['id']}/decision", {
                        "decision": "rejected",
                        "processor_id": int(verifier_id)
                    })
    else:
        st.info("No pending certificate requests")

# ============ HEALTH TAB ============
with tab4:
    st.header("API Health")

    health = make_request("GET", "/health/")
    if health:
        st.json(health)

    if st.button("Test Connection"):
        ready = make_request("GET", "/health/ready")
        if ready:
            st.success(f"✅ Connected! ({ready.get('status')})")

# Footer
st.divider()
st.markdown(
    f"**Certflow** | API: {st.session_state.api_url} | "
    f"Last updated: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}"
)
