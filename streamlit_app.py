"""
Streamlit UI for SMART OSH - occupational safety risk assessment.

Connects to the FastAPI backend for accounts, analyses, reports and the dashboard.
"""
import streamlit as st
from dataclasses import asdict
from datetime import datetime
from typing import List, Optional
import logging
import pandas as pd

from app.models.fta_analysis import GateType
from app.services.event_tree import MAX_BARRIERS, enumerate_outcomes, outcome_summary
from app.services.fault_tree import add_basic_event, add_intermediate_event, empty_structure, count_nodes
from app.services.cause_consequence import add_event
from app.services.risk_scoring import assess_risk
from app.services.safety_metrics import SafetyInputs, calculate_safety_metrics, rate_status
from app.ui.api_client import ApiResult, get_api_base_url
from app.ui.diagrams import cause_consequence_dot, event_tree_dot, fault_tree_dot
from app.ui.session import AuthState, GateDecision, UISession, gate
from app.ui import validation

logger = logging.getLogger(__name__)

# Page config
st.set_page_config(
    page_title="SMART OSH",
    page_icon="🦺",
    layout="wide",
    initial_sidebar_state="expanded"
)

API_BASE_URL = get_api_base_url()

PROTECTED_PAGES = [
    "Dashboard",
    "AI HIRADC",
    "K3 Calculator",
    "Fault Tree Analysis",
    "Event Tree Analysis",
    "Cause Consequence Analysis",
    "Reports",
    "Contact",
    "About",
]

RISK_BADGES = {"Low": "🟢", "Medium": "🟡", "High": "🟠", "Extreme": "🔴"}
STATUS_BADGES = {"good": "🟢", "warning": "🟡", "critical": "🔴", "info": "🔵"}

# Initialize session state
if "ui_session" not in st.session_state:
    st.session_state.ui_session = UISession()
if "page" not in st.session_state:
    st.session_state.page = "Login"
if "fta_structure" not in st.session_state:
    st.session_state.fta_structure = empty_structure()
if "cca_causes" not in st.session_state:
    st.session_state.cca_causes = []
if "cca_consequences" not in st.session_state:
    st.session_state.cca_consequences = []
if "hiradc_insight" not in st.session_state:
    st.session_state.hiradc_insight = ""

session: UISession = st.session_state.ui_session
api = session.client


# ============= Helpers =============

def show_errors(errors: List[str]) -> bool:
    """Render validation errors inline. Returns True if there were any."""
    for error in errors:
        st.error(f"⚠️ {error}")
    return bool(errors)


def show_api_error(result: ApiResult, message: str) -> None:
    """Generic message plus the backend detail, if any."""
    if result.unauthorized:
        session.logout()
        st.session_state.page = "Login"
        st.warning("Your session has expired. Please log in again.")
        return
    st.error(f"❌ {message}" + (f": {result.error}" if result.error else ""))


def go_to(page: str) -> None:
    st.session_state.page = page
    st.rerun()


def format_date(value: Optional[str]) -> str:
    if not value:
        return "-"
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00")).strftime("%Y-%m-%d %H:%M")
    except ValueError:
        return value


# ============= Public pages =============

def render_login():
    st.title("🦺 SMART OSH")
    st.caption("Sign in to your risk assessment workspace")
    with st.form("login_form"):
        email = st.text_input("Email", placeholder="your.email@company.com")
        password = st.text_input("Password", type="password")
        submitted = st.form_submit_button("Log In", type="primary", use_container_width=True)

    if submitted:
        errors = validation.required_fields(
            {"email": email, "password": password}, {"email": "Email", "password": "Password"}
        )
        if not show_errors(errors):
            with st.spinner("Signing in..."):
                result = session.login(email.strip(), password)
            if result.ok:
                go_to("Dashboard")
            else:
                st.error(f"❌ Login failed: {result.error}")

    col1, col2 = st.columns(2)
    if col1.button("Create an account"):
        go_to("Register")
    if col2.button("Forgot password?"):
        go_to("Forgot Password")


def render_register():
    st.title("Create Account")
    with st.form("register_form"):
        name = st.text_input("Full Name")
        email = st.text_input("Email")
        password = st.text_input("Password", type="password")
        password_confirm = st.text_input("Confirm Password", type="password")
        submitted = st.form_submit_button("Register", type="primary", use_container_width=True)

    if submitted:
        errors = validation.validate_registration(name, email, password, password_confirm)
        if not show_errors(errors):
            with st.spinner("Creating account..."):
                result = session.register(name.strip(), email.strip(), password, password_confirm)
            if result.ok:
                st.success("✅ Account created. Welcome!")
                go_to("Dashboard")
            else:
                st.error(f"❌ Registration failed: {result.error}")

    if st.button("Back to login"):
        go_to("Login")


def render_forgot_password():
    st.title("Forgot Password")
    st.caption("Enter your email and we will send you a reset link.")
    with st.form("forgot_form"):
        email = st.text_input("Email", placeholder="your.email@company.com")
        submitted = st.form_submit_button("Send Reset Link", type="primary")

    if submitted and not show_errors(validation.validate_email(email)):
        result = api.request_password_reset(email.strip())
        if result.ok:
            st.success("✅ If an account exists for this email, a reset link has been sent.")
        else:
            st.error(f"❌ Failed to request password reset: {result.error}")

    if st.button("Back to login"):
        go_to("Login")


def render_reset_password(token: str):
    st.title("Reset Password")
    if not token:
        st.error("❌ Invalid or missing reset token.")
        if st.button("Request a new link"):
            go_to("Forgot Password")
        return

    password = st.text_input("New Password", type="password")
    if password:
        strength = validation.password_strength(password)
        st.progress(strength / 5, text=f"Password strength: {validation.strength_label(strength)}")
    password_confirm = st.text_input("Confirm New Password", type="password")

    if st.button("Reset Password", type="primary"):
        if not show_errors(validation.validate_new_password(password, password_confirm)):
            result = api.confirm_password_reset(token, password, password_confirm)
            if result.ok:
                st.query_params.clear()
                st.success("✅ Password has been reset. You can now log in.")
                st.session_state.page = "Login"
            else:
                st.error(f"❌ Failed to reset password: {result.error}")


# ============= Dashboard =============

def render_dashboard():
    user_name = (session.user or {}).get("name", "")
    st.title(f"Welcome back, {user_name}")
    st.caption("Overview of your risk analyses and safety performance")

    with st.spinner("Loading dashboard data..."):
        result = api.dashboard()
    if not result.ok:
        show_api_error(result, "Failed to load dashboard data. Please try again later")
        return
    data = result.data

    kpis = data["kpis"]
    col1, col2, col3, col4 = st.columns(4)
    col1.metric("Total Analyses", kpis["total"])
    col2.metric("🔴 High Risk", kpis["high"])
    col3.metric("🟡 Medium Risk", kpis["medium"])
    col4.metric("🟢 Low Risk", kpis["low"])

    left, right = st.columns(2)
    with left:
        st.subheader("Analysis Trend (6 months)")
        trend = pd.DataFrame(data["monthly_trend"])
        if not trend.empty:
            st.line_chart(trend.set_index("name")["analyses"])
    with right:
        st.subheader("Average TRIR (6 months)")
        trir = pd.DataFrame(data["trir_trend"])
        if not trir.empty:
            st.bar_chart(trir.set_index("name")["trir"])

    left, right = st.columns([1, 2])
    with left:
        st.subheader("Risk Distribution")
        distribution = pd.DataFrame(data["risk_distribution"])
        if distribution["value"].sum() > 0:
            st.bar_chart(distribution.set_index("name")["value"])
        else:
            st.info("No analyses yet.")
    with right:
        st.subheader("Recent Activities")
        recent = data["recent_activities"]
        if recent:
            df = pd.DataFrame(recent)
            df["date"] = df["date"].apply(format_date)
            st.dataframe(df[["title", "type", "score", "date"]], use_container_width=True, hide_index=True)
        else:
            st.info("No recent activities. Start with an AI HIRADC analysis.")


# ============= HIRADC =============

def render_hiradc():
    st.title("AI HIRADC")
    st.caption("Hazard Identification, Risk Assessment and Determining Control")

    activity_name = st.text_input("Activity Name")
    location = st.text_input("Location")
    hazard = st.text_area("Potential Hazard")
    col1, col2 = st.columns(2)
    severity = col1.slider("Severity", 1, 5, 3)
    likelihood = col2.slider("Likelihood", 1, 5, 3)

    assessment = assess_risk(severity, likelihood)
    badge = RISK_BADGES.get(assessment.category.value, "⚪")
    st.metric("Risk Score", f"{assessment.score}/25", help="Severity x Likelihood")
    st.markdown(f"**Risk Category:** {badge} {assessment.category.value}")
    if assessment.requires_immediate_action:
        st.warning("⚠️ This risk requires immediate action before the activity continues.")

    fields = {
        "activity_name": activity_name,
        "location": location,
        "hazard": hazard,
    }
    labels = {"activity_name": "Activity name", "location": "Location", "hazard": "Hazard"}
    payload = {**fields, "severity": severity, "likelihood": likelihood}

    col1, col2 = st.columns(2)
    if col1.button("🤖 Generate AI Insight"):
        if not show_errors(validation.required_fields(fields, labels)):
            with st.spinner("Generating insight..."):
                result = api.generate_insight(payload)
            if result.ok:
                st.session_state.hiradc_insight = result.data["ai_insight"]
            else:
                show_api_error(result, "Failed to generate AI insight")

    insight = st.text_area("AI Insight", value=st.session_state.hiradc_insight, height=220)

    if col2.button("💾 Save Analysis", type="primary"):
        if not show_errors(validation.required_fields(fields, labels)):
            result = api.create_record("hiradc", {**payload, "analysis_type": "HIRADC", "ai_insight": insight})
            if result.ok:
                st.success(f"✅ Analysis saved (score {result.data['risk_score']}, {result.data['risk_category']})")
                st.session_state.hiradc_insight = ""
            else:
                show_api_error(result, "Failed to save analysis")

    st.markdown("---")
    st.subheader("Saved Analyses")
    result = api.list_records("hiradc")
    if not result.ok:
        show_api_error(result, "Failed to load analyses")
        return
    items = result.data["items"]
    if not items:
        st.info("No HIRADC analyses yet.")
        return
    df = pd.DataFrame(items)
    df["created_at"] = df["created_at"].apply(format_date)
    st.dataframe(
        df[["id", "activity_name", "location", "severity", "likelihood", "risk_score", "risk_category", "created_at"]],
        use_container_width=True,
        hide_index=True,
    )


# ============= K3 calculator =============

def render_calculator():
    st.title("K3 Calculator")
    st.caption("Occupational safety performance metrics")

    col1, col2, col3 = st.columns(3)
    total_work_hours = col1.number_input("Total Work Hours", min_value=0.0, step=1000.0)
    total_lti = col2.number_input("Lost Time Injuries", min_value=0.0, step=1.0)
    total_incidents = col3.number_input("Total Incidents", min_value=0.0, step=1.0)
    total_days_lost = col1.number_input("Days Lost", min_value=0.0, step=1.0)
    employees_with_ppe = col2.number_input("Employees with PPE", min_value=0.0, step=1.0)
    total_employees = col3.number_input("Total Employees", min_value=0.0, step=1.0)

    inputs = SafetyInputs(
        total_lti=total_lti,
        total_incidents=total_incidents,
        total_work_hours=total_work_hours,
        total_days_lost=total_days_lost,
        employees_with_ppe=employees_with_ppe,
        total_employees=total_employees,
    )
    metrics = calculate_safety_metrics(inputs).to_dict()

    labels = {
        "ltir": "LTIR",
        "trir": "TRIR",
        "severity_rate": "Severity Rate",
        "frequency_rate": "Frequency Rate",
        "safe_man_hours": "Safe Man-Hours",
        "compliance_ppe": "PPE Compliance (%)",
    }
    columns = st.columns(3)
    for index, (field, label) in enumerate(labels.items()):
        badge = STATUS_BADGES[rate_status(field, metrics[field])]
        columns[index % 3].metric(f"{badge} {label}", f"{metrics[field]:,.2f}")

    if st.button("💾 Save Calculation", type="primary"):
        result = api.create_record("calculator", {"analysis_type": "K3", **asdict(inputs)})
        if result.ok:
            st.success("✅ Calculation saved")
        else:
            show_api_error(result, "Failed to save calculation")

    st.markdown("---")
    st.subheader("History")
    result = api.list_records("calculator")
    if result.ok and result.data["items"]:
        df = pd.DataFrame(result.data["items"])
        df["created_at"] = df["created_at"].apply(format_date)
        st.dataframe(df[["id", *labels.keys(), "created_at"]], use_container_width=True, hide_index=True)
    elif not result.ok:
        show_api_error(result, "Failed to load calculations")
    else:
        st.info("No calculations saved yet.")


# ============= FTA =============

def render_fta():
    st.title("Fault Tree Analysis")
    structure = st.session_state.fta_structure

    title = st.text_input("Title")
    top_event = st.text_input("Top Event", value=structure["top_event"].get("text", ""))

    gate_options = ["top"] + [gate["id"] for gate in structure["gates"]]
    col1, col2 = st.columns(2)
    with col1:
        st.subheader("Add Intermediate Event")
        with st.form("fta_intermediate", clear_on_submit=True):
            text = st.text_input("Event description")
            gate_type = st.selectbox("Gate", [g.value for g in GateType])
            parent = st.selectbox("Attach to", gate_options)
            if st.form_submit_button("Add Event"):
                try:
                    st.session_state.fta_structure = add_intermediate_event(structure, text, GateType(gate_type), parent)
                    st.rerun()
                except ValueError as e:
                    st.error(f"⚠️ {e}")
    with col2:
        st.subheader("Add Basic Event")
        with st.form("fta_basic", clear_on_submit=True):
            text = st.text_input("Basic event description")
            parent = st.selectbox("Attach to gate", gate_options)
            if st.form_submit_button("Add Basic Event"):
                try:
                    st.session_state.fta_structure = add_basic_event(structure, text, parent)
                    st.rerun()
                except ValueError as e:
                    st.error(f"⚠️ {e}")

    preview = {**structure, "top_event": {**structure["top_event"], "text": top_event}}
    st.graphviz_chart(fault_tree_dot(preview))
    counts = count_nodes(structure)
    st.caption(
        f"{counts['gates']} gate(s), {counts['intermediate_events']} intermediate event(s), "
        f"{counts['basic_events']} basic event(s)"
    )

    col1, col2 = st.columns(2)
    if col1.button("💾 Save FTA", type="primary"):
        errors = validation.required_fields({"title": title, "top_event": top_event}, {"title": "Title", "top_event": "Top event"})
        if not show_errors(errors):
            result = api.create_record("fta", {
                "analysis_type": "FTA",
                "title": title,
                "top_event": top_event,
                "structure": structure,
            })
            if result.ok:
                st.success("✅ Fault tree saved")
                st.session_state.fta_structure = empty_structure()
            else:
                show_api_error(result, "Failed to save fault tree")
    if col2.button("Reset Diagram"):
        st.session_state.fta_structure = empty_structure()
        st.rerun()


# ============= ETA =============

def render_eta():
    st.title("Event Tree Analysis")
    title = st.text_input("Title")
    initiating_event = st.text_input("Initiating Event")

    st.subheader("Barriers")
    st.caption(f"Success rate between 0 and 1. At most {MAX_BARRIERS} barriers.")
    default = pd.DataFrame([{"name": "Barrier 1", "success_rate": 0.9}])
    edited = st.data_editor(
        st.session_state.get("eta_barriers", default),
        num_rows="dynamic",
        use_container_width=True,
        column_config={
            "name": st.column_config.TextColumn("Barrier", required=True),
            "success_rate": st.column_config.NumberColumn("Success Rate", min_value=0.0, max_value=1.0, step=0.01),
        },
        key="eta_editor",
    )
    barriers = [
        {"name": str(row["name"]).strip(), "success_rate": float(row["success_rate"])}
        for _, row in edited.dropna(subset=["name", "success_rate"]).iterrows()
        if str(row["name"]).strip()
    ]

    errors = []
    for barrier in barriers:
        errors += validation.validate_probability(barrier["success_rate"])
    if len(barriers) > MAX_BARRIERS:
        errors.append(f"At most {MAX_BARRIERS} barriers are supported")
    if show_errors(errors):
        return

    evaluated = enumerate_outcomes([b["success_rate"] for b in barriers])
    summary = outcome_summary(evaluated)
    outcomes = [o.to_dict() for o in evaluated]
    st.graphviz_chart(event_tree_dot(initiating_event, barriers, outcomes))

    rows = [
        {
            "Outcome": index,
            "Path": " / ".join("Success" if step else "Fail" for step in outcome["path"]) or "-",
            "Frequency": round(outcome["frequency"], 6),
            "Severity": outcome["severity"],
        }
        for index, outcome in enumerate(outcomes, start=1)
    ]
    st.dataframe(pd.DataFrame(rows), use_container_width=True, hide_index=True)
    st.caption(f"Total frequency: {summary['total_frequency']:.4f}")

    if st.button("💾 Save ETA", type="primary"):
        errors = validation.required_fields(
            {"title": title, "initiating_event": initiating_event},
            {"title": "Title", "initiating_event": "Initiating event"},
        )
        if not show_errors(errors):
            result = api.create_record("eta", {
                "analysis_type": "ETA",
                "title": title,
                "initiating_event": initiating_event,
                "barriers": barriers,
            })
            if result.ok:
                st.success(f"✅ Event tree saved with {len(result.data['outcomes'])} outcomes")
            else:
                show_api_error(result, "Failed to save event tree")


# ============= CCA =============

def render_cca():
    st.title("Cause Consequence Analysis")
    title = st.text_input("Title")
    critical_event = st.text_input("Critical Event")

    col1, col2 = st.columns(2)
    for column, key, heading in ((col1, "cca_causes", "Causes"), (col2, "cca_consequences", "Consequences")):
        with column:
            st.subheader(heading)
            with st.form(f"form_{key}", clear_on_submit=True):
                text = st.text_input("Event description")
                gate_type = st.selectbox("Gate", [g.value for g in GateType])
                if st.form_submit_button(f"Add to {heading}"):
                    try:
                        st.session_state[key] = add_event(st.session_state[key], text, GateType(gate_type))
                        st.rerun()
                    except ValueError as e:
                        st.error(f"⚠️ {e}")
            for index, event in enumerate(st.session_state[key], start=1):
                st.markdown(f"{index}. {event['text']} `{event['gate_type']}`")

    st.graphviz_chart(cause_consequence_dot(critical_event, st.session_state.cca_causes, st.session_state.cca_consequences))

    if st.button("💾 Save CCA", type="primary"):
        errors = validation.required_fields(
            {"title": title, "critical_event": critical_event},
            {"title": "Title", "critical_event": "Critical event"},
        )
        if not show_errors(errors):
            result = api.create_record("cca", {
                "analysis_type": "CCA",
                "title": title,
                "critical_event": critical_event,
                "cause_tree": st.session_state.cca_causes,
                "consequence_tree": st.session_state.cca_consequences,
            })
            if result.ok:
                st.success("✅ Cause consequence analysis saved")
                st.session_state.cca_causes = []
                st.session_state.cca_consequences = []
            else:
                show_api_error(result, "Failed to save analysis")


# ============= Reports =============

def render_reports():
    st.title("Reports")
    col1, col2 = st.columns([1, 2])
    report_type = col1.selectbox("Type", ["All", "HIRADC", "FTA", "ETA", "CCA", "K3"])
    search = col2.text_input("Search by title or type")
    page = st.number_input("Page", min_value=1, value=1, step=1)

    result = api.list_reports(None if report_type == "All" else report_type, search or None, int(page))
    if not result.ok:
        show_api_error(result, "Failed to load reports")
        return

    data = result.data
    st.caption(f"Showing {data['total']} report(s), page {data['page']} of {max(data['total_pages'], 1)}")
    if not data["items"]:
        st.info("No reports found.")
        return

    for item in data["items"]:
        col1, col2, col3, col4, col5 = st.columns([3, 1, 2, 1, 1])
        col1.markdown(f"**{item['title']}**  \n{format_date(item['created_at'])}")
        col2.markdown(f"`{item['type']}`")
        col3.markdown(item["status"])
        pdf_key = f"pdf_{item['type']}_{item['id']}"
        if col4.button("📄 PDF", key=f"btn_{pdf_key}"):
            pdf = api.report_pdf(item["type"], item["id"])
            if pdf.ok:
                st.session_state[pdf_key] = pdf.data
            else:
                show_api_error(pdf, "Failed to export PDF")
        if pdf_key in st.session_state:
            col4.download_button(
                "⬇️",
                data=st.session_state[pdf_key],
                file_name=f"{item['type'].lower()}_{item['id']}.pdf",
                mime="application/pdf",
                key=f"dl_{pdf_key}",
            )
        if col5.button("🗑️", key=f"del_{item['type']}_{item['id']}"):
            deleted = api.delete_report(item["type"], item["id"])
            if deleted.ok:
                st.success("Report deleted")
                st.rerun()
            else:
                show_api_error(deleted, "Failed to delete report")


# ============= Contact & About =============

def render_contact():
    st.title("Contact")
    user = session.user or {}
    with st.form("contact_form", clear_on_submit=True):
        name = st.text_input("Name", value=user.get("name", ""))
        email = st.text_input("Email", value=user.get("email", ""))
        message = st.text_area("Message")
        submitted = st.form_submit_button("Send Message", type="primary")

    if submitted and not show_errors(validation.validate_contact(name, email, message)):
        result = api.send_contact_message(name.strip(), email.strip(), message.strip())
        if result.ok:
            st.success("✅ Message sent. We will get back to you soon.")
        else:
            show_api_error(result, "Failed to send message")


def render_about():
    st.title("About SMART OSH")
    st.markdown(
        """
SMART OSH supports occupational safety and health teams with five analysis tools:

* **AI HIRADC**: hazard identification with a severity x likelihood risk score
  (Low up to 5, Medium up to 12, High up to 20, Extreme above) and a written insight.
* **K3 Calculator**: LTIR, TRIR, severity rate, frequency rate, safe man-hours and PPE compliance.
* **Fault Tree Analysis**: top event decomposed through AND/OR gates into basic events.
* **Event Tree Analysis**: every success/failure path of the barriers with its frequency.
* **Cause Consequence Analysis**: causes and consequences of a critical event.
        """
    )
    st.caption(f"Backend: {API_BASE_URL}")


# ============= Routing =============

PAGE_RENDERERS = {
    "Dashboard": render_dashboard,
    "AI HIRADC": render_hiradc,
    "K3 Calculator": render_calculator,
    "Fault Tree Analysis": render_fta,
    "Event Tree Analysis": render_eta,
    "Cause Consequence Analysis": render_cca,
    "Reports": render_reports,
    "Contact": render_contact,
    "About": render_about,
}


def main():
    reset_token = st.query_params.get("token")
    if st.query_params.get("page") == "reset-password":
        render_reset_password(reset_token or "")
        return

    if session.state == AuthState.LOADING:
        session.refresh()

    with st.sidebar:
        st.header("🦺 SMART OSH")
        if session.is_authenticated:
            st.caption(f"Signed in as {(session.user or {}).get('email', '')}")
            current = st.session_state.page if st.session_state.page in PROTECTED_PAGES else "Dashboard"
            st.session_state.page = st.radio("Navigation", PROTECTED_PAGES, index=PROTECTED_PAGES.index(current))
            if st.button("Log Out", use_container_width=True):
                session.logout()
                go_to("Login")
        st.markdown("---")
        st.text_input("Backend URL", value=API_BASE_URL, disabled=True, help="Set via API_BASE_URL environment variable")

    page = st.session_state.page
    if page == "Register":
        render_register()
        return
    if page == "Forgot Password":
        render_forgot_password()
        return

    decision = gate(session.state)
    if decision == GateDecision.SHOW_LOADING:
        st.info("Connecting to the server...")
        if st.button("Retry"):
            session.refresh()
            st.rerun()
    elif decision == GateDecision.REDIRECT_LOGIN or page not in PAGE_RENDERERS:
        render_login()
    else:
        PAGE_RENDERERS[page]()


main()
