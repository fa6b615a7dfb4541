"""Database models."""
from app.models.user import User
from app.models.auth_session import AuthSession
from app.models.hiradc_analysis import HiradcAnalysis, RiskCategory
from app.models.fta_analysis import FtaAnalysis, GateType
from app.models.eta_analysis import EtaAnalysis, OutcomeSeverity
from app.models.cca_analysis import CcaAnalysis
from app.models.k3_calculation import K3Calculation
from app.models.contact_message import ContactMessage, MessageStatus
from app.models.activity_log import ActivityLog

__all__ = [
    "User",
    "AuthSession",
    "HiradcAnalysis",
    "RiskCategory",
    "FtaAnalysis",
    "GateType",
    "EtaAnalysis",
    "OutcomeSeverity",
    "CcaAnalysis",
    "K3Calculation",
    "ContactMessage",
    "MessageStatus",
    "ActivityLog",
]
