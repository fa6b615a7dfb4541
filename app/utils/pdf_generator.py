"""
PDF report generation utilities.
"""
import logging
from io import BytesIO
from datetime import datetime, timezone
from typing import Any, List, Sequence
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.pagesizes import letter
from reportlab.lib.styles import getSampleStyleSheet, ParagraphStyle
from reportlab.lib.units import inch
from reportlab.platypus import SimpleDocTemplate, Paragraph, Spacer, Table, TableStyle
from reportlab.lib.enums import TA_CENTER, TA_LEFT, TA_JUSTIFY
from reportlab.platypus.flowables import HRFlowable

from app.schemas.common import AnalysisType
from app.services.report_service import report_title
from app.services.safety_metrics import rate_status

logger = logging.getLogger(__name__)


def _text(value: Any) -> str:
    """Escape user text for reportlab paragraph markup."""
    if value is None or value == "":
        return "-"
    return escape(str(value)).replace("\n", "<br/>")


class AnalysisReportBuilder:
    """Builder class for creating PDF reports of a single analysis record."""

    # Risk category colors
    CATEGORY_COLORS = {
        'Extreme': colors.HexColor('#c0392b'),
        'High': colors.HexColor('#e74c3c'),
        'Medium': colors.HexColor('#f39c12'),
        'Low': colors.HexColor('#27ae60'),
    }

    STATUS_COLORS = {
        'good': '#27ae60',
        'warning': '#f39c12',
        'critical': '#c0392b',
        'info': '#7f8c8d',
    }

    TITLES = {
        AnalysisType.HIRADC: "HIRADC Risk Assessment Report",
        AnalysisType.FTA: "Fault Tree Analysis Report",
        AnalysisType.ETA: "Event Tree Analysis Report",
        AnalysisType.CCA: "Cause Consequence Analysis Report",
        AnalysisType.K3: "Safety Metrics (K3) Report",
    }

    def __init__(self, report_type: AnalysisType, record: Any):
        """
        Initialize PDF report builder.

        Args:
            report_type: Which analysis table the record comes from
            record: ORM instance of that table
        """
        self.report_type = AnalysisType(report_type)
        self.record = record
        self.buffer = BytesIO()
        self.story = []
        self._setup_document()
        self._setup_styles()

    def _setup_document(self):
        self.doc = SimpleDocTemplate(
            self.buffer,
            pagesize=letter,
            topMargin=0.75*inch,
            bottomMargin=0.75*inch,
            leftMargin=0.75*inch,
            rightMargin=0.75*inch,
            title=self.TITLES[self.report_type],
        )

    def _setup_styles(self):
        """Define custom paragraph styles for the report."""
        styles = getSampleStyleSheet()

        self.title_style = ParagraphStyle(
            'TitleStyle',
            parent=styles['Heading1'],
            fontSize=24,
            textColor=colors.HexColor('#2c3e50'),
            spaceAfter=20,
            alignment=TA_CENTER,
            fontName='Helvetica-Bold',
            leading=30
        )

        self.subtitle_style = ParagraphStyle(
            'SubtitleStyle',
            parent=styles['Normal'],
            fontSize=11,
            textColor=colors.HexColor('#7f8c8d'),
            alignment=TA_CENTER,
            spaceAfter=15
        )

        self.section_style = ParagraphStyle(
            'SectionStyle',
            parent=styles['Heading2'],
            fontSize=15,
            textColor=colors.HexColor('#2c3e50'),
            spaceAfter=10,
            spaceBefore=16,
            fontName='Helvetica-Bold',
        )

        self.score_style = ParagraphStyle(
            'ScoreStyle',
            parent=styles['Normal'],
            fontSize=40,
            textColor=colors.HexColor('#2c3e50'),
            alignment=TA_CENTER,
            fontName='Helvetica-Bold',
            leading=46,
            spaceAfter=10
        )

        self.normal_style = ParagraphStyle(
            'NormalStyle',
            parent=styles['Normal'],
            fontSize=10,
            leading=14,
            alignment=TA_LEFT
        )

        self.body_style = ParagraphStyle(
            'BodyStyle',
            parent=styles['Normal'],
            fontSize=10,
            leading=14,
            alignment=TA_JUSTIFY,
            spaceAfter=8
        )

        self.footer_style = ParagraphStyle(
            'FooterStyle',
            parent=styles['Normal'],
            fontSize=9,
            textColor=colors.HexColor('#95a5a6'),
            alignment=TA_CENTER,
            spaceBefore=20
        )

    def _table(self, header: Sequence[str], rows: List[Sequence[Any]], col_widths=None) -> Table:
        data = [[Paragraph(f"<b>{_text(h)}</b>", self.normal_style) for h in header]]
        for row in rows:
            data.append([Paragraph(_text(cell), self.normal_style) for cell in row])
        table = Table(data, colWidths=col_widths, repeatRows=1)
        table.setStyle(TableStyle([
            ('BACKGROUND', (0, 0), (-1, 0), colors.HexColor('#ecf0f1')),
            ('GRID', (0, 0), (-1, -1), 0.5, colors.HexColor('#bdc3c7')),
            ('VALIGN', (0, 0), (-1, -1), 'TOP'),
            ('TOPPADDING', (0, 0), (-1, -1), 4),
            ('BOTTOMPADDING', (0, 0), (-1, -1), 4),
        ]))
        return table

    def _add_title_page(self):
        self.story.append(Spacer(1, 0.3*inch))
        self.story.append(Paragraph(self.TITLES[self.report_type], self.title_style))
        self.story.append(Paragraph(_text(report_title(self.report_type, self.record)), self.subtitle_style))
        self.story.append(HRFlowable(width="100%", thickness=2, color=colors.HexColor('#34495e'), spaceBefore=5, spaceAfter=15))

        metadata_items = [f"<b>Type:</b> {self.report_type.value}", f"<b>Record:</b> #{self.record.id}"]
        created_at = getattr(self.record, "created_at", None)
        if created_at:
            metadata_items.append(f"<b>Created:</b> {created_at.strftime('%Y-%m-%d %H:%M')}")
        self.story.append(Paragraph(" | ".join(metadata_items), self.normal_style))

        timestamp = datetime.now(timezone.utc).strftime("%B %d, %Y at %H:%M:%S UTC")
        self.story.append(Paragraph(f"<i>Generated: {timestamp}</i>", self.subtitle_style))
        self.story.append(Spacer(1, 0.2*inch))

    def _add_hiradc_body(self):
        record = self.record
        category = getattr(record.risk_category, "value", record.risk_category)

        self.story.append(Paragraph("Activity", self.section_style))
        self.story.append(self._table(
            ["Field", "Value"],
            [
                ["Activity", record.activity_name],
                ["Location", record.location],
                ["Hazard", record.hazard],
                ["Severity", record.severity],
                ["Likelihood", record.likelihood],
            ],
            col_widths=[1.6*inch, 5.3*inch],
        ))

        self.story.append(Paragraph("Risk Score", self.section_style))
        self.story.append(Paragraph(f"{record.risk_score}/25", self.score_style))
        category_style = ParagraphStyle(
            'CategoryStyle',
            parent=self.normal_style,
            fontSize=14,
            textColor=self.CATEGORY_COLORS.get(category, colors.black),
            alignment=TA_CENTER,
            fontName='Helvetica-Bold',
            spaceAfter=15
        )
        self.story.append(Paragraph(f"{_text(category).upper()} RISK", category_style))

        controls = record.recommended_controls or []
        if controls:
            self.story.append(Paragraph("Recommended Controls", self.section_style))
            for index, control in enumerate(controls, start=1):
                self.story.append(Paragraph(f"{index}. {_text(control)}", self.body_style))

        if record.ai_insight:
            insight_style = ParagraphStyle(
                'InsightStyle',
                parent=self.body_style,
                backColor=colors.HexColor('#f8f9fa'),
                borderPadding=8,
                leftIndent=5,
                rightIndent=5,
            )
            self.story.append(Paragraph("AI Insight", self.section_style))
            self.story.append(Paragraph(_text(record.ai_insight), insight_style))

    def _add_fta_body(self):
        structure = self.record.structure or {}
        self.story.append(Paragraph(f"<b>Top Event:</b> {_text(self.record.top_event)}", self.body_style))

        gates = structure.get("gates", [])
        self.story.append(Paragraph(f"Gates ({len(gates)})", self.section_style))
        if gates:
            self.story.append(self._table(
                ["Gate", "Type", "Parent"],
                [[g.get("id"), g.get("type"), g.get("parent_id")] for g in gates],
            ))

        intermediate = structure.get("intermediate_events", [])
        self.story.append(Paragraph(f"Intermediate Events ({len(intermediate)})", self.section_style))
        if intermediate:
            self.story.append(self._table(
                ["Event", "Description", "Gate"],
                [[e.get("id"), e.get("text"), e.get("gate_id")] for e in intermediate],
            ))

        basic = structure.get("basic_events", [])
        self.story.append(Paragraph(f"Basic Events ({len(basic)})", self.section_style))
        if basic:
            self.story.append(self._table(
                ["Event", "Description", "Parent Gate"],
                [[e.get("id"), e.get("text"), e.get("parent_gate_id")] for e in basic],
            ))

    def _add_eta_body(self):
        record = self.record
        self.story.append(Paragraph(f"<b>Initiating Event:</b> {_text(record.initiating_event)}", self.body_style))

        barriers = record.barriers or []
        self.story.append(Paragraph(f"Barriers ({len(barriers)})", self.section_style))
        if barriers:
            self.story.append(self._table(
                ["#", "Barrier", "Success Rate"],
                [[i, b.get("name"), f"{b.get('success_rate', 0):.2f}"] for i, b in enumerate(barriers, start=1)],
            ))

        outcomes = record.outcomes or []
        self.story.append(Paragraph(f"Outcomes ({len(outcomes)})", self.section_style))
        if outcomes:
            rows = []
            for i, outcome in enumerate(outcomes, start=1):
                path = " / ".join("Success" if step else "Fail" for step in outcome.get("path", [])) or "-"
                rows.append([i, path, f"{outcome.get('frequency', 0):.4f}", outcome.get("severity")])
            self.story.append(self._table(["#", "Path", "Frequency", "Severity"], rows))
            total = sum(o.get("frequency", 0) for o in outcomes)
            self.story.append(Spacer(1, 0.1*inch))
            self.story.append(Paragraph(f"<b>Total frequency:</b> {total:.4f}", self.normal_style))

    def _add_cca_body(self):
        record = self.record
        self.story.append(Paragraph(f"<b>Critical Event:</b> {_text(record.critical_event)}", self.body_style))
        for heading, events in (("Causes", record.cause_tree or []), ("Consequences", record.consequence_tree or [])):
            self.story.append(Paragraph(f"{heading} ({len(events)})", self.section_style))
            if events:
                self.story.append(self._table(
                    ["#", "Event", "Gate"],
                    [[i, e.get("text"), e.get("gate_type")] for i, e in enumerate(events, start=1)],
                ))

    def _add_k3_body(self):
        record = self.record
        self.story.append(Paragraph("Inputs", self.section_style))
        self.story.append(self._table(
            ["Input", "Value"],
            [
                ["Lost Time Injuries", record.total_lti],
                ["Total Incidents", record.total_incidents],
                ["Total Work Hours", record.total_work_hours],
                ["Days Lost", record.total_days_lost],
                ["Employees with PPE", record.employees_with_ppe],
                ["Total Employees", record.total_employees],
            ],
        ))

        metrics = [
            ("LTIR", "ltir"),
            ("TRIR", "trir"),
            ("Severity Rate", "severity_rate"),
            ("Frequency Rate", "frequency_rate"),
            ("Safe Man-Hours", "safe_man_hours"),
            ("PPE Compliance (%)", "compliance_ppe"),
        ]
        self.story.append(Paragraph("Metrics", self.section_style))
        rows = []
        for label, field in metrics:
            value = getattr(record, field)
            rows.append([label, value, rate_status(field, value).upper()])
        self.story.append(self._table(["Metric", "Value", "Status"], rows))

    def _add_footer(self):
        self.story.append(Spacer(1, 0.3*inch))
        self.story.append(HRFlowable(width="100%", thickness=1, color=colors.HexColor('#ecf0f1'), spaceBefore=10, spaceAfter=10))

        timestamp = datetime.now(timezone.utc).strftime("%Y-%m-%d %H:%M:%S UTC")
        self.story.append(Paragraph(f"Generated by SMART OSH | {timestamp}", self.footer_style))

    def build(self) -> bytes:
        """
        Build the complete PDF report and return PDF bytes.

        Returns:
            bytes: Raw PDF bytes
        """
        bodies = {
            AnalysisType.HIRADC: self._add_hiradc_body,
            AnalysisType.FTA: self._add_fta_body,
            AnalysisType.ETA: self._add_eta_body,
            AnalysisType.CCA: self._add_cca_body,
            AnalysisType.K3: self._add_k3_body,
        }
        self._add_title_page()
        bodies[self.report_type]()
        self._add_footer()

        try:
            self.doc.build(self.story)
            return self.buffer.getvalue()
        except Exception as e:
            logger.error(f"Error generating PDF: {e}", exc_info=True)
            raise
        finally:
            self.buffer.close()


def generate_analysis_report_pdf(report_type: AnalysisType, record: Any) -> bytes:
    """
    Generate a PDF report for one analysis record.

    Args:
        report_type: Analysis table of the record
        record: ORM instance

    Returns:
        bytes: Raw PDF bytes
    """
    return AnalysisReportBuilder(report_type, record).build()
