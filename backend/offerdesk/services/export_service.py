"""Export service — CSV and PDF renderings of the audit log."""

import csv
import io
import logging
from datetime import date
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.pagesizes import landscape, letter
from reportlab.lib.styles import getSampleStyleSheet
from reportlab.lib.units import inch
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from offerdesk.models.audit import AuditLog

logger = logging.getLogger(__name__)

CSV_COLUMNS = ["timestamp", "user", "module", "entityId", "action", "justification", "changes"]


def describe_changes(diff: dict | None) -> str:
    """'field: from -> to; ...' for a stored diff."""
    if not diff:
        return ""
    return "; ".join(
        f"{field}: {change.get('from')} -> {change.get('to')}" for field, change in diff.items()
    )


def _row(log: AuditLog) -> list[str]:
    return [
        log.timestamp.isoformat() if log.timestamp else "",
        log.user,
        log.module,
        log.entity_id,
        log.action,
        log.justification or "",
        describe_changes(log.diff),
    ]


class ExportService:
    def audit_csv(self, logs: list[AuditLog]) -> str:
        buf = io.StringIO()
        writer = csv.writer(buf)
        writer.writerow(CSV_COLUMNS)
        for log in logs:
            writer.writerow(_row(log))
        return buf.getvalue()

    def audit_pdf(self, logs: list[AuditLog], filters: dict | None = None) -> bytes:
        buf = io.BytesIO()
        doc = SimpleDocTemplate(buf, pagesize=landscape(letter), topMargin=0.5 * inch)
        styles = getSampleStyleSheet()
        cell = styles["BodyText"]
        cell.fontSize = 7
        cell.leading = 9
        elements = []

        elements.append(Paragraph("OfferDesk Audit Log", styles["Title"]))
        elements.append(Paragraph(f"Generated: {date.today().isoformat()}", styles["Normal"]))
        active_filters = {k: v for k, v in (filters or {}).items() if v}
        if active_filters:
            summary = ", ".join(f"{k}={v}" for k, v in active_filters.items())
            elements.append(Paragraph(f"Filters: {escape(summary)}", styles["Normal"]))
        elements.append(Spacer(1, 12))

        if logs:
            data = [["Time", "User", "Module", "Entity", "Action", "Justification", "Changes"]]
            for log in logs:
                row = _row(log)
                row[0] = row[0][:19]
                # Paragraph parses markup; user text is escaped
                data.append(row[:5] + [Paragraph(escape(row[5]), cell), Paragraph(escape(row[6][:400]), cell)])

            table = Table(
                data,
                colWidths=[1.2 * inch, 0.9 * inch, 1.3 * inch, 1.3 * inch, 1.0 * inch, 1.6 * inch, 2.7 * inch],
                repeatRows=1,
            )
            table.setStyle(TableStyle([
                ("BACKGROUND", (0, 0), (-1, 0), colors.grey),
                ("TEXTCOLOR", (0, 0), (-1, 0), colors.whitesmoke),
                ("FONTSIZE", (0, 0), (-1, -1), 7),
                ("GRID", (0, 0), (-1, -1), 0.5, colors.grey),
                ("VALIGN", (0, 0), (-1, -1), "TOP"),
            ]))
            elements.append(table)
        else:
            elements.append(Paragraph("No audit entries match the filters.", styles["Normal"]))

        doc.build(elements)
        logger.info(f"Audit PDF export: {len(logs)} rows")
        return buf.getvalue()


export_service = ExportService()
