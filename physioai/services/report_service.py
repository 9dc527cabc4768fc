from __future__ import annotations

import textwrap
from io import BytesIO

from reportlab.lib.pagesizes import letter
from reportlab.lib.units import inch
from reportlab.pdfgen import canvas

from physioai.core.config import settings
from physioai.schemas.patient import Patient

DISCLAIMER = "PhysioAI Monitor demo. Motion readings are simulated and AI notes are not medical advice."
WRAP_WIDTH = 100


def build_patient_export_json(patient: Patient) -> dict:
    data = patient.model_dump(mode="json", exclude={"logs": {"__all__": {"voice_note_base64"}}})
    return {"disclaimer": DISCLAIMER, "patient": data}


def export_filename(patient: Patient, kind: str = "progress") -> str:
    return f"physioai_{kind}_{patient.id}.pdf"


class _PdfWriter:
    def __init__(self) -> None:
        self.buf = BytesIO()
        self.c = canvas.Canvas(self.buf, pagesize=letter)
        self.w, self.h = letter
        self.y = self.h - 0.75 * inch

    def _advance(self, dy: float) -> None:
        self.y -= dy
        if self.y < 1.2 * inch:
            self.c.showPage()
            self.y = self.h - 0.75 * inch

    def title(self, text: str) -> None:
        self.c.setFont("Helvetica-Bold", 16)
        self.c.drawString(0.75 * inch, self.y, text)
        self._advance(0.3 * inch)
        self.c.setFont("Helvetica", 9)
        self.c.setFillGray(0.25)
        self.c.drawString(0.75 * inch, self.y, DISCLAIMER)
        self.c.setFillGray(0)
        self._advance(0.45 * inch)

    def heading(self, text: str) -> None:
        self.c.setFont("Helvetica-Bold", 11)
        self.c.drawString(0.75 * inch, self.y, text)
        self._advance(0.25 * inch)

    def lines(self, lines: list[str], size: int = 10) -> None:
        for line in lines:
            for chunk in textwrap.wrap(line, WRAP_WIDTH) or [""]:
                self.c.setFont("Helvetica", size)
                self.c.drawString(0.75 * inch, self.y, chunk)
                self._advance(0.2 * inch)
        self._advance(0.1 * inch)

    def finish(self) -> bytes:
        self.c.showPage()
        self.c.save()
        return self.buf.getvalue()


def _summary_lines(patient: Patient) -> list[str]:
    return [
        f"Patient: {patient.name} ({patient.id})",
        f"Age: {patient.age}",
        f"Email: {patient.email}",
        f"Physiotherapist: {patient.physio_name}",
        f"Injury: {patient.injury} [{patient.injury_type}]",
        f"Start date: {patient.start_date}",
        f"Status: {patient.status.value}",
        f"Sessions logged: {len(patient.logs)}",
    ]


def build_patient_pdf_bytes(patient: Patient, discharge_report: str | None = None) -> bytes:
    pdf = _PdfWriter()
    pdf.title(f"{settings.app_name} - {'Discharge Summary' if discharge_report else 'Progress Report'}")

    pdf.heading("Patient Summary")
    pdf.lines(_summary_lines(patient))

    if discharge_report:
        pdf.heading("Discharge Report")
        pdf.lines(discharge_report.splitlines(), size=9)

    pdf.heading("Session Log")
    if patient.logs:
        pdf.lines(
            [
                f"{log.date} • pain {log.pain_score}/10 • ROM {log.max_rom:g}° • reps {log.reps_completed}"
                + (f" • {log.notes}" if log.notes else "")
                for log in patient.logs
            ],
            size=9,
        )
    else:
        pdf.lines(["No sessions logged."], size=9)

    if patient.weekly_reports:
        pdf.heading("Clinical Reports")
        for report in patient.weekly_reports:
            pdf.lines([f"{report.date} • {report.title} • {report.physio_name}", report.content], size=9)

    return pdf.finish()
