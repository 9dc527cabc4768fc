"""
Pure roster mutations.

Every function takes the current roster and returns a new list; inputs are
never modified in place. Patients are matched by ``id`` and an update always
replaces the matching entry, so ids stay unique across the roster.
"""

from __future__ import annotations

import uuid
from datetime import date

from physioai.schemas.patient import Patient, PatientStatus, SessionLog, WeeklyReport

DEFAULT_REGISTRATION_AGE = 25
SELF_LOGGED_NOTE = "Patient self-logged session via mobile app"


class PatientNotFoundError(LookupError):
    pass


class LogNotFoundError(LookupError):
    pass


class DuplicatePatientError(ValueError):
    pass


def new_id(prefix: str) -> str:
    return f"{prefix}{uuid.uuid4().hex[:12]}"


def today_iso() -> str:
    return date.today().isoformat()


def parse_age(value: int | str | None, default: int) -> int:
    """Lenient age parsing: leading digits win, anything unusable (or zero) gives ``default``."""
    if isinstance(value, int):
        return value or default
    digits = ""
    for ch in (value or "").strip():
        if not ch.isdigit():
            break
        digits += ch
    return int(digits) if digits and int(digits) else default


def find_patient(patients: list[Patient], patient_id: str) -> Patient:
    for p in patients:
        if p.id == patient_id:
            return p
    raise PatientNotFoundError(patient_id)


def find_patient_by_email(patients: list[Patient], email: str) -> Patient | None:
    needle = email.strip().lower()
    return next((p for p in patients if p.email.lower() == needle), None)


def resolve_selected_patient(patients: list[Patient], selected_id: str | None) -> Patient | None:
    if not patients:
        return None
    if selected_id:
        for p in patients:
            if p.id == selected_id:
                return p
    return patients[0]


def replace_patient(patients: list[Patient], updated: Patient) -> list[Patient]:
    find_patient(patients, updated.id)
    return [updated if p.id == updated.id else p for p in patients]


def add_patient(patients: list[Patient], patient: Patient) -> list[Patient]:
    if any(p.id == patient.id for p in patients):
        raise DuplicatePatientError(patient.id)
    return [patient, *patients]


def append_log(patients: list[Patient], patient_id: str, log: SessionLog) -> list[Patient]:
    patient = find_patient(patients, patient_id)
    return replace_patient(patients, patient.model_copy(update={"logs": [*patient.logs, log]}))


def edit_log(
    patients: list[Patient], patient_id: str, log_id: str, *, max_rom: float, pain_score: int
) -> list[Patient]:
    patient = find_patient(patients, patient_id)
    if not any(log.id == log_id for log in patient.logs):
        raise LogNotFoundError(log_id)

    logs = [
        log.model_copy(update={"max_rom": max_rom, "pain_score": pain_score}) if log.id == log_id else log
        for log in patient.logs
    ]
    return replace_patient(patients, patient.model_copy(update={"logs": logs}))


def add_report(patients: list[Patient], patient_id: str, report: WeeklyReport) -> list[Patient]:
    # Newest first, matching how reports are listed to the patient.
    patient = find_patient(patients, patient_id)
    return replace_patient(patients, patient.model_copy(update={"weekly_reports": [report, *patient.weekly_reports]}))


def discharge(patients: list[Patient], patient_id: str) -> list[Patient]:
    patient = find_patient(patients, patient_id)
    reset = patient.model_copy(update={"logs": [], "weekly_reports": [], "status": PatientStatus.ON_TRACK})
    return replace_patient(patients, reset)


def build_log(
    *,
    pain_score: int,
    max_rom: float,
    reps_completed: int,
    notes: str | None = None,
    voice_note_base64: str | None = None,
    voice_analysis: str | None = None,
    on: str | None = None,
) -> SessionLog:
    return SessionLog(
        id=new_id("l"),
        date=on or today_iso(),
        pain_score=pain_score,
        max_rom=max_rom,
        reps_completed=reps_completed,
        notes=notes or SELF_LOGGED_NOTE,
        video_url="",
        voice_note_base64=voice_note_base64 or None,
        voice_analysis=voice_analysis or None,
    )


def build_report(*, title: str, content: str, physio_name: str, on: str | None = None) -> WeeklyReport:
    return WeeklyReport(id=new_id("r"), date=on or today_iso(), title=title, content=content, physio_name=physio_name)


def build_registered_patient(
    template: Patient,
    *,
    name: str,
    age: int | str | None,
    email: str,
    physio_name: str,
) -> Patient:
    """
    New self-registered patient cut from ``template``: same injury, protocol,
    start date and status, but fresh identity and empty logs/reports.
    """
    return template.model_copy(
        deep=True,
        update={
            "id": new_id("p"),
            "name": name.strip(),
            "age": parse_age(age, DEFAULT_REGISTRATION_AGE),
            "email": email.strip(),
            "physio_name": physio_name.strip(),
            "logs": [],
            "weekly_reports": [],
        },
    )


def assert_unique_ids(patients: list[Patient]) -> None:
    seen: set[str] = set()
    for p in patients:
        if p.id in seen:
            raise DuplicatePatientError(p.id)
        seen.add(p.id)
