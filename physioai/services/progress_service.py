from __future__ import annotations

import math

from physioai.schemas.patient import Patient
from physioai.schemas.therapist import (
    ChartPoint,
    ChartResponse,
    TherapistPatientItem,
    TherapistPatientsResponse,
)

LOGS_PER_WEEK = 3
DEFAULT_PHYSIO_INITIALS = "MD"
DEFAULT_PHYSIO_NAME = "Clinician"


def _chart_date(iso_date: str) -> str:
    # 2023-11-02 -> 11/02
    return "/".join(iso_date.split("-")[1:])


def benchmark_for(patient: Patient, index: int) -> float:
    if not patient.benchmark_rom:
        return 0
    return patient.benchmark_rom[min(index, len(patient.benchmark_rom) - 1)]


def build_chart_points(patient: Patient) -> list[ChartPoint]:
    return [
        ChartPoint(
            date=_chart_date(log.date),
            rom=log.max_rom,
            pain=log.pain_score,
            benchmark=benchmark_for(patient, i),
        )
        for i, log in enumerate(patient.logs)
    ]


def default_report_title(patient: Patient) -> str:
    return f"Week {math.ceil(len(patient.logs) / LOGS_PER_WEEK)} Update"


def build_chart(patient: Patient) -> ChartResponse:
    return ChartResponse(
        patient_id=patient.id,
        points=build_chart_points(patient),
        default_report_title=default_report_title(patient),
    )


def physio_initials(name: str | None) -> str:
    if not name:
        return DEFAULT_PHYSIO_INITIALS
    return "".join(part[0] for part in name.split() if part)[:2] or DEFAULT_PHYSIO_INITIALS


def build_therapist_patients(patients: list[Patient], physio_name: str | None) -> TherapistPatientsResponse:
    return TherapistPatientsResponse(
        physio_name=physio_name or DEFAULT_PHYSIO_NAME,
        physio_initials=physio_initials(physio_name),
        patients=[
            TherapistPatientItem(
                id=p.id,
                name=p.name,
                injury=p.injury,
                status=p.status,
                logs_count=len(p.logs),
                last_log_date=p.logs[-1].date if p.logs else None,
            )
            for p in patients
        ],
    )
