import base64
import logging

from fastapi import APIRouter

from physioai.api.deps import CurrentPatientDep, GatewayDep, StoreDep
from physioai.schemas.patient import (
    BoosterResponse,
    DischargeResponse,
    Exercise,
    LogCreate,
    Patient,
    SessionLog,
    VoiceNoteRequest,
    VoiceNoteResponse,
)
from physioai.services import navigation
from physioai.services.report_service import build_patient_pdf_bytes, export_filename
from physioai.services.roster_service import append_log, build_log, discharge, find_patient

logger = logging.getLogger(__name__)

router = APIRouter()

# Tiny silent WAV for demos on devices without a microphone.
DEMO_VOICE_NOTE = "data:audio/wav;base64,UklGRiQAAABXQVZFZm10IBAAAAABAAEAQB8AAEAfAAABAAgAZGF0YQAAAAA="
DEMO_VOICE_ANALYSIS = (
    "Transcription: [Demo Audio] I felt a slight twinge in my wrist today, but overall mobility is better. "
    "| Keywords: twinge, better, mobility"
)


@router.get("/me", response_model=Patient)
def me(patient: CurrentPatientDep):
    return patient


@router.get("/exercises", response_model=list[Exercise])
def exercises(patient: CurrentPatientDep):
    return patient.prescribed_exercises


@router.post("/logs", response_model=SessionLog, status_code=201)
def submit_log(payload: LogCreate, patient: CurrentPatientDep, store: StoreDep):
    log = build_log(
        pain_score=payload.pain_score,
        max_rom=payload.max_rom,
        reps_completed=payload.reps_completed,
        notes=payload.notes,
        voice_note_base64=payload.voice_note_base64,
        voice_analysis=payload.voice_analysis,
    )
    store.apply(append_log, patient.id, log)
    return log


@router.get("/booster", response_model=BoosterResponse)
def progress_booster(patient: CurrentPatientDep, gateway: GatewayDep):
    return BoosterResponse(message=gateway.compose_motivation(patient))


@router.post("/voice-notes/analyze", response_model=VoiceNoteResponse)
def analyze_voice_note(payload: VoiceNoteRequest, patient: CurrentPatientDep, gateway: GatewayDep):
    return VoiceNoteResponse(
        voice_note_base64=payload.audio_base64,
        voice_analysis=gateway.transcribe_voice_note(payload.audio_base64),
    )


@router.post("/voice-notes/demo", response_model=VoiceNoteResponse)
def demo_voice_note(patient: CurrentPatientDep):
    return VoiceNoteResponse(voice_note_base64=DEMO_VOICE_NOTE, voice_analysis=DEMO_VOICE_ANALYSIS)


@router.post("/discharge", response_model=DischargeResponse)
def discharge_patient(patient: CurrentPatientDep, store: StoreDep, gateway: GatewayDep):
    report = gateway.compose_discharge_report(patient)
    pdf = build_patient_pdf_bytes(patient, discharge_report=report)
    # No mail is sent; the dispatch is only recorded.
    logger.info("Emailing discharge report to %s (%d chars)", patient.email, len(report))

    roster = store.apply(discharge, patient.id)
    return DischargeResponse(
        patient_id=patient.id,
        email=patient.email,
        report=report,
        pdf_filename=export_filename(patient, kind="discharge"),
        pdf_base64=base64.b64encode(pdf).decode("utf-8"),
        screen=navigation.reset(),
        patient=find_patient(roster, patient.id),
    )
