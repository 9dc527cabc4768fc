import base64
import logging

from fastapi import APIRouter, HTTPException, status

from physioai.api.deps import GatewayDep, OnboardingDep, PhysioDep, StoreDep, get_patient_or_404
from physioai.core.config import settings
from physioai.schemas.auth import ScreenResponse, UserRole
from physioai.schemas.patient import Patient, SessionLog, WeeklyReport
from physioai.schemas.therapist import (
    AIResultResponse,
    ChartResponse,
    InjuryLibraryResponse,
    LogEdit,
    OnboardingCase,
    OnboardingResponse,
    OnboardingStart,
    OnboardingVerify,
    PredictionRequest,
    ReportCreate,
    TherapistPatientsResponse,
)
from physioai.services import navigation
from physioai.services.auth_service import create_access_token
from physioai.services.onboarding_service import (
    OnboardingError,
    OnboardingNotFound,
    OnboardingRegistry,
    OnboardingWizard,
    build_case,
    send_otp,
    verify_otp,
)
from physioai.services.progress_service import build_chart, build_therapist_patients, default_report_title
from physioai.services.protocol_library import INJURY_LIBRARY, get_injury_profile
from physioai.services.report_service import build_patient_export_json, build_patient_pdf_bytes, export_filename
from physioai.services.roster_service import (
    DuplicatePatientError,
    LogNotFoundError,
    add_patient,
    add_report,
    build_report,
    edit_log,
    find_patient,
)

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/patients", response_model=TherapistPatientsResponse)
def therapist_patients(store: StoreDep, physio: PhysioDep):
    return build_therapist_patients(store.patients, physio.name)


@router.get("/patients/{patient_id}", response_model=Patient)
def therapist_patient(patient_id: str, store: StoreDep, physio: PhysioDep):
    return get_patient_or_404(store, patient_id)


@router.post("/patients/{patient_id}/select", response_model=ScreenResponse)
def select_patient(patient_id: str, store: StoreDep, physio: PhysioDep):
    """Select a patient. The selection lives in the returned token, which the client keeps."""
    patient = get_patient_or_404(store, patient_id)
    try:
        screen = navigation.select_patient(navigation.screen_for_identity(physio, store.patients), patient.id)
    except navigation.InvalidTransition as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc))
    token = create_access_token(physio.model_copy(update={"selected_patient_id": patient.id}))
    return ScreenResponse(role=UserRole.PHYSIO, screen=screen, access_token=token)


@router.get("/patients/{patient_id}/chart", response_model=ChartResponse)
def patient_chart(patient_id: str, store: StoreDep, physio: PhysioDep):
    return build_chart(get_patient_or_404(store, patient_id))


@router.put("/patients/{patient_id}/logs/{log_id}", response_model=SessionLog)
def edit_patient_log(patient_id: str, log_id: str, payload: LogEdit, store: StoreDep, physio: PhysioDep):
    get_patient_or_404(store, patient_id)
    try:
        roster = store.apply(edit_log, patient_id, log_id, max_rom=payload.max_rom, pain_score=payload.pain_score)
    except LogNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Log not found.")
    return next(log for log in find_patient(roster, patient_id).logs if log.id == log_id)


@router.post("/patients/{patient_id}/reports", response_model=WeeklyReport, status_code=201)
def send_report(patient_id: str, payload: ReportCreate, store: StoreDep, physio: PhysioDep):
    patient = get_patient_or_404(store, patient_id)
    if not payload.content.strip():
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail="Report content is empty.")

    report = build_report(
        title=(payload.title or "").strip() or default_report_title(patient),
        content=payload.content,
        physio_name=physio.name or "Physiotherapist",
    )
    store.apply(add_report, patient_id, report)
    logger.info("Report %r sent to patient %s", report.title, patient_id)
    return report


@router.post("/patients/{patient_id}/analysis", response_model=AIResultResponse)
def analyze_progress(patient_id: str, store: StoreDep, gateway: GatewayDep, physio: PhysioDep):
    patient = get_patient_or_404(store, patient_id)
    return AIResultResponse(patient_id=patient.id, text=gateway.summarize_progress(patient))


@router.post("/patients/{patient_id}/prediction", response_model=AIResultResponse)
def predict_recovery(
    patient_id: str, payload: PredictionRequest, store: StoreDep, gateway: GatewayDep, physio: PhysioDep
):
    patient = get_patient_or_404(store, patient_id)
    profile = get_injury_profile(payload.injury_type or patient.injury_type)
    return AIResultResponse(patient_id=patient.id, text=gateway.predict_recovery(patient, profile))


@router.get("/patients/{patient_id}/export.json")
def export_patient_json(patient_id: str, store: StoreDep, physio: PhysioDep):
    return build_patient_export_json(get_patient_or_404(store, patient_id))


@router.get("/patients/{patient_id}/export.pdf")
def export_patient_pdf(patient_id: str, store: StoreDep, physio: PhysioDep):
    patient = get_patient_or_404(store, patient_id)
    pdf = build_patient_pdf_bytes(patient)
    return {
        "filename": export_filename(patient),
        "content_type": "application/pdf",
        "base64": base64.b64encode(pdf).decode("utf-8"),
    }


@router.get("/injuries", response_model=InjuryLibraryResponse)
def injury_library(physio: PhysioDep):
    return InjuryLibraryResponse(injuries=list(INJURY_LIBRARY.values()))


def _wizard_response(wizard: OnboardingWizard) -> OnboardingResponse:
    return OnboardingResponse(
        wizard_id=wizard.id,
        step=wizard.step,
        phone=wizard.phone,
        otp_sent=wizard.otp_sent,
        otp_verified=wizard.otp_verified,
    )


def _get_wizard(onboarding: OnboardingRegistry, wizard_id: str, physio_id: str) -> OnboardingWizard:
    try:
        return onboarding.get(wizard_id, physio_id)
    except OnboardingNotFound:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Onboarding not found.")


@router.post("/onboarding", response_model=OnboardingResponse, status_code=201)
def start_onboarding(payload: OnboardingStart, onboarding: OnboardingDep, physio: PhysioDep):
    wizard = onboarding.start(physio.subject, physio.name)
    try:
        wizard = send_otp(wizard, payload.phone)
    except OnboardingError as exc:
        onboarding.discard(wizard.id)
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc))
    return _wizard_response(onboarding.save(wizard))


@router.post("/onboarding/{wizard_id}/verify", response_model=OnboardingResponse)
def verify_onboarding(wizard_id: str, payload: OnboardingVerify, onboarding: OnboardingDep, physio: PhysioDep):
    wizard = _get_wizard(onboarding, wizard_id, physio.subject)
    try:
        wizard = verify_otp(wizard, payload.otp, settings.demo_otp)
    except OnboardingError as exc:
        logger.info("Onboarding %s: OTP rejected", wizard_id)
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc))
    return _wizard_response(onboarding.save(wizard))


@router.post("/onboarding/{wizard_id}/case", response_model=Patient, status_code=201)
def create_case(wizard_id: str, payload: OnboardingCase, store: StoreDep, onboarding: OnboardingDep, physio: PhysioDep):
    wizard = _get_wizard(onboarding, wizard_id, physio.subject)
    try:
        patient = build_case(wizard, name=payload.name, age=payload.age, injury_type=payload.injury_type)
    except OnboardingError as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc))

    try:
        store.apply(add_patient, patient)
    except DuplicatePatientError:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Patient already exists.")
    onboarding.discard(wizard_id)
    logger.info("Case %s opened for %s (%s)", patient.id, patient.name, patient.injury_type)
    return patient
