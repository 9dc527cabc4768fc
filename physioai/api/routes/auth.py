import logging

from fastapi import APIRouter, HTTPException, status

from physioai.api.deps import OptionalIdentityDep, StoreDep
from physioai.schemas.auth import (
    Identity,
    LandingScreen,
    LoginResponse,
    PhysioLoginRequest,
    RegistrationRequest,
    ScreenResponse,
    UserRole,
)
from physioai.services import navigation
from physioai.services.auth_service import create_access_token
from physioai.services.protocol_library import verify_physio_license
from physioai.services.roster_service import (
    DuplicatePatientError,
    add_patient,
    build_registered_patient,
    find_patient_by_email,
)
from physioai.services.seed_service import seed_roster

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/physio-login", response_model=LoginResponse)
def physio_login(payload: PhysioLoginRequest, store: StoreDep):
    physio = verify_physio_license(payload.license_id)
    if physio is None:
        logger.info("Rejected clinician login for licence %r", payload.license_id)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED, detail="License ID not found in the national registry."
        )

    patients = store.patients
    screen = navigation.complete_physio_login(
        navigation.begin_physio_login(LandingScreen()), physio, patients[0].id if patients else None
    )
    identity = Identity(role=UserRole.PHYSIO, subject=physio.id, name=physio.name)
    return LoginResponse(access_token=create_access_token(identity), role=identity.role, name=physio.name, screen=screen)


@router.post("/register", response_model=LoginResponse)
def register(payload: RegistrationRequest, store: StoreDep):
    # A case the clinician already opened for this email is signed in as-is.
    patient = find_patient_by_email(store.patients, payload.email)
    if patient is None:
        patient = build_registered_patient(
            seed_roster()[0],
            name=payload.name,
            age=payload.age,
            email=payload.email,
            physio_name=payload.physio_name,
        )
        try:
            store.apply(add_patient, patient)
        except DuplicatePatientError:
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Patient already exists.")
        logger.info("Registered patient %s", patient.id)

    screen = navigation.complete_registration(navigation.begin_registration(LandingScreen()), patient.id)
    identity = Identity(role=UserRole.PATIENT, subject=patient.id, name=patient.name)
    return LoginResponse(access_token=create_access_token(identity), role=identity.role, name=patient.name, screen=screen)


@router.get("/screen", response_model=ScreenResponse)
def current_screen(identity: OptionalIdentityDep, store: StoreDep):
    screen = navigation.screen_for_identity(identity, store.patients)
    role = identity.role if identity and screen.kind != "landing" else UserRole.NONE
    return ScreenResponse(role=role, screen=screen)
