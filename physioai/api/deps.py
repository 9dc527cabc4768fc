from typing import Annotated

from fastapi import Depends, HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from physioai.schemas.auth import Identity, UserRole
from physioai.schemas.patient import Patient
from physioai.services.ai_gateway import AIGateway
from physioai.services.auth_service import InvalidTokenError, identity_from_token
from physioai.services.onboarding_service import OnboardingRegistry
from physioai.services.roster_service import PatientNotFoundError, find_patient
from physioai.services.sensor_service import SensorSessionRegistry
from physioai.services.state_store import RosterStore

bearer = HTTPBearer(auto_error=False)


def get_store(request: Request) -> RosterStore:
    return request.app.state.roster_store


def get_ai_gateway(request: Request) -> AIGateway:
    return request.app.state.ai_gateway


def get_sensor_sessions(request: Request) -> SensorSessionRegistry:
    return request.app.state.sensor_sessions


def get_onboarding(request: Request) -> OnboardingRegistry:
    return request.app.state.onboarding


StoreDep = Annotated[RosterStore, Depends(get_store)]
GatewayDep = Annotated[AIGateway, Depends(get_ai_gateway)]
SensorSessionsDep = Annotated[SensorSessionRegistry, Depends(get_sensor_sessions)]
OnboardingDep = Annotated[OnboardingRegistry, Depends(get_onboarding)]


def get_optional_identity(
    creds: Annotated[HTTPAuthorizationCredentials | None, Depends(bearer)],
) -> Identity | None:
    if creds is None or not creds.credentials:
        return None
    try:
        return identity_from_token(creds.credentials)
    except InvalidTokenError:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token.")


OptionalIdentityDep = Annotated[Identity | None, Depends(get_optional_identity)]


def get_current_identity(identity: OptionalIdentityDep) -> Identity:
    if identity is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated.")
    return identity


CurrentIdentityDep = Annotated[Identity, Depends(get_current_identity)]


def require_physio(identity: CurrentIdentityDep) -> Identity:
    if identity.role != UserRole.PHYSIO:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Clinician access required.")
    return identity


def require_patient(identity: CurrentIdentityDep, store: StoreDep) -> Patient:
    if identity.role != UserRole.PATIENT:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Patient access required.")
    try:
        return find_patient(store.patients, identity.subject)
    except PatientNotFoundError:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Patient not found.")


PhysioDep = Annotated[Identity, Depends(require_physio)]
CurrentPatientDep = Annotated[Patient, Depends(require_patient)]


def get_patient_or_404(store: RosterStore, patient_id: str) -> Patient:
    try:
        return find_patient(store.patients, patient_id)
    except PatientNotFoundError:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Patient not found.")
