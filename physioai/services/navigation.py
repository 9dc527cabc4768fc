from __future__ import annotations

from physioai.schemas.auth import (
    ClinicianScreen,
    Identity,
    LandingScreen,
    PatientScreen,
    Physio,
    PhysioLoginScreen,
    RegistrationScreen,
    UserRole,
)
from physioai.schemas.patient import Patient
from physioai.services.roster_service import resolve_selected_patient

AnyScreen = LandingScreen | RegistrationScreen | PhysioLoginScreen | PatientScreen | ClinicianScreen


class InvalidTransition(ValueError):
    def __init__(self, screen: AnyScreen, action: str):
        super().__init__(f"Cannot {action} from the {screen.kind} screen.")
        self.screen = screen
        self.action = action


def reset(_screen: AnyScreen | None = None) -> LandingScreen:
    return LandingScreen()


def begin_registration(screen: AnyScreen) -> RegistrationScreen:
    if not isinstance(screen, LandingScreen):
        raise InvalidTransition(screen, "begin registration")
    return RegistrationScreen()


def begin_physio_login(screen: AnyScreen) -> PhysioLoginScreen:
    if not isinstance(screen, LandingScreen):
        raise InvalidTransition(screen, "begin clinician login")
    return PhysioLoginScreen()


def complete_registration(screen: AnyScreen, patient_id: str) -> PatientScreen:
    if not isinstance(screen, RegistrationScreen):
        raise InvalidTransition(screen, "complete registration")
    return PatientScreen(patient_id=patient_id)


def complete_physio_login(screen: AnyScreen, physio: Physio, first_patient_id: str | None) -> ClinicianScreen:
    if not isinstance(screen, PhysioLoginScreen):
        raise InvalidTransition(screen, "complete clinician login")
    return ClinicianScreen(physio_id=physio.id, physio_name=physio.name, selected_patient_id=first_patient_id)


def select_patient(screen: AnyScreen, patient_id: str) -> ClinicianScreen:
    if not isinstance(screen, ClinicianScreen):
        raise InvalidTransition(screen, "select a patient")
    return screen.model_copy(update={"selected_patient_id": patient_id})


def screen_for_identity(identity: Identity | None, patients: list[Patient]) -> AnyScreen:
    """Screen a bearer of ``identity`` lands on. Unknown or stale identities go back to the landing page."""
    if identity is None or identity.role == UserRole.NONE:
        return LandingScreen()
    if identity.role == UserRole.PATIENT:
        if any(p.id == identity.subject for p in patients):
            return PatientScreen(patient_id=identity.subject)
        return LandingScreen()
    selected = resolve_selected_patient(patients, identity.selected_patient_id)
    return ClinicianScreen(
        physio_id=identity.subject, physio_name=identity.name, selected_patient_id=selected.id if selected else None
    )
