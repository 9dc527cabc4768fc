from __future__ import annotations

import threading
import uuid
from dataclasses import dataclass, replace

from physioai.schemas.patient import Patient, PatientStatus
from physioai.services.protocol_library import get_injury_profile, get_protocol
from physioai.services.roster_service import new_id, parse_age, today_iso

MIN_PHONE_LENGTH = 10
DEFAULT_CASE_AGE = 30

STEP_PHONE = 1
STEP_OTP = 2
STEP_DETAILS = 3


class OnboardingError(ValueError):
    pass


@dataclass(frozen=True)
class OnboardingWizard:
    id: str
    physio_id: str
    physio_name: str
    step: int = STEP_PHONE
    phone: str = ""
    otp_sent: bool = False
    otp_verified: bool = False


def send_otp(wizard: OnboardingWizard, phone: str) -> OnboardingWizard:
    if len(phone.strip()) < MIN_PHONE_LENGTH:
        raise OnboardingError("Please enter a valid phone number.")
    return replace(wizard, phone=phone.strip(), otp_sent=True, step=STEP_OTP)


def verify_otp(wizard: OnboardingWizard, otp: str, expected: str) -> OnboardingWizard:
    if not wizard.otp_sent:
        raise OnboardingError("Send a verification OTP first.")
    if otp.strip() != expected:
        raise OnboardingError(f"Invalid OTP. (Hint: Use {expected})")
    return replace(wizard, otp_verified=True, step=STEP_DETAILS)


def case_email(name: str) -> str:
    return f"{name.strip().lower().replace(' ', '.', 1)}@example.com"


def build_case(
    wizard: OnboardingWizard, *, name: str, age: int | str | None, injury_type: str, start_date: str | None = None
) -> Patient:
    """Open a new case with the exercise plan and ROM benchmarks of the selected injury."""
    if not wizard.otp_verified:
        raise OnboardingError("Verify the patient's phone number first.")

    profile = get_injury_profile(injury_type)
    protocol = get_protocol(injury_type)
    if profile is None or protocol is None:
        raise OnboardingError("System Error: Protocol not found for this injury.")

    return Patient(
        id=new_id("p"),
        name=name.strip(),
        age=parse_age(age, DEFAULT_CASE_AGE),
        email=case_email(name),
        physio_name=wizard.physio_name,
        injury=profile.name,
        injury_type=injury_type,
        start_date=start_date or today_iso(),
        status=PatientStatus.ON_TRACK,
        prescribed_exercises=[ex.model_copy(deep=True) for ex in protocol.exercises],
        benchmark_rom=list(protocol.benchmarks),
        logs=[],
        weekly_reports=[],
    )


class OnboardingNotFound(LookupError):
    pass


class OnboardingRegistry:
    """Open wizards, at most one per clinician. Starting a new one abandons the previous."""

    def __init__(self) -> None:
        self._wizards: dict[str, OnboardingWizard] = {}
        self._lock = threading.Lock()

    def start(self, physio_id: str, physio_name: str) -> OnboardingWizard:
        wizard = OnboardingWizard(id=uuid.uuid4().hex, physio_id=physio_id, physio_name=physio_name)
        with self._lock:
            for wid in [wid for wid, w in self._wizards.items() if w.physio_id == physio_id]:
                del self._wizards[wid]
            self._wizards[wizard.id] = wizard
        return wizard

    def get(self, wizard_id: str, physio_id: str) -> OnboardingWizard:
        with self._lock:
            wizard = self._wizards.get(wizard_id)
        if wizard is None or wizard.physio_id != physio_id:
            raise OnboardingNotFound(wizard_id)
        return wizard

    def save(self, wizard: OnboardingWizard) -> OnboardingWizard:
        with self._lock:
            self._wizards[wizard.id] = wizard
        return wizard

    def discard(self, wizard_id: str) -> None:
        with self._lock:
            self._wizards.pop(wizard_id, None)

    def __len__(self) -> int:
        with self._lock:
            return len(self._wizards)
