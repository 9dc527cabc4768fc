import pytest

from physioai.schemas.patient import PatientStatus
from physioai.services.onboarding_service import (
    OnboardingError,
    OnboardingNotFound,
    OnboardingRegistry,
    OnboardingWizard,
    build_case,
    case_email,
    send_otp,
    verify_otp,
)
from physioai.services.protocol_library import INJURY_LIBRARY, PROTOCOL_MAPPING


def _verified() -> OnboardingWizard:
    wizard = OnboardingWizard(id="w", physio_id="PHY-2022", physio_name="Dr. Sarah Connor")
    return verify_otp(send_otp(wizard, "+1 555 000 0000"), "1234", expected="1234")


def test_wizard_steps():
    wizard = OnboardingWizard(id="w", physio_id="PHY-2022", physio_name="Dr. Sarah Connor")
    assert wizard.step == 1

    wizard = send_otp(wizard, "9876543210")
    assert (wizard.step, wizard.otp_sent, wizard.otp_verified) == (2, True, False)

    wizard = verify_otp(wizard, "1234", expected="1234")
    assert (wizard.step, wizard.otp_verified) == (3, True)


def test_short_phone_rejected():
    with pytest.raises(OnboardingError, match="valid phone number"):
        send_otp(OnboardingWizard(id="w", physio_id="PHY-2022", physio_name="x"), "12345")


def test_wrong_otp_rejected():
    wizard = send_otp(OnboardingWizard(id="w", physio_id="PHY-2022", physio_name="x"), "9876543210")
    with pytest.raises(OnboardingError, match=r"Invalid OTP. \(Hint: Use 1234\)"):
        verify_otp(wizard, "0000", expected="1234")


def test_case_requires_verification():
    wizard = send_otp(OnboardingWizard(id="w", physio_id="PHY-2022", physio_name="x"), "9876543210")
    with pytest.raises(OnboardingError):
        build_case(wizard, name="A", age="30", injury_type="acl_rehab")


@pytest.mark.parametrize("injury_type", list(PROTOCOL_MAPPING))
def test_case_gets_exact_protocol_bundle(injury_type):
    patient = build_case(_verified(), name="Meera Nair", age="41", injury_type=injury_type, start_date="2024-01-05")

    protocol = PROTOCOL_MAPPING[injury_type]
    assert patient.prescribed_exercises == list(protocol.exercises)
    assert patient.benchmark_rom == list(protocol.benchmarks)
    assert patient.injury == INJURY_LIBRARY[injury_type].name
    assert patient.injury_type == injury_type
    assert patient.status == PatientStatus.ON_TRACK
    assert patient.start_date == "2024-01-05"
    assert patient.physio_name == "Dr. Sarah Connor"
    assert patient.age == 41
    assert patient.logs == [] and patient.weekly_reports == []


def test_case_exercises_are_copies():
    patient = build_case(_verified(), name="A", age=None, injury_type="acl_rehab")
    patient.prescribed_exercises[0].target_reps = 99
    assert PROTOCOL_MAPPING["acl_rehab"].exercises[0].target_reps == 10
    assert patient.age == 30


def test_unknown_injury_rejected():
    with pytest.raises(OnboardingError, match="Protocol not found"):
        build_case(_verified(), name="A", age="30", injury_type="tennis_elbow")


def test_case_email_replaces_first_space_only():
    assert case_email("Anna Maria Lopez") == "anna.maria lopez@example.com"
    assert case_email("Ravi") == "ravi@example.com"


def test_registry_roundtrip():
    registry = OnboardingRegistry()
    wizard = registry.start("PHY-1001", "Dr. X")
    registry.save(send_otp(wizard, "9876543210"))
    assert registry.get(wizard.id, "PHY-1001").step == 2
    registry.discard(wizard.id)
    with pytest.raises(OnboardingNotFound):
        registry.get(wizard.id, "PHY-1001")


def test_new_wizard_replaces_abandoned_one():
    registry = OnboardingRegistry()
    first = registry.start("PHY-1001", "Dr. X")
    registry.save(send_otp(first, "9876543210"))
    other = registry.start("PHY-2022", "Dr. Y")

    second = registry.start("PHY-1001", "Dr. X")

    assert len(registry) == 2
    with pytest.raises(OnboardingNotFound):
        registry.get(first.id, "PHY-1001")
    assert registry.get(second.id, "PHY-1001").step == 1
    assert registry.get(other.id, "PHY-2022").physio_name == "Dr. Y"


def test_wizard_belongs_to_its_clinician():
    registry = OnboardingRegistry()
    wizard = registry.start("PHY-1001", "Dr. X")
    with pytest.raises(OnboardingNotFound):
        registry.get(wizard.id, "PHY-2022")
