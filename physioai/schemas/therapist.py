from pydantic import BaseModel, Field

from physioai.schemas.patient import PatientStatus


class TherapistPatientItem(BaseModel):
    id: str
    name: str
    injury: str
    status: PatientStatus
    logs_count: int
    last_log_date: str | None


class TherapistPatientsResponse(BaseModel):
    physio_name: str
    physio_initials: str
    patients: list[TherapistPatientItem]


class ChartPoint(BaseModel):
    date: str  # MM/DD
    rom: float
    pain: int
    benchmark: float


class ChartResponse(BaseModel):
    patient_id: str
    points: list[ChartPoint]
    default_report_title: str


class LogEdit(BaseModel):
    max_rom: float = Field(..., ge=0)
    pain_score: int = Field(..., ge=0, le=10)


class ReportCreate(BaseModel):
    title: str | None = Field(None, max_length=200)
    content: str = Field(..., max_length=20000)


class PredictionRequest(BaseModel):
    injury_type: str | None = None


class AIResultResponse(BaseModel):
    patient_id: str
    text: str


class InjuryProfile(BaseModel):
    id: str
    name: str
    description: str
    typical_recovery_weeks: int
    expected_milestones: list[str]


class InjuryLibraryResponse(BaseModel):
    injuries: list[InjuryProfile]


class OnboardingStart(BaseModel):
    phone: str = Field(..., max_length=40)


class OnboardingVerify(BaseModel):
    otp: str = Field(..., max_length=10)


class OnboardingCase(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    age: int | str | None = None
    injury_type: str


class OnboardingResponse(BaseModel):
    wizard_id: str
    step: int
    phone: str
    otp_sent: bool
    otp_verified: bool
