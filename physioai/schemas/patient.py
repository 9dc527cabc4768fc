from enum import Enum

from pydantic import BaseModel, Field

from physioai.schemas.auth import LandingScreen


class PatientStatus(str, Enum):
    ON_TRACK = "On Track"
    BEHIND = "Behind"
    AHEAD = "Ahead"


class Exercise(BaseModel):
    id: str
    name: str
    target_reps: int = Field(..., ge=0)
    target_rom: float = Field(..., ge=0)  # degrees
    instructions: str
    video_url: str | None = None


class SessionLog(BaseModel):
    id: str
    date: str  # ISO date
    pain_score: int = Field(..., ge=0, le=10)
    max_rom: float = Field(..., ge=0)  # degrees achieved
    reps_completed: int = Field(..., ge=0)
    notes: str | None = None
    video_url: str | None = None
    voice_note_base64: str | None = None  # data URI of the recorded clip
    voice_analysis: str | None = None


class WeeklyReport(BaseModel):
    id: str
    date: str
    title: str
    content: str
    physio_name: str


class Patient(BaseModel):
    id: str
    name: str
    age: int
    email: str
    physio_name: str
    injury: str  # display name
    injury_type: str  # injury library key
    start_date: str
    status: PatientStatus = PatientStatus.ON_TRACK
    prescribed_exercises: list[Exercise] = Field(default_factory=list)
    logs: list[SessionLog] = Field(default_factory=list)
    benchmark_rom: list[float] = Field(default_factory=list)  # expected ROM per week
    weekly_reports: list[WeeklyReport] = Field(default_factory=list)


class LogCreate(BaseModel):
    pain_score: int = Field(..., ge=0, le=10)
    max_rom: float = Field(..., ge=0)
    reps_completed: int = Field(..., ge=0)
    notes: str | None = None
    voice_note_base64: str | None = None
    voice_analysis: str | None = None


class VoiceNoteRequest(BaseModel):
    audio_base64: str = Field(..., min_length=1)


class VoiceNoteResponse(BaseModel):
    voice_note_base64: str
    voice_analysis: str


class BoosterResponse(BaseModel):
    message: str


class DischargeResponse(BaseModel):
    patient_id: str
    email: str
    report: str
    pdf_filename: str
    pdf_base64: str
    screen: LandingScreen
    patient: Patient
