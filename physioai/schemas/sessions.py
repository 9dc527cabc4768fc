from pydantic import BaseModel, Field


class SensorFrame(BaseModel):
    angle_deg: int
    reps: int
    max_rom_deg: int
    feedback: str
    complete: bool


class ExerciseSessionStart(BaseModel):
    exercise_id: str = Field(..., min_length=1, max_length=100)


class ExerciseSessionResponse(BaseModel):
    id: str
    patient_id: str
    exercise_id: str
    exercise_name: str
    target_reps: int
    target_rom: float
    frame: SensorFrame


class ExerciseSessionLogCreate(BaseModel):
    pain_score: int = Field(..., ge=0, le=10)
    voice_note_base64: str | None = None
    voice_analysis: str | None = None
