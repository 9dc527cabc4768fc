from fastapi import APIRouter, HTTPException, status

from physioai.api.deps import CurrentPatientDep, SensorSessionsDep, StoreDep
from physioai.schemas.patient import SessionLog
from physioai.schemas.sessions import ExerciseSessionLogCreate, ExerciseSessionResponse, ExerciseSessionStart
from physioai.services.roster_service import append_log, build_log
from physioai.services.sensor_service import SensorSessionNotFound, SimulatedSession

router = APIRouter()


def _to_response(session: SimulatedSession) -> ExerciseSessionResponse:
    return ExerciseSessionResponse(
        id=session.id,
        patient_id=session.patient_id,
        exercise_id=session.exercise.id,
        exercise_name=session.exercise.name,
        target_reps=session.feed.target_reps,
        target_rom=session.exercise.target_rom,
        frame=session.feed.frame(),
    )


def _not_found() -> HTTPException:
    return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Exercise session not found.")


@router.post("/exercise-sessions", response_model=ExerciseSessionResponse, status_code=201)
def start_exercise_session(payload: ExerciseSessionStart, patient: CurrentPatientDep, sessions: SensorSessionsDep):
    exercise = next((ex for ex in patient.prescribed_exercises if ex.id == payload.exercise_id), None)
    if exercise is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Exercise not prescribed for this patient.")
    return _to_response(sessions.start(patient.id, exercise))


@router.get("/exercise-sessions/{session_id}", response_model=ExerciseSessionResponse)
def poll_exercise_session(session_id: str, patient: CurrentPatientDep, sessions: SensorSessionsDep):
    try:
        return _to_response(sessions.advance(session_id, patient.id))
    except SensorSessionNotFound:
        raise _not_found()


@router.post("/exercise-sessions/{session_id}/end", response_model=ExerciseSessionResponse)
def end_exercise_session(session_id: str, patient: CurrentPatientDep, sessions: SensorSessionsDep):
    try:
        return _to_response(sessions.end(session_id, patient.id))
    except SensorSessionNotFound:
        raise _not_found()


@router.post("/exercise-sessions/{session_id}/log", response_model=SessionLog, status_code=201)
def log_exercise_session(
    session_id: str,
    payload: ExerciseSessionLogCreate,
    patient: CurrentPatientDep,
    sessions: SensorSessionsDep,
    store: StoreDep,
):
    try:
        session = sessions.pop(session_id, patient.id)
    except SensorSessionNotFound:
        raise _not_found()

    frame = session.feed.stop()
    log = build_log(
        pain_score=payload.pain_score,
        max_rom=frame.max_rom_deg,
        reps_completed=frame.reps,
        voice_note_base64=payload.voice_note_base64,
        voice_analysis=payload.voice_analysis,
    )
    store.apply(append_log, patient.id, log)
    return log
