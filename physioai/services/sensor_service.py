"""
Simulated motion-tracking feed for the exercise screen.

A fixed-period timer nudges a displayed joint angle by a small random step,
occasionally counts a repetition and finishes the session once the target
rep count is reached. This drives UI animation only.
"""

from __future__ import annotations

import random
import threading
import time
import uuid
from dataclasses import dataclass, field

from physioai.schemas.patient import Exercise
from physioai.schemas.sessions import SensorFrame

TICK_INTERVAL_MS = 100
DIRECTION_PERIOD_MS = 2000
MIN_ANGLE_DEG = 0
MAX_ANGLE_DEG = 80
MAX_STEP_DEG = 4
REP_PROBABILITY = 0.02
CUE_PROBABILITY = 0.05
DEFAULT_TARGET_REPS = 10
# One poll never replays more than a minute of ticks.
MAX_CATCHUP_TICKS = 600

CUE_ALIGN = "Align your body in the frame"
CUE_REP = "Great extension! Hold it."
CUE_STEADY = "Keep your forearm steady."


def clamp_angle(value: int) -> int:
    return max(MIN_ANGLE_DEG, min(MAX_ANGLE_DEG, value))


def now_ms() -> int:
    return int(time.time() * 1000)


class SimulatedSensorFeed:
    def __init__(self, target_reps: int | None = None, rng: random.Random | None = None):
        self.target_reps = target_reps if target_reps else DEFAULT_TARGET_REPS
        self.rng = rng or random.Random()
        self.angle = 0
        self.reps = 0
        self.max_rom = 0
        self.feedback = CUE_ALIGN
        self.complete = False

    def tick(self, at_ms: int) -> SensorFrame:
        if self.complete:
            return self.frame()

        step = self.rng.randint(0, MAX_STEP_DEG)
        increasing = (at_ms // DIRECTION_PERIOD_MS) % 2 == 0
        self.angle = clamp_angle(self.angle + step if increasing else self.angle - step)
        self.max_rom = max(self.max_rom, self.angle)

        if self.rng.random() < REP_PROBABILITY:
            self.reps += 1
            self.feedback = CUE_REP
            if self.reps >= self.target_reps:
                self.complete = True
        elif self.rng.random() < CUE_PROBABILITY:
            self.feedback = CUE_STEADY
        return self.frame()

    def stop(self) -> SensorFrame:
        self.complete = True
        return self.frame()

    def frame(self) -> SensorFrame:
        return SensorFrame(
            angle_deg=self.angle,
            reps=self.reps,
            max_rom_deg=self.max_rom,
            feedback=self.feedback,
            complete=self.complete,
        )


@dataclass
class SimulatedSession:
    id: str
    patient_id: str
    exercise: Exercise
    feed: SimulatedSensorFeed
    last_tick_ms: int
    lock: threading.Lock = field(default_factory=threading.Lock)

    def advance(self, at_ms: int) -> SensorFrame:
        with self.lock:
            elapsed = max(0, (at_ms - self.last_tick_ms) // TICK_INTERVAL_MS)
            for i in range(min(elapsed, MAX_CATCHUP_TICKS)):
                if self.feed.complete:
                    break
                self.feed.tick(self.last_tick_ms + (i + 1) * TICK_INTERVAL_MS)
            self.last_tick_ms += elapsed * TICK_INTERVAL_MS
            return self.feed.frame()


class SensorSessionNotFound(LookupError):
    pass


class SensorSessionRegistry:
    """In-memory exercise sessions keyed by id. Sessions die with the process."""

    def __init__(self, rng_factory=random.Random, clock=now_ms):
        self._rng_factory = rng_factory
        self._clock = clock
        self._sessions: dict[str, SimulatedSession] = {}
        self._lock = threading.Lock()

    def start(self, patient_id: str, exercise: Exercise) -> SimulatedSession:
        session = SimulatedSession(
            id=uuid.uuid4().hex,
            patient_id=patient_id,
            exercise=exercise,
            feed=SimulatedSensorFeed(target_reps=exercise.target_reps, rng=self._rng_factory()),
            last_tick_ms=self._clock(),
        )
        with self._lock:
            # One active session per patient.
            for sid in [sid for sid, s in self._sessions.items() if s.patient_id == patient_id]:
                del self._sessions[sid]
            self._sessions[session.id] = session
        return session

    def get(self, session_id: str, patient_id: str) -> SimulatedSession:
        with self._lock:
            session = self._sessions.get(session_id)
        if session is None or session.patient_id != patient_id:
            raise SensorSessionNotFound(session_id)
        return session

    def advance(self, session_id: str, patient_id: str) -> SimulatedSession:
        session = self.get(session_id, patient_id)
        session.advance(self._clock())
        return session

    def end(self, session_id: str, patient_id: str) -> SimulatedSession:
        session = self.get(session_id, patient_id)
        session.advance(self._clock())
        with session.lock:
            session.feed.stop()
        return session

    def pop(self, session_id: str, patient_id: str) -> SimulatedSession:
        session = self.get(session_id, patient_id)
        session.advance(self._clock())
        with self._lock:
            self._sessions.pop(session_id, None)
        return session
