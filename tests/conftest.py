import os
import tempfile

_tmpdir = tempfile.mkdtemp(prefix="physioai-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{_tmpdir}/physioai-test.db"
os.environ["JWT_SECRET"] = "test-secret"
os.environ["GEMINI_API_KEY"] = ""

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402

from physioai.api.deps import get_ai_gateway  # noqa: E402
from physioai.database.session import SessionLocal, init_db  # noqa: E402
from physioai.main import create_app  # noqa: E402
from physioai.models.storage import StorageEntry  # noqa: E402
from physioai.services.seed_service import DEMO_PATIENT_EMAIL, DEMO_PHYSIO_LICENSE  # noqa: E402


class CannedGateway:
    """AI gateway test double: canned text, no network, records calls."""

    def __init__(self) -> None:
        self.calls: list[tuple[str, object]] = []

    def summarize_progress(self, patient):
        self.calls.append(("summarize_progress", patient.id))
        return f"Summary for {patient.name}"

    def predict_recovery(self, patient, profile):
        self.calls.append(("predict_recovery", profile.id if profile else None))
        if profile is None:
            return "Error: Selected injury protocol configuration not found."
        return f"Prediction for {patient.name} on {profile.id}"

    def compose_motivation(self, patient):
        self.calls.append(("compose_motivation", patient.id))
        return f"Keep going, {patient.name}!"

    def compose_discharge_report(self, patient):
        self.calls.append(("compose_discharge_report", len(patient.logs)))
        return f"Dear {patient.name},\nCongratulations on completing your programme."

    def transcribe_voice_note(self, audio_base64):
        self.calls.append(("transcribe_voice_note", audio_base64))
        return "Transcription: hello | Keywords: none"


def clear_storage() -> None:
    init_db()
    with SessionLocal() as db:
        db.query(StorageEntry).delete()
        db.commit()


@pytest.fixture
def session_factory():
    clear_storage()
    return SessionLocal


@pytest.fixture
def gateway():
    return CannedGateway()


@pytest.fixture
def app(gateway):
    clear_storage()
    application = create_app()
    application.dependency_overrides[get_ai_gateway] = lambda: gateway
    return application


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c


def auth_headers(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def physio_headers(client):
    res = client.post("/api/auth/physio-login", json={"license_id": DEMO_PHYSIO_LICENSE})
    assert res.status_code == 200
    return auth_headers(res.json()["access_token"])


@pytest.fixture
def patient_headers(client):
    res = client.post(
        "/api/auth/register",
        json={"name": "Ishaan", "age": "24", "email": DEMO_PATIENT_EMAIL, "physio_name": "Dr. Shrikant Tiwari"},
    )
    assert res.status_code == 200
    return auth_headers(res.json()["access_token"])
