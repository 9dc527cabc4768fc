from physioai.schemas.patient import Patient, PatientStatus, SessionLog, WeeklyReport
from physioai.services.protocol_library import KNEE_EXERCISES, WRIST_EXERCISES

DEMO_PATIENT_EMAIL = "ishaan.demo@example.com"
DEMO_PHYSIO_LICENSE = "PT-88321"


def seed_roster() -> list[Patient]:
    """Demo roster used when storage holds nothing usable. Built fresh on every call."""
    return [
        Patient(
            id="p1",
            name="Ishaan",
            age=24,
            email=DEMO_PATIENT_EMAIL,
            physio_name="Dr. Shrikant Tiwari",
            injury="Right Wrist Fracture (Cast Removal)",
            injury_type="wrist_post_cast",
            start_date="2023-11-01",
            status=PatientStatus.ON_TRACK,
            prescribed_exercises=[ex.model_copy(deep=True) for ex in WRIST_EXERCISES],
            benchmark_rom=[30, 40, 50, 60, 70, 75, 80],
            logs=[
                SessionLog(id="l1", date="2023-11-02", pain_score=7, max_rom=15, reps_completed=5,
                           notes="Very stiff after cast removal", video_url="mock_video_1.mp4"),
                SessionLog(id="l2", date="2023-11-05", pain_score=6, max_rom=20, reps_completed=8,
                           notes="Less swelling", video_url="mock_video_2.mp4"),
                SessionLog(id="l3", date="2023-11-09", pain_score=5, max_rom=28, reps_completed=10,
                           notes="Feeling better movement", video_url="mock_video_3.mp4"),
                SessionLog(id="l4", date="2023-11-12", pain_score=4, max_rom=35, reps_completed=12,
                           notes="Good session", video_url="mock_video_4.mp4"),
                SessionLog(id="l5", date="2023-11-15", pain_score=3, max_rom=42, reps_completed=15,
                           notes="Almost hit target", video_url="mock_video_5.mp4"),
            ],
            weekly_reports=[
                WeeklyReport(
                    id="r1",
                    date="2023-11-08",
                    title="Week 1 Review",
                    content=(
                        "Ishaan, excellent start. I noticed in your video logs that you are guarding "
                        "your wrist slightly. Try to relax the shoulder."
                    ),
                    physio_name="Dr. Shrikant Tiwari",
                )
            ],
        ),
        Patient(
            id="p2",
            name="Rahul Verma",
            age=32,
            email="rahul.v@example.com",
            physio_name="Dr. Shrikant Tiwari",
            injury="ACL Reconstruction",
            injury_type="acl_rehab",
            start_date="2023-10-15",
            status=PatientStatus.BEHIND,
            prescribed_exercises=[ex.model_copy(deep=True) for ex in KNEE_EXERCISES],
            benchmark_rom=[60, 75, 90, 100],
            logs=[
                SessionLog(id="l6", date="2023-10-16", pain_score=8, max_rom=45, reps_completed=8,
                           notes="High pain", video_url="mock_video_6.mp4"),
                SessionLog(id="l7", date="2023-10-25", pain_score=6, max_rom=60, reps_completed=10,
                           notes="Struggling with extension", video_url="mock_video_7.mp4"),
            ],
            weekly_reports=[],
        ),
    ]
