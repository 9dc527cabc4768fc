"""
Static clinical reference data: injury profiles, exercise bundles and the
injury -> treatment protocol mapping used when a case is opened.
"""

from dataclasses import dataclass

from physioai.schemas.auth import Physio
from physioai.schemas.patient import Exercise
from physioai.schemas.therapist import InjuryProfile

VERIFIED_PHYSIOS: dict[str, Physio] = {
    "PT-88321": Physio(id="PHY-1001", name="Dr. Shrikant Tiwari"),
    "PT-99402": Physio(id="PHY-2022", name="Dr. Sarah Connor"),
}

INJURY_LIBRARY: dict[str, InjuryProfile] = {
    "wrist_post_cast": InjuryProfile(
        id="wrist_post_cast",
        name="Distal Radius Fracture (Post-Cast)",
        description="Rehabilitation following 6 weeks of immobilization for wrist fracture.",
        typical_recovery_weeks=8,
        expected_milestones=[
            "Week 1: Gentle active ROM, 30° flexion/extension",
            "Week 3: 50% normal ROM, begin light gripping",
            "Week 6: Near full ROM, strengthening exercises",
            "Week 8: Return to normal load bearing",
        ],
    ),
    "acl_rehab": InjuryProfile(
        id="acl_rehab",
        name="ACL Reconstruction (Post-Op)",
        description="Standard protocol for anterior cruciate ligament reconstruction.",
        typical_recovery_weeks=24,
        expected_milestones=[
            "Week 2: 90° flexion, full extension",
            "Week 6: Full ROM, normal gait",
            "Week 12: Jogging initiation",
        ],
    ),
    "frozen_shoulder": InjuryProfile(
        id="frozen_shoulder",
        name="Adhesive Capsulitis (Frozen Shoulder)",
        description="Focus on gradual stretching to restore range of motion.",
        typical_recovery_weeks=12,
        expected_milestones=[
            "Week 2: Pain reduction",
            "Week 6: Improved external rotation",
            "Week 12: Functional overhead reach",
        ],
    ),
}

WRIST_EXERCISES: list[Exercise] = [
    Exercise(
        id="w1",
        name="Wrist Flexion/Extension",
        target_reps=15,
        target_rom=45,
        instructions="Place forearm on table, hand hanging off edge. Gently move hand up and down.",
    ),
    Exercise(
        id="w2",
        name="Towel Wring",
        target_reps=10,
        target_rom=0,
        instructions="Hold a rolled towel. Twist hands in opposite directions simulating wringing water.",
    ),
]

KNEE_EXERCISES: list[Exercise] = [
    Exercise(
        id="k1",
        name="Heel Slides",
        target_reps=10,
        target_rom=110,
        instructions="Lie on back. Slide heel towards buttocks.",
    ),
]

SHOULDER_EXERCISES: list[Exercise] = [
    Exercise(
        id="s1",
        name="Wall Crawl",
        target_reps=8,
        target_rom=120,
        instructions="Walk fingers up the wall as high as possible without pain.",
    ),
    Exercise(
        id="s2",
        name="Pendulum Swing",
        target_reps=20,
        target_rom=0,
        instructions="Lean forward and let arm hang loose. Swing gently in circles.",
    ),
]


@dataclass(frozen=True)
class Protocol:
    exercises: tuple[Exercise, ...]
    benchmarks: tuple[float, ...]  # expected ROM per week


PROTOCOL_MAPPING: dict[str, Protocol] = {
    "wrist_post_cast": Protocol(exercises=tuple(WRIST_EXERCISES), benchmarks=(30, 40, 50, 60, 70, 75, 80)),
    "acl_rehab": Protocol(exercises=tuple(KNEE_EXERCISES), benchmarks=(60, 75, 90, 100, 110, 120)),
    "frozen_shoulder": Protocol(exercises=tuple(SHOULDER_EXERCISES), benchmarks=(45, 60, 80, 100, 130, 150)),
}


def get_injury_profile(injury_type: str) -> InjuryProfile | None:
    return INJURY_LIBRARY.get(injury_type)


def get_protocol(injury_type: str) -> Protocol | None:
    return PROTOCOL_MAPPING.get(injury_type)


def verify_physio_license(license_id: str) -> Physio | None:
    return VERIFIED_PHYSIOS.get(license_id.strip())
