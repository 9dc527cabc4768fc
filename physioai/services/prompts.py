import re
from textwrap import dedent

from physioai.schemas.patient import Patient, SessionLog
from physioai.schemas.therapist import InjuryProfile

RECENT_LOG_WINDOW = 5

_DATA_URI_PREFIX = re.compile(r"^data:audio/\w+;base64,")


def _last_log(patient: Patient) -> SessionLog | None:
    return patient.logs[-1] if patient.logs else None


def _fmt_num(value: float) -> str:
    return f"{value:g}"


def progress_prompt(patient: Patient) -> str:
    lines = "\n".join(
        f"- Date: {log.date}, Pain (1-10): {log.pain_score}, ROM: {_fmt_num(log.max_rom)}°, "
        f"Reps: {log.reps_completed}, Notes: {log.notes or '-'}"
        for log in patient.logs[-RECENT_LOG_WINDOW:]
    )
    return dedent(
        """\
        You are an expert physiotherapist assistant. Analyze the following patient data.

        Patient: {name}
        Injury: {injury}

        Recent Progress Logs (Last {window} entries):
        {lines}

        Please provide:
        1. A summary of their progress trend.
        2. Specific observations about their pain vs. ROM.
        3. Recommendations for the physiotherapist.

        Format the output as a concise Markdown block.
        """
    ).format(name=patient.name, injury=patient.injury, window=RECENT_LOG_WINDOW, lines=lines or "- (no logs yet)")


def prediction_prompt(patient: Patient, profile: InjuryProfile) -> str:
    last = _last_log(patient)
    latest_rom = last.max_rom if last else 0
    latest_pain = last.pain_score if last else 0
    weeks = len(patient.logs) / 3
    return dedent(
        """\
        You are an advanced clinical prediction bot.

        Context:
        Patient Name: {name}
        Actual Injury: {injury}
        Physio's Selected Protocol: {protocol}
        Protocol Description: {description}
        Standard Milestones: {milestones}

        Patient's Current Status:
        - Latest ROM: {rom} degrees
        - Latest Pain: {pain}/10
        - Weeks since start: Approx {weeks:.1f} weeks

        Task:
        Compare the patient's actual progress against the standard protocol milestones.
        Predict the trajectory for the next 2 weeks.
        Are they recovering faster or slower than the traditional curve for this specific injury?

        Keep it conversational but clinical.
        """
    ).format(
        name=patient.name,
        injury=patient.injury,
        protocol=profile.name,
        description=profile.description,
        milestones="; ".join(profile.expected_milestones),
        rom=_fmt_num(latest_rom),
        pain=latest_pain,
        weeks=weeks,
    )


def motivation_prompt(patient: Patient) -> str:
    last = _last_log(patient)
    pain = last.pain_score if last else 0
    reps = last.reps_completed if last else 0
    return dedent(
        f"""\
        Write a 3-sentence motivational "Progress Booster" for a patient named {patient.name} recovering from {patient.injury}.
        Their latest pain score was {pain}/10 (lower is better) and they completed {reps} reps.
        Be encouraging, professional, and concise. Do not use markdown.
        """
    )


def discharge_prompt(patient: Patient) -> str:
    last = _last_log(patient)
    final_rom = last.max_rom if last else 0
    final_pain = last.pain_score if last else 0
    return dedent(
        f"""\
        Draft a compassionate and professional discharge summary email for {patient.name}.
        Email Subject: Recovery Journey Completion - {patient.injury}

        Details:
        - Patient: {patient.name}
        - Injury: {patient.injury}
        - Sessions Logged: {len(patient.logs)}
        - Final ROM: {_fmt_num(final_rom)}°
        - Final Pain: {final_pain}/10

        The email should congratulate them on completing their prescribed protocol and instruct them that their temporary data logs are now being securely wiped from the active device storage.
        Do not use markdown formatting.
        """
    )


VOICE_NOTE_PROMPT = dedent(
    """\
    You are listening to a voice note from a physiotherapy patient after their exercise session.
    1. Transcribe the audio exactly.
    2. Extract any keywords related to pain (e.g., "sharp", "dull", "hurts"), fatigue, or difficulty.
    3. Determine the sentiment (Positive/Negative/Neutral).

    Format as: "Transcription: [text] | Keywords: [list]"
    """
)


def strip_audio_data_uri(audio_base64: str) -> str:
    return _DATA_URI_PREFIX.sub("", audio_base64.strip(), count=1)
