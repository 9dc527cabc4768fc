"""
External AI gateway.

Each capability builds a prompt from patient data, sends it to a hosted
generative model at a fixed temperature and returns the model's text
verbatim. Failures never reach the caller: an empty response or any error
maps to a fixed fallback string.
"""

from __future__ import annotations

import base64
import logging
from typing import Any, Protocol

import google.generativeai as genai

from physioai.core.config import settings
from physioai.schemas.patient import Patient
from physioai.schemas.therapist import InjuryProfile
from physioai.services import prompts

logger = logging.getLogger(__name__)

ANALYSIS_EMPTY = "Unable to generate analysis at this time."
ANALYSIS_ERROR = "Error generating analysis."
PREDICTION_EMPTY = "Prediction unavailable."
PREDICTION_ERROR = "System error: Unable to compute prediction."
PROTOCOL_NOT_FOUND = "Error: Selected injury protocol configuration not found."
MOTIVATION_EMPTY = "Keep pushing forward! Consistency is key to recovery."
MOTIVATION_ERROR = "Recovery takes time, but every rep counts. You're doing great!"
DISCHARGE_EMPTY = "Discharge summary generated."
DISCHARGE_ERROR = "Error generating discharge report."
VOICE_EMPTY = "Audio analysis unavailable."
VOICE_ERROR = "Error analyzing voice note."

ANALYSIS_TEMPERATURE = 0.3
PREDICTION_TEMPERATURE = 0.4
MOTIVATION_TEMPERATURE = 0.7
DISCHARGE_TEMPERATURE = 0.7

VOICE_NOTE_MIME_TYPE = "audio/webm"


class GatewayUnavailable(RuntimeError):
    pass


class AIGateway(Protocol):
    def summarize_progress(self, patient: Patient) -> str: ...

    def predict_recovery(self, patient: Patient, profile: InjuryProfile | None) -> str: ...

    def compose_motivation(self, patient: Patient) -> str: ...

    def compose_discharge_report(self, patient: Patient) -> str: ...

    def transcribe_voice_note(self, audio_base64: str) -> str: ...


class GeminiGateway:
    def __init__(self, api_key: str | None, model_name: str, timeout_seconds: float | None = None):
        self.model_name = model_name
        self.timeout_seconds = timeout_seconds
        self._configured = bool(api_key)
        if api_key:
            genai.configure(api_key=api_key)

    def _generate(self, contents: Any, temperature: float | None = None) -> str:
        if not self._configured:
            raise GatewayUnavailable("Gemini API key not configured")

        model = genai.GenerativeModel(self.model_name)
        generation_config = {"temperature": temperature} if temperature is not None else None
        request_options = {"timeout": self.timeout_seconds} if self.timeout_seconds else None
        resp = model.generate_content(contents, generation_config=generation_config, request_options=request_options)
        return (resp.text or "").strip()

    def _call(self, operation: str, contents: Any, temperature: float | None, empty: str, error: str) -> str:
        try:
            text = self._generate(contents, temperature=temperature)
        except Exception:
            logger.exception("AI gateway %s failed; returning fallback", operation)
            return error
        return text or empty

    def summarize_progress(self, patient: Patient) -> str:
        return self._call(
            "progress analysis", prompts.progress_prompt(patient), ANALYSIS_TEMPERATURE, ANALYSIS_EMPTY, ANALYSIS_ERROR
        )

    def predict_recovery(self, patient: Patient, profile: InjuryProfile | None) -> str:
        if profile is None:
            return PROTOCOL_NOT_FOUND
        return self._call(
            "recovery prediction",
            prompts.prediction_prompt(patient, profile),
            PREDICTION_TEMPERATURE,
            PREDICTION_EMPTY,
            PREDICTION_ERROR,
        )

    def compose_motivation(self, patient: Patient) -> str:
        return self._call(
            "progress booster",
            prompts.motivation_prompt(patient),
            MOTIVATION_TEMPERATURE,
            MOTIVATION_EMPTY,
            MOTIVATION_ERROR,
        )

    def compose_discharge_report(self, patient: Patient) -> str:
        return self._call(
            "discharge report",
            prompts.discharge_prompt(patient),
            DISCHARGE_TEMPERATURE,
            DISCHARGE_EMPTY,
            DISCHARGE_ERROR,
        )

    def transcribe_voice_note(self, audio_base64: str) -> str:
        try:
            audio = base64.b64decode(prompts.strip_audio_data_uri(audio_base64), validate=True)
        except ValueError:
            logger.warning("Voice note payload is not valid base64")
            return VOICE_ERROR
        contents = [{"mime_type": VOICE_NOTE_MIME_TYPE, "data": audio}, prompts.VOICE_NOTE_PROMPT]
        return self._call("voice note analysis", contents, None, VOICE_EMPTY, VOICE_ERROR)


def build_gateway() -> GeminiGateway:
    return GeminiGateway(
        api_key=settings.gemini_api_key,
        model_name=settings.gemini_model,
        timeout_seconds=settings.ai_timeout_seconds,
    )
