import json
import time
import uuid
import base64
import logging
from typing import Any, Optional

import google.generativeai as genai
from pydantic import TypeAdapter, ValidationError

from ielts_evaluator.config_manager import Settings, load_settings
from ielts_evaluator.errors import (
    ApiKeyMissingError,
    EmptyResponseError,
    InvalidApiKeyError,
    InvalidResponseError,
    QuotaExceededError,
)
from ielts_evaluator.models import AnalysisResult, ConnectionTestResult
from ielts_evaluator.validators import normalize_audio_base64, validate_audio_base64, validate_topic

logger = logging.getLogger(__name__)

PING_PROMPT = "Ping"
ANALYSIS_CUE = "Evaluate this IELTS presentation."
AUDIO_MIME_TYPE = "audio/webm"

CONNECTION_ERROR_MESSAGES = [
    (429, "Quota Exceeded (429) - Free tier limit reached or project restricted."),
    (403, "Permission Denied (403) - API Key invalid or API not enabled in Google Cloud."),
    (400, "Bad Request (400) - Model might not be available in your region."),
]

RESPONSE_SCHEMA = {
    "type": "object",
    "properties": {
        "transcript": {"type": "string"},
        "evidence_log": {
            "type": "object",
            "properties": {
                "detected_advanced_vocabulary": {"type": "array", "items": {"type": "string"}},
                "detected_complex_grammar": {"type": "array", "items": {"type": "string"}}
            },
            "required": ["detected_advanced_vocabulary", "detected_complex_grammar"]
        },
        "assessment_summary": {
            "type": "object",
            "properties": {
                "cefr_level": {"type": "string"},
                "ielts_band": {"type": "number"},
                "short_comment": {"type": "string"}
            },
            "required": ["cefr_level", "ielts_band", "short_comment"]
        },
        "radar_chart_data": {
            "type": "object",
            "properties": {
                "fluency_score": {"type": "number"},
                "vocabulary_score": {"type": "number"},
                "grammar_score": {"type": "number"},
                "pronunciation_score": {"type": "number"}
            },
            "required": ["fluency_score", "vocabulary_score", "grammar_score", "pronunciation_score"]
        },
        "detailed_diagnosis": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "original_text": {"type": "string"},
                    "error_type": {"type": "string", "enum": ["grammar", "vocabulary", "pronunciation"]},
                    "correction": {"type": "string"},
                    "explanation": {"type": "string"}
                },
                "required": ["original_text", "error_type", "correction", "explanation"]
            }
        },
        "polished_version": {
            "type": "object",
            "properties": {
                "original_segment": {"type": "string"},
                "native_rewrite": {"type": "string"}
            },
            "required": ["original_segment", "native_rewrite"]
        }
    },
    "required": [
        "transcript", "evidence_log", "assessment_summary",
        "radar_chart_data", "detailed_diagnosis", "polished_version"
    ]
}

_analysis_result_adapter = TypeAdapter(AnalysisResult)


def get_client(settings: Settings, system_instruction: Optional[str] = None,
               generation_config: Any = None) -> genai.GenerativeModel:
    """
    Build a model handle bound to the settings' API key.
    Raises ApiKeyMissingError before touching the SDK if no key is configured.
    """
    if not settings.api_key:
        logger.error("API key is missing from settings")
        raise ApiKeyMissingError()
    # process-wide: concurrent calls with different keys can observe each other's key
    genai.configure(api_key=settings.api_key)
    return genai.GenerativeModel(
        settings.model,
        generation_config=generation_config,
        system_instruction=system_instruction
    )


def build_system_prompt(topic: str) -> str:
    return (
        f"You are a strict IELTS Examiner. Evaluate the speech for the topic: {topic}. \n"
        "  Focus on IELTS 9-band criteria. Return valid JSON."
    )


def _status_code(error: Exception) -> Optional[int]:
    # google.api_core errors carry the HTTP status in `code`; other transports use `status`
    for attr in ('status', 'code', 'status_code'):
        value = getattr(error, attr, None)
        if isinstance(value, int):
            return value
    return None


def _error_message(error: Exception) -> str:
    return str(error) or getattr(error, 'message', '') or ''


def _matches(error: Exception, status: int, *needles: str) -> bool:
    if _status_code(error) == status:
        return True
    message = _error_message(error)
    return any(needle in message for needle in needles)


def _response_text(response: Any) -> Optional[str]:
    if response is None:
        return None
    try:
        return response.text
    except ValueError:
        # the SDK's quick accessor raises when the candidate carries no text part
        return None


def test_api_connection(settings: Optional[Settings] = None) -> ConnectionTestResult:
    """Send a one-token prompt to the configured model. Never raises."""
    request_id = str(uuid.uuid4())
    start_time = time.time()
    try:
        settings = settings or load_settings()
        model = get_client(settings)
        logger.info(f"Testing connection with model: {settings.model}",
                    extra={'request_id': request_id, 'model': settings.model, 'operation': 'test_connection'})
        response = model.generate_content([PING_PROMPT])
        latency_ms = int((time.time() - start_time) * 1000)
        logger.info(f"Connection test succeeded in {latency_ms} ms",
                    extra={'request_id': request_id, 'latency_ms': latency_ms, 'operation': 'test_connection'})
        return ConnectionTestResult(success=True, message=_response_text(response) or "OK")
    except Exception as e:
        logger.error(f"Connection test failed: {e}",
                     extra={'request_id': request_id, 'operation': 'test_connection'})
        message = _error_message(e) or "Unknown Error"
        for status, friendly_message in CONNECTION_ERROR_MESSAGES:
            if _matches(e, status, str(status)):
                message = friendly_message
                break
        return ConnectionTestResult(success=False, message=message)


def analyze_audio(audio_base64: str, topic: str, settings: Optional[Settings] = None) -> AnalysisResult:
    """
    Submit a base64 webm recording for IELTS speaking evaluation.

    The topic is interpolated verbatim into the system instruction. The model
    is asked for JSON constrained by RESPONSE_SCHEMA; the parsed object is
    only checked locally when `settings.validate_response` is set.
    """
    settings = settings or load_settings()
    audio_base64 = normalize_audio_base64(audio_base64)

    for is_valid, error in (validate_audio_base64(audio_base64), validate_topic(topic)):
        if not is_valid:
            raise ValueError(error)

    generation_config = genai.types.GenerationConfig(
        response_mime_type="application/json",
        response_schema=RESPONSE_SCHEMA
    )
    model = get_client(settings, system_instruction=build_system_prompt(topic),
                       generation_config=generation_config)
    contents = [
        {"mime_type": AUDIO_MIME_TYPE, "data": base64.b64decode(audio_base64)},
        ANALYSIS_CUE
    ]

    request_id = str(uuid.uuid4())
    start_time = time.time()
    logger.info(f"Analyzing audio with {settings.model}...",
                extra={'request_id': request_id, 'model': settings.model, 'operation': 'analyze_audio'})
    try:
        response = model.generate_content(contents)
    except Exception as e:
        logger.error(f"Gemini error: {e}", extra={'request_id': request_id, 'operation': 'analyze_audio'})
        if _matches(e, 429, "429", "quota"):
            raise QuotaExceededError() from e
        if _matches(e, 403, "403"):
            raise InvalidApiKeyError() from e
        raise

    latency_ms = int((time.time() - start_time) * 1000)
    logger.info(f"Analysis response received in {latency_ms} ms",
                extra={'request_id': request_id, 'latency_ms': latency_ms, 'operation': 'analyze_audio'})

    text = _response_text(response)
    if not text:
        raise EmptyResponseError()

    result = json.loads(text)

    if settings.validate_response:
        try:
            _analysis_result_adapter.validate_python(result, strict=True)
        except ValidationError as e:
            logger.warning(f"Model response does not match the analysis schema: {e}",
                           extra={'request_id': request_id, 'operation': 'analyze_audio'})
            raise InvalidResponseError(f"Model response does not match the analysis schema: {e}") from e

    return result
