"""
Pytest fixtures for IELTS evaluator tests.
"""
import os
import sys
import copy
import pytest
from types import SimpleNamespace

# Add the project root to Python path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from ielts_evaluator import config_manager
from ielts_evaluator.config_manager import Settings
from ielts_evaluator.services import gemini_service

ENV_VARS = (
    'API_KEY', 'GOOGLE_API_KEY', 'GEMINI_MODEL',
    'STRICT_RESPONSE_VALIDATION', 'IELTS_EVALUATOR_CONFIG',
)

# base64 of b"fake webm bytes"
SAMPLE_AUDIO_BASE64 = "ZmFrZSB3ZWJtIGJ5dGVz"


class FakeResponse:
    def __init__(self, text):
        self._text = text

    @property
    def text(self):
        return self._text


class NoPartsResponse:
    """Mimics the SDK raising from `.text` when no candidate part is present."""

    @property
    def text(self):
        raise ValueError("The `response.text` quick accessor requires the response to contain a valid `Part`")


class FakeGenerativeModel:
    def __init__(self, fake, model_name, generation_config=None, system_instruction=None):
        self.fake = fake
        self.model_name = model_name
        self.generation_config = generation_config
        self.system_instruction = system_instruction

    def generate_content(self, contents):
        self.fake.calls.append({
            'model': self.model_name,
            'contents': contents,
            'generation_config': self.generation_config,
            'system_instruction': self.system_instruction,
        })
        if self.fake.error is not None:
            raise self.fake.error
        return self.fake.response


class FakeGenAI:
    """Stands in for the `google.generativeai` module and records every interaction."""

    def __init__(self):
        self.api_keys = []
        self.models = []
        self.calls = []
        self.response = FakeResponse("pong")
        self.error = None
        self.types = SimpleNamespace(GenerationConfig=lambda **kwargs: kwargs)

    def configure(self, api_key=None):
        self.api_keys.append(api_key)

    def GenerativeModel(self, model_name, generation_config=None, system_instruction=None):
        model = FakeGenerativeModel(self, model_name, generation_config, system_instruction)
        self.models.append(model)
        return model


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    """Keep the developer's shell and .env files out of the tests."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr(config_manager, 'load_dotenv', lambda *args, **kwargs: False)


@pytest.fixture
def fake_genai(monkeypatch):
    fake = FakeGenAI()
    monkeypatch.setattr(gemini_service, 'genai', fake)
    return fake


@pytest.fixture
def settings():
    return Settings(api_key='test-key')


@pytest.fixture
def sample_audio_base64():
    return SAMPLE_AUDIO_BASE64


@pytest.fixture
def sample_analysis_result():
    """Sample evaluation in the shape the model is asked to return."""
    return copy.deepcopy({
        "transcript": "I'd like to talk about a book that changed my perspective on life.",
        "evidence_log": {
            "detected_advanced_vocabulary": ["perspective", "profoundly"],
            "detected_complex_grammar": ["third conditional", "relative clause"]
        },
        "assessment_summary": {
            "cefr_level": "B2",
            "ielts_band": 6.5,
            "short_comment": "Fluent with occasional grammatical slips."
        },
        "radar_chart_data": {
            "fluency_score": 7,
            "vocabulary_score": 6.5,
            "grammar_score": 6,
            "pronunciation_score": 6.5
        },
        "detailed_diagnosis": [
            {
                "original_text": "it make me think",
                "error_type": "grammar",
                "correction": "it made me think",
                "explanation": "Past tense is needed when narrating a past experience."
            },
            {
                "original_text": "very very good",
                "error_type": "vocabulary",
                "correction": "outstanding",
                "explanation": "Use a single precise adjective instead of repetition."
            }
        ],
        "polished_version": {
            "original_segment": "it make me think about my life very very much",
            "native_rewrite": "it made me reflect deeply on my own life"
        }
    })
