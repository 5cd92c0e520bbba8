from pydantic import BaseModel
from typing import List, Literal
from typing_extensions import TypedDict

# --- Evaluation returned by the model (parsed JSON, shape mirrors RESPONSE_SCHEMA) ---

class EvidenceLog(TypedDict):
    detected_advanced_vocabulary: List[str]
    detected_complex_grammar: List[str]

class AssessmentSummary(TypedDict):
    cefr_level: str
    ielts_band: float
    short_comment: str

class RadarChartData(TypedDict):
    fluency_score: float
    vocabulary_score: float
    grammar_score: float
    pronunciation_score: float

class DiagnosisEntry(TypedDict):
    original_text: str
    error_type: Literal["grammar", "vocabulary", "pronunciation"]
    correction: str
    explanation: str

class PolishedVersion(TypedDict):
    original_segment: str
    native_rewrite: str

class AnalysisResult(TypedDict):
    """IELTS speaking evaluation for a single recording."""
    transcript: str
    evidence_log: EvidenceLog
    assessment_summary: AssessmentSummary
    radar_chart_data: RadarChartData
    detailed_diagnosis: List[DiagnosisEntry]
    polished_version: PolishedVersion

# --- Connection probe ---

class ConnectionTestResult(BaseModel):
    success: bool
    message: str
