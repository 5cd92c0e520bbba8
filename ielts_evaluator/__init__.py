"""IELTS speaking evaluation through the Gemini API."""

__version__ = "0.1.0"
