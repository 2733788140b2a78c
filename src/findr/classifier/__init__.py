"""Photo classification.

Example:
    >>> from findr.classifier import parse_response
    >>> parse_response('{"isAnimal": false, "confidence": 0}').detected
    False
"""

from findr.classifier.gemini import GeminiClassifier, reply_text
from findr.classifier.parser import parse_response
from findr.classifier.prompt import ANALYSIS_PROMPT

__all__ = [
    "ANALYSIS_PROMPT",
    "GeminiClassifier",
    "parse_response",
    "reply_text",
]
