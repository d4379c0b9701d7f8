"""
AI Service Module

This module forwards AI requests to the backend's ``/ai`` endpoints: classifying
a free-text post into a post type, checking text for toxicity before it is
posted, and generating a meme image for a prompt. No model runs client-side.
"""

from data.models import ClassificationResult, ToxicityResult, MemeResult
from services.api_client import ApiClient, parse_one
from utils.exceptions import ValidationError
from utils.logger import get_logger

logger = get_logger(__name__)


def _require_text(value: str, field_name: str) -> str:
    if value is None or not value.strip():
        raise ValidationError(f"{field_name} cannot be empty")
    return value


class AIService:
    """Service for the backend's AI helpers."""

    resource = "/ai"

    def __init__(self, client: ApiClient):
        self.client = client

    def classify_post(self, prompt: str) -> ClassificationResult:
        """
        Ask the backend what kind of post a free-text prompt describes.

        Args:
            prompt: What the user typed.

        Returns:
            ClassificationResult: Suggested type, confidence and extracted fields.
        """
        data = self.client.post(f"{self.resource}/classify",
                                json_body={'prompt': _require_text(prompt, "Prompt")})
        result = parse_one(data, ClassificationResult.from_dict, "classification")
        logger.info(f"Prompt classified as {result.type} ({result.confidence:.0%})")
        return result

    def check_toxicity(self, content: str) -> ToxicityResult:
        data = self.client.post(f"{self.resource}/check-toxicity",
                                json_body={'content': _require_text(content, "Content")})
        return parse_one(data, ToxicityResult.from_dict, "toxicity result")

    def generate_meme(self, prompt: str) -> MemeResult:
        data = self.client.post(f"{self.resource}/generate-meme",
                                json_body={'prompt': _require_text(prompt, "Prompt")})
        return parse_one(data, MemeResult.from_dict, "meme")
