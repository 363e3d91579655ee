"""
AI processor service for BorderWatch.

This module provides integration with a local Ollama model for report and
threat analysis. The model is optional: every call reports failure as a
value and callers substitute the keyword analysis.
"""

import json
import math
import re
import asyncio
from typing import Any, Dict, NamedTuple, Optional

import aiohttp
from pydantic import ValidationError

from borderwatch.core.config import settings
from borderwatch.core.logging import logger
from borderwatch.models.threat import ThreatLevel
from borderwatch.schemas.assessment import ImageAnalysis, ImageThreatAssessment, TextAnalysis
from borderwatch.services.threat_scorer import analyze_text

# Keyword analysis stays below the auto-escalation threshold
FALLBACK_MAX_CONFIDENCE = 0.8
FALLBACK_KEY_POINT = "AI analysis temporarily unavailable"

IMAGE_LEVELS = ("none", "low", "medium", "high", "critical")

THREAT_PROMPT = """
You are a military and security threat analyst. Analyze the following threat report for potential security risks in a border region context (India-Pakistan border area).

Threat Report: "{description}"

Return your analysis in JSON format with the following structure:
```json
{{
    "confidence": "Number from 0.0 to 1.0",
    "threatLevel": "One of: low, medium, high, critical",
    "category": "One of: drone, ground, cyber, air, infiltration, shelling, unknown",
    "recommendations": ["action1", "action2", "action3"],
    "keyPoints": ["point1", "point2", "point3"],
    "riskFactors": ["factor1", "factor2"],
    "immediateAction": "Immediate action required, or null"
}}
```

Only return the JSON. Do not include any other text in your response.
"""

IMAGE_PROMPT = """
Analyze this image for potential security threats in a border region context. Look for aerial objects, unusual ground activity, military equipment or personnel, and installations.

Return your analysis in JSON format:
```json
{
    "description": "What you see",
    "detectedObjects": ["object1", "object2"],
    "threatAssessment": {
        "level": "One of: none, low, medium, high, critical",
        "confidence": "Number from 0.0 to 1.0",
        "reasoning": "Explanation of the assessment"
    },
    "locationContext": "Location type if identifiable, or null"
}
```

Only return the JSON. Do not include any other text in your response.
"""


class AnalysisResult(NamedTuple):
    """Outcome of a model call: the analysis, or why there is none."""
    analysis: Optional[TextAnalysis]
    failure: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.failure is None and self.analysis is not None


def apply_analysis_fallback(result: AnalysisResult, description: str) -> TextAnalysis:
    """
    Resolve an analysis result to a usable analysis.

    A failed model call is replaced by the keyword analysis of the same
    description, with confidence capped at FALLBACK_MAX_CONFIDENCE.
    """
    if result.ok:
        return result.analysis

    analysis = analyze_text(description)
    return analysis.model_copy(update={
        "confidence": min(analysis.confidence, FALLBACK_MAX_CONFIDENCE),
        "key_points": [FALLBACK_KEY_POINT] + analysis.key_points,
        "source": "fallback",
    })


def image_analysis_fallback() -> ImageAnalysis:
    return ImageAnalysis(
        description="Image analysis unavailable. Please describe what you observe in the image.",
        detected_objects=[],
        threat_assessment=ImageThreatAssessment(
            level="none",
            confidence=0.1,
            reasoning="Image analysis not available without a vision model",
        ),
        location_context="Manual review required",
    )


def _clamp(value: Any, default: float) -> float:
    if isinstance(value, bool):
        return default
    try:
        value = float(value)
    except (TypeError, ValueError):
        return default
    if math.isnan(value):
        return default
    return max(0.0, min(1.0, value))


def _text(value: Any, default: Optional[str]) -> Optional[str]:
    """A scalar reply field as text; anything else gives the default."""
    if isinstance(value, (str, int, float)) and not isinstance(value, bool):
        return str(value).strip() or default
    return default


def _string_list(value: Any, limit: int, default) -> list:
    if isinstance(value, list):
        return [str(v) for v in value[:limit]]
    return list(default)


class AIProcessor:
    """
    AI processor for threat analysis using Ollama.

    Requests are sequential and bounded by AI_TIMEOUT.
    """

    def __init__(self, enabled: Optional[bool] = None):
        """Initialize the AI processor."""
        self.enabled = enabled if enabled is not None else settings.AI_ENABLED
        self.base_url = settings.OLLAMA_BASE_URL
        self.model = settings.AI_MODEL
        self.vision_model = settings.AI_VISION_MODEL
        self.timeout = settings.AI_TIMEOUT
        self.session = None

    async def initialize(self):
        """Initialize the aiohttp session."""
        if self.session is None:
            self.session = aiohttp.ClientSession()

    async def close(self):
        """Close the aiohttp session."""
        if self.session:
            await self.session.close()
            self.session = None

    async def _make_ollama_request(self, prompt: str, model: str, images: Optional[list] = None) -> str:
        """
        Make a request to the Ollama API.

        Args:
            prompt: The prompt to send to the model.
            model: Model name.
            images: Optional base64-encoded images for vision models.

        Returns:
            The model's response text.

        Raises:
            Exception: If the request fails or times out.
        """
        await self.initialize()

        data = {
            "model": model,
            "prompt": prompt,
            "stream": False,
            "format": "json",
            "options": {
                "temperature": 0.1,
                "num_predict": 1024,
            }
        }
        if images:
            data["images"] = images

        async with self.session.post(
            f"{self.base_url}/api/generate",
            json=data,
            timeout=aiohttp.ClientTimeout(total=self.timeout)
        ) as response:
            if response.status != 200:
                error_text = await response.text()
                raise RuntimeError(f"Ollama API error: {response.status} - {error_text}")

            result = await response.json()
            return result.get("response", "")

    def _extract_json_from_response(self, response: str) -> Dict[str, Any]:
        """
        Extract JSON from the model's response.

        Args:
            response: The model's response.

        Returns:
            Parsed JSON object, or an empty dict when none can be parsed.
        """
        try:
            json_match = re.search(r'```json\s*(.*?)\s*```', response, re.DOTALL)
            if json_match:
                json_str = json_match.group(1)
            else:
                json_match = re.search(r'(\{.*\})', response, re.DOTALL)
                json_str = json_match.group(1) if json_match else response

            data = json.loads(json_str)
            return data if isinstance(data, dict) else {}

        except json.JSONDecodeError:
            logger.error(f"Failed to parse JSON from response: {response[:200]}")
            return {}

    def _to_text_analysis(self, data: Dict[str, Any]) -> TextAnalysis:
        try:
            threat_level = ThreatLevel(data.get("threatLevel"))
        except (ValueError, TypeError):
            threat_level = ThreatLevel.MEDIUM

        return TextAnalysis(
            threat_level=threat_level,
            confidence=_clamp(data.get("confidence"), 0.5),
            category=_text(data.get("category"), "unknown"),
            recommendations=_string_list(
                data.get("recommendations"), 5, ["Monitor situation closely", "Report to authorities"]
            ),
            key_points=_string_list(data.get("keyPoints"), 5, ["Threat assessment pending"]),
            risk_factors=_string_list(data.get("riskFactors"), 3, ["Unknown risk factors"]),
            immediate_action=_text(data.get("immediateAction"), None),
            source="ai",
        )

    def _to_image_analysis(self, data: Dict[str, Any]) -> ImageAnalysis:
        assessment = data.get("threatAssessment")
        if not isinstance(assessment, dict):
            assessment = {}
        level = _text(assessment.get("level"), "low").lower()

        return ImageAnalysis(
            description=_text(data.get("description"), "Image analysis completed"),
            detected_objects=_string_list(data.get("detectedObjects"), 10, []),
            threat_assessment=ImageThreatAssessment(
                level=level if level in IMAGE_LEVELS else "low",
                confidence=_clamp(assessment.get("confidence"), 0.5),
                reasoning=_text(assessment.get("reasoning"), "Standard image analysis completed"),
            ),
            location_context=_text(data.get("locationContext"), None),
        )

    async def analyze_threat(self, description: str) -> AnalysisResult:
        """
        Analyze a threat description with the language model.

        Args:
            description: Free text from a report or threat.

        Returns:
            AnalysisResult carrying the analysis, or the failure reason.
        """
        if not self.enabled:
            return AnalysisResult(None, "AI analysis disabled")

        try:
            response = await self._make_ollama_request(THREAT_PROMPT.format(description=description), self.model)
        except asyncio.TimeoutError:
            logger.error(f"Ollama request timed out after {self.timeout} seconds")
            return AnalysisResult(None, f"timed out after {self.timeout} seconds")
        except Exception as e:
            logger.error(f"Error making Ollama request: {e}")
            return AnalysisResult(None, str(e))

        data = self._extract_json_from_response(response)
        if not data:
            return AnalysisResult(None, "Model returned no usable JSON")

        try:
            return AnalysisResult(self._to_text_analysis(data))
        except (ValidationError, TypeError, AttributeError) as e:
            logger.error(f"Model reply did not fit the analysis schema: {e}")
            return AnalysisResult(None, "Model reply did not match the expected format")

    async def analyze_image(self, base64_image: str) -> ImageAnalysis:
        """
        Analyze an image with the vision model.

        Args:
            base64_image: Base64-encoded image bytes.

        Returns:
            The image analysis, or a manual-review placeholder when the
            model is unavailable.
        """
        if not self.enabled:
            return image_analysis_fallback()

        try:
            response = await self._make_ollama_request(IMAGE_PROMPT, self.vision_model, images=[base64_image])
        except asyncio.TimeoutError:
            logger.error(f"Ollama vision request timed out after {self.timeout} seconds")
            return image_analysis_fallback()
        except Exception as e:
            logger.error(f"Image analysis failed: {e}")
            return image_analysis_fallback()

        data = self._extract_json_from_response(response)
        if not data:
            return image_analysis_fallback()

        try:
            return self._to_image_analysis(data)
        except (ValidationError, TypeError, AttributeError) as e:
            logger.error(f"Vision reply did not fit the analysis schema: {e}")
            return image_analysis_fallback()
