"""
AI service for HIRADC risk narratives.
"""
import logging
from typing import Optional

from openai import OpenAI

from app.core.config import settings
from app.services.risk_scoring import RECOMMENDED_CONTROLS, assess_risk

logger = logging.getLogger(__name__)

CONTROL_DESCRIPTIONS = {
    "Elimination": "Remove the hazard from the work process entirely",
    "Substitution": "Replace with a safer material or process",
    "Engineering Controls": "Put technical systems in place to reduce exposure",
    "Administrative Controls": "Work procedures, training and worker rotation",
    "Personal Protective Equipment (PPE)": "As the last line of control",
}


def template_insight(
    activity_name: str,
    location: str,
    hazard: str,
    severity: int,
    likelihood: int,
) -> str:
    """Deterministic narrative used when no language model is configured."""
    assessment = assess_risk(severity, likelihood)
    controls = "\n".join(
        f"{i}. {name} - {CONTROL_DESCRIPTIONS[name]}"
        for i, name in enumerate(RECOMMENDED_CONTROLS, start=1)
    )
    if assessment.requires_immediate_action:
        closing = (
            "ATTENTION: This risk requires immediate action and strict controls "
            "before the activity continues."
        )
    else:
        closing = "Keep monitoring periodically and evaluate the effectiveness of the controls in place."

    return (
        f'Risk analysis for the activity "{activity_name}" at {location} identifies the hazard: {hazard}.\n\n'
        f"With severity {severity} and likelihood {likelihood}, this risk is categorised as "
        f"{assessment.category.value} with a risk score of {assessment.score}.\n\n"
        "Recommended controls, applied hierarchically:\n"
        f"{controls}\n\n"
        f"{closing}"
    )


class AIService:
    """Service for AI-written risk narratives."""

    def __init__(self):
        self._client = None

    @property
    def client(self):
        """Lazy-load OpenAI client."""
        if self._client is None and settings.is_openai_available():
            try:
                self._client = OpenAI(api_key=settings.OPENAI_API_KEY)
            except Exception as e:
                logger.error(f"Failed to initialize OpenAI client: {e}")
                return None
        return self._client

    def is_available(self) -> bool:
        return settings.is_openai_available() and self.client is not None

    def _model_insight(
        self,
        activity_name: str,
        location: str,
        hazard: str,
        severity: int,
        likelihood: int,
    ) -> Optional[str]:
        assessment = assess_risk(severity, likelihood)
        prompt = f"""You are an occupational health and safety (OHS) expert. Write a professional HIRADC risk narrative.

Activity: {activity_name}
Location: {location}
Hazard: {hazard}
Severity (1-5): {severity}
Likelihood (1-5): {likelihood}
Risk score: {assessment.score} ({assessment.category.value})

Cover, in plain text without markdown:
1. A short assessment of the hazard and its risk level
2. Recommended controls following the hierarchy of controls: {', '.join(RECOMMENDED_CONTROLS)}
3. Whether the activity may continue before controls are in place"""

        try:
            response = self.client.chat.completions.create(
                model=settings.OPENAI_MODEL,
                messages=[
                    {"role": "system", "content": "You are an occupational health and safety expert."},
                    {"role": "user", "content": prompt},
                ],
                temperature=0.3,
            )
            content = response.choices[0].message.content
            return content.strip() if content else None
        except Exception as e:
            logger.error(f"AI insight error for activity '{activity_name}': {e}", exc_info=True)
            return None

    def generate_hiradc_insight(
        self,
        activity_name: str,
        location: str,
        hazard: str,
        severity: int,
        likelihood: int,
    ) -> str:
        """
        Generate the narrative for a hazard analysis.

        Uses the language model when configured and falls back to the
        deterministic template when it is not or when the call fails.

        Raises:
            ValueError: If severity or likelihood are outside 1-5
        """
        assess_risk(severity, likelihood)
        if self.is_available():
            insight = self._model_insight(activity_name, location, hazard, severity, likelihood)
            if insight:
                return insight
            logger.warning("Falling back to template insight")
        return template_insight(activity_name, location, hazard, severity, likelihood)


def get_ai_service() -> AIService:
    """Dependency returning the AI service."""
    return AIService()
