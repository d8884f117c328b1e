# backend/ai/groq_client.py
import json
import logging
from typing import Any, Dict, Optional

import httpx

from core.config import settings

logger = logging.getLogger(__name__)


class GroqError(Exception):
    """Message is safe to show to an admin; every GroqError is retryable."""
    pass


SYSTEM_PROMPT = "\n".join([
    "You are a practical trainer evaluator for Octonix Solutions.",
    "",
    "IMPORTANT: This is for TRAINING candidates, not hiring experienced developers.",
    "Knowledge is 'good to have' - focus on TRAINABILITY. Be lenient: 'Right' beats 'Perfect'.",
    "",
    "SCORING (be generous, give credit for trying):",
    "- overallScore0to100: Trainability + basic aptitude (60-80 is typical)",
    "- honestySignal0to10, aiTooling0to10, promptEngineering0to10, domainBasics0to10, codingBasics0to10, communication0to10: Rate 0-10",
    "- integrityRisk0to10: 0 = clean, 10 = very suspicious proctoring events",
    "",
    "VIDEO BEHAVIOR EVALUATION (if provided):",
    "Use video behavior data to assess communication0to10 score:",
    "- GOOD indicators: tone (calm/confident/professional), speed 6-7/10, low repetitive words, smooth flow, thoughtful pauses, appropriate hand movements",
    "- BAD indicators: excessive 'like/uhh/ummm', long gaps (>3s), nervous tone, rushed/very slow speech, no thought before answering",
    "- If behavior data is missing or empty, don't penalize - score communication based on text answers only",
    "- Question-specific good signs: starting ASAP (Q3), breaking into parts (Q1/Q2/Q4), saying 'it depends' (Q5), discussing improvement (Q4)",
    "",
    "ANSWER VALIDATION (Step 4 - Domain Questions):",
    "For each text-based question in domainKnowledge, validate if the answer is acceptable:",
    "- Don't expect perfection - just check if they understand the basic concept",
    "- Mark TRUE if answer shows basic understanding, FALSE if completely wrong/nonsensical/empty",
    "- Return answerValidations as object with questionId as key, boolean as value",
    '- Example: {"ml_5": true, "ml_7": false, "pm_1": true}',
    "",
    "OUTPUT MUST include ALL fields in this EXACT format:",
    "{",
    '  "overallScore0to100": 75,',
    '  "sectionScores": {',
    '    "honestySignal0to10": 8,',
    '    "aiTooling0to10": 7,',
    '    "promptEngineering0to10": 6,',
    '    "domainBasics0to10": 5,',
    '    "codingBasics0to10": 4,',
    '    "communication0to10": 7,',
    '    "integrityRisk0to10": 1',
    "  },",
    '  "answerValidations": {"ml_5": true, "ml_7": false},',
    '  "strengths": ["Good problem-solving", "Willing to learn"],',
    '  "risks": ["Limited coding experience"],',
    '  "recommendedNextSteps": ["Start with basics", "Provide mentoring"],',
    '  "shortSummary": "Trainable candidate with basic understanding...",',
    '  "trainerSummary": {',
    '    "knowledgeLevel": "Basic understanding of concepts",',
    '    "availability": "Mon-Fri 9am-5pm EST",',
    '    "bestFit": "Junior role with mentorship",',
    '    "trainingNeeds": "Fundamentals and hands-on practice",',
    '    "readyToStart": "With basic training"',
    "  }",
    "}",
    "",
    'CRITICAL: "readyToStart" must be EXACTLY one of: "Yes", "With basic training", or "Needs significant training"',
    "Return ONLY this JSON structure. No markdown, no extra text.",
])


def _status_message(status_code: int) -> str:
    if status_code == 429:
        return "AI service is experiencing high demand. Please try again in a moment."
    if status_code >= 500:
        return "AI service is temporarily down. This usually resolves quickly."
    return f"Unable to connect to AI service ({status_code}). Please try again."


def chat_json(user_payload: Dict[str, Any], model: Optional[str] = None, timeout: Optional[float] = None) -> Dict[str, Any]:
    """
    Calls the Groq chat-completions endpoint in JSON mode and returns the
    parsed JSON object from the first choice. Schema validation is the
    caller's job.
    """
    if not settings.groq_api_key:
        raise GroqError("Missing env var: GROQ_API_KEY")

    payload = {
        "model": model or settings.groq_model,
        "temperature": 0.2,
        "response_format": {"type": "json_object"},
        "messages": [
            {"role": "system", "content": SYSTEM_PROMPT},
            {"role": "user", "content": json.dumps(user_payload)},
        ],
    }
    headers = {"Authorization": f"Bearer {settings.groq_api_key}"}

    try:
        resp = httpx.post(
            settings.groq_api_url,
            json=payload,
            headers=headers,
            timeout=timeout or settings.groq_timeout,
        )
    except httpx.HTTPError as e:
        logger.warning("groq request failed: %s", e)
        raise GroqError("Unable to connect to AI service. Please try again.") from e

    if resp.status_code >= 400:
        logger.warning("groq returned %s: %s", resp.status_code, resp.text[:500])
        raise GroqError(_status_message(resp.status_code))

    try:
        body = resp.json()
        content = body["choices"][0]["message"]["content"]
    except (ValueError, KeyError, IndexError, TypeError):
        content = None
    if not content or not isinstance(content, str):
        raise GroqError("AI service returned an incomplete response. Please try again.")

    try:
        parsed = json.loads(content)
    except ValueError as e:
        raise GroqError("AI service returned an unexpected format. Please try again.") from e
    if not isinstance(parsed, dict):
        raise GroqError("AI service returned an unexpected format. Please try again.")
    return parsed
