# backend/core/catalog.py
"""Static role catalog and interview prompts shown to candidates."""
from typing import Dict, List, Optional


ROLE_MARKET: List[Dict[str, Optional[str]]] = [
    {
        "roleId": "ai_ml",
        "label": "AI / ML Engineer",
        "demand": "High",
        "supply": "Medium",
        "averageCompanyUsd": "$160k–$260k (total)",
        "topTierUsd": "$300k–$550k+ (total)",
        "codingLanguage": "python",
    },
    {
        "roleId": "product_manager",
        "label": "Product Manager",
        "demand": "High",
        "supply": "High",
        "averageCompanyUsd": "$180k–$280k (total)",
        "topTierUsd": "$300k–$550k+ (total)",
        "codingLanguage": None,
    },
    {
        "roleId": "financial_analyst",
        "label": "Financial Analyst",
        "demand": "Medium",
        "supply": "High",
        "averageCompanyUsd": "$90k–$140k (base)",
        "topTierUsd": "$160k–$300k+ (total)",
        "codingLanguage": None,
    },
    {
        "roleId": "business_analyst",
        "label": "Business Analyst",
        "demand": "High",
        "supply": "High",
        "averageCompanyUsd": "$95k–$150k (total)",
        "topTierUsd": "$170k–$260k+ (total)",
        "codingLanguage": None,
    },
    {
        "roleId": "java_full_stack",
        "label": "Java Full Stack Developer",
        "demand": "High",
        "supply": "High",
        "averageCompanyUsd": "$110k–$170k (total)",
        "topTierUsd": "$180k–$320k+ (total)",
        "codingLanguage": "java",
    },
    {
        "roleId": "python_full_stack",
        "label": "Python Full Stack Developer",
        "demand": "High",
        "supply": "High",
        "averageCompanyUsd": "$115k–$175k (total)",
        "topTierUsd": "$180k–$320k+ (total)",
        "codingLanguage": "python",
    },
]

ROLE_IDS = frozenset(r["roleId"] for r in ROLE_MARKET)

VIDEO_QUESTIONS: List[str] = [
    "In 60 seconds: describe your current situation and what you need most in the next 60 days.",
    "Why did you choose this domain? What are you genuinely best at in it?",
    "Be brutally honest: what are you worst at right now in your domain?",
    "Describe a time you were under pressure and how you handled it.",
    "If we give you a training plan, what will you do daily to finish it?",
]

VIDEO_QUESTION_COUNT = len(VIDEO_QUESTIONS)
VIDEO_THINK_SECONDS = 7
VIDEO_MAX_SECONDS = 180


def role_label(role_id: Optional[str]) -> Optional[str]:
    if not role_id:
        return None
    for role in ROLE_MARKET:
        if role["roleId"] == role_id:
            return role["label"]
    return role_id
