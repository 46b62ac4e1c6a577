"""
Predicsure AI — Prediction accuracy estimate.

Scores how much context is available for a prediction:

* user profile completeness   (max 40)
* question specificity        (max 30)
* category-specific profile   (max 20)
* psyche profile presence     (max 10)

The result is shown to the user and pinned into the LLM prompt so the model
prints the same figure.
"""

from __future__ import annotations

import re
from typing import Optional

from app.models.psyche import PsycheProfile
from app.models.user import User

_SPECIFICITY_PATTERNS = [
    re.compile(r"\b(specific|exactly|precisely|particular)\b", re.IGNORECASE),
    re.compile(r"\b(when|how long|how much|how many)\b", re.IGNORECASE),
    re.compile(r"\b(my job|my career|my relationship|my business|my health)\b", re.IGNORECASE),
    re.compile(r"\b(next week|next month|this year|within \d+)\b", re.IGNORECASE),
    re.compile(r"\b(should i|will i|can i|is it)\b", re.IGNORECASE),
]

_CONTEXT_PATTERNS = [
    re.compile(r"\b(because|since|due to|after|before)\b", re.IGNORECASE),
    re.compile(r"\b(currently|right now|at the moment)\b", re.IGNORECASE),
    re.compile(r"\b(i've been|i have been|i am|i'm)\b", re.IGNORECASE),
    re.compile(r"\b(my situation|my circumstances|my case)\b", re.IGNORECASE),
]

_CATEGORY_PROFILE_ATTR = {
    "career": "career_profile",
    "finance": "money_profile",
    "love": "love_profile",
    "health": "health_profile",
}

_CATEGORY_QUESTIONS = {
    "career": "What's your current job position and career goals?",
    "finance": "What's your current financial situation and goals?",
    "love": "What are you looking for in relationships?",
    "health": "What are your current health goals and challenges?",
}

PROFILE_MAX = 40
QUESTION_MAX = 30
CATEGORY_MAX = 20
PSYCHE_MAX = 10

MAX_MISSING_FACTORS = 5
MAX_SUGGESTIONS = 3


def calculate_accuracy(
    user: Optional[User],
    psyche_profile: Optional[PsycheProfile],
    question: str,
    category: str,
) -> dict:
    """Return ``{"score", "label", "missing_factors", "improvement_suggestions"}``.

    Parameters
    ----------
    user:
        The requesting user, or ``None`` for an anonymous request.
    psyche_profile:
        The user's stored psyche profile, if any.
    question:
        The free-text question being predicted.
    category:
        Prediction category (``general`` never asks for a category profile).
    """
    missing: list[str] = []
    suggestions: list[str] = []
    score = 0

    # -- 1. Profile completeness -------------------------------------------
    profile_score = 0
    if user is not None:
        if user.nickname:
            profile_score += 5
        else:
            missing.append("Your name/nickname")
            suggestions.append("What should I call you?")

        if user.interests is not None:
            profile_score += min(10, len(user.interests) * 3)
        else:
            missing.append("Your primary interests")
            suggestions.append("What areas of life are you most focused on right now?")

        if user.relationship_status and user.relationship_status != "prefer-not-say":
            profile_score += 5
        else:
            missing.append("Your relationship status")

        if user.location:
            profile_score += 10
        else:
            missing.append("Your location/city")
            suggestions.append("Where are you based?")

        if user.age_range:
            profile_score += 5
        else:
            missing.append("Your age range")

        if user.onboarding_completed:
            profile_score += 5
    else:
        missing.append("Basic profile information")
        suggestions.append("Complete your profile to get more accurate predictions")

    score += min(profile_score, PROFILE_MAX)

    # -- 2. Question specificity -------------------------------------------
    question_score = 0
    word_count = len(question.split())
    if word_count >= 15:
        question_score += 10
    elif word_count >= 10:
        question_score += 7
    elif word_count >= 5:
        question_score += 4
    else:
        suggestions.append("Can you provide more details about your situation?")

    specificity = sum(1 for p in _SPECIFICITY_PATTERNS if p.search(question))
    question_score += min(10, specificity * 3)
    context = sum(1 for p in _CONTEXT_PATTERNS if p.search(question))
    question_score += min(10, context * 3)

    if question_score < 15:
        suggestions.append("Adding timeframes and specific details would help")

    score += min(question_score, QUESTION_MAX)

    # -- 3. Category-specific profile --------------------------------------
    category_score = 0
    if user is not None:
        attr = _CATEGORY_PROFILE_ATTR.get(category)
        category_profile = getattr(user, attr) if attr else None
        if category_profile:
            filled = sum(1 for v in category_profile.values() if v)
            category_score = min(CATEGORY_MAX, filled * 5)
        elif category != "general":
            missing.append(f"Your {category} profile details")
            if category in _CATEGORY_QUESTIONS:
                suggestions.append(_CATEGORY_QUESTIONS[category])

    score += min(category_score, CATEGORY_MAX)

    # -- 4. Psyche profile -------------------------------------------------
    psyche_score = 0
    if psyche_profile is not None:
        if psyche_profile.psyche_type:
            psyche_score += 5
        if psyche_profile.psyche_parameters and len(psyche_profile.psyche_parameters) >= 4:
            psyche_score += 5
    else:
        missing.append("Your personality assessment")
        suggestions.append("Complete the personality assessment for personalized insights")

    score += min(psyche_score, PSYCHE_MAX)

    score = max(0, min(100, round(score)))
    return {
        "score": score,
        "label": accuracy_label(score),
        "missing_factors": missing[:MAX_MISSING_FACTORS],
        "improvement_suggestions": suggestions[:MAX_SUGGESTIONS],
    }


def accuracy_label(score: int) -> str:
    if score >= 75:
        return "High"
    if score >= 50:
        return "Moderate"
    return "Low"


def format_accuracy_for_prompt(accuracy: dict) -> str:
    lines = [
        "\n\n**PREDICTION ACCURACY CONTEXT:**\n",
        f"Based on available information, this prediction has a calculated accuracy of "
        f"{accuracy['score']}% ({accuracy['label']}).\n",
    ]
    if accuracy["missing_factors"]:
        lines.append("\nMissing context that would improve accuracy:\n")
        lines.extend(f"• {factor}\n" for factor in accuracy["missing_factors"])
    lines.append(
        f"\n**IMPORTANT:** Use EXACTLY \"{accuracy['score']}% ({accuracy['label']})\" "
        "as the Prediction Accuracy in your response. Do not make up a different number.\n"
    )
    return "".join(lines)
