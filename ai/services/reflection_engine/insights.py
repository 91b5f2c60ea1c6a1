from __future__ import annotations
from typing import List, Sequence

# Insights and recommendations are plain rule output; no numbers beyond what
# the caller already shows, no model calls.

MAX_RECOMMENDATIONS = 4

NO_DATA_INSIGHT = "No data available yet. Start tracking your daily reflections!"
NO_DATA_RECOMMENDATION = "Begin by rating your day and writing a brief diary entry."

DEFAULT_RECOMMENDATIONS = [
    "Continue reflecting daily to track your emotional patterns.",
    "Celebrate your wins, no matter how small.",
    "Be kind to yourself on difficult days.",
]


def _consistency_insight(rated_days: int) -> str:
    if rated_days >= 25:
        return "🎯 Excellent consistency! You've been tracking your mood regularly."
    if rated_days >= 15:
        return "👍 Good tracking habit! Try to maintain this consistency."
    return "💡 Consider tracking more regularly to get better insights."


def _mood_insight(avg_rating: float) -> str:
    if avg_rating >= 4.0:
        return "😊 Your overall mood has been very positive this month!"
    if avg_rating >= 3.0:
        return "🙂 Your mood has been generally stable and balanced."
    return "💙 It seems you've had some challenging days. Remember, it's okay to have ups and downs."


def generate_insights(rated_days: int, avg_rating: float, trend: str, themes: Sequence[str]) -> List[str]:
    insights = [_consistency_insight(rated_days), _mood_insight(avg_rating)]
    if trend == "improving":
        insights.append("📈 Great news! Your mood trend is improving over time.")
    elif trend == "declining":
        insights.append("📉 Your mood has been declining recently. Consider what might be affecting you.")
    if themes:
        insights.append(f"🔍 Main focus areas: {', '.join(themes)}.")
    return insights


def generate_recommendations(avg_rating: float, trend: str, themes: Sequence[str]) -> List[str]:
    """Rule-ordered recommendations, earlier rules win when capped at MAX_RECOMMENDATIONS."""
    recs: List[str] = []
    if avg_rating < 3.0:
        recs.append("Consider talking to someone you trust about how you're feeling.")
        recs.append("Try incorporating small self-care activities into your daily routine.")
    if trend == "declining":
        recs.append("Identify patterns: What days tend to be harder? What helps on better days?")
        recs.append("Consider professional support if you're consistently struggling.")
    if "Stress" in themes:
        recs.append("Practice stress management techniques like deep breathing or meditation.")
        recs.append("Ensure you're getting enough rest and taking regular breaks.")
    if "Work" in themes:
        recs.append("Maintain work-life balance. Set boundaries for work hours.")
    if "Social" in themes:
        recs.append("Continue nurturing your social connections - they're important for wellbeing.")
    if "Health" in themes:
        recs.append("Keep up the healthy habits! Physical health supports mental wellbeing.")
    if not recs:
        recs = list(DEFAULT_RECOMMENDATIONS)
    return recs[:MAX_RECOMMENDATIONS]
