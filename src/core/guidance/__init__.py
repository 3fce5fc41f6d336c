"""Recommendation, goal and narrative generation for risk analyses"""

from .generator import (
    care_timeline,
    generate_health_goals,
    generate_next_steps,
    generate_pre_diagnosis,
    generate_recommendations,
    generate_summary,
    goal_progress,
    lifestyle_score,
    preventive_risk_index,
)

__all__ = [
    "care_timeline",
    "generate_health_goals",
    "generate_next_steps",
    "generate_pre_diagnosis",
    "generate_recommendations",
    "generate_summary",
    "goal_progress",
    "lifestyle_score",
    "preventive_risk_index",
]
