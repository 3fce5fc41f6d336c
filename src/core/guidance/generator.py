"""
Narrative generators: recommendations, health goals, summary text,
next steps and pre-diagnosis suggestions.

All functions are pure; they only read the survey, the risk tier and the
templates in ``catalog``.
"""

import math
from typing import Dict, List, Sequence

from ..models import Goal, PreDiagnosis, RiskLevel, SurveyRecord
from .catalog import (
    ACTIVITY_GOAL,
    CHECKUP_GOAL,
    CHRONIC_DISEASE_RECOMMENDATIONS,
    FOLLOW_UP_GOAL,
    IMMEDIATE_CARE,
    MEDICATION_GOAL,
    PREVENTIVE_CARE,
    ROUTINE_CARE,
    TIER_GUIDANCE,
    CareTimeline,
    GoalTemplate,
)


def generate_recommendations(risk_level: RiskLevel, survey: SurveyRecord) -> List[str]:
    """Tier block first, then chronic-disease specific advice."""
    recommendations = list(TIER_GUIDANCE[risk_level].recommendations)

    chronic = survey.health_history.chronic_diseases
    for disease, advice in CHRONIC_DISEASE_RECOMMENDATIONS:
        if disease in chronic:
            recommendations.append(advice)

    return recommendations


def _goal(template: GoalTemplate, priority: str) -> Goal:
    return Goal(
        id=template.id,
        title=template.title,
        description=template.description,
        deadline=template.deadline,
        priority=priority,
    )


def generate_health_goals(survey: SurveyRecord, risk_level: RiskLevel) -> List[Goal]:
    """
    Build the four catalog goals and drop the low-priority ones.

    A goal is kept when its priority is not "low" or the patient reported
    medications. Medication Adherence is "low" exactly when medications is
    empty, so it only survives when medications were given.
    """
    has_medications = bool(survey.health_history.medications)

    goals = [
        _goal(CHECKUP_GOAL, "high" if risk_level == RiskLevel.HIGH else "medium"),
        _goal(ACTIVITY_GOAL, "medium"),
        _goal(MEDICATION_GOAL, "high" if has_medications else "low"),
        _goal(FOLLOW_UP_GOAL, "medium"),
    ]

    return [
        goal for goal in goals
        if goal.priority != "low" or has_medications
    ]


def lifestyle_score(survey: SurveyRecord) -> int:
    symptom_count = len(survey.symptoms)
    chronic_count = len(survey.health_history.chronic_diseases)
    return max(0, 100 - 5 * symptom_count - 10 * chronic_count)


def preventive_risk_index(risk_level: RiskLevel) -> int:
    return TIER_GUIDANCE[risk_level].preventive_risk_index


def generate_summary(risk_level: RiskLevel,
                     survey: SurveyRecord,
                     report_count: int,
                     include_indices: bool = True) -> str:
    info = survey.personal_info
    symptom_count = len(survey.symptoms)
    chronic_count = len(survey.health_history.chronic_diseases)

    summary = (
        f"Based on your health assessment, you are a {info.age}-year-old {info.gender} "
        f"with {symptom_count} current symptoms and {chronic_count} chronic conditions. "
        f"Your overall risk level is assessed as {risk_level.value}. "
        f"{report_count} medical reports have been analyzed to provide "
        f"comprehensive health insights."
    )

    if include_indices:
        summary += (
            f" Lifestyle Score: {lifestyle_score(survey)}/100."
            f" Preventive Risk Index: {preventive_risk_index(risk_level)}."
        )

    return summary


def generate_next_steps(risk_level: RiskLevel) -> List[str]:
    return list(TIER_GUIDANCE[risk_level].next_steps)


def generate_pre_diagnosis(risk_level: RiskLevel, survey: SurveyRecord) -> List[PreDiagnosis]:
    guidance = TIER_GUIDANCE[risk_level]
    return [
        PreDiagnosis(
            condition=guidance.condition,
            probability=guidance.probability,
            urgency=guidance.urgency,
            symptoms=tuple(survey.symptoms),
            recommendation=guidance.diagnosis_advice,
        )
    ]


def care_timeline(risk_level: RiskLevel, risk_factors: Sequence[str]) -> CareTimeline:
    """
    Pick the care timeline shown next to the goals.

    High risk only escalates to immediate care when one of the risk factors
    is a symptom entry; high risk without symptoms falls through to routine.
    """
    has_symptoms = any("symptoms" in factor for factor in risk_factors)

    if risk_level == RiskLevel.HIGH and has_symptoms:
        return IMMEDIATE_CARE
    if risk_level == RiskLevel.MEDIUM:
        return PREVENTIVE_CARE
    return ROUTINE_CARE


def goal_progress(goal_count: int, completed_count: int) -> Dict[str, float]:
    """Completion percentage clamped to [0, 100] plus any overflow above 100."""
    raw = 0.0 if goal_count == 0 else (completed_count / goal_count) * 100
    return {
        'completion': min(100.0, max(0.0, raw)),
        'overflow': max(0, math.floor(raw - 100 + 0.5)),
    }
