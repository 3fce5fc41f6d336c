"""
Fixed guidance templates, one block per risk tier.
"""

from dataclasses import dataclass
from typing import Any, Dict, List, Tuple

from ..models import RiskLevel


@dataclass(frozen=True)
class CareTimeline:
    title: str
    description: str
    urgency: str
    color: str


@dataclass(frozen=True)
class TierGuidance:
    """Everything the narrative generators emit for one risk tier."""
    level: RiskLevel
    recommendations: Tuple[str, ...]
    next_steps: Tuple[str, ...]
    condition: str
    probability: str
    urgency: str
    diagnosis_advice: str
    preventive_risk_index: int


@dataclass(frozen=True)
class GoalTemplate:
    id: int
    title: str
    description: str
    deadline: str


@dataclass(frozen=True)
class SustainableGoal:
    id: int
    title: str
    description: str
    category: str
    frequency: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'title': self.title,
            'description': self.description,
            'category': self.category,
            'frequency': self.frequency,
        }


TIER_GUIDANCE: Dict[RiskLevel, TierGuidance] = {
    RiskLevel.HIGH: TierGuidance(
        level=RiskLevel.HIGH,
        recommendations=(
            "Immediate medical consultation recommended",
            "Self-isolation until cleared by healthcare provider",
            "Monitor symptoms closely",
        ),
        next_steps=(
            "Contact healthcare provider immediately",
            "Book nearest health camp consultation",
            "Follow isolation guidelines if symptomatic",
            "Monitor vital signs regularly",
        ),
        condition="Possible acute infection or uncontrolled chronic condition",
        probability="75%",
        urgency="High",
        diagnosis_advice=(
            "Consult a healthcare provider immediately for clinical examination "
            "and confirmatory tests"
        ),
        preventive_risk_index=80,
    ),
    RiskLevel.MEDIUM: TierGuidance(
        level=RiskLevel.MEDIUM,
        recommendations=(
            "Schedule appointment with healthcare provider",
            "Continue monitoring symptoms",
            "Maintain good hygiene practices",
        ),
        next_steps=(
            "Schedule routine checkup within 2 weeks",
            "Continue current medications",
            "Book health camp for preventive screening",
            "Maintain healthy lifestyle practices",
        ),
        condition="Early-stage infection or chronic condition needing monitoring",
        probability="60%",
        urgency="Medium",
        diagnosis_advice=(
            "Book a consultation within 2 weeks and keep a daily record of symptoms"
        ),
        preventive_risk_index=50,
    ),
    RiskLevel.LOW: TierGuidance(
        level=RiskLevel.LOW,
        recommendations=(
            "Continue preventive healthcare measures",
            "Regular health checkups as scheduled",
            "Maintain healthy lifestyle",
        ),
        next_steps=(
            "Continue preventive care routine",
            "Schedule annual health camp visit",
            "Maintain current health practices",
            "Stay updated with preventive screenings",
        ),
        condition="Minor or self-limiting condition",
        probability="40%",
        urgency="Low",
        diagnosis_advice=(
            "Maintain healthy practices and attend routine preventive screenings"
        ),
        preventive_risk_index=25,
    ),
}

# Appended after the tier block, in this order
CHRONIC_DISEASE_RECOMMENDATIONS: List[Tuple[str, str]] = [
    ("Diabetes", "Monitor blood sugar levels regularly"),
    ("Hypertension", "Monitor blood pressure daily"),
]

CHECKUP_GOAL = GoalTemplate(
    id=1,
    title="Complete Health Checkup",
    description="Schedule and complete comprehensive health examination",
    deadline="30 days",
)
ACTIVITY_GOAL = GoalTemplate(
    id=2,
    title="Improve Physical Activity",
    description="Engage in 30 minutes of moderate exercise daily",
    deadline="Ongoing",
)
MEDICATION_GOAL = GoalTemplate(
    id=3,
    title="Medication Adherence",
    description="Take prescribed medications as directed",
    deadline="Daily",
)
FOLLOW_UP_GOAL = GoalTemplate(
    id=4,
    title="Follow-up Testing",
    description="Schedule follow-up blood tests in 3 months",
    deadline="90 days",
)

SUSTAINABLE_GOALS: List[SustainableGoal] = [
    SustainableGoal(
        id=101,
        title="Daily Health Monitoring",
        description="Track vital signs and symptoms daily using health apps",
        category="Monitoring",
        frequency="Daily",
    ),
    SustainableGoal(
        id=102,
        title="Nutrition Improvement",
        description="Follow balanced diet rich in fruits, vegetables, and whole grains",
        category="Diet",
        frequency="Daily",
    ),
    SustainableGoal(
        id=103,
        title="Regular Exercise",
        description="Maintain 150 minutes of moderate exercise per week",
        category="Fitness",
        frequency="Weekly",
    ),
    SustainableGoal(
        id=104,
        title="Preventive Screenings",
        description="Complete age-appropriate health screenings annually",
        category="Prevention",
        frequency="Annually",
    ),
    SustainableGoal(
        id=105,
        title="Stress Management",
        description="Practice stress reduction techniques like meditation or yoga",
        category="Mental Health",
        frequency="Daily",
    ),
]

IMMEDIATE_CARE = CareTimeline(
    title="Immediate Medical Attention Required",
    description=(
        "Based on your symptoms and risk factors, we recommend immediate "
        "consultation with a healthcare provider."
    ),
    urgency="immediate",
    color="destructive",
)
PREVENTIVE_CARE = CareTimeline(
    title="Preventive Care Recommended",
    description=(
        "Your health indicators suggest the need for preventive measures "
        "and regular monitoring."
    ),
    urgency="within 2 weeks",
    color="warning",
)
ROUTINE_CARE = CareTimeline(
    title="Continue Preventive Healthcare",
    description=(
        "Your health indicators are generally positive. Maintain current "
        "healthy practices."
    ),
    urgency="routine checkup",
    color="success",
)
