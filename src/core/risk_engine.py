"""
Risk Assessment Engine - Scores a health survey plus uploaded reports
Deterministic weighted rules; no model inference, no I/O
"""

import logging
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from .guidance import (
    generate_health_goals,
    generate_next_steps,
    generate_pre_diagnosis,
    generate_recommendations,
    generate_summary,
    lifestyle_score,
    preventive_risk_index,
)
from .models import (
    AnalysisResult,
    BloodTestContent,
    GeneralReportContent,
    ReportRecord,
    RiskLevel,
    SurveyRecord,
    XRayContent,
    coerce_reports,
    coerce_survey,
)
from ..utils.parsing import leading_float, leading_int

logger = logging.getLogger(__name__)


LOW_HEMOGLOBIN = "Hemoglobin levels are below normal range - possible anemia"
HIGH_GLUCOSE = "Glucose levels are elevated - monitor for diabetes"
HIGH_CHOLESTEROL = "Cholesterol levels are high - dietary changes recommended"
NORMAL_BLOOD_PANEL = "Blood test results are within normal ranges"

# Blood findings containing this marker add the abnormal-panel bonus.
# None of the messages above contain it.
ABNORMAL_MARKER = "abnormal"


class RiskAssessmentEngine:
    """
    Converts a survey and a list of reports into an AnalysisResult.

    Scoring is an accumulator over independent weighted rules. Rule order
    only affects the order of the risk factor strings, never the score.
    """

    def __init__(self, config: Dict[str, Any] = None):
        self.config = config or {}

        self.weights = {
            'symptom': self.config.get('symptom_weight', 10),
            'travel_history': self.config.get('travel_history_weight', 15),
            'crowded_places': self.config.get('crowded_places_weight', 10),
            'sick_contact': self.config.get('sick_contact_weight', 20),
            'chronic_disease': self.config.get('chronic_disease_weight', 15),
            'abnormal_blood': self.config.get('abnormal_blood_bonus', 25),
        }
        self.high_threshold = self.config.get('high_threshold', 50)
        self.medium_threshold = self.config.get('medium_threshold', 25)

        self.hemoglobin_min = self.config.get('hemoglobin_min', 12.0)
        self.glucose_max = self.config.get('glucose_max', 100)
        self.cholesterol_max = self.config.get('cholesterol_max', 200)

        self.include_health_indices = self.config.get('include_health_indices', True)

    def analyze(self,
                survey: Union[SurveyRecord, Dict[str, Any], None],
                reports: Optional[Sequence[Union[ReportRecord, Dict[str, Any]]]] = None
                ) -> AnalysisResult:
        """
        Assess one survey submission.

        Accepts parsed records or the raw dicts stored by the portal; absent
        fields are defaulted, so partial input never raises.
        """
        survey = coerce_survey(survey)
        reports = coerce_reports(reports)

        risk_score, risk_factors = self._score_survey(survey)
        report_bonus, report_findings = self._analyze_reports(reports)
        risk_score += report_bonus

        risk_level = self.classify(risk_score)

        logger.debug(
            "Risk assessment: score=%d level=%s factors=%d findings=%d",
            risk_score, risk_level.value, len(risk_factors), len(report_findings),
        )

        return AnalysisResult(
            risk_level=risk_level,
            risk_score=risk_score,
            risk_factors=tuple(risk_factors),
            report_findings=tuple(report_findings),
            recommendations=tuple(generate_recommendations(risk_level, survey)),
            health_goals=tuple(generate_health_goals(survey, risk_level)),
            summary=generate_summary(
                risk_level, survey, len(reports),
                include_indices=self.include_health_indices,
            ),
            next_steps=tuple(generate_next_steps(risk_level)),
            pre_diagnosis=tuple(generate_pre_diagnosis(risk_level, survey)),
            lifestyle_score=lifestyle_score(survey),
            preventive_risk_index=preventive_risk_index(risk_level),
        )

    def classify(self, score: int) -> RiskLevel:
        return RiskLevel.from_score(score, self.high_threshold, self.medium_threshold)

    # ------------------------------------------------------------------
    # Survey rules
    # ------------------------------------------------------------------

    def _score_survey(self, survey: SurveyRecord) -> Tuple[int, List[str]]:
        score = 0
        factors: List[str] = []

        if survey.symptoms:
            factors.append(f"Current symptoms: {', '.join(survey.symptoms)}")
            score += len(survey.symptoms) * self.weights['symptom']

        exposure = survey.exposure
        if exposure.travel_history == "yes":
            factors.append("Recent travel history")
            score += self.weights['travel_history']
        if exposure.crowded_places == "yes":
            factors.append("Recent exposure to crowded places")
            score += self.weights['crowded_places']
        if exposure.sick_contact == "yes":
            factors.append("Contact with sick individuals")
            score += self.weights['sick_contact']

        chronic = survey.health_history.chronic_diseases
        if chronic:
            factors.append(f"Chronic conditions: {', '.join(chronic)}")
            score += len(chronic) * self.weights['chronic_disease']

        return score, factors

    # ------------------------------------------------------------------
    # Report rules
    # ------------------------------------------------------------------

    def _analyze_reports(self, reports: Sequence[ReportRecord]) -> Tuple[int, List[str]]:
        bonus = 0
        findings: List[str] = []

        for report in reports:
            content = report.content
            if isinstance(content, BloodTestContent):
                blood_findings = self.analyze_blood_panel(content)
                findings.extend(blood_findings)
                if any(ABNORMAL_MARKER in finding for finding in blood_findings):
                    bonus += self.weights['abnormal_blood']
            elif isinstance(content, XRayContent):
                if content.findings:
                    findings.append(f"X-Ray: {content.findings}")
            elif isinstance(content, GeneralReportContent):
                # General reports are listed for the reviewer but not scored
                continue
            elif content is None:
                logger.debug("Report %r has no content, skipping", report.name)

        return bonus, findings

    def analyze_blood_panel(self, content: BloodTestContent) -> List[str]:
        """Threshold checks on hemoglobin, glucose and cholesterol."""
        values = content.values
        findings: List[str] = []

        hemoglobin = leading_float(values.get('hemoglobin'))
        glucose = leading_int(values.get('glucose'))
        cholesterol = leading_int(values.get('cholesterol'))

        if hemoglobin is not None and hemoglobin < self.hemoglobin_min:
            findings.append(LOW_HEMOGLOBIN)
        if glucose is not None and glucose > self.glucose_max:
            findings.append(HIGH_GLUCOSE)
        if cholesterol is not None and cholesterol > self.cholesterol_max:
            findings.append(HIGH_CHOLESTEROL)

        if not findings:
            findings.append(NORMAL_BLOOD_PANEL)

        return findings


_default_engine = RiskAssessmentEngine()


def analyze(survey: Union[SurveyRecord, Dict[str, Any], None],
            reports: Optional[Sequence[Union[ReportRecord, Dict[str, Any]]]] = None
            ) -> AnalysisResult:
    """Run the default-configured engine."""
    return _default_engine.analyze(survey, reports)
