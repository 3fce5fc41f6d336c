"""
Assessment workflow - the call boundary around RiskAssessmentEngine.

The engine is a pure function. Everything with side effects lives here:
progress reporting, at-most-once execution per submission, stamping the
result with an id and timestamp, persistence and the fallback result.
"""

import logging
import uuid
from datetime import datetime, timezone
from typing import Any, Callable, Dict, List, Optional, Sequence

from .guidance import (
    generate_health_goals,
    generate_next_steps,
    generate_pre_diagnosis,
    generate_recommendations,
    goal_progress,
    lifestyle_score,
    preventive_risk_index,
)
from .models import (
    AnalysisResult,
    ReportRecord,
    RiskLevel,
    SurveyRecord,
    coerce_reports,
    coerce_survey,
)
from .risk_engine import RiskAssessmentEngine
from .storage import HealthRepository

logger = logging.getLogger(__name__)


ProgressCallback = Callable[[int, str], None]

PROGRESS_STAGES = [
    (10, "Receiving survey responses"),
    (25, "Survey data processed"),
    (45, "Medical reports analyzed"),
    (60, "Scoring risk factors"),
    (80, "Generating recommendations"),
    (95, "Preparing health goals"),
]
COMPLETE_STAGE = (100, "Analysis complete")

FALLBACK_SUMMARY = (
    "This is a prototype assessment generated with default values. "
    "Please retake the survey or consult a healthcare provider for a "
    "complete evaluation."
)


def fallback_result() -> AnalysisResult:
    """Constant low-risk result used when the assessment itself fails"""
    survey = SurveyRecord()
    level = RiskLevel.LOW
    return AnalysisResult(
        risk_level=level,
        risk_score=0,
        risk_factors=(),
        report_findings=(),
        recommendations=tuple(generate_recommendations(level, survey)),
        health_goals=tuple(generate_health_goals(survey, level)),
        summary=FALLBACK_SUMMARY,
        next_steps=tuple(generate_next_steps(level)),
        pre_diagnosis=tuple(generate_pre_diagnosis(level, survey)),
        lifestyle_score=lifestyle_score(survey),
        preventive_risk_index=preventive_risk_index(level),
    )


class AssessmentWorkflow:
    """
    Runs one assessment per submission and persists the outcome.

    Submissions are identified by the caller. Submitting the same id twice
    returns the stored analysis without re-running the engine; a retake is a
    new submission id and produces a brand new analysis.
    """

    def __init__(self,
                 engine: RiskAssessmentEngine,
                 repository: HealthRepository,
                 progress_callback: Optional[ProgressCallback] = None):
        self.engine = engine
        self.repository = repository
        self.progress_callback = progress_callback

    def submit(self,
               submission_id: str,
               survey: Any,
               reports: Optional[Sequence[Any]] = None,
               patient_id: Optional[str] = None) -> Dict[str, Any]:
        """
        Assess a survey submission and store it in the analyses collection.

        Returns:
            The stored analysis record (result fields plus id/timestamp)
        """
        existing = self.find_submission(submission_id)
        if existing is not None:
            logger.info("Submission %s already assessed, returning stored analysis", submission_id)
            return existing

        survey_record = coerce_survey(survey)
        report_records = coerce_reports(reports)

        for percent, stage in PROGRESS_STAGES:
            self._report_progress(percent, stage)

        result, is_fallback = self._run_engine(survey_record, report_records)

        self.repository.save_survey(survey_record.to_dict(), survey_id=submission_id)

        record = {
            **result.to_dict(),
            'id': uuid.uuid4().hex,
            'submissionId': submission_id,
            'timestamp': datetime.now(timezone.utc).isoformat(),
            'surveyData': survey_record.to_dict(),
            'reports': [report.to_dict() for report in report_records],
            'fallback': is_fallback,
        }
        if patient_id is not None:
            record['patientId'] = patient_id

        stored = self.repository.save_analysis(record)
        self.repository.save_health_goals(record['healthGoals'])

        if patient_id is not None:
            self.repository.update_patient(patient_id, {
                'surveyData': record['surveyData'],
                'reports': record['reports'],
                'analysis': result.to_dict(),
                'healthGoals': record['healthGoals'],
            })

        self._report_progress(*COMPLETE_STAGE)
        logger.info(
            "Analysis %s stored: risk=%s score=%d",
            stored['id'], stored['riskLevel'], stored['riskScore'],
        )
        return stored

    def find_submission(self, submission_id: str) -> Optional[Dict[str, Any]]:
        for analysis in self.repository.get_analyses():
            if isinstance(analysis, dict) and analysis.get('submissionId') == submission_id:
                return analysis
        return None

    def _run_engine(self, survey: SurveyRecord,
                    reports: List[ReportRecord]) -> tuple:
        try:
            return self.engine.analyze(survey, reports), False
        except Exception as e:
            logger.warning("Risk assessment failed, using prototype result: %s", e, exc_info=True)
            return fallback_result(), True

    def _report_progress(self, percent: int, stage: str) -> None:
        if self.progress_callback is None:
            return
        try:
            self.progress_callback(percent, stage)
        except Exception as e:
            logger.warning("Progress callback failed at %d%%: %s", percent, e)

    # ------------------------------------------------------------------
    # Goal tracking
    # ------------------------------------------------------------------

    def toggle_goal(self, goal_id: int) -> bool:
        """Flip a goal's completion state. Returns True when now completed."""
        completed = list(self.repository.get_completed_goals())
        if goal_id in completed:
            completed = [g for g in completed if g != goal_id]
            now_completed = False
        else:
            completed.append(goal_id)
            now_completed = True
        self.repository.save_completed_goals(completed)
        return now_completed

    def goal_progress(self, goals: Optional[Sequence[Dict[str, Any]]] = None) -> Dict[str, float]:
        goals = self.repository.get_health_goals() if goals is None else goals
        completed = self.repository.get_completed_goals()
        return goal_progress(len(goals), len(completed))
