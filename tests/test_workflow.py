"""Tests for AssessmentWorkflow: progress, idempotency, fallback and goals"""

import pytest

from src.core.risk_engine import RiskAssessmentEngine
from src.core.workflow import (
    COMPLETE_STAGE,
    FALLBACK_SUMMARY,
    PROGRESS_STAGES,
    AssessmentWorkflow,
    fallback_result,
)


class CountingEngine(RiskAssessmentEngine):
    """Engine that records how often it ran"""

    def __init__(self):
        super().__init__()
        self.calls = 0

    def analyze(self, survey, reports=None):
        self.calls += 1
        return super().analyze(survey, reports)


class FailingEngine(RiskAssessmentEngine):
    def analyze(self, survey, reports=None):
        raise RuntimeError("scoring backend unavailable")


@pytest.fixture
def progress():
    return []


@pytest.fixture
def workflow(repository, progress):
    def record(percent, stage):
        progress.append((percent, stage))
    return AssessmentWorkflow(CountingEngine(), repository, progress_callback=record)


# ------------------------------------------------------------------
# Submission
# ------------------------------------------------------------------

class TestSubmit:
    def test_progress_sequence(self, workflow, progress, sample_survey):
        workflow.submit("sub-1", sample_survey)
        percents = [p for p, _ in progress]
        assert percents == [10, 25, 45, 60, 80, 95, 100]
        assert progress[-1] == COMPLETE_STAGE
        assert progress[:-1] == PROGRESS_STAGES

    def test_stored_record(self, workflow, repository, sample_survey, blood_report):
        stored = workflow.submit("sub-1", sample_survey, [blood_report])

        assert stored['submissionId'] == "sub-1"
        assert stored['id']
        assert stored['timestamp']
        assert stored['fallback'] is False
        assert stored['riskScore'] == 50
        assert stored['riskLevel'] == "medium"
        assert stored['riskColor'] == "warning"
        assert stored['surveyData']['symptoms'] == ['Fever', 'Cough']
        assert stored['reports'][0]['name'] == 'blood_test.pdf'

        assert repository.get_analysis(stored['id']) == stored
        assert repository.get_health_goals() == stored['healthGoals']
        assert repository.get_surveys()[0]['id'] == "sub-1"

    def test_same_submission_runs_once(self, workflow, repository, sample_survey):
        first = workflow.submit("sub-1", sample_survey)
        second = workflow.submit("sub-1", {'symptoms': ['Rash']})

        assert second == first
        assert workflow.engine.calls == 1
        assert len(repository.get_analyses()) == 1
        assert len(repository.get_surveys()) == 1

    def test_retake_creates_new_analysis(self, workflow, repository, sample_survey):
        first = workflow.submit("sub-1", sample_survey)
        second = workflow.submit("sub-2", sample_survey)
        assert first['id'] != second['id']
        assert workflow.engine.calls == 2
        assert len(repository.get_analyses()) == 2

    def test_patient_is_updated(self, workflow, repository, sample_survey):
        repository.save_patient({'id': 'p1', 'name': 'Ravi'})
        stored = workflow.submit("sub-1", sample_survey, patient_id='p1')

        patient = repository.get_patient('p1')
        assert stored['patientId'] == 'p1'
        assert patient['analysis']['riskScore'] == stored['riskScore']
        assert patient['healthGoals'] == stored['healthGoals']
        assert repository.get_analysis_by_patient('p1')['id'] == stored['id']

    def test_empty_survey(self, workflow):
        stored = workflow.submit("sub-1", None)
        assert stored['riskScore'] == 0
        assert stored['riskLevel'] == "low"

    def test_broken_callback_does_not_abort(self, repository, sample_survey):
        def explode(percent, stage):
            raise ValueError("ui gone")

        flow = AssessmentWorkflow(RiskAssessmentEngine(), repository, progress_callback=explode)
        stored = flow.submit("sub-1", sample_survey)
        assert stored['riskScore'] == 50


class TestFallback:
    def test_engine_failure_stores_fallback(self, repository, sample_survey):
        flow = AssessmentWorkflow(FailingEngine(), repository)
        stored = flow.submit("sub-1", sample_survey)

        assert stored['fallback'] is True
        assert stored['riskScore'] == 0
        assert stored['riskLevel'] == "low"
        assert stored['summary'] == FALLBACK_SUMMARY
        assert len(repository.get_analyses()) == 1

    def test_fallback_result_shape(self):
        result = fallback_result()
        assert result.risk_factors == ()
        assert result.report_findings == ()
        assert len(result.recommendations) == 3
        assert len(result.next_steps) == 4
        assert [g.id for g in result.health_goals] == [1, 2, 4]


# ------------------------------------------------------------------
# Goals
# ------------------------------------------------------------------

class TestGoalTracking:
    def test_toggle(self, workflow, repository):
        assert workflow.toggle_goal(2) is True
        assert repository.get_completed_goals() == [2]
        assert workflow.toggle_goal(2) is False
        assert repository.get_completed_goals() == []

    def test_progress_from_stored_goals(self, workflow, sample_survey):
        stored = workflow.submit("sub-1", sample_survey)
        workflow.toggle_goal(stored['healthGoals'][0]['id'])
        progress = workflow.goal_progress()
        assert progress['completion'] == pytest.approx(100 / len(stored['healthGoals']))
        assert progress['overflow'] == 0

    def test_progress_without_goals(self, workflow):
        assert workflow.goal_progress() == {'completion': 0.0, 'overflow': 0}
