"""Tests for the rules-based risk assessment engine."""

import pytest

from src.core.models import (
    AnalysisResult,
    BloodTestContent,
    RiskLevel,
    SurveyRecord,
)
from src.core.risk_engine import (
    HIGH_CHOLESTEROL,
    HIGH_GLUCOSE,
    LOW_HEMOGLOBIN,
    NORMAL_BLOOD_PANEL,
    RiskAssessmentEngine,
    analyze,
)


def _survey(symptoms=(), travel="no", crowded="no", sick="no",
            chronic=(), medications=""):
    return {
        'personalInfo': {'age': '30', 'gender': 'female'},
        'symptoms': list(symptoms),
        'exposure': {'travelHistory': travel, 'crowdedPlaces': crowded, 'sickContact': sick},
        'healthHistory': {'chronicDiseases': list(chronic), 'medications': medications},
    }


# ------------------------------------------------------------------
# Defaults and determinism
# ------------------------------------------------------------------

class TestDefaults:
    def test_empty_input_does_not_raise(self, engine):
        result = engine.analyze({}, [])
        assert isinstance(result, AnalysisResult)

    def test_empty_input_is_low_risk(self, engine):
        result = engine.analyze({}, [])
        assert result.risk_level == RiskLevel.LOW
        assert result.risk_score == 0
        assert result.risk_factors == ()
        assert result.report_findings == ()

    def test_empty_input_uses_low_templates(self, engine):
        result = engine.analyze({}, [])
        assert list(result.recommendations) == [
            "Continue preventive healthcare measures",
            "Regular health checkups as scheduled",
            "Maintain healthy lifestyle",
        ]
        assert list(result.next_steps) == [
            "Continue preventive care routine",
            "Schedule annual health camp visit",
            "Maintain current health practices",
            "Stay updated with preventive screenings",
        ]
        assert len(result.pre_diagnosis) == 1
        assert result.pre_diagnosis[0].probability == "40%"
        assert result.pre_diagnosis[0].urgency == "Low"

    def test_none_inputs(self, engine):
        result = engine.analyze(None, None)
        assert result.risk_score == 0

    def test_partial_nested_fields(self, engine):
        result = engine.analyze(
            {'symptoms': ['Fever'], 'exposure': None, 'healthHistory': {'chronicDiseases': None}},
            [{'content': None}, {}, "not a report"],
        )
        assert result.risk_score == 10
        assert result.report_findings == ()

    def test_accepts_parsed_records(self, engine, sample_survey):
        from_dict = engine.analyze(sample_survey, [])
        from_record = engine.analyze(SurveyRecord.from_dict(sample_survey), [])
        assert from_dict == from_record

    def test_deterministic(self, engine, sample_survey, blood_report):
        first = engine.analyze(sample_survey, [blood_report])
        second = engine.analyze(sample_survey, [blood_report])
        assert first.to_dict() == second.to_dict()

    def test_module_level_analyze(self, sample_survey):
        assert analyze(sample_survey).risk_score == RiskAssessmentEngine().analyze(sample_survey).risk_score

    def test_result_is_immutable(self, engine):
        result = engine.analyze({}, [])
        with pytest.raises(AttributeError):
            result.risk_score = 99


# ------------------------------------------------------------------
# Survey scoring
# ------------------------------------------------------------------

class TestSurveyScoring:
    def test_symptom_scaling(self, engine):
        result = engine.analyze({'symptoms': ['Fever', 'Cough', 'Fatigue']}, [])
        assert result.risk_score == 30
        assert list(result.risk_factors) == ["Current symptoms: Fever, Cough, Fatigue"]
        assert result.risk_level == RiskLevel.MEDIUM

    def test_exposure_accumulation(self, engine):
        result = engine.analyze(_survey(travel="yes", crowded="yes", sick="yes"), [])
        assert result.risk_score == 45
        assert list(result.risk_factors) == [
            "Recent travel history",
            "Recent exposure to crowded places",
            "Contact with sick individuals",
        ]
        assert result.risk_level == RiskLevel.MEDIUM

    def test_exposure_requires_literal_yes(self, engine):
        result = engine.analyze(_survey(travel="YES", crowded="", sick="no"), [])
        assert result.risk_score == 0

    def test_boolean_exposure_is_accepted(self, engine):
        survey = {'exposure': {'sickContact': True, 'travelHistory': False}}
        result = engine.analyze(survey, [])
        assert result.risk_score == 20

    def test_chronic_scaling(self, engine):
        result = engine.analyze(_survey(chronic=["Diabetes", "Asthma"]), [])
        assert result.risk_score == 30
        assert list(result.risk_factors) == ["Chronic conditions: Diabetes, Asthma"]

    def test_factor_order(self, engine):
        result = engine.analyze(
            _survey(symptoms=["Fever"], travel="yes", sick="yes", chronic=["Asthma"]), []
        )
        assert list(result.risk_factors) == [
            "Current symptoms: Fever",
            "Recent travel history",
            "Contact with sick individuals",
            "Chronic conditions: Asthma",
        ]
        assert result.risk_score == 10 + 15 + 20 + 15

    def test_score_is_not_clamped(self, engine):
        symptoms = ["S%d" % i for i in range(12)]
        result = engine.analyze(_survey(symptoms=symptoms, chronic=["Diabetes"]), [])
        assert result.risk_score == 135
        assert result.risk_level == RiskLevel.HIGH

    def test_custom_weights(self):
        engine = RiskAssessmentEngine({'symptom_weight': 26})
        result = engine.analyze({'symptoms': ['Fever']}, [])
        assert result.risk_score == 26
        assert result.risk_level == RiskLevel.MEDIUM


# ------------------------------------------------------------------
# Tiering
# ------------------------------------------------------------------

class TestTiering:
    @pytest.mark.parametrize("score,expected", [
        (0, RiskLevel.LOW),
        (25, RiskLevel.LOW),
        (26, RiskLevel.MEDIUM),
        (50, RiskLevel.MEDIUM),
        (51, RiskLevel.HIGH),
        (200, RiskLevel.HIGH),
    ])
    def test_threshold_boundaries(self, engine, score, expected):
        assert engine.classify(score) == expected

    def test_boundary_from_survey(self, engine):
        at_25 = engine.analyze(_survey(symptoms=["Fever"], travel="yes"), [])
        at_50 = engine.analyze(_survey(symptoms=["A", "B", "C"], sick="yes"), [])
        at_60 = engine.analyze(_survey(symptoms=["A", "B", "C", "D"], sick="yes"), [])
        assert (at_25.risk_score, at_25.risk_level) == (25, RiskLevel.LOW)
        assert (at_50.risk_score, at_50.risk_level) == (50, RiskLevel.MEDIUM)
        assert (at_60.risk_score, at_60.risk_level) == (60, RiskLevel.HIGH)

    def test_risk_colors(self, engine):
        assert engine.analyze({}, []).risk_color == "success"
        assert engine.analyze({'symptoms': ['A', 'B', 'C']}, []).risk_color == "warning"
        assert engine.analyze({'symptoms': list("ABCDEF")}, []).risk_color == "destructive"


# ------------------------------------------------------------------
# Report sub-rules
# ------------------------------------------------------------------

class TestBloodPanel:
    def test_all_abnormal_values(self, engine, blood_report):
        result = engine.analyze({}, [blood_report])
        assert list(result.report_findings) == [LOW_HEMOGLOBIN, HIGH_GLUCOSE, HIGH_CHOLESTEROL]

    def test_abnormal_bonus_never_fires(self, engine, blood_report):
        result = engine.analyze({'symptoms': ['Fever', 'Cough', 'Fatigue']}, [blood_report])
        assert not any("abnormal" in f for f in result.report_findings)
        assert result.risk_score == 30

    def test_normal_panel(self, engine):
        content = BloodTestContent(values={
            'hemoglobin': '12.5 g/dL', 'glucose': '95 mg/dL', 'cholesterol': '180 mg/dL',
        })
        assert engine.analyze_blood_panel(content) == [NORMAL_BLOOD_PANEL]

    def test_boundary_values_are_normal(self, engine):
        content = BloodTestContent(values={
            'hemoglobin': '12.0', 'glucose': '100', 'cholesterol': '200',
        })
        assert engine.analyze_blood_panel(content) == [NORMAL_BLOOD_PANEL]

    def test_unit_suffixes_ignored(self, engine):
        content = BloodTestContent(values={
            'hemoglobin': '11.5 g/dL', 'glucose': '110 mg/dL', 'cholesterol': '180 mg/dL',
        })
        assert engine.analyze_blood_panel(content) == [LOW_HEMOGLOBIN, HIGH_GLUCOSE]

    def test_integer_parse_truncates(self, engine):
        # "100.9" reads as 100, which is not above the limit
        content = BloodTestContent(values={'glucose': '100.9 mg/dL'})
        assert engine.analyze_blood_panel(content) == [NORMAL_BLOOD_PANEL]

    def test_non_numeric_values_do_not_fire(self, engine):
        content = BloodTestContent(values={
            'hemoglobin': 'pending', 'glucose': '', 'cholesterol': 'n/a',
        })
        assert engine.analyze_blood_panel(content) == [NORMAL_BLOOD_PANEL]

    def test_missing_values(self, engine):
        report = {'content': {'type': 'Blood Test'}}
        result = engine.analyze({}, [report])
        assert list(result.report_findings) == [NORMAL_BLOOD_PANEL]

    def test_one_message_set_per_report(self, engine, blood_report):
        normal = {'content': {'type': 'Blood Test', 'values': {'hemoglobin': '13'}}}
        result = engine.analyze({}, [blood_report, normal])
        assert list(result.report_findings) == [
            LOW_HEMOGLOBIN, HIGH_GLUCOSE, HIGH_CHOLESTEROL, NORMAL_BLOOD_PANEL,
        ]


class TestXRay:
    def test_findings_are_prefixed(self, engine):
        report = {'content': {'type': 'X-Ray', 'findings': 'Lungs clear',
                              'impression': 'Normal chest X-ray'}}
        result = engine.analyze({}, [report])
        assert list(result.report_findings) == ["X-Ray: Lungs clear"]
        assert result.risk_score == 0

    def test_missing_findings_skipped(self, engine):
        report = {'content': {'type': 'X-Ray', 'impression': 'Normal'}}
        assert engine.analyze({}, [report]).report_findings == ()

    def test_xray_abnormal_wording_does_not_score(self, engine):
        report = {'content': {'type': 'X-Ray',
                              'findings': 'No signs of infection or abnormalities.'}}
        assert engine.analyze({}, [report]).risk_score == 0


class TestGeneralReport:
    def test_general_report_counts_but_is_not_analyzed(self, engine):
        report = {'content': {'type': 'General Report', 'findings': 'Awaiting review'}}
        result = engine.analyze({}, [report])
        assert result.report_findings == ()
        assert "1 medical reports have been analyzed" in result.summary

    def test_unknown_type_tag(self, engine):
        report = {'content': {'type': 'MRI', 'findings': 'Unremarkable'}}
        result = engine.analyze({}, [report])
        assert result.report_findings == ()
        assert result.risk_score == 0


# ------------------------------------------------------------------
# Output assembly
# ------------------------------------------------------------------

class TestResultAssembly:
    def test_to_dict_shape(self, engine, sample_survey, blood_report):
        data = engine.analyze(sample_survey, [blood_report]).to_dict()
        assert set(data) == {
            'riskLevel', 'riskColor', 'riskScore', 'riskFactors', 'reportFindings',
            'recommendations', 'healthGoals', 'summary', 'nextSteps',
            'preDiagnosis', 'lifestyleScore', 'preventiveRiskIndex',
        }
        assert data['riskLevel'] == 'medium'
        assert data['riskScore'] == 20 + 15 + 15
        assert isinstance(data['healthGoals'][0], dict)

    def test_pre_diagnosis_uses_patient_symptoms(self, engine):
        result = engine.analyze(_survey(symptoms=list("ABCDEF")), [])
        entry = result.pre_diagnosis[0]
        assert entry.symptoms == ("A", "B", "C", "D", "E", "F")
        assert (entry.probability, entry.urgency) == ("75%", "High")

    def test_indices(self, engine):
        result = engine.analyze(_survey(symptoms=["A", "B"], chronic=["Asthma"]), [])
        assert result.lifestyle_score == 80
        assert result.preventive_risk_index == 50

    def test_indices_can_be_left_out_of_summary(self):
        engine = RiskAssessmentEngine({'include_health_indices': False})
        summary = engine.analyze({}, []).summary
        assert "Lifestyle Score" not in summary
        assert summary.endswith("comprehensive health insights.")
