"""
Data models for health surveys, uploaded reports and risk analyses.

Every record can be built from the plain JSON-shaped dicts the portal stores
(camelCase keys) via ``from_dict``. Parsing is tolerant: missing or wrongly
typed fields fall back to empty defaults instead of raising.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, ClassVar, Dict, List, Optional, Tuple, Union


class RiskLevel(Enum):
    """Risk tiers derived from the cumulative score"""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @property
    def color(self) -> str:
        """Badge color tag used by the portal"""
        return _RISK_COLORS[self]

    @classmethod
    def from_score(cls, score: int,
                   high_threshold: int = 50,
                   medium_threshold: int = 25) -> "RiskLevel":
        if score > high_threshold:
            return cls.HIGH
        if score > medium_threshold:
            return cls.MEDIUM
        return cls.LOW


_RISK_COLORS = {
    RiskLevel.LOW: "success",
    RiskLevel.MEDIUM: "warning",
    RiskLevel.HIGH: "destructive",
}


def availability_color(booked: int, capacity: int) -> str:
    """Camp fill badge: 90% booked or more is "destructive", 70% or more "warning"."""
    if capacity <= 0:
        return "destructive" if booked > 0 else "success"
    percentage = booked * 100 / capacity
    if percentage >= 90:
        return "destructive"
    if percentage >= 70:
        return "warning"
    return "success"


class ReportType(Enum):
    BLOOD_TEST = "Blood Test"
    XRAY = "X-Ray"
    GENERAL = "General Report"


# ----------------------------------------------------------------------
# Tolerant field readers
# ----------------------------------------------------------------------

def _mapping(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _text(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return ""


def _optional_text(value: Any) -> Optional[str]:
    return value if isinstance(value, str) else None


def _text_list(value: Any) -> Tuple[str, ...]:
    if not isinstance(value, (list, tuple)):
        return ()
    return tuple(item for item in value if isinstance(item, str))


def _flag(value: Any) -> str:
    """Exposure answers are "yes"/"no"; booleans are accepted too."""
    if isinstance(value, bool):
        return "yes" if value else "no"
    if isinstance(value, str):
        return value
    return "no"


# ----------------------------------------------------------------------
# Survey
# ----------------------------------------------------------------------

@dataclass(frozen=True)
class PersonalInfo:
    age: str = ""
    gender: str = ""
    occupation: str = ""
    state: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> "PersonalInfo":
        data = _mapping(data)
        return cls(
            age=_text(data.get("age")),
            gender=_text(data.get("gender")),
            occupation=_text(data.get("occupation")),
            state=_text(data.get("state")),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "age": self.age,
            "gender": self.gender,
            "occupation": self.occupation,
            "state": self.state,
        }


@dataclass(frozen=True)
class Exposure:
    travel_history: str = "no"
    crowded_places: str = "no"
    sick_contact: str = "no"

    @classmethod
    def from_dict(cls, data: Any) -> "Exposure":
        data = _mapping(data)
        return cls(
            travel_history=_flag(data.get("travelHistory")),
            crowded_places=_flag(data.get("crowdedPlaces")),
            sick_contact=_flag(data.get("sickContact")),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "travelHistory": self.travel_history,
            "crowdedPlaces": self.crowded_places,
            "sickContact": self.sick_contact,
        }


@dataclass(frozen=True)
class HealthHistory:
    chronic_diseases: Tuple[str, ...] = ()
    medications: str = ""
    allergies: str = ""

    @classmethod
    def from_dict(cls, data: Any) -> "HealthHistory":
        data = _mapping(data)
        return cls(
            chronic_diseases=_text_list(data.get("chronicDiseases")),
            medications=_text(data.get("medications")),
            allergies=_text(data.get("allergies")),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "chronicDiseases": list(self.chronic_diseases),
            "medications": self.medications,
            "allergies": self.allergies,
        }


@dataclass(frozen=True)
class SurveyRecord:
    """The intake questionnaire a patient fills in"""
    personal_info: PersonalInfo = field(default_factory=PersonalInfo)
    symptoms: Tuple[str, ...] = ()
    exposure: Exposure = field(default_factory=Exposure)
    health_history: HealthHistory = field(default_factory=HealthHistory)

    @classmethod
    def from_dict(cls, data: Any) -> "SurveyRecord":
        data = _mapping(data)
        return cls(
            personal_info=PersonalInfo.from_dict(data.get("personalInfo")),
            symptoms=_text_list(data.get("symptoms")),
            exposure=Exposure.from_dict(data.get("exposure")),
            health_history=HealthHistory.from_dict(data.get("healthHistory")),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "personalInfo": self.personal_info.to_dict(),
            "symptoms": list(self.symptoms),
            "exposure": self.exposure.to_dict(),
            "healthHistory": self.health_history.to_dict(),
        }


# ----------------------------------------------------------------------
# Reports
# ----------------------------------------------------------------------

@dataclass(frozen=True)
class BloodTestContent:
    """Lab panel; values keep their unit suffix, e.g. "95 mg/dL"."""
    type: ClassVar[str] = ReportType.BLOOD_TEST.value
    values: Dict[str, str] = field(default_factory=dict)
    normal_ranges: Dict[str, str] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type,
            "values": dict(self.values),
            "normalRanges": dict(self.normal_ranges),
        }


@dataclass(frozen=True)
class XRayContent:
    type: ClassVar[str] = ReportType.XRAY.value
    findings: Optional[str] = None
    impression: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type,
            "findings": self.findings,
            "impression": self.impression,
        }


@dataclass(frozen=True)
class GeneralReportContent:
    """Any report the rules do not inspect (including unknown type tags)"""
    type: str = ReportType.GENERAL.value
    findings: Optional[str] = None
    status: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.type,
            "findings": self.findings,
            "status": self.status,
        }


ReportContent = Union[BloodTestContent, XRayContent, GeneralReportContent]


def _lab_values(value: Any) -> Dict[str, str]:
    return {
        str(key): _text(raw)
        for key, raw in _mapping(value).items()
    }


def parse_report_content(data: Any) -> Optional[ReportContent]:
    """Turn a raw ``content`` dict into its tagged record"""
    if isinstance(data, (BloodTestContent, XRayContent, GeneralReportContent)):
        return data
    if not isinstance(data, dict):
        return None

    report_type = data.get("type")
    if report_type == ReportType.BLOOD_TEST.value:
        return BloodTestContent(
            values=_lab_values(data.get("values")),
            normal_ranges=_lab_values(data.get("normalRanges")),
        )
    if report_type == ReportType.XRAY.value:
        return XRayContent(
            findings=_optional_text(data.get("findings")),
            impression=_optional_text(data.get("impression")),
        )
    return GeneralReportContent(
        type=_text(report_type) or ReportType.GENERAL.value,
        findings=_optional_text(data.get("findings")),
        status=_optional_text(data.get("status")),
    )


@dataclass(frozen=True)
class ReportRecord:
    """One uploaded document and the content derived from it"""
    id: str = ""
    name: str = ""
    mime_type: str = ""
    size: int = 0
    upload_date: str = ""
    content: Optional[ReportContent] = None

    @classmethod
    def from_dict(cls, data: Any) -> "ReportRecord":
        data = _mapping(data)
        size = data.get("size")
        return cls(
            id=_text(data.get("id")),
            name=_text(data.get("name")),
            mime_type=_text(data.get("type")),
            size=size if isinstance(size, int) and not isinstance(size, bool) else 0,
            upload_date=_text(data.get("uploadDate")),
            content=parse_report_content(data.get("content")),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "type": self.mime_type,
            "size": self.size,
            "uploadDate": self.upload_date,
            "content": self.content.to_dict() if self.content else None,
        }


# ----------------------------------------------------------------------
# Analysis output
# ----------------------------------------------------------------------

@dataclass(frozen=True)
class Goal:
    id: int
    title: str
    description: str
    deadline: str
    priority: str
    completed: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "description": self.description,
            "deadline": self.deadline,
            "priority": self.priority,
            "completed": self.completed,
        }


@dataclass(frozen=True)
class PreDiagnosis:
    condition: str
    probability: str
    urgency: str
    symptoms: Tuple[str, ...]
    recommendation: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "condition": self.condition,
            "probability": self.probability,
            "urgency": self.urgency,
            "symptoms": list(self.symptoms),
            "recommendation": self.recommendation,
        }


@dataclass(frozen=True)
class AnalysisResult:
    """Outcome of one survey + reports assessment. Never mutated after creation."""
    risk_level: RiskLevel
    risk_score: int
    risk_factors: Tuple[str, ...]
    report_findings: Tuple[str, ...]
    recommendations: Tuple[str, ...]
    health_goals: Tuple[Goal, ...]
    summary: str
    next_steps: Tuple[str, ...]
    pre_diagnosis: Tuple[PreDiagnosis, ...]
    lifestyle_score: int
    preventive_risk_index: int

    @property
    def risk_color(self) -> str:
        return self.risk_level.color

    def to_dict(self) -> Dict[str, Any]:
        """JSON-compatible shape, as kept in the ``aiAnalyses`` collection"""
        return {
            "riskLevel": self.risk_level.value,
            "riskColor": self.risk_color,
            "riskScore": self.risk_score,
            "riskFactors": list(self.risk_factors),
            "reportFindings": list(self.report_findings),
            "recommendations": list(self.recommendations),
            "healthGoals": [goal.to_dict() for goal in self.health_goals],
            "summary": self.summary,
            "nextSteps": list(self.next_steps),
            "preDiagnosis": [entry.to_dict() for entry in self.pre_diagnosis],
            "lifestyleScore": self.lifestyle_score,
            "preventiveRiskIndex": self.preventive_risk_index,
        }


def coerce_survey(survey: Union[SurveyRecord, Dict[str, Any], None]) -> SurveyRecord:
    if isinstance(survey, SurveyRecord):
        return survey
    return SurveyRecord.from_dict(survey)


def coerce_reports(reports: Any) -> List[ReportRecord]:
    if not isinstance(reports, (list, tuple)):
        return []
    return [
        report if isinstance(report, ReportRecord) else ReportRecord.from_dict(report)
        for report in reports
    ]
