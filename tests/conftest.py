"""Test configuration and fixtures"""

import pytest

from src.core.risk_engine import RiskAssessmentEngine
from src.core.storage import HealthRepository, InMemoryStore


@pytest.fixture
def engine():
    """Engine with default weights and thresholds"""
    return RiskAssessmentEngine()


@pytest.fixture
def repository():
    """Repository over a fresh in-memory store"""
    return HealthRepository(InMemoryStore())


@pytest.fixture
def sample_survey():
    """Survey dict in the shape the portal submits"""
    return {
        'personalInfo': {'age': '35', 'gender': 'male',
                         'occupation': 'Construction Worker', 'state': 'Maharashtra'},
        'symptoms': ['Fever', 'Cough'],
        'exposure': {'travelHistory': 'yes', 'crowdedPlaces': 'no', 'sickContact': 'no'},
        'healthHistory': {'chronicDiseases': ['Diabetes'],
                          'medications': 'Metformin', 'allergies': 'None'},
    }


@pytest.fixture
def blood_report():
    """Blood test report with every analyte outside its range"""
    return {
        'id': 'r1',
        'name': 'blood_test.pdf',
        'type': 'application/pdf',
        'size': 1024,
        'uploadDate': '2024-01-15T10:30:00Z',
        'content': {
            'type': 'Blood Test',
            'values': {'hemoglobin': '11.0', 'glucose': '150', 'cholesterol': '250'},
            'normalRanges': {
                'hemoglobin': '12.0-15.5 g/dL',
                'glucose': '70-100 mg/dL',
                'cholesterol': '<200 mg/dL',
            },
        },
    }
