"""
Demo data seeder: sample patients, doctors and health camps.

Patient analyses are produced by the risk engine at seed time rather than
stored as literals, so the demo always matches the current rules.
"""

import copy
import logging
from typing import Any, Dict, List

from .report_intake import NORMAL_RANGES
from .risk_engine import RiskAssessmentEngine
from .storage import HealthRepository

logger = logging.getLogger(__name__)


DEMO_PATIENTS: List[Dict[str, Any]] = [
    {
        'id': '1',
        'aadhaarNumber': '123456789012',
        'mobileNumber': '+91 9876543210',
        'personalInfo': {
            'name': 'Rajesh Kumar', 'age': '35', 'gender': 'male',
            'occupation': 'Construction Worker', 'state': 'Maharashtra', 'city': 'Mumbai',
        },
        'surveyData': {
            'personalInfo': {'age': '35', 'gender': 'male',
                             'occupation': 'Construction Worker', 'state': 'Maharashtra'},
            'symptoms': ['Cough', 'Fatigue', 'Body aches'],
            'exposure': {'travelHistory': 'yes', 'crowdedPlaces': 'yes', 'sickContact': 'no'},
            'healthHistory': {'chronicDiseases': ['Hypertension'],
                              'medications': 'Blood pressure medication', 'allergies': 'None'},
        },
        'reports': [
            {
                'id': '1',
                'name': 'blood_test_jan_2024.pdf',
                'type': 'application/pdf',
                'size': 1024000,
                'uploadDate': '2024-01-15T10:30:00Z',
                'content': {
                    'type': 'Blood Test',
                    'values': {
                        'hemoglobin': '11.5 g/dL',
                        'wbc': '8,200 cells/μL',
                        'rbc': '4.0 million cells/μL',
                        'platelets': '280,000 cells/μL',
                        'glucose': '110 mg/dL',
                        'cholesterol': '220 mg/dL',
                    },
                    'normalRanges': NORMAL_RANGES,
                },
            },
        ],
    },
    {
        'id': '2',
        'aadhaarNumber': '234567890123',
        'mobileNumber': '+91 9123456789',
        'personalInfo': {
            'name': 'Priya Sharma', 'age': '28', 'gender': 'female',
            'occupation': 'Domestic Worker', 'state': 'Maharashtra', 'city': 'Pune',
        },
        'surveyData': {
            'personalInfo': {'age': '28', 'gender': 'female',
                             'occupation': 'Domestic Worker', 'state': 'Maharashtra'},
            'symptoms': ['Headache'],
            'exposure': {'travelHistory': 'no', 'crowdedPlaces': 'no', 'sickContact': 'no'},
            'healthHistory': {'chronicDiseases': [], 'medications': '', 'allergies': 'Dust allergy'},
        },
        'reports': [],
    },
    {
        'id': '3',
        'aadhaarNumber': '345678901234',
        'mobileNumber': '+91 9988776655',
        'personalInfo': {
            'name': 'Mohammed Ali', 'age': '42', 'gender': 'male',
            'occupation': 'Factory Worker', 'state': 'Maharashtra', 'city': 'Thane',
        },
        'surveyData': {
            'personalInfo': {'age': '42', 'gender': 'male',
                             'occupation': 'Factory Worker', 'state': 'Maharashtra'},
            'symptoms': ['Fever', 'Cough', 'Shortness of breath', 'Fatigue'],
            'exposure': {'travelHistory': 'yes', 'crowdedPlaces': 'yes', 'sickContact': 'yes'},
            'healthHistory': {'chronicDiseases': ['Diabetes', 'Asthma'],
                              'medications': 'Diabetes medication, Inhaler', 'allergies': 'None'},
        },
        'reports': [
            {
                'id': '2',
                'name': 'chest_xray_feb_2024.jpg',
                'type': 'image/jpeg',
                'size': 2048000,
                'uploadDate': '2024-02-01T14:20:00Z',
                'content': {
                    'type': 'X-Ray',
                    'findings': 'Mild congestion in lower lobes, no signs of pneumonia',
                    'impression': 'Mild respiratory congestion, follow-up recommended',
                },
            },
        ],
    },
]

DEMO_DOCTORS: List[Dict[str, Any]] = [
    {
        'id': '1',
        'registerId': 'MH-12345',
        'fullName': 'Dr. Amit Patel',
        'licenseNumber': 'LIC-123456789',
        'specialization': 'General Medicine',
        'qualification': 'MBBS, MD',
        'experience': '8',
        'hospitalAffiliation': 'City General Hospital',
        'phone': '+91 9876543210',
        'email': 'amit.patel@hospital.com',
        'state': 'Maharashtra',
        'city': 'Mumbai',
        'pincode': '400001',
        'documents': [],
        'status': 'verified',
        'registrationDate': '2024-01-01T00:00:00Z',
        'verifiedDate': '2024-01-02T00:00:00Z',
        'verifiedBy': 'admin',
    },
    {
        'id': '2',
        'registerId': 'MH-54321',
        'fullName': 'Dr. Rajesh Kumar',
        'licenseNumber': 'LIC-456789123',
        'specialization': 'Pulmonology',
        'qualification': 'MBBS, MD, DM',
        'experience': '15',
        'hospitalAffiliation': 'Breathing Easy Clinic',
        'phone': '+91 9988776655',
        'email': 'rajesh.kumar@breathing.com',
        'state': 'Maharashtra',
        'city': 'Thane',
        'pincode': '400601',
        'documents': [],
        'status': 'pending-verification',
        'registrationDate': '2024-01-20T00:00:00Z',
    },
]

DEMO_HEALTH_CAMPS: List[Dict[str, Any]] = [
    {
        'id': '1',
        'name': 'Central Mumbai Health Camp',
        'description': 'Free health checkup and consultation for migrant workers',
        'date': '2024-02-15',
        'startTime': '09:00',
        'endTime': '17:00',
        'capacity': 100,
        'booked': 45,
        'address': 'Plot No. 123, Near Central Railway Station, Mumbai',
        'city': 'Mumbai',
        'state': 'Maharashtra',
        'pincode': '400001',
        'location': {'lat': 19.0760, 'lng': 72.8777},
        'specializations': ['General Medicine', 'Internal Medicine', 'Infectious Diseases'],
        'status': 'active',
        'createdBy': 'admin',
    },
    {
        'id': '2',
        'name': 'East Side Mobile Clinic',
        'description': 'Mobile health camp for construction workers',
        'date': '2024-02-25',
        'startTime': '10:00',
        'endTime': '18:00',
        'capacity': 50,
        'booked': 28,
        'address': 'Near Construction Site, Powai, Mumbai',
        'city': 'Mumbai',
        'state': 'Maharashtra',
        'pincode': '400076',
        'location': {'lat': 19.1197, 'lng': 72.9064},
        'specializations': ['Emergency Medicine', 'General Medicine'],
        'status': 'active',
        'createdBy': 'admin',
    },
]


def seed_demo_data(repository: HealthRepository,
                   engine: RiskAssessmentEngine = None) -> Dict[str, int]:
    """
    Replace the store contents with the demo data set.

    Returns:
        Number of seeded records per collection
    """
    engine = engine or RiskAssessmentEngine()
    repository.clear_all()

    for template in DEMO_PATIENTS:
        patient = copy.deepcopy(template)
        analysis = engine.analyze(patient['surveyData'], patient['reports'])
        analysis_dict = analysis.to_dict()
        repository.save_patient({
            **patient,
            'analysis': analysis_dict,
            'healthGoals': copy.deepcopy(analysis_dict['healthGoals']),
        })
        repository.save_analysis({
            **copy.deepcopy(analysis_dict),
            'id': f"demo-{patient['id']}",
            'patientId': patient['id'],
        })

    for doctor in DEMO_DOCTORS:
        repository.save_doctor(copy.deepcopy(doctor))
    for camp in DEMO_HEALTH_CAMPS:
        repository.save_health_camp(copy.deepcopy(camp))

    repository.save_completed_goals([1, 2])

    counts = {
        'patients': len(DEMO_PATIENTS),
        'doctors': len(DEMO_DOCTORS),
        'healthCamps': len(DEMO_HEALTH_CAMPS),
    }
    logger.info(
        "Demo data seeded: %d patients, %d doctors, %d health camps",
        counts['patients'], counts['doctors'], counts['healthCamps'],
    )
    return counts
