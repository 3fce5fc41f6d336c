"""
Main application entry point
Demonstrates how to use the Migrant Health Buddy assessment flow
"""

import logging
import uuid

from src.core.config import config
from src.core.demo_data import seed_demo_data
from src.core.guidance import care_timeline
from src.core.guidance.catalog import SUSTAINABLE_GOALS
from src.core.models import RiskLevel, availability_color
from src.core.report_intake import build_report
from src.core.risk_engine import RiskAssessmentEngine
from src.core.storage import HealthRepository, JsonFileStore
from src.core.workflow import AssessmentWorkflow


def print_progress(percent: int, stage: str) -> None:
    print(f"   [{percent:3d}%] {stage}")


def main():
    """Main application workflow"""

    logging.basicConfig(
        level=config.logging_config['level'],
        format=config.logging_config['format'],
    )

    print("="*60)
    print("Migrant Health Buddy - Health Risk Assessment")
    print("="*60)

    repository = HealthRepository(JsonFileStore(config.store_path))
    engine = RiskAssessmentEngine(config.get_engine_config())
    workflow = AssessmentWorkflow(engine, repository, progress_callback=print_progress)

    print("\n1. Seeding demo data...")
    counts = seed_demo_data(repository, engine)
    for collection, count in counts.items():
        print(f"   ✓ {count} {collection}")

    survey = {
        'personalInfo': {'age': '31', 'gender': 'female',
                         'occupation': 'Textile Worker', 'state': 'Gujarat'},
        'symptoms': ['Fever', 'Cough', 'Fatigue'],
        'exposure': {'travelHistory': 'yes', 'crowdedPlaces': 'yes', 'sickContact': 'no'},
        'healthHistory': {'chronicDiseases': ['Diabetes'],
                          'medications': 'Metformin', 'allergies': ''},
    }
    reports = [
        build_report('cbc_blood_panel.pdf', 'application/pdf', 482133).to_dict(),
        build_report('chest_xray.jpg', 'image/jpeg', 1804221).to_dict(),
    ]

    print("\n2. Running assessment...")
    analysis = workflow.submit(uuid.uuid4().hex, survey, reports)

    print("\n" + "="*60)
    print("HEALTH ANALYSIS REPORT")
    print("="*60)
    print(f"\nTimestamp: {analysis['timestamp']}")
    print(f"Risk Level: {analysis['riskLevel'].upper()}")
    print(f"Risk Score: {analysis['riskScore']}")
    print(f"\nSummary: {analysis['summary']}")

    if analysis['riskFactors']:
        print(f"\nRisk Factors ({len(analysis['riskFactors'])}):")
        for factor in analysis['riskFactors']:
            print(f"   • {factor}")

    if analysis['reportFindings']:
        print("\nReport Findings:")
        for finding in analysis['reportFindings']:
            print(f"   • {finding}")

    print("\nRecommendations:")
    for rec in analysis['recommendations']:
        print(f"   • {rec}")

    print("\nHealth Goals:")
    for goal in analysis['healthGoals']:
        print(f"   • [{goal['priority']}] {goal['title']} ({goal['deadline']})")

    for entry in analysis['preDiagnosis']:
        print(f"\nPre-diagnosis: {entry['condition']} "
              f"({entry['probability']}, urgency {entry['urgency']})")

    timeline = care_timeline(RiskLevel(analysis['riskLevel']), analysis['riskFactors'])
    print(f"\n{timeline.title}: {timeline.description}")

    print("\nSustainable Goals:")
    for goal in SUSTAINABLE_GOALS:
        print(f"   • {goal.title} ({goal.frequency})")

    print("\n3. Booking a health camp...")
    for camp in repository.search_camps("mumbai"):
        color = availability_color(camp['booked'], camp['capacity'])
        print(f"   • {camp['name']}: {camp['booked']}/{camp['capacity']} booked [{color}]")
    booking = repository.book_camp('2', '1')
    if booking is not None:
        print(f"   ✓ Booking {booking['id']} confirmed for camp {booking['campId']}")

    print("\n" + "="*60)
    print(f"✓ Done! Data stored at {config.store_path}")


if __name__ == "__main__":
    main()
