"""
Local key-value persistence and the repository the portal talks to.

Each collection ("patients", "aiAnalyses", ...) is stored under its own key
as a JSON list. Read and write failures are logged and degrade to an empty
collection, so a corrupt cache never takes the portal down.
"""

import json
import logging
import os
import tempfile
import threading
import uuid
from abc import ABC, abstractmethod
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

logger = logging.getLogger(__name__)


PATIENTS = 'patients'
DOCTORS = 'doctors'
HEALTH_CAMPS = 'healthCamps'
VERIFICATIONS = 'verifications'
ANALYSES = 'aiAnalyses'
BOOKINGS = 'bookings'
SURVEYS = 'healthSurveys'
REPORTS = 'medicalReports'
HEALTH_GOALS = 'healthGoals'
COMPLETED_GOALS = 'completedHealthGoals'
CURRENT_PATIENT = 'currentPatient'
CURRENT_DOCTOR = 'currentDoctor'

ALL_KEYS = [
    PATIENTS, DOCTORS, HEALTH_CAMPS, VERIFICATIONS, ANALYSES,
    BOOKINGS, SURVEYS, REPORTS, HEALTH_GOALS,
    COMPLETED_GOALS, CURRENT_PATIENT, CURRENT_DOCTOR,
]

# export/import document key -> storage key
_EXPORT_KEYS = {
    'patients': PATIENTS,
    'doctors': DOCTORS,
    'healthCamps': HEALTH_CAMPS,
    'verifications': VERIFICATIONS,
    'analyses': ANALYSES,
    'bookings': BOOKINGS,
    'surveys': SURVEYS,
    'reports': REPORTS,
    'healthGoals': HEALTH_GOALS,
    'completedGoals': COMPLETED_GOALS,
}


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


class KeyValueStore(ABC):
    """Minimal string-keyed store holding JSON-compatible values"""

    @abstractmethod
    def get(self, key: str) -> Any:
        """Return the stored value, or None when the key is absent"""
        pass

    @abstractmethod
    def set(self, key: str, value: Any) -> None:
        pass

    @abstractmethod
    def remove(self, key: str) -> None:
        pass

    @abstractmethod
    def keys(self) -> List[str]:
        pass


class InMemoryStore(KeyValueStore):

    def __init__(self, initial: Optional[Dict[str, Any]] = None):
        self._data: Dict[str, Any] = dict(initial or {})

    def get(self, key: str) -> Any:
        return self._data.get(key)

    def set(self, key: str, value: Any) -> None:
        self._data[key] = value

    def remove(self, key: str) -> None:
        self._data.pop(key, None)

    def keys(self) -> List[str]:
        return list(self._data)


class JsonFileStore(KeyValueStore):
    """All keys kept in a single JSON document on disk"""

    def __init__(self, path: Path):
        self.path = Path(path)
        self._lock = threading.RLock()

    def _load(self) -> Dict[str, Any]:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.error("Error reading %s: %s", self.path, e)
            return {}
        if not isinstance(data, dict):
            logger.warning("Ignoring malformed store document at %s", self.path)
            return {}
        return data

    def _dump(self, data: Dict[str, Any]) -> None:
        """Replace the document atomically; on failure the old file is left as is."""
        try:
            text = json.dumps(data, indent=2, ensure_ascii=False)
        except (TypeError, ValueError) as e:
            logger.error("Error writing %s: %s", self.path, e)
            return

        tmp_name = None
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp"
            )
            with os.fdopen(fd, 'w', encoding='utf-8') as f:
                f.write(text)
            os.replace(tmp_name, self.path)
        except OSError as e:
            logger.error("Error writing %s: %s", self.path, e)
            if tmp_name and os.path.exists(tmp_name):
                os.unlink(tmp_name)

    def get(self, key: str) -> Any:
        return self._load().get(key)

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            data = self._load()
            data[key] = value
            self._dump(data)

    def remove(self, key: str) -> None:
        with self._lock:
            data = self._load()
            if key in data:
                del data[key]
                self._dump(data)

    def keys(self) -> List[str]:
        return list(self._load())


class HealthRepository:
    """
    Collection accessors over a KeyValueStore.

    Records are plain dicts in the portal's camelCase shape. Saving a record
    with a known ``id`` replaces it; unknown ids are appended.
    """

    def __init__(self, store: KeyValueStore):
        self.store = store
        # Held around every read-modify-write of a collection
        self.lock = threading.RLock()

    # ------------------------------------------------------------------
    # Generic collection helpers
    # ------------------------------------------------------------------

    def _get_collection(self, key: str) -> List[Dict[str, Any]]:
        items = self.store.get(key)
        if items is None:
            return []
        if not isinstance(items, list):
            logger.warning("Collection %s is not a list, treating as empty", key)
            return []
        return items

    def _set_collection(self, key: str, items: List[Any]) -> None:
        self.store.set(key, items)

    def _find(self, key: str, field: str, value: Any) -> Optional[Dict[str, Any]]:
        for item in self._get_collection(key):
            if isinstance(item, dict) and item.get(field) == value:
                return item
        return None

    def _upsert(self, key: str, record: Dict[str, Any]) -> Dict[str, Any]:
        with self.lock:
            items = self._get_collection(key)
            now = _now()
            for index, item in enumerate(items):
                if isinstance(item, dict) and item.get('id') == record.get('id'):
                    saved = {**record, 'updatedAt': now}
                    items[index] = saved
                    break
            else:
                saved = {**record, 'createdAt': now, 'updatedAt': now}
                items.append(saved)
            self._set_collection(key, items)
            return saved

    def _update(self, key: str, record_id: Any, updates: Dict[str, Any]) -> bool:
        with self.lock:
            items = self._get_collection(key)
            for index, item in enumerate(items):
                if isinstance(item, dict) and item.get('id') == record_id:
                    items[index] = {**item, **updates, 'updatedAt': _now()}
                    self._set_collection(key, items)
                    return True
            return False

    # ------------------------------------------------------------------
    # Patients
    # ------------------------------------------------------------------

    def get_patients(self) -> List[Dict[str, Any]]:
        return self._get_collection(PATIENTS)

    def get_patient(self, patient_id: str) -> Optional[Dict[str, Any]]:
        return self._find(PATIENTS, 'id', patient_id)

    def get_patient_by_aadhaar(self, aadhaar: str) -> Optional[Dict[str, Any]]:
        return self._find(PATIENTS, 'aadhaarNumber', aadhaar)

    def save_patient(self, patient: Dict[str, Any]) -> Dict[str, Any]:
        return self._upsert(PATIENTS, patient)

    def update_patient(self, patient_id: str, updates: Dict[str, Any]) -> bool:
        return self._update(PATIENTS, patient_id, updates)

    # ------------------------------------------------------------------
    # Doctors
    # ------------------------------------------------------------------

    def get_doctors(self) -> List[Dict[str, Any]]:
        return self._get_collection(DOCTORS)

    def get_doctor(self, doctor_id: str) -> Optional[Dict[str, Any]]:
        return self._find(DOCTORS, 'id', doctor_id)

    def get_doctor_by_register_id(self, register_id: str) -> Optional[Dict[str, Any]]:
        return self._find(DOCTORS, 'registerId', register_id)

    def save_doctor(self, doctor: Dict[str, Any]) -> Dict[str, Any]:
        return self._upsert(DOCTORS, doctor)

    def update_doctor_status(self, doctor_id: str, status: str,
                             verified_by: Optional[str] = None) -> bool:
        return self._update(DOCTORS, doctor_id, {
            'status': status,
            'verifiedDate': _now(),
            'verifiedBy': verified_by or 'admin',
        })

    # ------------------------------------------------------------------
    # Health camps and bookings
    # ------------------------------------------------------------------

    def get_health_camps(self) -> List[Dict[str, Any]]:
        return self._get_collection(HEALTH_CAMPS)

    def get_health_camp(self, camp_id: str) -> Optional[Dict[str, Any]]:
        return self._find(HEALTH_CAMPS, 'id', camp_id)

    def save_health_camp(self, camp: Dict[str, Any]) -> Dict[str, Any]:
        return self._upsert(HEALTH_CAMPS, camp)

    def update_camp_booking(self, camp_id: str, increment: bool) -> bool:
        """Adjust the booked seat count; never drops below zero"""
        with self.lock:
            camps = self.get_health_camps()
            for camp in camps:
                if isinstance(camp, dict) and camp.get('id') == camp_id:
                    booked = camp.get('booked', 0)
                    camp['booked'] = booked + 1 if increment else max(0, booked - 1)
                    self._set_collection(HEALTH_CAMPS, camps)
                    return True
            return False

    def search_camps(self, location: str = '') -> List[Dict[str, Any]]:
        """Camps whose city, address or state contains ``location`` (case-insensitive)"""
        needle = location.strip().lower()
        camps = [c for c in self.get_health_camps() if isinstance(c, dict)]
        if not needle:
            return camps
        return [
            camp for camp in camps
            if any(needle in str(camp.get(field, '')).lower()
                   for field in ('city', 'address', 'state'))
        ]

    def book_camp(self, patient_id: str, camp_id: str) -> Optional[Dict[str, Any]]:
        """
        Book a seat at a camp for a patient.

        Returns:
            The new booking, or None when the patient already holds one
            for this camp

        Raises:
            KeyError: if the camp does not exist
        """
        with self.lock:
            if self.get_health_camp(camp_id) is None:
                raise KeyError(camp_id)
            if self.find_booking(patient_id, camp_id) is not None:
                return None

            booking = self.save_booking({
                'id': uuid.uuid4().hex,
                'patientId': patient_id,
                'campId': camp_id,
                'status': 'confirmed',
                'bookingDate': _now(),
            })
            self.update_camp_booking(camp_id, increment=True)
            return booking

    def cancel_booking(self, patient_id: str, camp_id: str) -> bool:
        """Remove the patient's booking and release the seat"""
        with self.lock:
            booking = self.find_booking(patient_id, camp_id)
            if booking is None:
                return False
            remaining = [
                b for b in self.get_bookings()
                if not (isinstance(b, dict) and b.get('id') == booking.get('id'))
            ]
            self._set_collection(BOOKINGS, remaining)
            self.update_camp_booking(camp_id, increment=False)
            return True

    def find_booking(self, patient_id: str, camp_id: str) -> Optional[Dict[str, Any]]:
        for booking in self.get_bookings_by_patient(patient_id):
            if booking.get('campId') == camp_id:
                return booking
        return None

    def get_bookings(self) -> List[Dict[str, Any]]:
        return self._get_collection(BOOKINGS)

    def get_bookings_by_patient(self, patient_id: str) -> List[Dict[str, Any]]:
        return [b for b in self.get_bookings() if isinstance(b, dict) and b.get('patientId') == patient_id]

    def get_bookings_by_camp(self, camp_id: str) -> List[Dict[str, Any]]:
        return [b for b in self.get_bookings() if isinstance(b, dict) and b.get('campId') == camp_id]

    def save_booking(self, booking: Dict[str, Any]) -> Dict[str, Any]:
        return self._upsert(BOOKINGS, booking)

    def update_booking_status(self, booking_id: str, status: str) -> bool:
        return self._update(BOOKINGS, booking_id, {'status': status})

    # ------------------------------------------------------------------
    # Verifications
    # ------------------------------------------------------------------

    def get_verifications(self) -> List[Dict[str, Any]]:
        return self._get_collection(VERIFICATIONS)

    def get_verification(self, verification_id: str) -> Optional[Dict[str, Any]]:
        return self._find(VERIFICATIONS, 'id', verification_id)

    def save_verification(self, verification: Dict[str, Any]) -> Dict[str, Any]:
        return self._upsert(VERIFICATIONS, verification)

    def update_verification_status(self, verification_id: str, status: str,
                                   verified_by: Optional[str] = None) -> bool:
        return self._update(VERIFICATIONS, verification_id, {
            'status': status,
            'verifiedDate': _now(),
            'verifiedBy': verified_by or 'admin',
        })

    # ------------------------------------------------------------------
    # Analyses
    # ------------------------------------------------------------------

    def get_analyses(self) -> List[Dict[str, Any]]:
        return self._get_collection(ANALYSES)

    def get_analysis(self, analysis_id: str) -> Optional[Dict[str, Any]]:
        return self._find(ANALYSES, 'id', analysis_id)

    def get_analysis_by_patient(self, patient_id: str) -> Optional[Dict[str, Any]]:
        """Most recent analysis stored for the patient"""
        matches = [
            a for a in self.get_analyses()
            if isinstance(a, dict) and a.get('patientId') == patient_id
        ]
        return matches[-1] if matches else None

    def save_analysis(self, analysis: Dict[str, Any]) -> Dict[str, Any]:
        return self._upsert(ANALYSES, analysis)

    # ------------------------------------------------------------------
    # Surveys, reports and goals
    # ------------------------------------------------------------------

    def get_surveys(self) -> List[Dict[str, Any]]:
        return self._get_collection(SURVEYS)

    def save_survey(self, survey: Dict[str, Any],
                    survey_id: Optional[str] = None) -> Dict[str, Any]:
        record = {**survey, 'id': survey_id or uuid.uuid4().hex, 'timestamp': _now()}
        with self.lock:
            surveys = self.get_surveys()
            surveys.append(record)
            self._set_collection(SURVEYS, surveys)
        return record

    def get_reports(self) -> List[Dict[str, Any]]:
        return self._get_collection(REPORTS)

    def save_reports(self, reports: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        """Append uploaded reports, assigning ids that are not already set"""
        now = _now()
        new_reports = [
            {**report, 'id': report.get('id') or uuid.uuid4().hex, 'uploadDate': now}
            for report in reports
        ]
        with self.lock:
            self._set_collection(REPORTS, self.get_reports() + new_reports)
        return new_reports

    def get_health_goals(self) -> List[Dict[str, Any]]:
        return self._get_collection(HEALTH_GOALS)

    def save_health_goals(self, goals: List[Dict[str, Any]]) -> None:
        self._set_collection(HEALTH_GOALS, goals)

    def get_completed_goals(self) -> List[int]:
        return self._get_collection(COMPLETED_GOALS)

    def save_completed_goals(self, goal_ids: List[int]) -> None:
        self._set_collection(COMPLETED_GOALS, goal_ids)

    # ------------------------------------------------------------------
    # Session
    # ------------------------------------------------------------------

    def set_current_patient(self, patient: Dict[str, Any]) -> None:
        self.store.set(CURRENT_PATIENT, patient)

    def get_current_patient(self) -> Optional[Dict[str, Any]]:
        patient = self.store.get(CURRENT_PATIENT)
        return patient if isinstance(patient, dict) else None

    def set_current_doctor(self, doctor: Dict[str, Any]) -> None:
        self.store.set(CURRENT_DOCTOR, doctor)

    def get_current_doctor(self) -> Optional[Dict[str, Any]]:
        doctor = self.store.get(CURRENT_DOCTOR)
        return doctor if isinstance(doctor, dict) else None

    def clear_current_session(self) -> None:
        self.store.remove(CURRENT_PATIENT)
        self.store.remove(CURRENT_DOCTOR)

    # ------------------------------------------------------------------
    # Bulk operations
    # ------------------------------------------------------------------

    def clear_all(self) -> None:
        for key in ALL_KEYS:
            self.store.remove(key)

    def export_data(self) -> str:
        data: Dict[str, Any] = {
            name: self._get_collection(key) for name, key in _EXPORT_KEYS.items()
        }
        data['exportDate'] = _now()
        return json.dumps(data, indent=2, ensure_ascii=False)

    def import_data(self, json_data: str) -> bool:
        """Load collections from an export document; returns False on bad input"""
        try:
            data = json.loads(json_data)
        except (TypeError, ValueError) as e:
            logger.error("Error importing data: %s", e)
            return False
        if not isinstance(data, dict):
            logger.error("Error importing data: expected a JSON object")
            return False

        for name, key in _EXPORT_KEYS.items():
            if data.get(name):
                self._set_collection(key, data[name])
        return True
