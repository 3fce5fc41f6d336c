"""
Report intake: derives report content for uploaded files.

There is no OCR; the content is inferred from the filename, the same way the
demo upload screen does it.
"""

import math
import uuid
from datetime import datetime, timezone
from typing import Optional

from .models import (
    BloodTestContent,
    GeneralReportContent,
    ReportContent,
    ReportRecord,
    XRayContent,
)


_BLOOD_PANEL_VALUES = {
    'hemoglobin': '12.5 g/dL',
    'wbc': '7,200 cells/μL',
    'rbc': '4.2 million cells/μL',
    'platelets': '250,000 cells/μL',
    'glucose': '95 mg/dL',
    'cholesterol': '180 mg/dL',
}

NORMAL_RANGES = {
    'hemoglobin': '12.0-15.5 g/dL',
    'wbc': '4,000-11,000 cells/μL',
    'rbc': '4.0-5.2 million cells/μL',
    'platelets': '150,000-450,000 cells/μL',
    'glucose': '70-100 mg/dL',
    'cholesterol': '<200 mg/dL',
}

_SIZE_UNITS = ['Bytes', 'KB', 'MB', 'GB']

ALLOWED_TYPES = ('image/jpeg', 'image/png', 'image/jpg', 'application/pdf')
MAX_REPORT_SIZE = 10 * 1024 * 1024  # 10 MB

REJECTED_UPLOAD_MESSAGE = "Only JPG, PNG, and PDF files under 10MB are allowed."


def is_allowed_upload(mime_type: str, size: int) -> bool:
    return mime_type in ALLOWED_TYPES and 0 <= size <= MAX_REPORT_SIZE


def content_for_filename(filename: str) -> ReportContent:
    name = filename.lower()

    if 'blood' in name or 'cbc' in name:
        return BloodTestContent(
            values=dict(_BLOOD_PANEL_VALUES),
            normal_ranges=dict(NORMAL_RANGES),
        )
    if 'xray' in name or 'chest' in name:
        return XRayContent(
            findings='Lungs appear clear with no signs of infection or abnormalities.',
            impression='Normal chest X-ray',
        )
    return GeneralReportContent(
        findings='Report uploaded successfully. Awaiting detailed analysis.',
        status='Under Review',
    )


def build_report(name: str,
                 mime_type: str,
                 size: int = 0,
                 upload_date: Optional[str] = None,
                 report_id: Optional[str] = None) -> ReportRecord:
    """
    Create a ReportRecord for an uploaded file

    Raises:
        ValueError: if the file is not a JPG, PNG or PDF under 10 MB
    """
    if not is_allowed_upload(mime_type, size):
        raise ValueError(f"Rejected upload {name!r} ({mime_type}, {size} bytes). {REJECTED_UPLOAD_MESSAGE}")

    return ReportRecord(
        id=report_id or uuid.uuid4().hex,
        name=name,
        mime_type=mime_type,
        size=size,
        upload_date=upload_date or datetime.now(timezone.utc).isoformat(),
        content=content_for_filename(name),
    )


def format_file_size(size: int) -> str:
    """Human readable size, e.g. 1536 -> "1.5 KB"."""
    if size <= 0:
        return '0 Bytes'

    index = min(int(math.floor(math.log(size) / math.log(1024))), len(_SIZE_UNITS) - 1)
    value = round(size / math.pow(1024, index), 2)
    # Drop trailing zeros: 1.50 -> 1.5, 2.00 -> 2
    return f"{value:g} {_SIZE_UNITS[index]}"
