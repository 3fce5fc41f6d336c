"""
FastAPI Backend for Migrant Health Buddy
Exposes the risk assessment workflow and the local data store to the portal
"""

import asyncio
import logging
import uuid
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime
from functools import partial
from typing import Optional, Dict, Any, List

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import BaseModel, Field

from src.core.config import config
from src.core.demo_data import seed_demo_data
from src.core.guidance.catalog import SUSTAINABLE_GOALS
from src.core.models import availability_color
from src.core.report_intake import (
    REJECTED_UPLOAD_MESSAGE,
    build_report,
    format_file_size,
    is_allowed_upload,
)
from src.core.risk_engine import RiskAssessmentEngine
from src.core.storage import HealthRepository, JsonFileStore
from src.core.workflow import AssessmentWorkflow

logging.basicConfig(
    level=config.logging_config['level'],
    format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
)
logger = logging.getLogger("health_buddy")

app = FastAPI(title="Migrant Health Buddy API", version="1.0.0")

# CORS middleware for the portal frontend
app.add_middleware(
    CORSMiddleware,
    allow_origins=config.api_config['cors_origins'],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Store I/O runs on this pool, off the event loop
executor: Optional[ThreadPoolExecutor] = None
repository: Optional[HealthRepository] = None
workflow: Optional[AssessmentWorkflow] = None


class HealthResponse(BaseModel):
    status: str
    timestamp: str


class AnalyzeRequest(BaseModel):
    """Survey submission; survey and reports use the portal's camelCase shape"""
    survey: Dict[str, Any] = Field(default_factory=dict)
    reports: List[Dict[str, Any]] = Field(default_factory=list)
    submission_id: Optional[str] = None
    patient_id: Optional[str] = None


class UploadedFile(BaseModel):
    name: str
    type: str = ""
    size: int = 0


class ReportUploadRequest(BaseModel):
    files: List[UploadedFile]


class GoalToggleResponse(BaseModel):
    goal_id: int
    completed: bool


class CampBookingRequest(BaseModel):
    patient_id: str


def _log_progress(percent: int, stage: str) -> None:
    logger.debug("Assessment progress %d%%: %s", percent, stage)


@app.on_event("startup")
async def startup_event():
    """Open the local store and build the assessment workflow"""
    global executor, repository, workflow
    logger.info("Starting Migrant Health Buddy API...")

    executor = ThreadPoolExecutor(max_workers=4)

    store_path = config.store_path
    repository = HealthRepository(JsonFileStore(store_path))
    engine = RiskAssessmentEngine(config.get_engine_config())
    workflow = AssessmentWorkflow(engine, repository, progress_callback=_log_progress)

    logger.info("Store ready at %s", store_path)


@app.on_event("shutdown")
async def shutdown_event():
    global executor
    if executor:
        executor.shutdown(wait=False)
        executor = None


def _require_workflow() -> AssessmentWorkflow:
    if workflow is None or repository is None or executor is None:
        raise HTTPException(status_code=503, detail="Service not ready")
    return workflow


def _locked(func, *args, **kwargs):
    with repository.lock:
        return func(*args, **kwargs)


async def _run_blocking(func, *args, **kwargs):
    """Run a store operation on the executor, holding the repository lock"""
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(executor, partial(_locked, func, *args, **kwargs))


@app.get("/health", response_model=HealthResponse)
async def health_check():
    """Health check endpoint"""
    return HealthResponse(
        status="healthy",
        timestamp=datetime.now().isoformat()
    )


# ------------------------------------------------------------------
# Analyses
# ------------------------------------------------------------------

@app.post("/api/analyze")
async def analyze_endpoint(request: AnalyzeRequest):
    """
    Assess a survey submission and store the analysis.
    Re-posting the same submission_id returns the stored analysis.
    """
    flow = _require_workflow()
    submission_id = request.submission_id or uuid.uuid4().hex

    if request.patient_id:
        patient = await _run_blocking(repository.get_patient, request.patient_id)
        if patient is None:
            raise HTTPException(status_code=404, detail=f"Unknown patient: {request.patient_id}")

    return await _run_blocking(
        flow.submit,
        submission_id,
        request.survey,
        request.reports,
        patient_id=request.patient_id,
    )


@app.get("/api/analyses")
async def list_analyses():
    _require_workflow()
    return await _run_blocking(repository.get_analyses)


@app.get("/api/analyses/{analysis_id}")
async def get_analysis(analysis_id: str):
    _require_workflow()
    analysis = await _run_blocking(repository.get_analysis, analysis_id)
    if analysis is None:
        raise HTTPException(status_code=404, detail=f"Unknown analysis: {analysis_id}")
    return analysis


@app.get("/api/patients/{patient_id}/analysis")
async def get_patient_analysis(patient_id: str):
    _require_workflow()
    analysis = await _run_blocking(repository.get_analysis_by_patient, patient_id)
    if analysis is None:
        raise HTTPException(status_code=404, detail=f"No analysis for patient: {patient_id}")
    return analysis


# ------------------------------------------------------------------
# Reports
# ------------------------------------------------------------------

@app.post("/api/reports")
async def upload_reports(request: ReportUploadRequest):
    """
    Register uploaded files and derive their report content.
    Files that are not JPG, PNG or PDF under 10 MB are left out; if none
    remain the request is rejected.
    """
    _require_workflow()
    accepted = [f for f in request.files if is_allowed_upload(f.type, f.size)]
    rejected = len(request.files) - len(accepted)
    if rejected:
        logger.warning("%d uploaded file(s) rejected", rejected)
    if not accepted:
        raise HTTPException(status_code=400, detail=REJECTED_UPLOAD_MESSAGE)

    reports = [
        build_report(f.name, mime_type=f.type, size=f.size).to_dict()
        for f in accepted
    ]
    saved = await _run_blocking(repository.save_reports, reports)
    logger.info("%d report(s) uploaded", len(saved))
    return [
        {**report, 'displaySize': format_file_size(report['size'])}
        for report in saved
    ]


# ------------------------------------------------------------------
# Goals
# ------------------------------------------------------------------

@app.post("/api/goals/{goal_id}/toggle", response_model=GoalToggleResponse)
async def toggle_goal(goal_id: int):
    flow = _require_workflow()
    completed = await _run_blocking(flow.toggle_goal, goal_id)
    return GoalToggleResponse(goal_id=goal_id, completed=completed)


@app.get("/api/goals/progress")
async def goals_progress():
    flow = _require_workflow()
    return await _run_blocking(flow.goal_progress)


@app.get("/api/goals/sustainable")
async def sustainable_goals():
    return [goal.to_dict() for goal in SUSTAINABLE_GOALS]


# ------------------------------------------------------------------
# Health camps
# ------------------------------------------------------------------

@app.get("/api/camps")
async def list_camps(location: str = ""):
    """Camps matching a city, address or state fragment, with an availability badge"""
    _require_workflow()
    camps = await _run_blocking(repository.search_camps, location)
    return [
        {**camp, 'availability': availability_color(camp.get('booked', 0), camp.get('capacity', 0))}
        for camp in camps
    ]


@app.post("/api/camps/{camp_id}/book")
async def book_camp(camp_id: str, request: CampBookingRequest):
    _require_workflow()
    try:
        booking = await _run_blocking(repository.book_camp, request.patient_id, camp_id)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Unknown health camp: {camp_id}")
    if booking is None:
        raise HTTPException(status_code=409, detail="You have already booked this health camp.")
    logger.info("Patient %s booked camp %s", request.patient_id, camp_id)
    return booking


@app.post("/api/camps/{camp_id}/cancel")
async def cancel_camp_booking(camp_id: str, request: CampBookingRequest):
    _require_workflow()
    cancelled = await _run_blocking(repository.cancel_booking, request.patient_id, camp_id)
    if not cancelled:
        raise HTTPException(status_code=404, detail=f"No booking for camp: {camp_id}")
    logger.info("Patient %s cancelled camp %s", request.patient_id, camp_id)
    return {'camp_id': camp_id, 'cancelled': True}


@app.post("/api/demo/seed")
async def seed_demo():
    flow = _require_workflow()
    return await _run_blocking(seed_demo_data, repository, flow.engine)


if __name__ == "__main__":
    import uvicorn
    logger.info("Starting Migrant Health Buddy API Server on http://localhost:8000")
    uvicorn.run(app, host="0.0.0.0", port=8000, log_level="info")
