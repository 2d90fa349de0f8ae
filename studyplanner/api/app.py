"""FastAPI web application for studyplanner."""

import logging
import uuid
from datetime import date, datetime
from typing import List, Optional
from fastapi import FastAPI, HTTPException, Depends
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from studyplanner.exceptions import StoreUnavailableError
from studyplanner.models.assignment import Assignment
from studyplanner.models.schedule_block import ScheduleBlock
from studyplanner.models.placement import PlacementResult, AutoFillResult
from studyplanner.database.database import get_db
from studyplanner.database.repository import AssignmentRepository
from studyplanner.database.schedule_template_repository import ScheduleTemplateRepository
from studyplanner.database.schedule_cache import ScheduleCache, CachedScheduleStore
from studyplanner.engine.placement import place_assignments
from studyplanner.engine.autofill import WeeklyAutoFiller

logger = logging.getLogger(__name__)

app = FastAPI(
    title="studyplanner API",
    description="Daily homeschool block planning with family-pattern assignment placement",
    version="0.1.0"
)

# Process-wide template cache, cleared whenever templates change
schedule_cache = ScheduleCache()


# Request/response models
class AssignmentCreateRequest(BaseModel):
    """Request body for creating an assignment."""
    user_id: str = Field(..., description="Student who owns the assignment")
    title: str
    subject: Optional[str] = None
    course_name: Optional[str] = None
    due_date: Optional[date] = None
    scheduled_date: Optional[date] = None
    scheduled_block: Optional[int] = None
    actual_estimated_minutes: Optional[int] = Field(None, ge=0)


class AssignmentResponse(BaseModel):
    assignment: Assignment


class AssignmentListResponse(BaseModel):
    assignments: List[Assignment]
    count: int


class ScheduleBlockCreate(BaseModel):
    """One template block in a create request."""
    student_name: str
    weekday: str
    block_number: Optional[int] = None
    start_time: str
    end_time: str
    subject: str = ""
    block_name: Optional[str] = None
    block_type: str


class ScheduleTemplateRequest(BaseModel):
    blocks: List[ScheduleBlockCreate]


class ScheduleTemplateResponse(BaseModel):
    blocks: List[ScheduleBlock]
    count: int


class DayScheduleResponse(PlacementResult):
    """Populated blocks for one student and date."""
    student: str
    day: date


class AutoFillRequest(BaseModel):
    week_start: date = Field(..., description="Any date in the week to fill")


@app.get("/health")
async def health():
    """Health check endpoint."""
    return {"status": "healthy", "version": "0.1.0"}


@app.post("/assignments", response_model=AssignmentResponse, status_code=201)
def create_assignment(request: AssignmentCreateRequest, db: Session = Depends(get_db)):
    """Create an assignment."""
    now = datetime.utcnow()
    assignment = Assignment(
        id=str(uuid.uuid4()),
        created_at=now,
        updated_at=now,
        **request.model_dump(),
    )
    try:
        created = AssignmentRepository(db).create(assignment)
    except StoreUnavailableError as e:
        raise HTTPException(status_code=503, detail=str(e))
    return AssignmentResponse(assignment=created)


@app.get("/assignments", response_model=AssignmentListResponse)
def list_assignments(student: str, db: Session = Depends(get_db)):
    """List a student's assignments (earliest due first)."""
    assignments = AssignmentRepository(db).get_for_student(student)
    return AssignmentListResponse(assignments=assignments, count=len(assignments))


@app.get("/assignments/{assignment_id}", response_model=AssignmentResponse)
def get_assignment(assignment_id: str, db: Session = Depends(get_db)):
    """Get one assignment."""
    assignment = AssignmentRepository(db).get(assignment_id)
    if assignment is None:
        raise HTTPException(status_code=404, detail="Assignment not found")
    return AssignmentResponse(assignment=assignment)


@app.post("/assignments/{assignment_id}/complete", response_model=AssignmentResponse)
def complete_assignment(assignment_id: str, db: Session = Depends(get_db)):
    """Mark an assignment completed."""
    assignment = AssignmentRepository(db).mark_completed(assignment_id)
    if assignment is None:
        raise HTTPException(status_code=404, detail="Assignment not found")
    return AssignmentResponse(assignment=assignment)


@app.post("/schedule-template", response_model=ScheduleTemplateResponse, status_code=201)
def create_schedule_template(request: ScheduleTemplateRequest, db: Session = Depends(get_db)):
    """Add blocks to the weekly template."""
    blocks = [ScheduleBlock(id=str(uuid.uuid4()), **b.model_dump()) for b in request.blocks]
    created = ScheduleTemplateRepository(db).create_batch(blocks) if blocks else []
    schedule_cache.clear()
    return ScheduleTemplateResponse(blocks=created, count=len(created))


@app.get("/schedule-template/{student}/{weekday}", response_model=ScheduleTemplateResponse)
def get_schedule_template(student: str, weekday: str, db: Session = Depends(get_db)):
    """Get a student's template blocks for one weekday."""
    blocks = ScheduleTemplateRepository(db).get_for_day(student, weekday)
    return ScheduleTemplateResponse(blocks=blocks, count=len(blocks))


@app.get("/students/{student}/days/{day}", response_model=DayScheduleResponse)
def get_day_schedule(student: str, day: date, db: Session = Depends(get_db)):
    """Populate a student's day with unplaced assignments (display only, nothing is saved)."""
    try:
        assignments = AssignmentRepository(db).get_for_student(student)
        store = CachedScheduleStore(ScheduleTemplateRepository(db), schedule_cache)
        blocks = store.get_for_day(student, day.strftime("%A"))
    except StoreUnavailableError as e:
        raise HTTPException(status_code=503, detail=str(e))

    result = place_assignments(assignments, blocks, student, day)
    return DayScheduleResponse(
        student=student,
        day=day,
        populated_blocks=result.populated_blocks,
        unscheduled_count=result.unscheduled_count,
    )


@app.post("/students/{student}/auto-fill", response_model=AutoFillResult)
def auto_fill(student: str, request: AutoFillRequest, db: Session = Depends(get_db)):
    """Persist placements for a whole week of the student's backlog."""
    filler = WeeklyAutoFiller(AssignmentRepository(db), ScheduleTemplateRepository(db))
    try:
        return filler.fill_week(student, request.week_start)
    except StoreUnavailableError as e:
        logger.error(f"Auto-fill for {student} aborted: {str(e)}")
        raise HTTPException(status_code=503, detail=f"Assignment store unavailable: {str(e)}")


if __name__ == "__main__":
    import uvicorn
    from studyplanner.database.database import init_db
    init_db()
    uvicorn.run(app, host="0.0.0.0", port=8000)
