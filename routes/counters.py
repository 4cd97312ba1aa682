from fastapi import APIRouter, Depends

from models.counter import CounterReset, CounterValue
from services.counter_service import CounterService
from utils.dependencies import (
    get_question_request_counter,
    get_visitor_counter,
    require_storage_ready,
)

router = APIRouter(prefix="/api", tags=["counters"], dependencies=[Depends(require_storage_ready)])


# ========== VISITOR COUNTER ==========

@router.post("/visitor", response_model=CounterValue)
def increment_visitor(counter: CounterService = Depends(get_visitor_counter)):
    """Count a page load."""
    return counter.increment()


@router.get("/visitor", response_model=CounterValue)
def get_visitor(counter: CounterService = Depends(get_visitor_counter)):
    """Read the visitor count without incrementing it."""
    return counter.get()


@router.post("/visitor/reset", response_model=CounterReset)
def reset_visitor(counter: CounterService = Depends(get_visitor_counter)):
    result = counter.reset()
    return {"message": counter.kind.reset_message, "count": result["count"]}


# ========== QUESTION REQUEST COUNTER ==========

@router.post("/questions/request", response_model=CounterValue)
def increment_question_requests(counter: CounterService = Depends(get_question_request_counter)):
    """Count a question sent by a user."""
    return counter.increment()


@router.get("/questions/request", response_model=CounterValue)
def get_question_requests(counter: CounterService = Depends(get_question_request_counter)):
    return counter.get()


@router.post("/questions/request/reset", response_model=CounterReset)
def reset_question_requests(counter: CounterService = Depends(get_question_request_counter)):
    result = counter.reset()
    return {"message": counter.kind.reset_message, "count": result["count"]}
