from fastapi import APIRouter, Depends
from typing import List

from models.chat import ChatData, ChatDataCreate, QuestionCountUpdate, TotalQuestionCount
from models.common import DeleteResult
from services.chat_service import ChatDataService
from utils.dependencies import get_chat_service, require_storage_ready

router = APIRouter(prefix="/api", tags=["chat data"], dependencies=[Depends(require_storage_ready)])


@router.get("/data", response_model=List[ChatData])
def get_all_data(service: ChatDataService = Depends(get_chat_service)):
    """Get all saved chats, newest first."""
    return service.list_all()


@router.post("/data", response_model=ChatData)
def add_data(payload: ChatDataCreate, service: ChatDataService = Depends(get_chat_service)):
    """Save a chat transcript."""
    return service.add(payload.title, payload.content)


@router.post("/data/{chat_id}/increment", response_model=QuestionCountUpdate)
def increment_question_count(chat_id: str, service: ChatDataService = Depends(get_chat_service)):
    """Increment the question count of one saved chat."""
    return service.increment_question(chat_id)


@router.get("/questions/total-count", response_model=TotalQuestionCount)
def get_total_question_count(service: ChatDataService = Depends(get_chat_service)):
    return service.total_question_count()


@router.delete("/data/{chat_id}", response_model=DeleteResult)
def delete_data(chat_id: str, service: ChatDataService = Depends(get_chat_service)):
    service.delete(chat_id)
    return DeleteResult()
