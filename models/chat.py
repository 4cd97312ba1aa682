from pydantic import BaseModel
from typing import Optional


# Request body for POST /api/data; presence is checked by the service
class ChatDataCreate(BaseModel):
    title: Optional[str] = None
    content: Optional[str] = None


# Public list/create view of a saved chat
class ChatData(BaseModel):
    id: str
    title: str
    content: str
    date: str


class QuestionCountUpdate(BaseModel):
    success: bool = True
    id: str
    title: str
    questionCount: int


class TotalQuestionCount(BaseModel):
    success: bool = True
    totalCount: int
    totalQuestions: int
