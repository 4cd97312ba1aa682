from pydantic import BaseModel
from datetime import datetime


class CounterValue(BaseModel):
    success: bool = True
    count: int
    lastUpdated: datetime


class CounterReset(BaseModel):
    success: bool = True
    message: str
    count: int
