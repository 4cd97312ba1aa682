from pydantic import BaseModel
from typing import Optional, Union
from datetime import datetime


class CarouselImageCreate(BaseModel):
    title: Optional[str] = None
    imageUrl: Optional[str] = None
    alt: Optional[str] = None
    order: Optional[Union[int, float, str]] = None


class CarouselImageBase64(BaseModel):
    title: Optional[str] = None
    imageData: Optional[str] = None  # data URI or bare base64
    alt: Optional[str] = None
    order: Optional[Union[int, float, str]] = None


class CarouselImage(BaseModel):
    id: str
    title: str
    imageUrl: str
    alt: str = ""
    order: Union[int, float] = 0
    createdAt: Optional[datetime] = None


class CarouselUploadResult(BaseModel):
    success: bool = True
    message: str = "Image uploaded successfully"
    data: CarouselImage
