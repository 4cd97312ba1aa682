from fastapi import APIRouter, Depends, File, Form, UploadFile
from typing import List, Optional

from models.carousel import CarouselImage, CarouselImageBase64, CarouselImageCreate, CarouselUploadResult
from models.common import DeleteResult
from services.gallery_service import GalleryService, check_image_type
from utils.dependencies import get_gallery_service, require_storage_ready
from utils.errors import BadRequest

router = APIRouter(prefix="/api/carousel", tags=["carousel"], dependencies=[Depends(require_storage_ready)])


@router.get("", response_model=List[CarouselImage])
def get_carousel_images(service: GalleryService = Depends(get_gallery_service)):
    """Carousel images in display order."""
    return service.list()


@router.post("", response_model=CarouselImage)
def add_carousel_image(payload: CarouselImageCreate, service: GalleryService = Depends(get_gallery_service)):
    """Add an image by URL (no file upload)."""
    return service.add(payload.title, payload.imageUrl, payload.alt, payload.order)


@router.post("/upload", response_model=CarouselUploadResult)
def upload_carousel_image(
    image: Optional[UploadFile] = File(None),
    title: Optional[str] = Form(None),
    alt: Optional[str] = Form(None),
    order: Optional[str] = Form(None),
    service: GalleryService = Depends(get_gallery_service),
):
    """Multipart upload; the file goes in the ``image`` field."""
    if image is None:
        raise BadRequest("No image file provided")
    check_image_type(image.content_type)
    data = image.file.read()
    saved = service.upload_file(data, image.content_type, image.filename, title=title, alt=alt, order=order)
    return {"data": saved}


@router.post("/upload-base64", response_model=CarouselUploadResult)
def upload_carousel_image_base64(payload: CarouselImageBase64, service: GalleryService = Depends(get_gallery_service)):
    """Upload an image sent inline as base64 (optionally a data URI)."""
    image = service.upload_base64(payload.title, payload.imageData, payload.alt, payload.order)
    return {"data": image}


@router.delete("/{image_id}", response_model=DeleteResult)
def delete_carousel_image(image_id: str, service: GalleryService = Depends(get_gallery_service)):
    service.delete(image_id)
    return DeleteResult()
