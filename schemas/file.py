from typing import Optional, List

from pydantic import BaseModel, Field


class UploadedFile(BaseModel):
    id: str = Field(..., description="Stored file name")
    name: str = Field(..., description="Original file name")
    mime_type: Optional[str] = Field(None, alias="mimeType")
    size: int
    url: str

    class Config:
        validate_by_name = True


class UploadResponse(BaseModel):
    file: UploadedFile


class PreviewResponse(BaseModel):
    preview_url: str = Field(..., alias="previewUrl")

    class Config:
        validate_by_name = True


class StoredObject(BaseModel):
    id: str = Field(..., alias="$id")
    name: str
    mime_type: Optional[str] = Field(None, alias="mimeType")
    size_original: int = Field(..., alias="sizeOriginal")
    url: str

    class Config:
        validate_by_name = True


class PreviewsRequest(BaseModel):
    ids: List[str] = []


class ObjectPreview(BaseModel):
    id: str
    url: Optional[str] = None
    mime_type: Optional[str] = Field(None, alias="mimeType")
    size_original: Optional[int] = Field(None, alias="sizeOriginal")
    error: Optional[str] = None

    class Config:
        validate_by_name = True


class ObjectUrl(BaseModel):
    url: str
