from typing import Annotated

from fastapi import APIRouter, File, UploadFile
from pydantic import BaseModel

from modelshop.api.deps import FileStorageDep

router = APIRouter(tags=["uploads"])


class UploadResponse(BaseModel):
    filePath: str


@router.post(
    "/upload",
    summary="Upload a file",
    description="Store a file and return the path it is served from.",
    response_model=UploadResponse,
    responses={400: {"description": "No file uploaded"}},
)
def upload_file(
    file: Annotated[UploadFile, File()], storage: FileStorageDep
) -> UploadResponse:
    return UploadResponse(filePath=storage.save(file.file, file.filename))
