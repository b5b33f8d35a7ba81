from fastapi import APIRouter, Depends, File, HTTPException, UploadFile

from quizcraft.core.config import settings
from quizcraft.core.security import get_current_user
from quizcraft.models.user_db.user_db import User
from quizcraft.schemas.uploads.upload_base import ImageKind, UploadOut
from quizcraft.services.errors import QuizValidationError
from quizcraft.services.storage import LocalBlobStore, build_image_path, get_blob_store

upload_router = APIRouter(prefix="/uploads", tags=["Uploads"])


@upload_router.post("/{kind}", response_model=UploadOut, status_code=201)
def upload_image(
    kind: ImageKind,
    file: UploadFile = File(...),
    store: LocalBlobStore = Depends(get_blob_store),
    current_user: User = Depends(get_current_user),
):
    if not (file.content_type or "").startswith("image/"):
        raise QuizValidationError("Only image uploads are accepted")

    try:
        data = file.file.read(settings.MAX_UPLOAD_BYTES + 1)
    finally:
        file.file.close()
    if len(data) > settings.MAX_UPLOAD_BYTES:
        raise HTTPException(status_code=413, detail="Image is too large")

    path = build_image_path(current_user.id, kind.value, file.filename)
    return UploadOut(url=store.upload(data, path), path=path)
