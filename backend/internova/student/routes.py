"""Student profile routes."""

from fastapi import APIRouter, Depends, File, Form, UploadFile
from fastapi.responses import JSONResponse

from ..dependencies import get_current_student_id, get_profile_service
from ..errors import NotFoundError
from .schemas import profile_payload
from .service import ProfileService, ResumeFile

router = APIRouter(prefix="/student", tags=["student"])


def _upload_size(upload: UploadFile) -> int:
    if upload.size is not None:
        return upload.size
    upload.file.seek(0, 2)
    size = upload.file.tell()
    upload.file.seek(0)
    return size


@router.put("/profile")
def upsert_profile(
    university_id: str = Form("", alias="universityId"),
    gpa: str = Form(...),
    department: str | None = Form(None),
    skills: str | None = Form(None),
    resume: UploadFile | None = File(None),
    user_id: int = Depends(get_current_student_id),
    service: ProfileService = Depends(get_profile_service),
):
    resume_file = None
    if resume is not None:
        resume_file = ResumeFile(
            stream=resume.file,
            file_name=resume.filename or "",
            content_type=resume.content_type or "",
            size=_upload_size(resume),
        )

    saved = service.upsert(user_id, university_id, department, gpa, skills, resume_file)
    return JSONResponse(
        {
            "message": "Upload Successful",
            "resumeUrl": saved.resume_url,
            "profile": profile_payload(saved),
        }
    )


@router.get("/profile")
def get_profile(
    user_id: int = Depends(get_current_student_id),
    service: ProfileService = Depends(get_profile_service),
):
    profile = service.get_profile(user_id)
    if profile is None:
        raise NotFoundError("No profile exists for this account yet.")
    return JSONResponse({"profile": profile_payload(profile)})
