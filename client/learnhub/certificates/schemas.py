"""Pydantic schemas for certificates."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict

from learnhub.courses.schemas import CourseRef, UserRef


class CertificateResponse(BaseModel):
    """Certificate of completion."""

    model_config = ConfigDict(extra="ignore")

    id: int
    certificate_id: str
    student: UserRef | None = None
    course: CourseRef | None = None
    issued_at: datetime | None = None
    pdf_file: str | None = None

    def matches(self, search: str) -> bool:
        """Case-insensitive search over ID, course title and student name."""
        needle = search.strip().lower()
        if not needle:
            return True
        haystack = [self.certificate_id]
        if self.course is not None:
            haystack.append(self.course.title)
        if self.student is not None:
            haystack.extend([self.student.first_name, self.student.last_name])
        return any(needle in value.lower() for value in haystack if value)


class VerificationResult(BaseModel):
    """Outcome of a certificate lookup; never an exception."""

    model_config = ConfigDict(extra="ignore")

    valid: bool
    certificate: CertificateResponse | None = None
    error: str | None = None
    certificate_id: str | None = None
