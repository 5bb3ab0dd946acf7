"""
MedAI Backend — Content Entity Schemas
========================================

What:  Pydantic models describing every record stored in the backing store
       (faculty, research, programs, applications, news, events) and the
       transient contact form submission.
Why:   One declarative contract per entity: required fields, types and
       acceptable value sets, shared by the loaders and the OpenAPI docs.
How:   Models are strict (no "1" → 1, no "true" → True). The only normalization
       allowed is ISO-8601 string → timezone-aware datetime and string →
       literal value set. Unknown keys are ignored so content files can gain
       fields before the code knows about them. Instances are frozen.

JSON keys are camelCase (researchAreas, publishDate); attribute names are
snake_case. Serialize with `model_dump(mode="json", by_alias=True)`.
"""

from datetime import datetime, timezone
from typing import Annotated, List, Literal, Optional

from pydantic import (
    AfterValidator,
    BaseModel,
    ConfigDict,
    EmailStr,
    Field,
    StringConstraints,
)
from pydantic.alias_generators import to_camel

_CURRENT_YEAR = datetime.now(timezone.utc).year


def _assume_utc(value: datetime) -> datetime:
    """Naive timestamps in content files are treated as UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


NonEmptyStr = Annotated[str, StringConstraints(min_length=1)]
HttpUrlStr = Annotated[str, StringConstraints(pattern=r"^https?://\S+$")]
ContentDatetime = Annotated[datetime, Field(strict=False), AfterValidator(_assume_utc)]


class ContentModel(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        strict=True,
        extra="ignore",
        frozen=True,
    )


# ══════════════════════════════════════════════════════════════════════════
# Faculty
# ══════════════════════════════════════════════════════════════════════════


class SocialLinks(ContentModel):
    twitter: Optional[HttpUrlStr] = None
    linkedin: Optional[HttpUrlStr] = None
    github: Optional[HttpUrlStr] = None
    website: Optional[HttpUrlStr] = None


class Education(ContentModel):
    degree: NonEmptyStr
    institution: NonEmptyStr
    year: int = Field(ge=1900, le=_CURRENT_YEAR + 10)
    field: Optional[str] = None


class Publication(ContentModel):
    title: NonEmptyStr
    authors: List[str] = Field(min_length=1)
    journal: NonEmptyStr
    year: int = Field(ge=1900, le=_CURRENT_YEAR + 1)
    doi: Optional[str] = None
    url: Optional[HttpUrlStr] = None


class FacultyMember(ContentModel):
    """
    What:  A faculty profile.
    Who:   Served by GET /api/faculty and GET /api/faculty/{id}; indexed by search.
    """

    id: NonEmptyStr
    name: NonEmptyStr
    title: NonEmptyStr
    department: NonEmptyStr
    email: EmailStr
    phone: Optional[str] = None
    office: Optional[str] = None
    bio: NonEmptyStr
    research_areas: List[str] = Field(min_length=1)
    education: List[Education]
    publications: List[Publication]
    profile_image: NonEmptyStr
    social_links: Optional[SocialLinks] = None
    is_active: bool


# ══════════════════════════════════════════════════════════════════════════
# Research
# ══════════════════════════════════════════════════════════════════════════


class Dataset(ContentModel):
    name: NonEmptyStr
    description: NonEmptyStr
    size: NonEmptyStr
    format: NonEmptyStr
    access_level: Literal["public", "restricted", "private"]
    download_url: Optional[HttpUrlStr] = None


class ResearchProject(ContentModel):
    id: NonEmptyStr
    title: NonEmptyStr
    description: NonEmptyStr
    status: Literal["active", "completed", "planned"]
    start_date: ContentDatetime
    end_date: Optional[ContentDatetime] = None
    principal_investigator: NonEmptyStr
    collaborators: List[str]
    funding_source: Optional[str] = None
    tags: List[str]
    publications: Optional[List[Publication]] = None
    datasets: Optional[List[Dataset]] = None
    images: List[str]
    featured: bool


# ══════════════════════════════════════════════════════════════════════════
# Programs & Applications
# ══════════════════════════════════════════════════════════════════════════


class CourseSchedule(ContentModel):
    days: List[str]
    time: str
    location: Optional[str] = None


class Course(ContentModel):
    id: NonEmptyStr
    code: NonEmptyStr
    title: NonEmptyStr
    description: NonEmptyStr
    credits: int = Field(gt=0)
    prerequisites: List[str]
    instructor: Optional[str] = None
    schedule: Optional[CourseSchedule] = None
    semester: Literal["fall", "spring", "summer", "year-round"]
    is_required: bool
    syllabus: Optional[str] = None


class Tuition(ContentModel):
    # JSON numbers like 12500 arrive as int; strict float still accepts them
    amount: float = Field(gt=0)
    period: Literal["semester", "year", "total"]
    currency: NonEmptyStr


class Program(ContentModel):
    id: NonEmptyStr
    title: NonEmptyStr
    type: Literal["degree", "certificate", "continuing-education"]
    level: Literal["undergraduate", "graduate", "doctoral", "professional"]
    description: NonEmptyStr
    duration: NonEmptyStr
    format: Literal["on-campus", "online", "hybrid"]
    requirements: List[str]
    prerequisites: List[str]
    courses: List[Course]
    application_deadline: Optional[ContentDatetime] = None
    application_url: Optional[str] = None
    tuition: Optional[Tuition] = None
    featured: bool
    is_active: bool
    image: Optional[str] = None
    brochure_url: Optional[str] = None


class ApplicationRequirement(ContentModel):
    id: NonEmptyStr
    title: NonEmptyStr
    description: NonEmptyStr
    required: bool
    documents: List[str]


class ApplicationStep(ContentModel):
    id: NonEmptyStr
    step: int = Field(gt=0)
    title: NonEmptyStr
    description: NonEmptyStr
    estimated_time: Optional[str] = None
    url: Optional[str] = None


class ApplicationDeadline(ContentModel):
    id: NonEmptyStr
    type: Literal["application", "documents", "interview", "decision"]
    date: ContentDatetime
    description: NonEmptyStr


class ApplicationContact(ContentModel):
    email: NonEmptyStr
    phone: Optional[str] = None
    office: Optional[str] = None


class FAQ(ContentModel):
    id: NonEmptyStr
    question: NonEmptyStr
    answer: NonEmptyStr
    category: Optional[str] = None


class ApplicationInfo(ContentModel):
    """
    What:  Admissions details for one program.
    Note:  program_id is a foreign key into Program.id and is NOT unique;
           a program may have several application entries.
    """

    id: NonEmptyStr
    program_id: NonEmptyStr
    requirements: List[ApplicationRequirement]
    process: List[ApplicationStep]
    deadlines: List[ApplicationDeadline]
    contact_info: ApplicationContact
    faq: List[FAQ]


# ══════════════════════════════════════════════════════════════════════════
# News & Events
# ══════════════════════════════════════════════════════════════════════════


class NewsArticle(ContentModel):
    id: NonEmptyStr
    title: NonEmptyStr
    slug: NonEmptyStr
    excerpt: NonEmptyStr
    content: NonEmptyStr
    author: NonEmptyStr
    publish_date: ContentDatetime
    last_modified: ContentDatetime
    tags: List[str]
    featured_image: Optional[str] = None
    featured: bool


class Event(ContentModel):
    id: NonEmptyStr
    title: NonEmptyStr
    description: NonEmptyStr
    start_date: ContentDatetime
    end_date: Optional[ContentDatetime] = None
    location: NonEmptyStr
    event_type: Literal["seminar", "conference", "workshop", "social"]
    registration_url: Optional[HttpUrlStr] = None
    capacity: Optional[int] = Field(default=None, gt=0)
    speakers: Optional[List[str]] = None
    tags: List[str]


# ══════════════════════════════════════════════════════════════════════════
# Contact Form (transient, never persisted)
# ══════════════════════════════════════════════════════════════════════════


class ContactFormData(ContentModel):
    """
    What:  A single contact form submission.
    When:  Exists only while POST /api/contact is being handled.
    """

    name: Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=100)]
    email: EmailStr
    subject: Annotated[str, StringConstraints(strip_whitespace=True, min_length=1, max_length=200)]
    message: Annotated[str, StringConstraints(strip_whitespace=True, min_length=10, max_length=5000)]
    organization: Optional[Annotated[str, StringConstraints(max_length=200)]] = None
    phone: Optional[Annotated[str, StringConstraints(max_length=20)]] = None
