"""
MedAI Backend — Schema Validators
===================================

What:  One validation function per entity, turning a raw untyped record into
       its typed model or raising ValidationError for the FIRST bad field.
Why:   Loaders and the contact form need the same fail-fast contract regardless
       of how pydantic orders or groups its own errors.
How:   model_validate() the record; on failure keep only errors()[0] and render
       its location as a dotted path ("education.0.year").

Validators are pure: no I/O, no logging, no mutation of the input.
"""

from typing import Any, Callable, Dict, List, Type, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from app.exceptions import ValidationError
from app.schemas.content import (
    ApplicationInfo,
    ContactFormData,
    Event,
    FacultyMember,
    NewsArticle,
    Program,
    ResearchProject,
)

M = TypeVar("M", bound=BaseModel)


def _location(loc: tuple) -> str:
    return ".".join(str(part) for part in loc) or "<root>"


def validate_record(model: Type[M], data: Any, entity: str = "") -> M:
    """
    Validate one raw record against `model`.

    Raises:
        ValidationError: naming the first offending field. `context["issues"]`
            holds the full per-field breakdown for callers that need it
            (the contact form returns it to the client).
    """
    entity = entity or model.__name__
    if not isinstance(data, dict):
        raise ValidationError(
            message=f"{entity} record must be an object, got {type(data).__name__}",
            field="<root>",
        )
    try:
        return model.model_validate(data)
    except PydanticValidationError as e:
        issues = e.errors(include_url=False, include_input=False)
        first = issues[0]
        field = _location(first["loc"])
        raise ValidationError(
            message=f"Invalid {entity}: field '{field}' {first['msg'].lower()}",
            field=field,
            context={
                "entity": entity,
                "issues": [
                    {"field": _location(issue["loc"]), "message": issue["msg"]}
                    for issue in issues
                ],
            },
        ) from None


def validate_faculty_member(data: Any) -> FacultyMember:
    return validate_record(FacultyMember, data, "faculty member")


def validate_research_project(data: Any) -> ResearchProject:
    return validate_record(ResearchProject, data, "research project")


def validate_program(data: Any) -> Program:
    return validate_record(Program, data, "program")


def validate_application_info(data: Any) -> ApplicationInfo:
    return validate_record(ApplicationInfo, data, "application info")


def validate_news_article(data: Any) -> NewsArticle:
    return validate_record(NewsArticle, data, "news article")


def validate_event(data: Any) -> Event:
    return validate_record(Event, data, "event")


def validate_contact_form(data: Any) -> ContactFormData:
    return validate_record(ContactFormData, data, "contact form")


def validate_collection(
    records: List[Any],
    validator: Callable[[Any], M],
) -> List[M]:
    """
    Validate every record in order; the first failure aborts the whole list.

    The raised ValidationError gets the record's position added to its
    context and message so the diagnostic points at the offending entry.
    """
    validated: List[M] = []
    for index, record in enumerate(records):
        try:
            validated.append(validator(record))
        except ValidationError as e:
            record_id = record.get("id") if isinstance(record, dict) else None
            context: Dict[str, Any] = {**e.context, "index": index}
            if record_id is not None:
                context["record_id"] = record_id
            label = f"record {index}" if record_id is None else f"record {index} (id={record_id!r})"
            raise ValidationError(
                message=f"{label}: {e.message}",
                field=e.field,
                context=context,
            ) from None
    return validated
