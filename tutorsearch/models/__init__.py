from .job import Job
from .teacher import (
    ATTRIBUTE_CLASS_LEVEL,
    ATTRIBUTE_LANGUAGE,
    ATTRIBUTE_QUALIFICATION,
    ATTRIBUTE_TEACHING_MODE,
    Teacher,
    TeacherAttribute,
    TeacherSubject,
)

__all__ = [
    "ATTRIBUTE_CLASS_LEVEL",
    "ATTRIBUTE_LANGUAGE",
    "ATTRIBUTE_QUALIFICATION",
    "ATTRIBUTE_TEACHING_MODE",
    "Job",
    "Teacher",
    "TeacherAttribute",
    "TeacherSubject",
]
