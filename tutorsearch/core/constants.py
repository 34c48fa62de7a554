# tutorsearch/core/constants.py
"""Fixed vocabularies shared by the search pipeline and the filters endpoint."""

from typing import Dict, List, Tuple

API_TITLE = "Tutor Search API"
API_VERSION = "0.1.0"
API_DESCRIPTION = "Geospatial faceted search over teacher profiles and job postings"

EARTH_RADIUS_M = 6_371_000.0

# Largest OFFSET a database accepts (signed 64-bit)
MAX_SQL_OFFSET = 2**63 - 1

# (label, min meters inclusive, max meters exclusive)
DISTANCE_BANDS: List[Tuple[str, int, int]] = [
    ("0-5 km", 0, 5000),
    ("5-10 km", 5000, 10000),
    ("10-15 km", 10000, 15000),
    ("15-25 km", 15000, 25000),
    ("25+ km", 25000, 100000),
]

# The filters endpoint advertises the open-ended band as 50 km.
DISTANCE_FILTER_OPTIONS: List[Dict[str, object]] = [
    {"label": "0-5 km", "value": 5000},
    {"label": "5-10 km", "value": 10000},
    {"label": "10-15 km", "value": 15000},
    {"label": "15-25 km", "value": 25000},
    {"label": "25+ km", "value": 50000},
]

URGENCY_PRIORITY: Dict[str, int] = {
    "immediate": 1,
    "within-week": 2,
    "within-month": 3,
    "flexible": 4,
}
URGENCY_DEFAULT_PRIORITY = 5

# name -> (min years inclusive, max years exclusive); None means unbounded
EXPERIENCE_BANDS: Dict[str, Tuple[int | None, int | None]] = {
    "beginner": (None, 2),
    "intermediate": (2, 5),
    "experienced": (5, 10),
    "expert": (10, None),
}

TEACHING_MODES = ["online", "offline", "both"]
# "both" is UI vocabulary, not a stored mode: a filter with this value is dropped.
TEACHING_MODE_ANY = "both"
GENDER_ANY = "any"

JOB_STATUS_ACTIVE = "active"

SUBJECTS = [
    "Mathematics",
    "Science",
    "English",
    "Hindi",
    "Social Studies",
    "Physics",
    "Chemistry",
    "Biology",
    "Computer Science",
    "Economics",
    "Accounting",
    "History",
    "Geography",
    "Political Science",
]

CLASS_LEVELS = [f"Class {n}" for n in range(1, 13)] + ["Undergraduate", "Postgraduate"]
