"""
Review preview codec.

A review's structured form fields are stored as one flat `preview` string:

    Goals Achieved: Finished the report

    Metastrategic Reflection: Used timeboxing

    Extrapolate: Need more breaks

Each template defines its label set once, as data, and both encode and
decode read it from there. Values longer than the template's preview length
are truncated with a trailing ellipsis, so decoding recovers only what was
encoded. Decoding never raises.

Encoder output decodes back to exactly the values that were encoded,
including line breaks and surrounding whitespace, unless a value itself
contains a blank line followed by the next label. Hand-written previews that
do not follow the encoder layout are decoded leniently, one line at a time.
"""

import logging
import re
from dataclasses import dataclass
from functools import lru_cache
from typing import Any, Dict, Mapping, Optional, Tuple

logger = logging.getLogger(__name__)

ELLIPSIS = "..."
SECTION_SEPARATOR = "\n\n"


@dataclass(frozen=True)
class ReviewField:
    """One labeled section; the label is the literal text including its colon."""
    key: str
    label: str


@dataclass(frozen=True)
class ReviewTemplate:
    """Label set and truncation length for one review type."""
    review_type: str
    fields: Tuple[ReviewField, ...]
    preview_length: int
    version: int = 1

    @property
    def keys(self) -> Tuple[str, ...]:
        return tuple(f.key for f in self.fields)

    @property
    def labels(self) -> Tuple[str, ...]:
        return tuple(f.label for f in self.fields)

    def empty(self) -> Dict[str, str]:
        return {f.key: "" for f in self.fields}


SESSION_TEMPLATE = ReviewTemplate(
    review_type="session",
    fields=(
        ReviewField("goalsAchieved", "Goals Achieved:"),
        ReviewField("metastrategicReflection", "Metastrategic Reflection:"),
        ReviewField("extrapolate", "Extrapolate:"),
    ),
    preview_length=50,
)

DAILY_TEMPLATE = ReviewTemplate(
    review_type="daily",
    fields=(
        ReviewField("achievements", "Achievements:"),
        ReviewField("insights", "Insights:"),
        ReviewField("tomorrow", "Tomorrow:"),
    ),
    preview_length=60,
)

EXPERIENTIAL_TEMPLATE = ReviewTemplate(
    review_type="experiential",
    fields=(
        ReviewField("experience", "Experience:"),
        ReviewField("habits", "Gained insight:"),
        ReviewField("potentialSolutions", "Experiment:"),
    ),
    preview_length=100,
)

TEMPLATES: Dict[str, ReviewTemplate] = {
    t.review_type: t for t in (SESSION_TEMPLATE, DAILY_TEMPLATE, EXPERIENTIAL_TEMPLATE)
}


def truncate(text: Optional[str], limit: int) -> str:
    """First `limit` characters, with an ellipsis appended when cut."""
    text = text or ""
    if len(text) > limit:
        return text[:limit] + ELLIPSIS
    return text


def encode(fields: Mapping[str, Any], template: ReviewTemplate = SESSION_TEMPLATE) -> str:
    """Pack form fields into a preview string, one labeled section per field."""
    sections = []
    for field in template.fields:
        value = fields.get(field.key)
        value = truncate("" if value is None else str(value), template.preview_length)
        sections.append(f"{field.label} {value}" if value else field.label)
    return SECTION_SEPARATOR.join(sections)


@lru_cache(maxsize=None)
def _encoded_pattern(template: ReviewTemplate) -> "re.Pattern":
    # Label, then optionally one space and the value, sections joined by the separator
    sections = [re.escape(label) + r"(?: ([\s\S]*?))?" for label in template.labels]
    return re.compile(re.escape(SECTION_SEPARATOR).join(sections) + r"\Z")


def _label_at_start(line: str, template: ReviewTemplate) -> Optional[ReviewField]:
    # Longest label first so one label can never shadow a longer one
    for field in sorted(template.fields, key=lambda f: len(f.label), reverse=True):
        if line.startswith(field.label):
            return field
    return None


def _fallback_pattern(field: ReviewField, template: ReviewTemplate) -> "re.Pattern":
    others = [re.escape(label) for label in template.labels if label != field.label]
    stop = rf"(?=\s*(?:{'|'.join(others)})|$)" if others else r"$"
    return re.compile(re.escape(field.label) + r"\s*([\s\S]*?)" + stop)


def decode(preview: Any, template: ReviewTemplate = SESSION_TEMPLATE) -> Dict[str, str]:
    """
    Unpack a preview string into the template's fields.

    A preview in the encoder layout is split on its labels and the values are
    returned untouched. Anything else goes through the lenient line scan.
    Anything unrecognised decodes to empty strings.
    """
    result = template.empty()
    if not isinstance(preview, str) or not preview:
        return result

    match = _encoded_pattern(template).match(preview)
    if match:
        return {key: value or "" for key, value in zip(template.keys, match.groups())}

    return _decode_lenient(preview, template, result)


def _decode_lenient(preview: str, template: ReviewTemplate, result: Dict[str, str]) -> Dict[str, str]:
    """
    Line scan for hand-written previews.

    A line starting with a label opens that section and keeps whatever follows
    the label; later non-empty lines are appended to the open section with a
    space. Labels the scan did not find are then searched anywhere in the
    text, capturing up to the next known label.
    """
    found = set()
    current: Optional[str] = None
    for raw_line in preview.splitlines():
        line = raw_line.strip()
        if not line:
            continue

        field = _label_at_start(line, template)
        if field is not None:
            current = field.key
            found.add(current)
            result[current] = line[len(field.label):].strip()
        elif current is not None:
            result[current] = f"{result[current]} {line}".strip()

    for field in template.fields:
        if field.key in found:
            continue
        match = _fallback_pattern(field, template).search(preview)
        if match:
            result[field.key] = match.group(1).strip()

    return result


def template_for(review_type: Optional[str]) -> Optional[ReviewTemplate]:
    return TEMPLATES.get(review_type) if review_type else None


def encode_for(review_type: str, fields: Mapping[str, Any]) -> str:
    """Encode with the template registered for a review type (KeyError if none)."""
    return encode(fields, TEMPLATES[review_type])


def decode_for(review_type: Optional[str], preview: Any) -> Dict[str, str]:
    """Decode with the template of a review type; types without one decode to {}."""
    template = template_for(review_type)
    if template is None:
        logger.debug(f"No preview template for review type {review_type!r}")
        return {}
    return decode(preview, template)
