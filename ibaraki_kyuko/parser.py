from __future__ import annotations

import logging
import re
from functools import reduce
from typing import Iterable, List, Optional, Tuple

from bs4 import BeautifulSoup

from .models import UNKNOWN_DATE, CancellationRecord, Marker, Paragraph
from .utils import WHITESPACE, split_words, strip_whitespace, to_half_width, trim

# "1/6" or "1/6(火)" at the start of a normalized paragraph
DATE_REGEX = re.compile(r"^([0-9]{1,2}/[0-9]{1,2}(?:\(.\))?)")
DIGIT_REGEX = re.compile(r"[0-9]")
ARROW_REGEX = re.compile(f"[{WHITESPACE}]*(?:⇒|→|=>|->)[{WHITESPACE}]*")
MARKER_REGEX = re.compile(f"^([{Marker.symbols()}])")

# Date-looking paragraphs mentioning a schedule (日程) or a topic (について)
# are links or descriptions, not date headings.
NOT_DATE_WORDS = ("日程", "について")
PERIOD_WORDS = ("限", "コマ")
ARROW_JOINER = "⇒"


def split_paragraphs(html: str) -> List[Paragraph]:
    if not html or not html.strip():
        return []
    soup = BeautifulSoup(html, "lxml")
    return [Paragraph(text=trim(p.get_text()), has_mark=p.find("mark") is not None) for p in soup.find_all("p")]


def _match_date(normalized: str) -> Optional[str]:
    match = DATE_REGEX.match(normalized)
    return match.group(1) if match else None


def _date_line(paragraph: Paragraph) -> Optional[str]:
    """Return the date a heading paragraph announces, or None if it is not one."""
    normalized = to_half_width(paragraph.text)
    date_text = _match_date(normalized)
    is_description = any(word in normalized for word in NOT_DATE_WORDS)
    if not paragraph.has_mark and (date_text is None or is_description):
        return None
    if date_text is not None:
        return date_text
    return strip_whitespace(normalized)


def _is_period(token: str) -> bool:
    # Permissive on purpose: "3限", "1・2限", "空きコマ". A subject that carries a
    # digit in the second slot (course codes) is taken as a period as well.
    return bool(DIGIT_REGEX.search(token)) or any(word in token for word in PERIOD_WORDS)


def _split_subject(subject: str) -> Tuple[Optional[str], Optional[str]]:
    segments = ARROW_REGEX.split(subject)
    if len(segments) < 2:
        return None, None
    subject_from = segments[0]
    subject_to = ARROW_JOINER.join(segments[1:])
    if not subject_from or not subject_to:
        return None, None
    return subject_from, subject_to


def build_record(raw_text: str, current_date: str) -> Optional[CancellationRecord]:
    match = MARKER_REGEX.match(raw_text)
    if not match:
        return None
    symbol = match.group(1)
    content = to_half_width(trim(raw_text[len(symbol):]))
    parts = split_words(content)

    target_class = parts[0] if parts else ""
    period = ""
    subject_start = 1
    if len(parts) > 1 and _is_period(parts[1]):
        period = parts[1]
        subject_start = 2
    subject = " ".join(parts[subject_start:])
    subject_from, subject_to = _split_subject(subject)

    return CancellationRecord(
        date=current_date or UNKNOWN_DATE,
        kind=Marker.kind_for(symbol),
        symbol=symbol,
        target_class=target_class,
        period=period,
        subject=subject,
        raw_text=symbol + content,
        subject_from=subject_from,
        subject_to=subject_to,
    )


def classify_paragraph(paragraph: Paragraph, current_date: str) -> Tuple[str, Optional[CancellationRecord]]:
    """Single step of the parse: (paragraph, date so far) -> (new date, record or None)."""
    date_text = _date_line(paragraph)
    if date_text is not None:
        return date_text, None
    record = build_record(paragraph.text, current_date)
    if record is None:
        logging.debug("Ignoring paragraph %r", paragraph.text[:40])
    return current_date, record


def _step(
    acc: Tuple[str, List[CancellationRecord]], paragraph: Paragraph
) -> Tuple[str, List[CancellationRecord]]:
    current_date, records = acc
    new_date, record = classify_paragraph(paragraph, current_date)
    if record is not None:
        records.append(record)
    return new_date, records


def parse_paragraphs(paragraphs: Iterable[Paragraph]) -> List[CancellationRecord]:
    _, records = reduce(_step, paragraphs, ("", []))
    return records


def parse_cancellation_html(html: str) -> List[CancellationRecord]:
    paragraphs = split_paragraphs(html)
    records = parse_paragraphs(paragraphs)
    dates = sum(1 for paragraph in paragraphs if _date_line(paragraph) is not None)
    logging.info("Parsed %d records under %d date lines (%d paragraphs)", len(records), dates, len(paragraphs))
    return records
