import logging

from ibaraki_kyuko.models import Paragraph
from ibaraki_kyuko.parser import (
    build_record,
    classify_paragraph,
    parse_cancellation_html,
    parse_paragraphs,
    split_paragraphs,
)


def _html(*paragraphs: str) -> str:
    return "".join(f"<p>{p}</p>" for p in paragraphs)


def test_parse_bulletin_fixture(bulletin_html):
    records = parse_cancellation_html(bulletin_html)
    assert [(r.date, r.symbol, r.target_class, r.period) for r in records] == [
        ("1/6(火)", "◉", "1-A", "3限"),
        ("1/6(火)", "◎", "3-C", "1・2限"),
        ("1/6(火)", "☆", "2-B", ""),
        ("1/7(水)", "◇", "4-M", "空きコマ"),
        ("1/7(水)", "◉", "5-E", "7・8限"),
    ]
    assert [r.kind for r in records] == ["休講", "補講", "変更", "遠隔", "休講"]
    assert records[0].subject == "英語Ⅰ"
    assert records[0].raw_text == "◉1-A 3限 英語Ⅰ"


def test_substitution_is_split_on_arrow(bulletin_html):
    record = parse_cancellation_html(bulletin_html)[2]
    assert record.subject == "応用物理Ⅱ(山口)⇒物質工学実用数学(佐藤稔)"
    assert record.subject_from == "応用物理Ⅱ(山口)"
    assert record.subject_to == "物質工学実用数学(佐藤稔)"


def test_simple_cancellation_record():
    (record,) = parse_cancellation_html(_html("<mark>1/6(火)</mark>", "◉1-A 3限 English"))
    assert record.to_dict() == {
        "date": "1/6(火)",
        "kind": "休講",
        "symbol": "◉",
        "target_class": "1-A",
        "period": "3限",
        "subject": "English",
        "raw_text": "◉1-A 3限 English",
    }


def test_records_without_date_get_unknown_date():
    records = parse_cancellation_html(_html("◉1-A 3限 English", "◎2-B 4限 数学", "お知らせ"))
    assert [r.date for r in records] == ["date unknown", "date unknown"]


def test_schedule_link_is_not_a_date_line():
    records = parse_cancellation_html(
        _html("1/6(火)", "1/13(火)からの試験日程について", "◉1-A 3限 English")
    )
    assert records[0].date == "1/6(火)"


def test_regarding_text_is_not_a_date_line():
    records = parse_cancellation_html(_html("1/20(火)の授業について", "◉1-A 3限 English"))
    assert records[0].date == "date unknown"


def test_date_pattern_keeps_only_matched_part():
    records = parse_cancellation_html(_html("１／７（水）以下の通り", "◉1-A 3限 English"))
    assert records[0].date == "1/7(水)"


def test_date_without_weekday():
    records = parse_cancellation_html(_html("12/25", "◉1-A 3限 English"))
    assert records[0].date == "12/25"


def test_marked_date_without_pattern_uses_whole_text():
    records = parse_cancellation_html(_html("<mark>1月 8日 （木）</mark>", "◉1-A 3限 English"))
    assert records[0].date == "1月8日(木)"


def test_marked_paragraph_is_a_date_even_with_schedule_word():
    records = parse_cancellation_html(_html("<mark>1/9(金)</mark> 日程", "◉1-A 3限 English"))
    assert records[0].date == "1/9(金)"


def test_later_date_supersedes_earlier():
    records = parse_cancellation_html(
        _html("1/6(火)", "◉1-A 3限 English", "1/7(水)", "◉1-B 2限 数学")
    )
    assert [r.date for r in records] == ["1/6(火)", "1/7(水)"]


def test_period_tokens():
    cases = {
        "◎3-C 1・2限 数学": "1・2限",
        "◉5-E 7・8限 実験": "7・8限",
        "◇4-M 空きコマ 製図": "空きコマ",
        "◉1-A 3 English": "3",
    }
    for raw, period in cases.items():
        record = build_record(raw, "1/6(火)")
        assert record.period == period
        assert len(record.subject.split()) == 1


def test_second_token_without_period_hint_starts_subject():
    record = build_record("◉1-A 英語 演習", "")
    assert record.period == ""
    assert record.subject == "英語 演習"


def test_digit_in_second_token_is_taken_as_period():
    # known false positive for course codes
    record = build_record("◉1-A M101 Intro", "")
    assert record.period == "M101"
    assert record.subject == "Intro"


def test_marker_only_paragraph_yields_empty_fields():
    record = build_record("◉", "")
    assert record.target_class == ""
    assert record.period == ""
    assert record.subject == ""
    assert record.raw_text == "◉"
    assert record.date == "date unknown"


def test_class_only_paragraph():
    record = build_record("☆　２－Ｂ", "1/6(火)")
    assert record.target_class == "2-B"
    assert record.subject == ""
    assert record.subject_from is None
    assert record.raw_text == "☆2-B"


def test_multiple_arrows_are_rejoined():
    record = build_record("☆1-A 数学 → 英語 → 国語", "")
    assert record.subject_from == "数学"
    assert record.subject_to == "英語⇒国語"


def test_ascii_arrows():
    assert build_record("☆1-A 数学=>英語", "").subject_to == "英語"
    record = build_record("☆1-A 2限 Physics -> Chemistry", "")
    assert record.period == "2限"
    assert record.subject_from == "Physics"
    assert record.subject_to == "Chemistry"


def test_dangling_arrow_sets_neither_field():
    for raw in ("☆1-A 数学⇒", "☆1-A ⇒英語"):
        record = build_record(raw, "")
        assert record.subject_from is None
        assert record.subject_to is None


def test_subject_fields_present_together():
    raws = ["☆1-A 数学⇒英語", "◉1-A 3限 English", "☆1-A ⇒", "◎1-A a->b->c"]
    for raw in raws:
        record = build_record(raw, "")
        assert (record.subject_from is None) == (record.subject_to is None)


def test_non_marker_text_builds_no_record():
    assert build_record("★1-A 3限 English", "") is None
    assert build_record(" ◉1-A", "") is None


def test_ignored_paragraph_keeps_date():
    date, record = classify_paragraph(Paragraph("本日の連絡事項"), "1/6(火)")
    assert date == "1/6(火)"
    assert record is None


def test_date_paragraph_updates_date_without_record():
    date, record = classify_paragraph(Paragraph("１／８（木）"), "1/6(火)")
    assert date == "1/8(木)"
    assert record is None


def test_record_paragraph_keeps_date():
    date, record = classify_paragraph(Paragraph("◉1-A 3限 English"), "1/6(火)")
    assert date == "1/6(火)"
    assert record.date == "1/6(火)"


def test_records_follow_paragraph_order():
    paragraphs = [Paragraph(f"◉{i}-A {i}限 科目{i}") for i in range(1, 6)]
    records = parse_paragraphs(paragraphs)
    assert [r.target_class for r in records] == ["1-A", "2-A", "3-A", "4-A", "5-A"]


def test_each_parse_starts_without_date():
    parse_cancellation_html(_html("1/6(火)", "◉1-A 3限 English"))
    (record,) = parse_cancellation_html(_html("◉1-A 3限 English"))
    assert record.date == "date unknown"


def test_split_paragraphs_detects_mark_and_trims():
    paragraphs = split_paragraphs("<div><p>  <mark>1/6</mark>(火) </p><p>◉1-A <strong>3限</strong></p></div>")
    assert paragraphs == [Paragraph("1/6(火)", True), Paragraph("◉1-A 3限", False)]


def test_empty_html_yields_no_records():
    assert parse_cancellation_html("") == []
    assert parse_cancellation_html("   ") == []
    assert parse_cancellation_html("<div>no paragraphs</div>") == []


def test_leading_zero_width_no_break_space_is_trimmed():
    (record,) = parse_cancellation_html("<p>\ufeff◉1-A 3限 English</p>")
    assert record.kind == "休講"
    assert record.target_class == "1-A"
    assert record.raw_text == "◉1-A 3限 English"


def test_zero_width_no_break_space_separates_tokens():
    record = build_record("◎\ufeff2-B\ufeff4限\ufeff数学\ufeff⇒\ufeff英語\ufeff", "")
    assert record.target_class == "2-B"
    assert record.period == "4限"
    assert record.subject_from == "数学"
    assert record.subject_to == "英語"


def test_zero_width_no_break_space_before_date():
    records = parse_cancellation_html("<p>\ufeff1/6(火)</p><p>◉1-A 3限 English</p>")
    assert records[0].date == "1/6(火)"


def test_summary_logs_date_line_count(caplog):
    with caplog.at_level(logging.INFO):
        parse_cancellation_html(_html("1/6(火)", "◉1-A 3限 English", "<mark>1/7(水)</mark>", "以上"))
    assert "Parsed 1 records under 2 date lines (4 paragraphs)" in caplog.text
