from sentiment_board.input_collector import (
    FILE_UPLOAD_SOURCE,
    SAMPLE_ENTRIES,
    InputCollector,
    decode_upload,
)
from sentiment_board.models import AnalysisRequestItem, Entry


def test_starts_with_one_blank_entry():
    c = InputCollector()
    assert len(c) == 1
    assert c.entries[0].text == ""
    assert c.valid_submission_set() == []


def test_add_entry_inherits_last_source():
    c = InputCollector([Entry("a", "Survey")])
    added = c.add_entry()
    assert added.text == ""
    assert added.source == "Survey"
    assert c.entries[-1] is added


def test_update_entry_merges_fields():
    c = InputCollector([Entry("a", "Survey")])
    entry_id = c.entries[0].id
    assert c.update_entry(entry_id, text="changed")
    assert c.entries[0].text == "changed"
    assert c.entries[0].source == "Survey"


def test_update_unknown_entry_is_noop():
    c = InputCollector([Entry("a", "Survey")])
    assert c.update_entry("missing", text="x") is False
    assert c.entries[0].text == "a"


def test_cannot_remove_last_entry():
    c = InputCollector()
    only = c.entries[0].id
    assert c.remove_entry(only) is False
    assert len(c) == 1


def test_remove_entry():
    c = InputCollector([Entry("a"), Entry("b")])
    assert c.remove_entry(c.entries[0].id)
    assert [e.text for e in c.entries] == ["b"]


def test_paste_expand_replaces_in_place():
    before, target, after = Entry("first", "X"), Entry("", "Tweets"), Entry("last", "Y")
    c = InputCollector([before, target, after])

    assert c.paste_expand(target.id, "one\ntwo\n\nthree\n")

    entries = c.entries
    assert [e.text for e in entries] == ["first", "one", "two", "three", "last"]
    assert [e.source for e in entries[1:4]] == ["Tweets"] * 3
    assert entries[0] is before and entries[-1] is after
    assert target.id not in {e.id for e in entries}


def test_single_line_paste_not_intercepted():
    c = InputCollector([Entry("", "S")])
    assert c.paste_expand(c.entries[0].id, "just one line\n\n") is False
    assert len(c) == 1


def test_paste_handles_crlf():
    c = InputCollector()
    c.paste_expand(c.entries[0].id, "a\r\nb\r\n")
    assert [e.text for e in c.entries] == ["a", "b"]


def test_load_from_file_skips_blank_lines():
    c = InputCollector()
    assert c.load_from_file("line1\nline2\n\nline3", "data.txt") == 3
    assert [e.text for e in c.entries] == ["line1", "line2", "line3"]
    assert all(e.source == "data.txt" for e in c.entries)


def test_load_from_file_fallback_source():
    c = InputCollector()
    c.load_from_file("hello", None)
    assert c.entries[0].source == FILE_UPLOAD_SOURCE


def test_load_from_empty_file_keeps_entries():
    c = InputCollector([Entry("keep", "me")])
    assert c.load_from_file("\n   \n", "empty.txt") == 0
    assert [e.text for e in c.entries] == ["keep"]


def test_load_samples_and_reset():
    c = InputCollector()
    c.load_samples()
    assert len(c) == len(SAMPLE_ENTRIES)
    c.reset()
    assert len(c) == 1 and c.entries[0].text == ""


def test_valid_submission_set_excludes_blank():
    c = InputCollector([Entry("a", "s1"), Entry("   ", "s2"), Entry("b", "s3")])
    assert c.valid_submission_set() == [
        AnalysisRequestItem("a", "s1"),
        AnalysisRequestItem("b", "s3"),
    ]
    assert c.has_content()


def test_decode_upload_strips_bom():
    assert decode_upload("\ufeffhi".encode("utf-8")) == "hi"
