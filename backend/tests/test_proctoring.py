# backend/tests/test_proctoring.py
from services.proctoring import append_events


def test_trims_to_newest_but_keeps_counting():
    doc = {"counts": {"heartbeat": 3}, "events": [{"atIso": "old", "type": "heartbeat", "details": {}}] * 3}
    out = append_events(doc, [{"type": "heartbeat"}, {"type": "paste"}], cap=4, at_iso="2024-01-01T00:00:00Z")

    assert len(out["events"]) == 4
    assert out["events"][-1] == {"atIso": "2024-01-01T00:00:00Z", "type": "paste", "details": {}}
    assert out["counts"] == {"heartbeat": 4, "paste": 1}
    # input untouched
    assert len(doc["events"]) == 3 and doc["counts"] == {"heartbeat": 3}


def test_empty_document():
    out = append_events(None, [{"type": "cut"}], cap=4000, at_iso="t")
    assert out == {"counts": {"cut": 1}, "events": [{"atIso": "t", "type": "cut", "details": {}}]}


def test_non_object_details_are_wrapped():
    out = append_events(None, [{"type": "copy", "details": "abc"}, {"type": "cut", "details": None}], cap=10, at_iso="t")
    assert [e["details"] for e in out["events"]] == [{"value": "abc"}, {}]
