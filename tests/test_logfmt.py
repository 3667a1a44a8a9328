from __future__ import annotations

from pylaptime._logfmt import clip_for_log


def test_clip_for_log_truncates_long_strings() -> None:
    clipped = clip_for_log({"transponder": "x" * 600}, max_string=10)

    assert clipped["transponder"].startswith("x" * 10)
    assert "<truncated 590 chars>" in clipped["transponder"]


def test_clip_for_log_summarises_bytes_and_nesting() -> None:
    clipped = clip_for_log([b"\x00" * 32, {"n": 1, "ok": True}])

    assert clipped == ["<bytes:32b>", {"n": 1, "ok": True}]
