from datetime import date

from taskboard.core.marker import format_marker, splice_marker, with_marker


def test_format_marker_uses_day_month_year():
    assert format_marker(date(2024, 3, 5)) == "[Added on: 05 Mar 2024]"


def test_with_marker_prefixes_description():
    assert with_marker(date(2024, 12, 31), "Buy milk") == "[Added on: 31 Dec 2024] Buy milk"


def test_splice_keeps_original_marker():
    old = "[Added on: 05 Mar 2024] Buy milk"
    assert splice_marker(old, "Buy oat milk") == "[Added on: 05 Mar 2024] Buy oat milk"


def test_splice_strips_marker_copied_into_new_text():
    old = "[Added on: 05 Mar 2024] Buy milk"
    new = "[Added on: 05 Mar 2024] Buy milk and bread"
    assert splice_marker(old, new) == "[Added on: 05 Mar 2024] Buy milk and bread"


def test_splice_only_strips_the_exact_original_marker():
    # Only the exact original marker is stripped.
    old = "[Added on: 05 Mar 2024] a"
    new = "[Added on: 01 Jan 2020] b"
    assert splice_marker(old, new) == "[Added on: 05 Mar 2024] [Added on: 01 Jan 2020] b"


def test_splice_without_marker_returns_new_text_untouched():
    assert splice_marker("plain text", "  new text ") == "  new text "


def test_repeated_splices_keep_a_single_marker():
    desc = "[Added on: 05 Mar 2024] Buy milk"
    for new in ("Buy bread", desc + " now", "Buy eggs"):
        desc = splice_marker(desc, new)
        assert desc.count("[Added on:") == 1
    assert desc == "[Added on: 05 Mar 2024] Buy eggs"


def test_splice_strips_every_copy_of_the_marker():
    old = "[Added on: 05 Mar 2024] a"
    new = "[Added on: 05 Mar 2024] b [Added on: 05 Mar 2024] c"
    assert splice_marker(old, new) == "[Added on: 05 Mar 2024] b  c"
