"""
Tests for the line diff engine.
"""

from collections import Counter

import pytest

from resume.diff import DiffType, compute_line_diff, diff_summary, split_lines


def _reconstruct(segments, side):
    keep = {DiffType.UNCHANGED, side}
    return [s.value for s in segments if s.type in keep]


def _flip(segments):
    swap = {DiffType.ADDED: DiffType.REMOVED, DiffType.REMOVED: DiffType.ADDED}
    return [(swap.get(s.type, s.type), s.value) for s in segments]


@pytest.mark.unit
def test_identical_texts_are_all_unchanged():
    text = "Alpha\nBeta\nGamma"
    segments = compute_line_diff(text, text)

    assert [s.type for s in segments] == [DiffType.UNCHANGED] * 3
    assert [s.value for s in segments] == ["Alpha", "Beta", "Gamma"]


@pytest.mark.unit
def test_appended_line():
    segments = compute_line_diff("Alpha\nBeta", "Alpha\nBeta\nGamma")

    assert [s.to_dict() for s in segments] == [
        {"type": "unchanged", "value": "Alpha"},
        {"type": "unchanged", "value": "Beta"},
        {"type": "added", "value": "Gamma"},
    ]


@pytest.mark.unit
def test_replaced_line_emits_removal_before_addition():
    segments = compute_line_diff("Alpha\nBeta\nGamma", "Alpha\nDelta\nGamma")

    assert [(s.type, s.value) for s in segments] == [
        (DiffType.UNCHANGED, "Alpha"),
        (DiffType.REMOVED, "Beta"),
        (DiffType.ADDED, "Delta"),
        (DiffType.UNCHANGED, "Gamma"),
    ]


@pytest.mark.unit
def test_empty_inputs_are_one_empty_line():
    segments = compute_line_diff("", "")
    assert [(s.type, s.value) for s in segments] == [(DiffType.UNCHANGED, "")]

    segments = compute_line_diff("", "Alpha")
    assert [(s.type, s.value) for s in segments] == [
        (DiffType.REMOVED, ""),
        (DiffType.ADDED, "Alpha"),
    ]


@pytest.mark.unit
def test_crlf_and_trailing_whitespace_are_ignored():
    segments = compute_line_diff("Alpha  \r\nBeta\t\r\n", "Alpha\nBeta\n")

    assert all(s.type == DiffType.UNCHANGED for s in segments)
    assert [s.value for s in segments] == ["Alpha", "Beta", ""]


@pytest.mark.unit
def test_leading_whitespace_is_significant():
    segments = compute_line_diff("  Alpha", "Alpha")
    assert diff_summary(segments) == {"unchanged": 0, "added": 1, "removed": 1}


@pytest.mark.unit
@pytest.mark.parametrize("before,after", [
    ("a\nb\nc", "a\nx\nc\nd"),
    ("one\ntwo\nthree\nfour", "zero\ntwo\nfour\nfive"),
    ("", "a\nb"),
    ("x\ny\nz", ""),
    ("a\na\nb\na", "b\na\na"),
])
def test_segments_reconstruct_both_inputs(before, after):
    segments = compute_line_diff(before, after)

    assert _reconstruct(segments, DiffType.REMOVED) == split_lines(before)
    assert _reconstruct(segments, DiffType.ADDED) == split_lines(after)


@pytest.mark.unit
def test_unchanged_count_is_the_lcs_length():
    # LCS of (a b c b d a b) and (b d c a b a) has length 4
    before = "\n".join("abcbdab")
    after = "\n".join("bdcaba")
    summary = diff_summary(compute_line_diff(before, after))

    assert summary["unchanged"] == 4
    assert summary["removed"] == 7 - 4
    assert summary["added"] == 6 - 4


@pytest.mark.unit
def test_swap_is_exact_mirror_for_pure_insertions():
    before = "Alpha\nGamma"
    after = "Alpha\nBeta\nGamma\nDelta"

    forward = compute_line_diff(before, after)
    backward = compute_line_diff(after, before)

    assert _flip(forward) == [(s.type, s.value) for s in backward]


@pytest.mark.unit
def test_swap_mirrors_change_counts():
    before = "a\nb\nc\nd"
    after = "b\nx\nd\ny"

    forward = compute_line_diff(before, after)
    backward = compute_line_diff(after, before)

    assert Counter(_flip(forward)) == Counter((s.type, s.value) for s in backward)


@pytest.mark.unit
def test_diff_summary_counts_every_type():
    segments = compute_line_diff("a\nb", "b\nc")
    assert diff_summary(segments) == {"unchanged": 1, "added": 1, "removed": 1}
    assert diff_summary([]) == {"unchanged": 0, "added": 0, "removed": 0}
