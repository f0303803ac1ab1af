"""Tests for LCS alignment and edit scripts."""

import pytest

from lintstep.diffing.aligner import align
from lintstep.diffing.models import EditOp, OpKind


def kinds(script):
    return [op.kind for op in script]


class TestAlign:
    def test_identical_inputs_are_all_matches(self):
        script = align(["a\n", "b\n"], ["a\n", "b\n"])
        assert kinds(script) == [OpKind.MATCH, OpKind.MATCH]
        assert [op.old_pos for op in script] == [1, 2]

    def test_empty_inputs(self):
        assert align([], []) == []
        assert kinds(align([], ["x"])) == [OpKind.INSERT]
        assert kinds(align(["x"], [])) == [OpKind.DELETE]

    def test_single_change(self):
        script = align(["a\n", "b\n", "c\n"], ["a\n", "X\n", "c\n"])
        assert script[1] == EditOp(OpKind.CHANGE, old="b\n", new="X\n", old_pos=2)
        assert kinds(script) == [OpKind.MATCH, OpKind.CHANGE, OpKind.MATCH]

    def test_insertion_between_matches(self):
        script = align(["# magic\n", "# note\n"], ["# magic\n", "\n", "# note\n"])
        assert kinds(script) == [OpKind.MATCH, OpKind.INSERT, OpKind.MATCH]
        assert script[1].old_pos is None
        assert script[2].old_pos == 2

    def test_gap_pairs_changes_before_leftover_deletes(self):
        script = align(["a", "b", "c", "d"], ["a", "X", "d"])
        assert kinds(script) == [OpKind.MATCH, OpKind.CHANGE, OpKind.DELETE, OpKind.MATCH]
        assert [op.old_pos for op in script] == [1, 2, 3, 4]

    def test_gap_pairs_changes_before_leftover_inserts(self):
        script = align(["a", "b", "d"], ["a", "X", "Y", "d"])
        assert kinds(script) == [OpKind.MATCH, OpKind.CHANGE, OpKind.INSERT, OpKind.MATCH]

    def test_every_element_appears_once(self):
        old = list("kitten")
        new = list("sitting")
        script = align(old, new)
        assert [op.old for op in script if op.consumes_original] == old
        assert [op.new for op in script if op.kind is not OpKind.DELETE] == new

    def test_strings_align_by_character(self):
        script = align('x = "a"', "x = 'a'")
        changed = [op for op in script if op.kind is not OpKind.MATCH]
        assert [(op.old, op.new) for op in changed] == [('"', "'"), ('"', "'")]

    def test_deterministic(self):
        old = ["a\n", "b\n", "a\n", "c\n"]
        new = ["b\n", "a\n", "c\n", "a\n"]
        assert align(old, new) == align(old, new)

    def test_rejects_non_sequences(self):
        with pytest.raises(TypeError):
            align(iter(["a"]), ["a"])
        with pytest.raises(TypeError):
            align(["a"], None)

