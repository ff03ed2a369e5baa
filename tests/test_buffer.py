from __future__ import annotations

from pathlib import Path

import pytest

from ed_engine.buffer import Buffer, BufferValidationError, UndoTimeline


def make_buffer(*lines: str) -> Buffer:
    return Buffer.from_lines(lines or ("alpha", "beta", "gamma"))


def test_empty_buffer_has_zero_lines_but_one_address() -> None:
    buffer = Buffer()

    assert buffer.line_count() == 0
    assert buffer.last_line() == 1
    assert buffer.current_line() == 1
    assert tuple(buffer.read_range(1, 1)) == ()


def test_insert_and_delete_mark_buffer_modified() -> None:
    buffer = make_buffer()
    assert buffer.is_modified() is False

    buffer.insert_lines(0, ["zero"])
    buffer.delete_range(3, 4)

    assert buffer.lines() == ("zero", "alpha")
    assert buffer.is_modified() is True
    assert len(buffer.history) == 2


def test_delete_clamps_current_line() -> None:
    buffer = make_buffer()
    buffer.set_current_line(3)

    buffer.delete_range(2, 3)

    assert buffer.current_line() == 1


def test_out_of_range_edits_raise_validation_error() -> None:
    buffer = make_buffer()

    with pytest.raises(BufferValidationError):
        buffer.insert_lines(4, ["x"])
    with pytest.raises(BufferValidationError):
        buffer.delete_range(3, 2)
    with pytest.raises(BufferValidationError):
        buffer.set_current_line(4)


def test_search_directions_exclude_start_line() -> None:
    buffer = make_buffer("a1", "b", "a2")

    assert buffer.search_forward("a", 1) == 3
    assert buffer.search_forward("a", 3) is None
    assert buffer.search_backward("a", 3) == 1
    assert buffer.search_backward("a", 1) is None


def test_transaction_groups_edits_into_one_undo_entry() -> None:
    buffer = make_buffer()

    with buffer.transaction("edit"):
        buffer.delete_range(1, 1)
        buffer.insert_lines(2, ["delta"])

    assert buffer.lines() == ("beta", "gamma", "delta")
    assert len(buffer.history) == 1
    assert buffer.undo() is True
    assert buffer.lines() == ("alpha", "beta", "gamma")


def test_transaction_rolls_back_on_error() -> None:
    buffer = make_buffer()
    buffer.set_current_line(2)

    with pytest.raises(RuntimeError):
        with buffer.transaction("broken"):
            buffer.delete_range(1, 2)
            raise RuntimeError("boom")

    assert buffer.lines() == ("alpha", "beta", "gamma")
    assert buffer.current_line() == 2
    assert buffer.is_modified() is False
    assert len(buffer.history) == 0


def test_transaction_without_changes_records_nothing() -> None:
    buffer = make_buffer()

    with buffer.transaction("noop"):
        pass

    assert buffer.undo() is False


def test_undo_walks_history_back_to_start() -> None:
    buffer = make_buffer()
    buffer.delete_range(1, 1)
    buffer.delete_range(1, 1)

    assert buffer.undo() is True
    assert buffer.lines() == ("beta", "gamma")
    assert buffer.undo() is True
    assert buffer.lines() == ("alpha", "beta", "gamma")
    assert buffer.undo() is False


def test_undo_history_is_bounded() -> None:
    buffer = Buffer.from_lines(["a"], name="bounded")
    buffer.history = UndoTimeline(limit=2)
    for word in ("b", "c", "d"):
        buffer.insert_lines(buffer.line_count(), [word])

    assert len(buffer.history) == 2
    assert buffer.undo() and buffer.undo()
    assert buffer.lines() == ("a", "b")
    assert buffer.undo() is False


def test_failed_save_leaves_file_untouched(tmp_path: Path) -> None:
    target = tmp_path / "keep.txt"
    target.write_text("original\n")
    buffer = Buffer(encoding="ascii")
    buffer.insert_lines(0, ["café"])

    with pytest.raises(UnicodeEncodeError):
        buffer.save(str(target))

    assert target.read_text() == "original\n"
    assert buffer.is_modified() is True
    assert buffer.file_path() is None


def test_save_writes_text_and_clears_modified(tmp_path: Path) -> None:
    target = tmp_path / "out.txt"
    buffer = make_buffer("one", "two")
    buffer.insert_lines(2, ["three"])

    written = buffer.save(str(target))

    assert written == len("one\ntwo\nthree\n")
    assert target.read_text() == "one\ntwo\nthree\n"
    assert buffer.is_modified() is False
    assert buffer.file_path() == str(target)


def test_save_without_path_fails() -> None:
    with pytest.raises(BufferValidationError):
        make_buffer().save()


def test_from_file_loads_lines_and_positions_on_last(tmp_path: Path) -> None:
    source = tmp_path / "in.txt"
    source.write_text("a\nb\nc\n")

    buffer = Buffer.from_file(str(source))

    assert buffer.lines() == ("a", "b", "c")
    assert buffer.current_line() == 3
    assert buffer.file_path() == str(source)


def test_from_missing_file_is_empty(tmp_path: Path) -> None:
    buffer = Buffer.from_file(str(tmp_path / "missing.txt"))

    assert buffer.line_count() == 0
    assert buffer.file_path() == str(tmp_path / "missing.txt")
