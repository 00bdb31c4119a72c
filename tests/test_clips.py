import pytest

from editorcore.clips import (ClipManager, Clip, effective_name, is_default_name,
                              ERROR_MISSING_SOURCE, ERROR_NEGATIVE_START, ERROR_EMPTY_RANGE)


@pytest.fixture
def manager():
    return ClipManager()


def add_three(manager):
    a = manager.add("", 0, 1000, "a.mp4")
    b = manager.add("", 1000, 2000, "a.mp4")
    c = manager.add("", 2000, 3000, "a.mp4")
    return a, b, c


def assert_contiguous(manager):
    assert [c.order for c in manager.clips] == list(range(1, len(manager) + 1))


def test_add_assigns_default_name_and_order(manager):
    a, b, c = add_three(manager)
    assert [x.display_name for x in (a, b, c)] == ["Clip1", "Clip2", "Clip3"]
    assert a.stored_title == "Clip1"
    assert_contiguous(manager)
    assert a.is_first and not a.is_last
    assert c.is_last and not c.is_first
    assert manager.count == 3


def test_add_keeps_given_name(manager):
    clip = manager.add("Intro", 0, 500, "a.mp4")
    assert clip.display_name == "Intro"
    assert clip.has_custom_title


def test_new_clips_start_selected(manager):
    add_three(manager)
    assert manager.selected_count == 3


def test_try_add_validation(manager):
    assert manager.try_add("", -1, 10, "x") == (False, ERROR_NEGATIVE_START)
    assert manager.try_add("", 5, 5, "x") == (False, ERROR_EMPTY_RANGE)
    assert manager.try_add("", 0, 10, "") == (False, ERROR_MISSING_SOURCE)
    assert manager.try_add("", 0, 10, "   ") == (False, ERROR_MISSING_SOURCE)
    assert len(manager) == 0

    assert manager.try_add("n", 0, 10, "x") == (True, "")
    assert len(manager) == 1
    assert manager.clips[0].display_name == "n"


def test_try_add_allows_overlap(manager):
    manager.try_add("", 0, 1000, "x")
    ok, message = manager.try_add("", 500, 1500, "x")
    assert ok and message == ""
    assert len(manager) == 2
    assert manager.clips[0].overlaps(500, 1500)


def test_overlap_detection():
    clip = Clip("", 1000, 2000)
    assert clip.overlaps(1500, 2500)
    assert clip.overlaps(500, 1500)
    assert clip.overlaps(0, 3000)
    assert not clip.overlaps(2000, 3000)
    assert not clip.overlaps(0, 1000)


def test_remove(manager):
    a, b, c = add_three(manager)
    assert manager.remove(b)
    assert manager.clips == [a, c]
    assert c.order == 2 and c.display_name == "Clip2"
    assert not manager.remove(b)
    assert not manager.remove(Clip("", 0, 1))
    assert_contiguous(manager)


def test_remove_selected(manager):
    a, b, c = add_three(manager)
    d = manager.add("", 3000, 4000, "a.mp4")
    manager.deselect_all()
    manager.set_selected(a, True)
    manager.set_selected(c, True)

    assert manager.remove_selected() == 2
    assert manager.clips == [b, d]
    assert [x.display_name for x in manager.clips] == ["Clip1", "Clip2"]
    assert manager.selected_count == 0
    assert manager.remove_selected() == 0
    assert_contiguous(manager)


def test_clear_restarts_naming(manager):
    add_three(manager)
    manager.clear()
    assert len(manager) == 0
    clip = manager.add("", 0, 10, "a.mp4")
    assert clip.display_name == "Clip1"
    assert clip.is_first and clip.is_last


def test_move_boundaries_are_no_ops(manager):
    a, b, c = add_three(manager)
    assert not manager.move_up(a)
    assert not manager.move_to_top(a)
    assert not manager.move_down(c)
    assert not manager.move_to_bottom(c)
    assert not manager.move_up(Clip("", 0, 1))
    assert manager.clips == [a, b, c]
    assert manager.is_at_top(a)
    assert manager.is_at_bottom(c)
    assert not manager.is_at_bottom(Clip("", 0, 1))


def test_moves_reorder_and_renumber(manager):
    a, b, c = add_three(manager)
    assert manager.move_down(a)
    assert manager.clips == [b, a, c]
    assert manager.move_up(c)
    assert manager.clips == [b, c, a]
    assert manager.move_to_bottom(b)
    assert manager.clips == [c, a, b]
    assert manager.move_to_top(b)
    assert manager.clips == [b, c, a]
    assert_contiguous(manager)
    assert b.is_first and a.is_last
    assert not c.is_first and not c.is_last


def test_default_names_follow_order_after_moves(manager):
    a, b, c = add_three(manager)
    manager.move_to_top(c)
    manager.move_down(a)
    manager.move_to_bottom(c)
    for clip in manager.clips:
        assert clip.display_name == f"Clip{clip.order}"
        assert clip.stored_title == f"Clip{clip.order}"


def test_custom_title_survives_reordering(manager):
    a, b, c = add_three(manager)
    manager.set_title(b, "Interview")
    manager.move_to_top(c)
    manager.move_to_bottom(a)
    manager.move_up(b)
    assert b.display_name == "Interview"
    assert b.stored_title == "Interview"
    assert manager.clips == [b, c, a]
    assert [x.display_name for x in manager.clips] == ["Interview", "Clip2", "Clip3"]


def test_default_shaped_title_is_treated_as_default(manager):
    a, b = manager.add("", 0, 10, "x"), manager.add("Clip7", 10, 20, "x")
    assert b.display_name == "Clip2"
    assert not b.has_custom_title
    manager.move_to_top(b)
    assert b.display_name == "Clip1"
    assert b.stored_title == "Clip1"


def test_effective_name_rule():
    assert effective_name("", 3) == "Clip3"
    assert effective_name("  ", 3) == "Clip3"
    assert effective_name("Clip12", 3) == "Clip3"
    assert effective_name("Clip 12", 3) == "Clip 12"
    assert effective_name("Sunset", 3) == "Sunset"
    assert is_default_name("Clip1")
    assert not is_default_name("Clipboard")


def test_set_title(manager, record):
    a, b, c = add_three(manager)
    changes = record(manager.clip_changed)

    assert manager.set_title(b, "Outro")
    assert b.custom_title == "Outro"
    assert changes.calls == [(b, 'title')]

    assert manager.set_title(b, "Clip2")
    assert b.stored_title == ""
    assert b.custom_title == ""
    assert b.display_name == "Clip2"

    assert not manager.set_title(b, "   ")
    assert not manager.set_title(Clip("", 0, 1), "x")


def test_selection_counts_and_signals(manager, record):
    a, b, c = add_three(manager)
    selected = record(manager.selected_count_changed)
    changes = record(manager.clip_changed)

    manager.deselect_all()
    assert manager.selected_count == 0
    assert selected.calls == [0]
    assert [f for _, f in changes.calls] == ['is_selected'] * 3

    assert manager.set_selected(b, True)
    assert not manager.set_selected(b, True)
    assert manager.get_selected() == [b]
    assert selected.calls == [0, 1]

    manager.select_all()
    assert manager.get_selected() == [a, b, c]
    assert selected.calls == [0, 1, 3]

    manager.deselect_all()
    manager.deselect_all()
    assert selected.calls == [0, 1, 3, 0]


def test_structural_signals(manager, record):
    counts = record(manager.count_changed)
    structure = record(manager.clips_changed)

    a, b, c = add_three(manager)
    assert counts.calls == [1, 2, 3]
    assert len(structure.calls) == 3

    changes = record(manager.clip_changed)
    manager.move_to_top(c)
    assert (c, 'order') in changes.calls
    assert (c, 'title') in changes.calls
    assert (c, 'is_first') in changes.calls
    assert (a, 'is_first') in changes.calls
    assert (b, 'is_last') in changes.calls
    assert counts.calls == [1, 2, 3]

    manager.clear()
    assert counts.calls == [1, 2, 3, 0]


def test_clip_time_formatting():
    clip = Clip("", 61500, 3723004)
    assert clip.duration == 3661504
    assert clip.formatted_start_time == "00:01:01.500"
    assert clip.formatted_end_time == "01:02:03.004"
    assert clip.formatted_duration == "01:01:01.504"
    assert clip.time_range == "00:01:01.500 → 01:02:03.004"


def test_total_duration(manager):
    add_three(manager)
    assert manager.get_total_duration() == 3000


def test_from_settings_reads_debug(capsys):
    manager = ClipManager.from_settings({"debug": True})
    manager.add("", 0, 10, "x")
    assert "[CLIPS] Added" in capsys.readouterr().out
