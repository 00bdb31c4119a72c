import re
from PyQt6.QtCore import QObject, pyqtSignal

from .media import format_time

DEFAULT_NAME_PREFIX = "Clip"
DEFAULT_NAME_PATTERN = re.compile(r"^Clip\d+$")

ERROR_MISSING_SOURCE = "Cannot determine the source file of the clip"
ERROR_NEGATIVE_START = "Start time cannot be negative"
ERROR_EMPTY_RANGE = "End time must be greater than start time"


def default_name(order):
    return f"{DEFAULT_NAME_PREFIX}{order}"


def is_default_name(text):
    return bool(DEFAULT_NAME_PATTERN.match(text or ""))


def effective_name(stored_title, order):
    """
    Display name of a clip.

    A stored title shaped like a default name ("Clip<N>" for any N) counts as
    default naming, so the clip shows the name for its current order instead.
    """
    if stored_title and stored_title.strip() and not is_default_name(stored_title):
        return stored_title
    return default_name(order)


class Clip:
    def __init__(self, title, start_time, end_time, order=0, source_file_path=""):
        self.stored_title = title or ""
        self.start_time = int(start_time)
        self.end_time = int(end_time)
        self.order = order
        self.is_selected = True
        self.source_file_path = source_file_path or ""
        self.is_first = False
        self.is_last = False

    @property
    def display_name(self):
        return effective_name(self.stored_title, self.order)

    @property
    def has_custom_title(self):
        return self.display_name != default_name(self.order)

    @property
    def custom_title(self):
        return self.stored_title if self.has_custom_title else ""

    @property
    def duration(self):
        return self.end_time - self.start_time

    @property
    def formatted_start_time(self):
        return format_time(self.start_time)

    @property
    def formatted_end_time(self):
        return format_time(self.end_time)

    @property
    def formatted_duration(self):
        return format_time(self.duration)

    @property
    def time_range(self):
        return f"{self.formatted_start_time} → {self.formatted_end_time}"

    def overlaps(self, start_time, end_time):
        return ((self.start_time <= start_time < self.end_time) or
                (self.start_time < end_time <= self.end_time) or
                (start_time <= self.start_time and end_time >= self.end_time))

    def __repr__(self):
        return f"Clip({self.display_name!r}, {self.start_time}-{self.end_time}, order={self.order})"


class ClipManager(QObject):
    """
    Ordered list of trim clips.

    Clips are only mutated through the manager. After every structural change
    the manager renumbers the clips, regenerates default names for clips whose
    order moved, refreshes first/last flags and reports counts that changed.
    """
    count_changed = pyqtSignal(int)
    selected_count_changed = pyqtSignal(int)
    clip_changed = pyqtSignal(object, str)
    clips_changed = pyqtSignal()

    def __init__(self, parent=None):
        super().__init__(parent)
        self._clips = []
        self._last_count = 0
        self._last_selected_count = 0
        self.debug = False

    @classmethod
    def from_settings(cls, settings, parent=None):
        manager = cls(parent)
        manager.debug = bool(settings.get("debug", False))
        return manager

    @property
    def clips(self):
        return list(self._clips)

    @property
    def count(self):
        return len(self._clips)

    @property
    def selected_count(self):
        return sum(1 for c in self._clips if c.is_selected)

    def __len__(self):
        return len(self._clips)

    def __iter__(self):
        return iter(list(self._clips))

    def index_of(self, clip):
        return next((i for i, c in enumerate(self._clips) if c is clip), -1)

    def add(self, name, start_time, end_time, source_file_path):
        if not name or not name.strip():
            name = default_name(len(self._clips) + 1)
        clip = Clip(name, start_time, end_time, len(self._clips) + 1, source_file_path)
        self._clips.append(clip)
        if self.debug: print(f"[CLIPS] Added {clip!r}")
        self._structure_changed()
        return clip

    def try_add(self, name, start_time, end_time, source_file_path):
        if not source_file_path or not source_file_path.strip():
            return False, ERROR_MISSING_SOURCE
        if start_time < 0:
            return False, ERROR_NEGATIVE_START
        if end_time <= start_time:
            return False, ERROR_EMPTY_RANGE

        # overlapping trims are allowed, the user reorders them by hand
        overlapping = [c for c in self._clips if c.overlaps(start_time, end_time)]
        if overlapping and self.debug:
            print(f"[CLIPS] Range {start_time}-{end_time} overlaps {', '.join(c.display_name for c in overlapping)}")

        self.add(name or "", start_time, end_time, source_file_path)
        return True, ""

    def remove(self, clip):
        index = self.index_of(clip)
        if index < 0:
            return False
        del self._clips[index]
        if self.debug: print(f"[CLIPS] Removed {clip!r}")
        self._structure_changed()
        return True

    def remove_selected(self):
        selected = [c for c in self._clips if c.is_selected]
        if not selected:
            return 0
        self._clips = [c for c in self._clips if not c.is_selected]
        if self.debug: print(f"[CLIPS] Removed {len(selected)} selected clip(s)")
        self._structure_changed()
        return len(selected)

    def clear(self):
        self._clips.clear()
        self._structure_changed()

    def is_at_top(self, clip):
        return self.index_of(clip) == 0

    def is_at_bottom(self, clip):
        index = self.index_of(clip)
        return index >= 0 and index == len(self._clips) - 1

    def move_up(self, clip):
        index = self.index_of(clip)
        if index <= 0:
            return False
        return self._move(index, index - 1)

    def move_down(self, clip):
        index = self.index_of(clip)
        if index < 0 or index >= len(self._clips) - 1:
            return False
        return self._move(index, index + 1)

    def move_to_top(self, clip):
        index = self.index_of(clip)
        if index <= 0:
            return False
        return self._move(index, 0)

    def move_to_bottom(self, clip):
        index = self.index_of(clip)
        if index < 0 or index >= len(self._clips) - 1:
            return False
        return self._move(index, len(self._clips) - 1)

    def _move(self, from_index, to_index):
        clip = self._clips.pop(from_index)
        self._clips.insert(to_index, clip)
        if self.debug: print(f"[CLIPS] Moved {clip.display_name} from {from_index + 1} to {to_index + 1}")
        self._structure_changed()
        return True

    def set_selected(self, clip, selected):
        if self.index_of(clip) < 0:
            return False
        changed = self._apply_selection(clip, selected)
        self._emit_counts()
        return changed

    def select_all(self):
        for clip in self._clips:
            self._apply_selection(clip, True)
        self._emit_counts()

    def deselect_all(self):
        for clip in self._clips:
            self._apply_selection(clip, False)
        self._emit_counts()

    def get_selected(self):
        return [c for c in self._clips if c.is_selected]

    def set_title(self, clip, text):
        if self.index_of(clip) < 0:
            return False
        text = text or ""
        if not text.strip() or text == default_name(clip.order):
            text = ""
        if text == clip.stored_title:
            return False
        clip.stored_title = text
        self.clip_changed.emit(clip, 'title')
        return True

    def get_total_duration(self):
        return sum(c.duration for c in self._clips)

    def _apply_selection(self, clip, selected):
        selected = bool(selected)
        if clip.is_selected == selected:
            return False
        clip.is_selected = selected
        self.clip_changed.emit(clip, 'is_selected')
        return True

    def _structure_changed(self):
        moved = self._renumber()
        self._regenerate_default_names(moved)
        self._update_position_flags()
        self.clips_changed.emit()
        self._emit_counts()

    def _renumber(self):
        moved = []
        for i, clip in enumerate(self._clips):
            if clip.order != i + 1:
                clip.order = i + 1
                moved.append(clip)
                self.clip_changed.emit(clip, 'order')
        return moved

    def _regenerate_default_names(self, clips):
        for clip in clips:
            if clip.has_custom_title:
                continue
            new_title = default_name(clip.order)
            if clip.stored_title != new_title:
                clip.stored_title = new_title
                self.clip_changed.emit(clip, 'title')

    def _update_position_flags(self):
        last_index = len(self._clips) - 1
        for i, clip in enumerate(self._clips):
            is_first, is_last = i == 0, i == last_index
            if clip.is_first != is_first:
                clip.is_first = is_first
                self.clip_changed.emit(clip, 'is_first')
            if clip.is_last != is_last:
                clip.is_last = is_last
                self.clip_changed.emit(clip, 'is_last')

    def _emit_counts(self):
        count = len(self._clips)
        if count != self._last_count:
            self._last_count = count
            self.count_changed.emit(count)
        selected = self.selected_count
        if selected != self._last_selected_count:
            self._last_selected_count = selected
            self.selected_count_changed.emit(selected)
