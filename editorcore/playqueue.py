import random
from enum import Enum
from PyQt6.QtCore import QObject, pyqtSignal

from .settings import make_rng


class PlayMode(Enum):
    SEQUENTIAL = "sequential"
    RANDOM = "random"
    REPEAT_ONE = "repeat_one"
    REPEAT_ALL = "repeat_all"
    SHUFFLE = "shuffle"


class PlayQueueState(Enum):
    EMPTY = "empty"
    READY = "ready"
    PLAYING = "playing"
    PAUSED = "paused"
    COMPLETED = "completed"
    ERROR = "error"


RANDOM_MODES = (PlayMode.RANDOM, PlayMode.SHUFFLE)


class PlayQueueManager(QObject):
    """
    Playback queue with a cursor, a play mode and a lifecycle state.

    The live queue may be reordered by the random modes; the insertion order is
    kept separately so switching back to sequential mode restores it. After
    each mutation the observable values are re-derived and only the ones that
    differ from the last emitted snapshot are signalled.
    """
    current_index_changed = pyqtSignal(int)
    current_item_changed = pyqtSignal(object)
    has_next_changed = pyqtSignal(bool)
    has_previous_changed = pyqtSignal(bool)
    count_changed = pyqtSignal(int)
    mode_changed = pyqtSignal(object)
    state_changed = pyqtSignal(object)
    queue_reordered = pyqtSignal()

    def __init__(self, rng=None, mode=PlayMode.SEQUENTIAL, parent=None):
        super().__init__(parent)
        self._queue = []
        self._original_order = []
        self._current_index = -1
        self._current_item = None
        self._mode = mode
        self._state = PlayQueueState.EMPTY
        self._rng = rng if rng is not None else random.Random()
        self._snapshot = self._take_snapshot()
        self.debug = False

    @classmethod
    def from_settings(cls, settings, rng=None, parent=None):
        try:
            mode = PlayMode(settings.get("default_play_mode", PlayMode.SEQUENTIAL.value))
        except ValueError:
            print(f"Error reading play mode setting: {settings.get('default_play_mode')!r}, using sequential")
            mode = PlayMode.SEQUENTIAL
        manager = cls(rng=rng if rng is not None else make_rng(settings), mode=mode, parent=parent)
        manager.debug = bool(settings.get("debug", False))
        return manager

    @property
    def items(self):
        return list(self._queue)

    @property
    def original_order(self):
        return list(self._original_order)

    @property
    def count(self):
        return len(self._queue)

    def __len__(self):
        return len(self._queue)

    @property
    def current_index(self):
        return self._current_index

    @property
    def current_item(self):
        return self._current_item

    @property
    def mode(self):
        return self._mode

    @property
    def state(self):
        return self._state

    @property
    def has_next(self):
        return self._has_neighbour(self._current_index < len(self._queue) - 1)

    @property
    def has_previous(self):
        return self._has_neighbour(self._current_index > 0)

    def _has_neighbour(self, sequential_ok):
        if not self._queue:
            return False
        if self._mode == PlayMode.SEQUENTIAL:
            return sequential_ok
        if self._mode in RANDOM_MODES:
            return len(self._queue) > 1
        return True

    # --- queue mutation ---

    def add_item(self, item):
        if item is None:
            return
        self._queue.append(item)
        self._original_order.append(item)
        if self._current_index == -1:
            self._select(0)
            self._set_state(PlayQueueState.READY)
        if self.debug: print(f"[QUEUE] Added {item!r}, {len(self._queue)} item(s) queued")
        self._notify()

    def add_items(self, items):
        if items is None:
            return
        for item in items:
            self.add_item(item)

    def remove_item(self, item):
        if item is None:
            return False
        try:
            index = self._queue.index(item)
        except ValueError:
            return False

        removed = self._queue.pop(index)
        if item in self._original_order:
            self._original_order.remove(item)

        if index < self._current_index:
            self._current_index -= 1
        elif index == self._current_index:
            if self._queue:
                self._select(min(self._current_index, len(self._queue) - 1))
            else:
                self._reset_cursor()
        if self.debug: print(f"[QUEUE] Removed {removed!r}")
        self._notify()
        return True

    def clear(self):
        self._queue.clear()
        self._original_order.clear()
        self._reset_cursor()
        if self.debug: print("[QUEUE] Cleared")
        self._notify()

    def set_current(self, target):
        """Move the cursor to a position (int) or to the first matching item."""
        if isinstance(target, int) and not isinstance(target, bool):
            index = target
        else:
            try:
                index = self._queue.index(target)
            except ValueError:
                return False
        if not 0 <= index < len(self._queue):
            return False
        self._select(index)
        self._notify()
        return True

    # --- mode ---

    def set_mode(self, mode):
        mode = PlayMode(mode)
        if mode == self._mode:
            return
        self._mode = mode
        if mode in RANDOM_MODES:
            self._shuffle_queue()
        elif mode == PlayMode.SEQUENTIAL:
            self._restore_original_order()
        if self.debug: print(f"[QUEUE] Play mode -> {mode.value}")
        self.mode_changed.emit(mode)
        self._notify()

    def _shuffle_queue(self):
        if len(self._queue) <= 1:
            return
        self._rng.shuffle(self._queue)
        self._relocate_current()
        self.queue_reordered.emit()

    def _restore_original_order(self):
        if not self._original_order:
            return
        self._queue = list(self._original_order)
        self._relocate_current()
        self.queue_reordered.emit()

    def _relocate_current(self):
        if self._current_item is None:
            return
        index = next((i for i, it in enumerate(self._queue) if it is self._current_item), -1)
        if index < 0 and self._current_item in self._queue:
            index = self._queue.index(self._current_item)
        if index >= 0:
            self._current_index = index

    # --- next / previous ---

    def get_next(self):
        if not self._queue:
            return None
        if self._mode == PlayMode.SEQUENTIAL:
            c = self._current_index
            return self._queue[c + 1] if c + 1 < len(self._queue) else None
        if self._mode == PlayMode.REPEAT_ALL:
            c = self._current_index
            return self._queue[c + 1] if c + 1 < len(self._queue) else self._queue[0]
        if self._mode == PlayMode.REPEAT_ONE:
            return self._current_item
        return self._random_pick()

    def get_previous(self):
        if not self._queue:
            return None
        if self._mode == PlayMode.SEQUENTIAL:
            c = self._current_index
            return self._queue[c - 1] if c - 1 >= 0 else None
        if self._mode == PlayMode.REPEAT_ALL:
            c = self._current_index
            return self._queue[c - 1] if c - 1 >= 0 else self._queue[-1]
        if self._mode == PlayMode.REPEAT_ONE:
            return self._current_item
        return self._random_pick()

    def _random_pick(self):
        if len(self._queue) <= 1:
            return None
        candidates = [i for i in range(len(self._queue)) if i != self._current_index]
        return self._queue[self._rng.choice(candidates)]

    def play_next(self):
        return self._advance_to(self.get_next())

    def play_previous(self):
        return self._advance_to(self.get_previous())

    def _advance_to(self, item):
        if item is None:
            return False
        # resolve by identity first so duplicates of the same path keep their slot
        index = next((i for i, it in enumerate(self._queue) if it is item), -1)
        if index < 0:
            index = self._queue.index(item)
        self._select(index)
        self._set_state(PlayQueueState.READY)
        if self.debug: print(f"[QUEUE] Now at {index}: {item!r}")
        self._notify()
        return True

    # --- lifecycle ---

    def start_playback(self):
        if self._current_item is None:
            return False
        self._set_state(PlayQueueState.PLAYING)
        return True

    def pause_playback(self):
        if self._state != PlayQueueState.PLAYING:
            return False
        self._set_state(PlayQueueState.PAUSED)
        return True

    def stop_playback(self):
        self._set_state(PlayQueueState.READY)

    def complete_playback(self):
        self._set_state(PlayQueueState.COMPLETED)
        if self.has_next:
            self.play_next()

    def mark_error(self):
        self._set_state(PlayQueueState.ERROR)

    # --- internals ---

    def _select(self, index):
        self._current_index = index
        self._current_item = self._queue[index]

    def _reset_cursor(self):
        self._current_index = -1
        self._current_item = None
        self._set_state(PlayQueueState.EMPTY)

    def _set_state(self, state):
        if state == self._state:
            return
        self._state = state
        if self.debug: print(f"[QUEUE] State -> {state.value}")
        self.state_changed.emit(state)

    def _take_snapshot(self):
        return {
            'current_index': self._current_index,
            'current_item': self._current_item,
            'has_next': self.has_next,
            'has_previous': self.has_previous,
            'count': len(self._queue),
        }

    def _notify(self):
        old, new = self._snapshot, self._take_snapshot()
        self._snapshot = new
        if new['current_index'] != old['current_index']:
            self.current_index_changed.emit(new['current_index'])
        if new['current_item'] is not old['current_item']:
            self.current_item_changed.emit(new['current_item'])
        if new['has_next'] != old['has_next']:
            self.has_next_changed.emit(new['has_next'])
        if new['has_previous'] != old['has_previous']:
            self.has_previous_changed.emit(new['has_previous'])
        if new['count'] != old['count']:
            self.count_changed.emit(new['count'])
