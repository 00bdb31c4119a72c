from datetime import datetime
from PyQt6.QtCore import QObject, pyqtSignal

DEFAULT_COMPLETION_THRESHOLD = 0.95


class PlayRecord:
    def __init__(self, item, play_time, played_ms, total_ms, completion_threshold=DEFAULT_COMPLETION_THRESHOLD):
        self.item = item
        self.play_time = play_time
        self.played_ms = int(played_ms)
        self.total_ms = int(total_ms)
        self.completion_threshold = completion_threshold

    @property
    def completion_percentage(self):
        if self.total_ms <= 0:
            return 0.0
        return min(100.0, self.played_ms / self.total_ms * 100.0)

    @property
    def is_completed(self):
        return self.completion_percentage >= self.completion_threshold * 100.0

    def update_progress(self, played_ms):
        self.played_ms = int(played_ms)


class PlayHistoryManager(QObject):
    """Most-recent-first list of played items, one record per path."""
    history_changed = pyqtSignal()

    def __init__(self, max_count=100, completion_threshold=DEFAULT_COMPLETION_THRESHOLD, parent=None):
        super().__init__(parent)
        self.records = []
        self.max_count = max_count
        self.completion_threshold = completion_threshold
        self.debug = False

    @classmethod
    def from_settings(cls, settings, parent=None):
        manager = cls(
            max_count=int(settings.get("history_max_count", 100)),
            completion_threshold=float(settings.get("history_completion_threshold", DEFAULT_COMPLETION_THRESHOLD)),
            parent=parent,
        )
        manager.debug = bool(settings.get("debug", False))
        return manager

    def __len__(self):
        return len(self.records)

    def add_play_record(self, item, played_ms, total_ms, play_time=None):
        if item is None:
            return None
        play_time = play_time or datetime.now()

        record = next((r for r in self.records if r.item.path == item.path), None)
        if record:
            record.update_progress(played_ms)
            record.play_time = play_time
            self.records.remove(record)
            self.records.insert(0, record)
        else:
            record = PlayRecord(item, play_time, played_ms, total_ms, self.completion_threshold)
            self.records.insert(0, record)
            if len(self.records) > self.max_count:
                dropped = self.records.pop()
                if self.debug: print(f"[HISTORY] Dropped oldest record {dropped.item!r}")

        if self.debug: print(f"[HISTORY] {item!r} at {record.completion_percentage:.0f}%")
        self.history_changed.emit()
        return record

    def get_recently_played(self):
        return self.records[0].item if self.records else None

    def get_recently_played_items(self, count=10):
        return [r.item for r in self.records[:count]]

    def get_incomplete_records(self):
        return [r for r in self.records if not r.is_completed]

    def remove_item_history(self, item):
        if item is None:
            return 0
        before = len(self.records)
        self.records = [r for r in self.records if r.item.path != item.path]
        removed = before - len(self.records)
        if removed:
            self.history_changed.emit()
        return removed

    def clear(self):
        if not self.records:
            return
        self.records.clear()
        self.history_changed.emit()
