import os


def format_time(milliseconds):
    if milliseconds < 0:
        return "00:00:00.000"
    milliseconds = int(milliseconds)
    hours, rem = divmod(milliseconds, 3600000)
    minutes, rem = divmod(rem, 60000)
    seconds, ms = divmod(rem, 1000)
    # hours wrap at a day, matching the editor's timecode display
    return f"{hours % 24:02d}:{minutes:02d}:{seconds:02d}.{ms:03d}"


class MediaItem:
    """A media reference held by the play queue. Two items are the same item when their paths match."""

    def __init__(self, path, duration_ms=0, media_type='video'):
        self.path = path
        self.duration_ms = int(duration_ms)
        self.media_type = media_type

    @property
    def file_name(self):
        return os.path.basename(self.path)

    @property
    def formatted_duration(self):
        return format_time(self.duration_ms)

    def __eq__(self, other):
        if not isinstance(other, MediaItem):
            return NotImplemented
        return self.path == other.path

    def __hash__(self):
        return hash(self.path)

    def __repr__(self):
        return f"MediaItem(path='{self.file_name}', duration={self.duration_ms}ms)"
