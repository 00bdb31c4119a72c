"""
Editing and playback state for the video editor: the trim clip list and the
playback queue, with Qt signals for the presentation layer.
"""

from .media import MediaItem, format_time
from .clips import Clip, ClipManager
from .playqueue import PlayMode, PlayQueueState, PlayQueueManager
from .history import PlayRecord, PlayHistoryManager
from .settings import DEFAULT_SETTINGS, load_settings, save_settings, make_rng

__all__ = [
    'MediaItem', 'format_time',
    'Clip', 'ClipManager',
    'PlayMode', 'PlayQueueState', 'PlayQueueManager',
    'PlayRecord', 'PlayHistoryManager',
    'DEFAULT_SETTINGS', 'load_settings', 'save_settings', 'make_rng',
]
