"""Playback feature module"""

from sequence_timer.features.playback.api import router
from sequence_timer.features.playback.definitions import DefinitionSource, RepositoryDefinitionSource
from sequence_timer.features.playback.service import PlaybackService, build_sequence_view, build_timer_view

__all__ = [
    "router",
    "DefinitionSource",
    "RepositoryDefinitionSource",
    "PlaybackService",
    "build_sequence_view",
    "build_timer_view",
]
