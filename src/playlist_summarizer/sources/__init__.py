"""Work item sources."""

from .youtube import YouTubePlaylistSource

__all__ = ["YouTubePlaylistSource"]
