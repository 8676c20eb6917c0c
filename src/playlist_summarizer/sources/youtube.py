"""YouTube playlist source.

Lists every video of one playlist through the YouTube Data API v3.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional, Set

from googleapiclient.discovery import build
from googleapiclient.errors import HttpError

from ..config_constants import PLAYLIST_PAGE_SIZE
from ..exceptions import ProviderConfigError, SourceError
from ..models import WorkItem

logger = logging.getLogger(__name__)

PROVIDER_NAME = "YouTube"


class YouTubePlaylistSource:
    """Produce the ordered list of work items for a playlist.

    Args:
        api_key: YouTube Data API key
        playlist_id: Playlist to list
        client: Prebuilt API client (tests inject a mock); built from
            ``api_key`` when omitted
    """

    def __init__(self, api_key: Optional[str], playlist_id: str, client: Any = None):
        if client is None:
            if not api_key:
                raise ProviderConfigError(
                    message="YouTube API key not provided",
                    provider=PROVIDER_NAME,
                    config_key="youtube_api_key",
                    suggestion="Set YOUTUBE_API_KEY environment variable",
                )
            try:
                client = build("youtube", "v3", developerKey=api_key, cache_discovery=False)
            except Exception as exc:
                raise SourceError(
                    message=f"error creating YouTube client: {exc}",
                    provider=PROVIDER_NAME,
                ) from exc
        self.client = client
        self.playlist_id = playlist_id

    def list_items(self) -> List[WorkItem]:
        """Fetch all playlist pages and return items in playlist order.

        Entries without a snippet or a video ID are skipped with a warning, as
        are repeats of a video already listed (a playlist may hold the same
        video more than once); the first occurrence keeps its position.

        Raises:
            SourceError: If any page request fails
        """
        items: List[WorkItem] = []
        seen: Set[str] = set()
        page_token: Optional[str] = None
        while True:
            response = self._list_page(page_token)
            for entry in response.get("items") or []:
                item = _to_work_item(entry)
                if item is None:
                    logger.warning(
                        "Skipping playlist item with missing details: %s",
                        entry.get("id", "<no id>"),
                    )
                    continue
                if item.item_id in seen:
                    logger.warning(
                        "Skipping repeated video %s (%s) in playlist %s.",
                        item.item_id,
                        item.title,
                        self.playlist_id,
                    )
                    continue
                seen.add(item.item_id)
                items.append(item)

            raw_next = response.get("nextPageToken")
            page_token = raw_next if isinstance(raw_next, str) and raw_next.strip() else None
            if page_token is None:
                break

        logger.info("Found %d videos in playlist %s.", len(items), self.playlist_id)
        return items

    def _list_page(self, page_token: Optional[str]) -> Dict[str, Any]:
        query_kwargs: Dict[str, Any] = {
            "part": "snippet,contentDetails",
            "playlistId": self.playlist_id,
            "maxResults": PLAYLIST_PAGE_SIZE,
        }
        if page_token is not None:
            query_kwargs["pageToken"] = page_token
        try:
            return self.client.playlistItems().list(**query_kwargs).execute()
        except HttpError as exc:
            raise SourceError(
                message=f"error fetching playlist items for {self.playlist_id}: {exc}",
                provider=PROVIDER_NAME,
                suggestion="Check the playlist ID and that the API key has YouTube Data API access",
            ) from exc


def _to_work_item(entry: Dict[str, Any]) -> Optional[WorkItem]:
    snippet = entry.get("snippet")
    content_details = entry.get("contentDetails")
    if not isinstance(snippet, dict) or not isinstance(content_details, dict):
        return None
    video_id = content_details.get("videoId")
    if not isinstance(video_id, str) or not video_id:
        return None
    return WorkItem(item_id=video_id, title=str(snippet.get("title") or ""))
