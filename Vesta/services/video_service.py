"""Listing videos (/listings/{id}/videos)."""

import os
from typing import List

import aiofiles
import aiohttp

from Vesta.core.client.models.wire import Video

from .base import BaseService, parse_list, parse_one


class VideoService(BaseService):

    async def upload(self, path: str, listing_id: int, listing_type: str) -> Video:
        """Upload a video file as multipart form data."""
        async with aiofiles.open(path, "rb") as f:
            content = await f.read()

        form = aiohttp.FormData()
        form.add_field("file", content, filename=os.path.basename(path))
        form.add_field("listingType", listing_type)
        return parse_one(Video, await self.api.post(f"/listings/{listing_id}/videos", data=form))

    async def get_listing_videos(self, listing_id: int, listing_type: str) -> List[Video]:
        data = await self.api.get(f"/listings/{listing_id}/videos", params={"listingType": listing_type})
        return parse_list(Video, data)

    async def delete(self, video_id: int) -> None:
        await self.api.delete(f"/listings/videos/{video_id}")

    def video_url(self, video_id: int) -> str:
        """Streaming URL; the server honours Range requests."""
        return self.api.url_for(f"/listings/videos/{video_id}")
