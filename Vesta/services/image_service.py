"""Listing images (/images)."""

import os
from typing import List

import aiofiles
import aiohttp

from Vesta.core.client.models.wire import Image

from .base import BaseService, parse_list, parse_one


class ImageService(BaseService):

    async def upload(self, path: str, listing_id: int, listing_type: str, is_primary: bool = False) -> Image:
        """Upload an image file as multipart form data."""
        async with aiofiles.open(path, "rb") as f:
            content = await f.read()

        form = aiohttp.FormData()
        form.add_field("file", content, filename=os.path.basename(path))
        form.add_field("listingId", str(listing_id))
        form.add_field("listingType", listing_type)
        form.add_field("isPrimary", "true" if is_primary else "false")
        return parse_one(Image, await self.api.post("/images/upload", data=form))

    async def get_listing_images(self, listing_id: int, listing_type: str) -> List[Image]:
        return parse_list(Image, await self.api.get(f"/images/listing/{listing_id}/{listing_type}"))

    async def delete(self, image_id: int) -> None:
        await self.api.delete(f"/images/{image_id}")

    def image_url(self, image_id: int) -> str:
        return self.api.url_for(f"/images/view/{image_id}")
