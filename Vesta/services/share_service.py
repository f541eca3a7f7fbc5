"""Sharing listings with contacts over direct messages."""

from typing import List, Optional

from Vesta.core.client.models.wire import MessageDetail, ShareableContact, ShareListingRequest

from .base import BaseService, parse_list, parse_one


class ShareService(BaseService):

    async def share_listing(self, recipient_id: int, listing_id: int, listing_type: str,
                            message: Optional[str] = None) -> MessageDetail:
        request = ShareListingRequest(recipient_id=recipient_id, listing_id=listing_id,
                                      listing_type=listing_type, message=message)
        return parse_one(MessageDetail, await self.api.post("/messages/share-listing", request.to_wire()))

    async def get_shareable_contacts(self) -> List[ShareableContact]:
        return parse_list(ShareableContact, await self.api.get("/messages/shareable-contacts"))
