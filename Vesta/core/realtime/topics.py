"""Topic destinations published by the Vesta broker."""


def notifications(user_id: int) -> str:
    return f"/topic/notifications/{user_id}"


def messages(user_id: int) -> str:
    return f"/topic/messages/{user_id}"


def favorite_count(listing_id: int) -> str:
    return f"/topic/listing/{listing_id}/favoriteCount"
