"""
Typed REST service wrappers, one module per backend resource.
"""

from Vesta.api.client import VestaAPIClient

from .admin_service import AdminService
from .auth_service import AuthService
from .category_service import CategoryService
from .comparison_service import ComparisonService
from .favorite_service import FavoriteService
from .image_service import ImageService
from .land_service import LandService
from .listing_service import ListingService
from .message_service import MessageService
from .notification_service import NotificationService
from .real_estate_service import RealEstateService
from .search_service import SearchService
from .share_service import ShareService
from .user_service import UserService
from .vehicle_service import VehicleService
from .video_service import VideoService
from .workplace_service import WorkplaceService


class Services:
    """Every service bound to one API client."""

    def __init__(self, api: VestaAPIClient):
        self.api = api
        self.auth = AuthService(api)
        self.real_estates = RealEstateService(api)
        self.vehicles = VehicleService(api)
        self.lands = LandService(api)
        self.workplaces = WorkplaceService(api)
        self.listings = ListingService(api)
        self.categories = CategoryService(api)
        self.favorites = FavoriteService(api)
        self.messages = MessageService(api)
        self.notifications = NotificationService(api)
        self.comparison = ComparisonService(api)
        self.admin = AdminService(api)
        self.search = SearchService(api)
        self.users = UserService(api)
        self.images = ImageService(api)
        self.share = ShareService(api)
        self.videos = VideoService(api)


__all__ = [
    'Services',
    'AdminService',
    'AuthService',
    'CategoryService',
    'ComparisonService',
    'FavoriteService',
    'ImageService',
    'LandService',
    'ListingService',
    'MessageService',
    'NotificationService',
    'RealEstateService',
    'SearchService',
    'ShareService',
    'UserService',
    'VehicleService',
    'VideoService',
    'WorkplaceService',
]
