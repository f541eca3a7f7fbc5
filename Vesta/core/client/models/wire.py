"""
Wire types exchanged with the Vesta backend.

Field names are snake_case in Python and camelCase on the wire; every model
accepts either form when validating and ignores unknown fields.
"""

from enum import Enum
from typing import Any, Dict, Generic, List, Optional, TypeVar

from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

T = TypeVar("T")


class VestaModel(BaseModel):
    """Base model with camelCase aliases."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        use_enum_values=True,
    )

    def to_wire(self) -> Dict[str, Any]:
        """Serialize with camelCase keys, leaving out unset optionals."""
        return self.model_dump(by_alias=True, exclude_none=True, mode="json")


# Enums

class Role(str, Enum):
    ROLE_USER = "ROLE_USER"
    ROLE_ADMIN = "ROLE_ADMIN"


class Currency(str, Enum):
    TRY = "TRY"
    USD = "USD"
    EUR = "EUR"


class ListingStatus(str, Enum):
    ACTIVE = "ACTIVE"
    PASSIVE = "PASSIVE"
    SOLD = "SOLD"
    DELETED = "DELETED"


class ListingType(str, Enum):
    REAL_ESTATE = "REAL_ESTATE"
    VEHICLE = "VEHICLE"
    LAND = "LAND"
    WORKPLACE = "WORKPLACE"


class RealEstateType(str, Enum):
    APARTMENT = "APARTMENT"
    HOUSE = "HOUSE"
    VILLA = "VILLA"
    RESIDENCE = "RESIDENCE"


class HeatingType(str, Enum):
    NATURAL_GAS = "NATURAL_GAS"
    CENTRAL_HEATING = "CENTRAL_HEATING"
    STOVE_HEATING = "STOVE_HEATING"
    AIR_CONDITIONING = "AIR_CONDITIONING"


class FuelType(str, Enum):
    GASOLINE = "GASOLINE"
    DIESEL = "DIESEL"
    ELECTRIC = "ELECTRIC"
    LPG = "LPG"
    HYBRID = "HYBRID"


class Transmission(str, Enum):
    MANUAL = "MANUAL"
    AUTOMATIC = "AUTOMATIC"


class LandType(str, Enum):
    LAND = "LAND"
    FIELD = "FIELD"
    VINEYARD = "VINEYARD"
    GARDEN = "GARDEN"


class WorkplaceType(str, Enum):
    SHOP = "SHOP"
    OFFICE = "OFFICE"
    FACTORY = "FACTORY"
    WAREHOUSE = "WAREHOUSE"


class OfferType(str, Enum):
    FOR_SALE = "FOR_SALE"
    FOR_RENT = "FOR_RENT"


class NotificationType(str, Enum):
    FAVORITE = "FAVORITE"
    VIEW = "VIEW"


# Users and auth

class User(VestaModel):
    id: int
    username: str
    email: Optional[str] = None
    name: Optional[str] = None
    surname: Optional[str] = None
    phone_number: Optional[str] = None
    enabled: bool = True
    roles: List[str] = Field(default_factory=list)
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    @property
    def is_admin(self) -> bool:
        return Role.ROLE_ADMIN.value in self.roles


class LoginRequest(VestaModel):
    username: str
    password: str


class RegisterRequest(VestaModel):
    name: str
    surname: str
    username: str
    email: str
    password: str
    phone_number: Optional[str] = None


class AuthResponse(VestaModel):
    token: str
    type: str = "Bearer"
    id: int
    username: str
    email: Optional[str] = None
    name: Optional[str] = None
    surname: Optional[str] = None
    phone_number: Optional[str] = None
    roles: List[str] = Field(default_factory=list)
    created_at: Optional[str] = None
    updated_at: Optional[str] = None

    def to_user(self) -> User:
        """The persisted user object: the response without the token fields."""
        return User.model_validate(self.model_dump(exclude={"token", "type"}))


class ForgotPasswordRequest(VestaModel):
    email: Optional[str] = None
    phone_number: Optional[str] = None
    method: str = "EMAIL"


class ResetPasswordRequest(VestaModel):
    email: str
    code: str
    new_password: str


class UpdateProfileRequest(VestaModel):
    name: Optional[str] = None
    surname: Optional[str] = None
    phone_number: Optional[str] = None
    email: Optional[str] = None


class ChangePasswordRequest(VestaModel):
    current_password: str
    new_password: str


class MessageResponse(VestaModel):
    message: str = ""


# Listings

class Category(VestaModel):
    id: int
    name: str
    slug: str
    active: bool = True


class CategoryStats(VestaModel):
    category_slug: Optional[str] = None
    category_name: Optional[str] = None
    count: int = 0


class BaseListing(VestaModel):
    id: int
    title: str
    description: Optional[str] = None
    price: float
    currency: Currency = Currency.TRY
    status: ListingStatus = ListingStatus.ACTIVE
    city: Optional[str] = None
    district: Optional[str] = None
    category_slug: Optional[str] = None
    category_name: Optional[str] = None
    owner_id: Optional[int] = None
    owner_username: Optional[str] = None
    created_at: Optional[str] = None
    updated_at: Optional[str] = None
    listing_type: Optional[str] = None
    image_url: Optional[str] = None
    offer_type: Optional[OfferType] = None


class RealEstate(BaseListing):
    real_estate_type: Optional[RealEstateType] = None
    room_count: Optional[int] = None
    square_meter: Optional[int] = None
    building_age: Optional[int] = None
    floor: Optional[int] = None
    heating_type: Optional[HeatingType] = None
    furnished: Optional[bool] = None


class Vehicle(BaseListing):
    brand: Optional[str] = None
    model: Optional[str] = None
    year: Optional[int] = None
    fuel_type: Optional[FuelType] = None
    transmission: Optional[Transmission] = None
    kilometer: Optional[int] = None
    engine_volume: Optional[str] = None


class Land(BaseListing):
    land_type: Optional[LandType] = None
    square_meter: Optional[int] = None
    zoning_status: Optional[str] = None
    parcel_number: Optional[int] = None
    island_number: Optional[int] = None


class Workplace(BaseListing):
    workplace_type: Optional[WorkplaceType] = None
    square_meter: Optional[int] = None
    floor_count: Optional[int] = None
    furnished: Optional[bool] = None


class ListingCreateRequest(VestaModel):
    title: str
    description: Optional[str] = None
    price: float
    currency: Currency
    category_slug: str
    city: str
    district: str
    offer_type: OfferType = OfferType.FOR_SALE


class RealEstateCreateRequest(ListingCreateRequest):
    real_estate_type: RealEstateType
    room_count: int
    square_meter: int
    building_age: int
    floor: int
    heating_type: HeatingType
    furnished: bool


class VehicleCreateRequest(ListingCreateRequest):
    brand: str
    model: str
    year: int
    fuel_type: FuelType
    transmission: Transmission
    kilometer: int
    engine_volume: Optional[str] = None


class LandCreateRequest(ListingCreateRequest):
    land_type: LandType
    square_meter: int
    parcel_number: int
    island_number: int
    zoning_status: Optional[str] = None


class WorkplaceCreateRequest(ListingCreateRequest):
    workplace_type: WorkplaceType
    square_meter: int
    floor_count: int
    furnished: bool


class ListingFilterRequest(VestaModel):
    city: Optional[str] = None
    district: Optional[str] = None
    category_slug: Optional[str] = None
    status: Optional[ListingStatus] = None
    min_price: Optional[float] = None
    max_price: Optional[float] = None


class RealEstateFilterRequest(ListingFilterRequest):
    real_estate_type: Optional[RealEstateType] = None
    min_room_count: Optional[int] = None
    max_room_count: Optional[int] = None
    min_square_meter: Optional[int] = None
    max_square_meter: Optional[int] = None
    min_building_age: Optional[int] = None
    max_building_age: Optional[int] = None
    min_floor: Optional[int] = None
    max_floor: Optional[int] = None
    heating_type: Optional[HeatingType] = None
    furnished: Optional[bool] = None


class VehicleFilterRequest(ListingFilterRequest):
    brand: Optional[str] = None
    model: Optional[str] = None
    min_year: Optional[int] = None
    max_year: Optional[int] = None
    fuel_type: Optional[FuelType] = None
    transmission: Optional[Transmission] = None
    min_kilometer: Optional[int] = None
    max_kilometer: Optional[int] = None


class LandFilterRequest(ListingFilterRequest):
    land_type: Optional[LandType] = None
    min_square_meter: Optional[int] = None
    max_square_meter: Optional[int] = None
    zoning_status: Optional[str] = None


class WorkplaceFilterRequest(ListingFilterRequest):
    workplace_type: Optional[WorkplaceType] = None
    min_square_meter: Optional[int] = None
    max_square_meter: Optional[int] = None
    min_floor_count: Optional[int] = None
    max_floor_count: Optional[int] = None
    furnished: Optional[bool] = None


class Page(VestaModel, Generic[T]):
    """One page of a Spring Data result."""
    content: List[T] = Field(default_factory=list)
    total_elements: int = 0
    total_pages: int = 0
    size: int = 0
    number: int = 0
    first: bool = True
    last: bool = True
    number_of_elements: int = 0


# Favorites

class Favorite(VestaModel):
    id: int
    listing_id: int
    listing_type: str
    created_at: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    price: Optional[float] = None
    currency: Optional[str] = None
    city: Optional[str] = None
    district: Optional[str] = None
    image_url: Optional[str] = None
    status: Optional[str] = None


class FavoriteCountUpdate(VestaModel):
    """Payload pushed on /topic/listing/{id}/favoriteCount."""
    listing_id: int
    listing_type: Optional[str] = None
    favorite_count: int = 0


# Notifications and messages

class Notification(VestaModel):
    id: int
    user_id: Optional[int] = None
    title: Optional[str] = None
    message: Optional[str] = None
    type: Optional[str] = None
    related_listing_id: Optional[int] = None
    related_listing_type: Optional[str] = None
    is_read: bool = Field(default=False, validation_alias=AliasChoices("isRead", "read", "is_read"))
    created_at: Optional[str] = None


class MessageCreateRequest(VestaModel):
    receiver_id: int
    content: str
    listing_id: Optional[int] = None


class MessageDetail(VestaModel):
    id: int
    sender_id: int
    sender_username: Optional[str] = None
    receiver_id: int
    receiver_username: Optional[str] = None
    listing_id: Optional[int] = None
    listing_title: Optional[str] = None
    shared_listing_type: Optional[str] = None
    shared_listing_title: Optional[str] = None
    shared_listing_image_url: Optional[str] = None
    content: str = ""
    is_read: bool = Field(default=False, validation_alias=AliasChoices("isRead", "read", "is_read"))
    created_at: Optional[str] = None


class ConversationSummary(VestaModel):
    other_user_id: int
    other_user_username: Optional[str] = None
    last_message: Optional[MessageDetail] = None
    unread_count: int = 0
    listing_id: Optional[int] = None
    listing_title: Optional[str] = None


class ShareListingRequest(VestaModel):
    recipient_id: int
    listing_id: int
    listing_type: str
    message: Optional[str] = None


class ShareableContact(VestaModel):
    id: int
    username: str
    email: Optional[str] = None


# Comparison

class ComparisonField(VestaModel):
    field_name: str
    values: Dict[str, Optional[str]] = Field(default_factory=dict)


class ComparisonResult(VestaModel):
    category: Optional[str] = None
    fields: List[ComparisonField] = Field(default_factory=list)
    listings: Dict[str, Any] = Field(default_factory=dict)


# Search

class AdvancedSearchCriteria(VestaModel):
    query: Optional[str] = None
    city: Optional[str] = None
    district: Optional[str] = None
    latitude: Optional[float] = None
    longitude: Optional[float] = None
    radius_km: Optional[float] = None
    category_slug: Optional[str] = None
    status: Optional[str] = None
    min_price: Optional[float] = None
    max_price: Optional[float] = None
    min_rooms: Optional[int] = None
    max_rooms: Optional[int] = None
    min_area: Optional[int] = None
    max_area: Optional[int] = None
    min_year: Optional[int] = None
    max_year: Optional[int] = None
    brand: Optional[str] = None
    model: Optional[str] = None
    fuel_type: Optional[str] = None
    transmission: Optional[str] = None
    sort_by: Optional[str] = None
    sort_order: Optional[str] = None


class SearchSuggestion(VestaModel):
    text: str
    type: Optional[str] = None
    count: int = 0


class SavedSearchRequest(VestaModel):
    name: str
    search_criteria: Dict[str, Any] = Field(default_factory=dict)
    notification_enabled: bool = False


class SavedSearch(VestaModel):
    id: int
    name: str
    search_criteria: Dict[str, Any] = Field(default_factory=dict)
    notification_enabled: bool = False
    created_at: Optional[str] = None
    updated_at: Optional[str] = None


# Images

class Image(VestaModel):
    id: int
    file_name: Optional[str] = None
    file_path: Optional[str] = None
    file_type: Optional[str] = None
    file_size: Optional[int] = None
    is_primary: bool = Field(default=False, validation_alias=AliasChoices("isPrimary", "primary", "is_primary"))
    display_order: Optional[int] = None
    created_at: Optional[str] = None


class Video(VestaModel):
    id: int
    file_name: Optional[str] = None
    file_path: Optional[str] = None
    file_type: Optional[str] = None
    file_size: Optional[int] = None
    display_order: Optional[int] = None
    created_at: Optional[str] = None


# Admin

class UserStats(VestaModel):
    total_users: int = 0
    active_users: int = 0
    oauth_users: int = 0
    last7_days_users: int = Field(default=0, alias="last7DaysUsers")
    last30_days_users: int = Field(default=0, alias="last30DaysUsers")


class ListingStats(VestaModel):
    total_listings: int = 0
    active_listings: int = 0
    real_estate_count: int = 0
    vehicle_count: int = 0
    land_count: int = 0
    workplace_count: int = 0


class GrowthData(VestaModel):
    month: str
    count: int = 0


class CityDistribution(VestaModel):
    city: str
    count: int = 0


class ActivityLog(VestaModel):
    id: int
    action: str
    description: Optional[str] = None
    timestamp: Optional[str] = None
    username: Optional[str] = None
