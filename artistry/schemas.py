"""
Request schemas for the Artistry API.

Each entity gets a Create model (the insert shape: no id, no timestamps, no
derived counters) and, where the entity can be edited, an Update model whose
fields are all optional. Payloads use camelCase keys; anything the models do
not declare is dropped, so clients cannot set server-generated columns.
"""
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Annotated, Any, ClassVar, FrozenSet, List, Literal, Optional

import pydantic
from pydantic import AfterValidator, BaseModel, BeforeValidator, ConfigDict, EmailStr, Field
from pydantic.alias_generators import to_camel

ProductCategory = Literal["decor", "gifts", "paintings", "crafts"]
StockStatus = Literal["available", "limited", "out_of_stock"]
OrderStatus = Literal["new", "in_progress", "completed", "delivered", "cancelled"]
PaymentStatus = Literal["pending", "paid", "failed", "refunded"]
AgeGroup = Literal["kids", "adults", "all"]
SkillLevel = Literal["beginner", "intermediate", "advanced"]
ClassFormat = Literal["online", "offline", "both"]

MAX_AMOUNT = Decimal(10) ** 15
MAX_INT = 2**31 - 1


class ValidationError(Exception):
    """Rejected payload; `details` is a list of {"path", "message"} dicts."""

    def __init__(self, message, details=None):
        super().__init__(message)
        self.message = message
        self.details = details or []


def normalize_money(value: Any) -> str:
    if isinstance(value, bool) or value is None:
        raise ValueError("must be a decimal amount")
    if isinstance(value, float):
        value = str(value)
    try:
        amount = Decimal(str(value).strip())
    except InvalidOperation:
        raise ValueError("must be a decimal amount")
    if not amount.is_finite() or amount < 0:
        raise ValueError("must be a non-negative decimal amount")
    if amount >= MAX_AMOUNT:
        raise ValueError("must be less than " + str(MAX_AMOUNT))
    try:
        return str(amount.quantize(Decimal("0.01")))
    except InvalidOperation:
        raise ValueError("must be a decimal amount")


def to_utc(value: datetime) -> datetime:
    # Naive input is taken as UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


Money = Annotated[str, BeforeValidator(normalize_money)]
UtcDateTime = Annotated[datetime, AfterValidator(to_utc)]
# Fits a 32-bit INTEGER column
Count = Annotated[int, Field(ge=0, le=MAX_INT)]
PositiveCount = Annotated[int, Field(ge=1, le=MAX_INT)]
Text = Annotated[str, Field(min_length=1)]


class Schema(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
        str_strip_whitespace=True,
    )


class UpdateSchema(Schema):
    # Columns that may be explicitly cleared with null in a PATCH
    nullable_fields: ClassVar[FrozenSet[str]] = frozenset()


# --- Auth ---
class Credentials(Schema):
    username: Text
    password: Text


class Registration(Schema):
    username: Annotated[str, Field(min_length=3, max_length=120)]
    password: Annotated[str, Field(min_length=6)]


# --- Products ---
class ProductCreate(Schema):
    name: Text
    description: Text
    price: Money
    discount_percent: Annotated[int, Field(ge=0, le=100)] = 0
    category: ProductCategory
    image_url: Optional[str] = None
    additional_images: Optional[List[str]] = None
    video_url: Optional[str] = None
    stock_quantity: Count = 0
    stock_status: StockStatus = "available"
    is_enabled: bool = True
    is_customizable: bool = False
    featured: bool = False


class ProductUpdate(UpdateSchema):
    nullable_fields = frozenset({"image_url", "additional_images", "video_url"})

    name: Optional[Text] = None
    description: Optional[Text] = None
    price: Optional[Money] = None
    discount_percent: Optional[Annotated[int, Field(ge=0, le=100)]] = None
    category: Optional[ProductCategory] = None
    image_url: Optional[str] = None
    additional_images: Optional[List[str]] = None
    video_url: Optional[str] = None
    stock_quantity: Optional[Count] = None
    stock_status: Optional[StockStatus] = None
    is_enabled: Optional[bool] = None
    is_customizable: Optional[bool] = None
    featured: Optional[bool] = None


# --- Orders ---
class OrderItemCreate(Schema):
    product_id: Optional[str] = None
    product_name: Text
    quantity: PositiveCount = 1
    price: Money


class OrderCreate(Schema):
    customer_name: Text
    customer_email: EmailStr
    customer_phone: Optional[str] = None
    shipping_address: Text
    status: OrderStatus = "new"
    total_amount: Money
    is_custom_order: bool = False
    custom_order_details: Optional[str] = None
    payment_status: PaymentStatus = "pending"
    payment_intent_id: Optional[str] = None
    items: List[OrderItemCreate] = []


class OrderUpdate(UpdateSchema):
    nullable_fields = frozenset({"customer_phone", "custom_order_details", "payment_intent_id"})

    customer_name: Optional[Text] = None
    customer_email: Optional[EmailStr] = None
    customer_phone: Optional[str] = None
    shipping_address: Optional[Text] = None
    status: Optional[OrderStatus] = None
    total_amount: Optional[Money] = None
    is_custom_order: Optional[bool] = None
    custom_order_details: Optional[str] = None
    payment_status: Optional[PaymentStatus] = None
    payment_intent_id: Optional[str] = None


# --- Art classes ---
class ArtClassCreate(Schema):
    title: Text
    description: Text
    age_group: AgeGroup
    skill_level: SkillLevel
    format: ClassFormat
    duration: Text
    schedule: Text
    price: Money
    max_students: PositiveCount = 10
    image_url: Optional[str] = None
    is_active: bool = True


class ArtClassUpdate(UpdateSchema):
    nullable_fields = frozenset({"image_url"})

    title: Optional[Text] = None
    description: Optional[Text] = None
    age_group: Optional[AgeGroup] = None
    skill_level: Optional[SkillLevel] = None
    format: Optional[ClassFormat] = None
    duration: Optional[Text] = None
    schedule: Optional[Text] = None
    price: Optional[Money] = None
    max_students: Optional[PositiveCount] = None
    image_url: Optional[str] = None
    is_active: Optional[bool] = None


class ClassRegistrationCreate(Schema):
    class_id: Text
    student_name: Text
    email: EmailStr
    phone: Optional[str] = None
    parent_name: Optional[str] = None
    payment_status: PaymentStatus = "pending"


# --- Workshops ---
class WorkshopCreate(Schema):
    title: Text
    description: Text
    date: UtcDateTime
    time: Text
    duration: Text
    venue: Text
    price: Money
    max_seats: PositiveCount
    image_url: Optional[str] = None


class WorkshopUpdate(UpdateSchema):
    nullable_fields = frozenset({"image_url"})

    title: Optional[Text] = None
    description: Optional[Text] = None
    date: Optional[UtcDateTime] = None
    time: Optional[Text] = None
    duration: Optional[Text] = None
    venue: Optional[Text] = None
    price: Optional[Money] = None
    max_seats: Optional[PositiveCount] = None
    image_url: Optional[str] = None
    is_past: Optional[bool] = None


class WorkshopBookingCreate(Schema):
    workshop_id: Text
    attendee_name: Text
    email: EmailStr
    phone: Optional[str] = None
    number_of_seats: PositiveCount = 1
    payment_status: PaymentStatus = "pending"


# --- Testimonials, contacts, gallery ---
class TestimonialCreate(Schema):
    author_name: Text
    role: Optional[str] = None
    content: Text
    rating: Annotated[int, Field(ge=1, le=5)] = 5
    avatar_url: Optional[str] = None
    is_visible: bool = True


class ContactCreate(Schema):
    name: Text
    email: EmailStr
    phone: Optional[str] = None
    subject: Optional[str] = None
    message: Text


class ContactUpdate(UpdateSchema):
    nullable_fields = frozenset({"phone", "subject"})

    name: Optional[Text] = None
    email: Optional[EmailStr] = None
    phone: Optional[str] = None
    subject: Optional[str] = None
    message: Optional[Text] = None
    is_read: Optional[bool] = None


class GalleryItemCreate(Schema):
    title: Text
    description: Optional[str] = None
    category: Text
    image_url: Text
    is_featured: bool = False


def _details(exc):
    details = []
    for error in exc.errors():
        path = ".".join(str(part) for part in error["loc"])
        details.append({"path": path, "message": error["msg"]})
    return details


def parse(schema, payload, label="Request"):
    """Validate a create payload; returns a snake_case dict ready for storage."""
    try:
        model = schema.model_validate(payload)
    except pydantic.ValidationError as exc:
        raise ValidationError(f"{label} data is invalid", _details(exc))
    return model.model_dump()


def parse_update(schema, payload, label="Request"):
    """Validate a partial payload; only keys the client sent are returned."""
    try:
        model = schema.model_validate(payload)
    except pydantic.ValidationError as exc:
        raise ValidationError(f"{label} data is invalid", _details(exc))
    changes = model.model_dump(exclude_unset=True)
    errors = [
        {"path": to_camel(key), "message": "may not be null"}
        for key, value in changes.items()
        if value is None and key not in schema.nullable_fields
    ]
    if errors:
        raise ValidationError(f"{label} data is invalid", errors)
    return changes
