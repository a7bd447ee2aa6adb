from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictInt, ValidationError, field_validator
from pydantic.alias_generators import to_camel

from library_api.errors import InvalidArgument


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# -----------------------------
# Requests
# -----------------------------
class BorrowRequest(_CamelModel):
    """Body of POST /borrow. Unknown keys are kept as caller metadata."""
    model_config = ConfigDict(extra="allow")

    book_id: str
    requester_identity: str = Field(min_length=1)

    @classmethod
    def from_body(cls, data: dict) -> "BorrowRequest":
        data = dict(data) if isinstance(data, dict) else {}
        # the web client sends the borrower as "email"
        if "requesterIdentity" not in data and "email" in data:
            data["requesterIdentity"] = data.pop("email")
        return parse(cls, data)

    @field_validator("requester_identity")
    @classmethod
    def _strip(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("requesterIdentity must not be blank")
        return v

    @property
    def caller_metadata(self) -> Dict[str, Any]:
        return dict(self.model_extra or {})


class BookCreate(_CamelModel):
    title: str = Field(min_length=1, max_length=200)
    writer: Optional[str] = None
    category: Optional[str] = None
    image: Optional[str] = None
    published: Optional[str] = None
    short_des: Optional[str] = None
    book_quantity: StrictInt = Field(default=1, ge=0)


class BookUpdate(_CamelModel):
    """Descriptive fields only; stock moves through QuantityAdjustment."""
    model_config = ConfigDict(extra="forbid")

    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    writer: Optional[str] = None
    category: Optional[str] = None
    image: Optional[str] = None
    published: Optional[str] = None
    short_des: Optional[str] = None


class QuantityAdjustment(_CamelModel):
    delta: StrictInt

    @field_validator("delta")
    @classmethod
    def _non_zero(cls, v: int) -> int:
        if v == 0:
            raise ValueError("delta must not be zero")
        return v


class RegisterRequest(_CamelModel):
    email: str = Field(min_length=3, max_length=255)
    password: str = Field(min_length=1)
    name: Optional[str] = None

    @field_validator("email")
    @classmethod
    def _normalize_email(cls, v: str) -> str:
        v = v.strip().lower()
        if "@" not in v:
            raise ValueError("email is not valid")
        return v


class LoginRequest(_CamelModel):
    email: str
    password: str


# -----------------------------
# Responses
# -----------------------------
class BookOut(_CamelModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    title: str
    writer: Optional[str] = None
    category: Optional[str] = None
    image: Optional[str] = None
    published: Optional[str] = None
    short_des: Optional[str] = None
    book_quantity: int
    created_at: datetime
    updated_at: datetime


class BorrowRecordOut(_CamelModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    book_id: str
    requester_identity: str
    status: str
    borrowed_at: datetime
    returned_at: Optional[datetime] = None
    metadata: Dict[str, Any] = Field(default_factory=dict, validation_alias="details")


class InsertedId(_CamelModel):
    inserted_id: str


class UserOut(_CamelModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: Optional[str] = None
    email: str
    role: str


def parse(model, data):
    """Validate a request body, turning pydantic errors into InvalidArgument."""
    try:
        return model.model_validate(data if isinstance(data, dict) else {})
    except ValidationError as e:
        err = e.errors()[0]
        field = ".".join(str(p) for p in err.get("loc", ())) or "body"
        raise InvalidArgument(f"{field}: {err.get('msg')}") from e


def dump(model, obj) -> dict:
    return model.model_validate(obj).model_dump(mode="json", by_alias=True)
