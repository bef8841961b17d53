from datetime import date
from decimal import Decimal
from typing import List, Literal, Optional

from pydantic import BaseModel, EmailStr, Field, computed_field

from librarium.models.book import AuthorRole
from librarium.models.book_copy import CopyStatus
from librarium.models.fine import FineReason, PaymentStatus
from librarium.models.member import MembershipStatus
from librarium.models.reservation import ReservationStatus
from librarium.models.staff import StaffRole


class BaseSchema(BaseModel):
    class Config:
        from_attributes = True


# Members
class MemberCreate(BaseSchema):
    first_name: str = Field(..., min_length=1, max_length=50)
    last_name: str = Field(..., min_length=1, max_length=50)
    email: EmailStr
    phone: Optional[str] = Field(None, max_length=20)
    address: Optional[str] = Field(None, max_length=255)
    membership_status: MembershipStatus = MembershipStatus.ACTIVE
    membership_expiry: Optional[date] = None


class MemberUpdate(BaseSchema):
    first_name: Optional[str] = Field(None, min_length=1, max_length=50)
    last_name: Optional[str] = Field(None, min_length=1, max_length=50)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, max_length=20)
    address: Optional[str] = Field(None, max_length=255)
    membership_status: Optional[MembershipStatus] = None
    membership_expiry: Optional[date] = None


class MemberResponse(MemberCreate):
    member_id: int
    membership_date: date


class MemberCardCreate(BaseSchema):
    card_number: str = Field(..., min_length=1, max_length=20)
    issue_date: Optional[date] = None
    expiry_date: date


class MemberCardResponse(BaseSchema):
    card_id: int
    member_id: int
    card_number: str
    issue_date: date
    expiry_date: date


# Authors, publishers, categories
class AuthorCreate(BaseSchema):
    first_name: str = Field(..., min_length=1, max_length=50)
    last_name: str = Field(..., min_length=1, max_length=50)
    birth_year: Optional[int] = None
    death_year: Optional[int] = None
    nationality: Optional[str] = Field(None, max_length=50)
    biography: Optional[str] = None


class AuthorUpdate(BaseSchema):
    first_name: Optional[str] = Field(None, min_length=1, max_length=50)
    last_name: Optional[str] = Field(None, min_length=1, max_length=50)
    birth_year: Optional[int] = None
    death_year: Optional[int] = None
    nationality: Optional[str] = Field(None, max_length=50)
    biography: Optional[str] = None


class AuthorResponse(AuthorCreate):
    author_id: int


class PublisherCreate(BaseSchema):
    name: str = Field(..., min_length=1, max_length=100)
    address: Optional[str] = Field(None, max_length=255)
    phone: Optional[str] = Field(None, max_length=20)
    email: Optional[str] = Field(None, max_length=100)
    website: Optional[str] = Field(None, max_length=255)
    established_year: Optional[int] = None


class PublisherUpdate(BaseSchema):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    address: Optional[str] = Field(None, max_length=255)
    phone: Optional[str] = Field(None, max_length=20)
    email: Optional[str] = Field(None, max_length=100)
    website: Optional[str] = Field(None, max_length=255)
    established_year: Optional[int] = None


class PublisherResponse(PublisherCreate):
    publisher_id: int


class CategoryCreate(BaseSchema):
    name: str = Field(..., min_length=1, max_length=50)
    description: Optional[str] = None
    parent_category_id: Optional[int] = None


class CategoryUpdate(BaseSchema):
    name: Optional[str] = Field(None, min_length=1, max_length=50)
    description: Optional[str] = None
    parent_category_id: Optional[int] = None


class CategoryResponse(CategoryCreate):
    category_id: int


# Books
class BookAuthorLink(BaseSchema):
    author_id: int
    role: AuthorRole = AuthorRole.PRIMARY


class BookCategoryLink(BaseSchema):
    category_id: int


class BookCreate(BaseSchema):
    isbn: str = Field(..., min_length=1, max_length=20)
    title: str = Field(..., min_length=1, max_length=255)
    publisher_id: Optional[int] = None
    publication_year: Optional[int] = None
    edition: Optional[str] = Field(None, max_length=20)
    pages: Optional[int] = Field(None, gt=0)
    language: Optional[str] = Field(None, max_length=30)
    description: Optional[str] = None
    authors: List[BookAuthorLink] = []
    category_ids: List[int] = []


class BookUpdate(BaseSchema):
    isbn: Optional[str] = Field(None, min_length=1, max_length=20)
    title: Optional[str] = Field(None, min_length=1, max_length=255)
    publisher_id: Optional[int] = None
    publication_year: Optional[int] = None
    edition: Optional[str] = Field(None, max_length=20)
    pages: Optional[int] = Field(None, gt=0)
    language: Optional[str] = Field(None, max_length=30)
    description: Optional[str] = None


class BookResponse(BaseSchema):
    book_id: int
    isbn: str
    title: str
    publisher_id: Optional[int] = None
    publication_year: Optional[int] = None
    edition: Optional[str] = None
    pages: Optional[int] = None
    language: Optional[str] = None
    description: Optional[str] = None
    added_date: date
    author_links: List[BookAuthorLink] = Field(default=[], serialization_alias="authors")
    category_links: List[BookCategoryLink] = Field(
        default=[],
        serialization_alias="categories",
    )


class BookCopyCreate(BaseSchema):
    barcode: str = Field(..., min_length=1, max_length=50)
    acquisition_date: Optional[date] = None
    price: Optional[Decimal] = Field(None, ge=0)
    status: CopyStatus = CopyStatus.AVAILABLE
    location: Optional[str] = Field(None, max_length=50)


class BookCopyUpdate(BaseSchema):
    barcode: Optional[str] = Field(None, min_length=1, max_length=50)
    price: Optional[Decimal] = Field(None, ge=0)
    status: Optional[CopyStatus] = None
    location: Optional[str] = Field(None, max_length=50)


class BookCopyResponse(BaseSchema):
    copy_id: int
    book_id: int
    barcode: str
    acquisition_date: date
    price: Optional[Decimal] = None
    status: CopyStatus
    location: Optional[str] = None


# Staff
class StaffCreate(BaseSchema):
    first_name: str = Field(..., min_length=1, max_length=50)
    last_name: str = Field(..., min_length=1, max_length=50)
    email: EmailStr
    phone: Optional[str] = Field(None, max_length=20)
    role: StaffRole
    hire_date: Optional[date] = None
    supervisor_id: Optional[int] = None


class StaffUpdate(BaseSchema):
    first_name: Optional[str] = Field(None, min_length=1, max_length=50)
    last_name: Optional[str] = Field(None, min_length=1, max_length=50)
    email: Optional[EmailStr] = None
    phone: Optional[str] = Field(None, max_length=20)
    role: Optional[StaffRole] = None
    supervisor_id: Optional[int] = None


class StaffResponse(StaffCreate):
    staff_id: int
    hire_date: date


# Loans
class LoanCreate(BaseModel):
    copy_id: int
    member_id: int
    staff_id: Optional[int] = None
    checkout_date: Optional[date] = None
    due_date: Optional[date] = None


class LoanReturn(BaseModel):
    return_date: Optional[date] = None
    condition: Literal["good", "damaged", "lost"] = "good"


class LoanResponse(BaseSchema):
    loan_id: int
    copy_id: int
    member_id: int
    staff_id: Optional[int] = None
    checkout_date: date
    due_date: date
    return_date: Optional[date] = None
    renewed_times: int

    @computed_field
    @property
    def is_overdue(self) -> bool:
        return self.return_date is None and self.due_date < date.today()


# Reservations
class ReservationCreate(BaseModel):
    book_id: int
    member_id: int
    reservation_date: Optional[date] = None
    expiry_date: Optional[date] = None


class ReservationFulfill(BaseModel):
    copy_id: Optional[int] = None


class ReservationResponse(BaseSchema):
    reservation_id: int
    book_id: int
    member_id: int
    copy_id: Optional[int] = None
    reservation_date: date
    expiry_date: date
    status: ReservationStatus


# Fines
class FineCreate(BaseModel):
    loan_id: int
    amount: Decimal = Field(..., gt=0, max_digits=10, decimal_places=2)
    reason: FineReason


class FinePayment(BaseModel):
    paid_date: Optional[date] = None


class FineResponse(BaseSchema):
    fine_id: int
    loan_id: int
    amount: Decimal
    reason: FineReason
    issue_date: date
    payment_status: PaymentStatus
    paid_date: Optional[date] = None
