# Import all models here
# This way when we import Base to alembic env.py all models are also will be imported
# and changes applied to migration script

from librarium.dependencies.database import Base

from .author import Author
from .book import AuthorRole, Book, BookAuthor, BookCategory
from .book_copy import BookCopy, CopyStatus
from .category import Category
from .fine import Fine, FineReason, PaymentStatus
from .loan import Loan
from .member import Member, MemberCard, MembershipStatus
from .project import Project, ProjectStatus
from .publisher import Publisher
from .reservation import Reservation, ReservationStatus
from .staff import Staff, StaffRole
from .task import Task, TaskPriority, TaskStatus
from .user import User, UserRole
