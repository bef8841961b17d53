import logging
from datetime import date, timedelta

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from librarium.models.project import Project, ProjectStatus
from librarium.models.task import Task, TaskPriority, TaskStatus
from librarium.models.user import User, UserRole
from librarium.services.user_service import pwd_context

logger = logging.getLogger(__name__)

SAMPLE_PASSWORD = "changeme123"


async def insert_sample_data(db: AsyncSession) -> bool:
    """Заповнює порожню базу демонстраційними користувачами, проєктами і задачами."""
    user_count = await db.scalar(select(func.count()).select_from(User))
    if user_count:
        logger.info("✅ Users table is not empty, skipping sample data")
        return False

    today = date.today()
    password_hash = pwd_context.hash(SAMPLE_PASSWORD)

    admin = User(
        username="admin",
        email="admin@example.com",
        password_hash=password_hash,
        first_name="Admin",
        last_name="User",
        role=UserRole.ADMIN,
    )
    john = User(
        username="john_doe",
        email="john@example.com",
        password_hash=password_hash,
        first_name="John",
        last_name="Doe",
        role=UserRole.USER,
    )
    jane = User(
        username="jane_smith",
        email="jane@example.com",
        password_hash=password_hash,
        first_name="Jane",
        last_name="Smith",
        role=UserRole.USER,
    )
    db.add_all([admin, john, jane])
    await db.flush()

    website = Project(
        name="Website Redesign",
        description="Update the company website with modern design",
        owner_id=admin.user_id,
        deadline=today + timedelta(days=30),
        status=ProjectStatus.ACTIVE,
    )
    mobile = Project(
        name="Mobile App Development",
        description="Create a new mobile application for customers",
        owner_id=john.user_id,
        deadline=today + timedelta(days=60),
        status=ProjectStatus.ACTIVE,
    )
    migration = Project(
        name="Database Migration",
        description="Migrate legacy database to new system",
        owner_id=admin.user_id,
        deadline=today + timedelta(days=15),
        status=ProjectStatus.ON_HOLD,
    )
    db.add_all([website, mobile, migration])
    await db.flush()

    tasks = [
        ("Design Homepage", "Create mockups for the new homepage", website, jane, admin, 7, TaskPriority.HIGH, TaskStatus.IN_PROGRESS),
        ("Backend API", "Develop REST API endpoints", website, john, admin, 14, TaskPriority.HIGH, TaskStatus.TODO),
        ("User Authentication", "Implement login and registration", mobile, john, john, 10, TaskPriority.URGENT, TaskStatus.IN_PROGRESS),
        ("Database Schema Design", "Design new database schema", migration, admin, admin, 5, TaskPriority.MEDIUM, TaskStatus.REVIEW),
        ("Data Export Script", "Write script to export old data", migration, john, admin, 8, TaskPriority.MEDIUM, TaskStatus.TODO),
    ]
    db.add_all(
        [
            Task(
                title=title,
                description=description,
                project_id=project.project_id,
                assigned_to=assignee.user_id,
                created_by=creator.user_id,
                due_date=today + timedelta(days=days),
                priority=priority,
                status=status,
            )
            for title, description, project, assignee, creator, days, priority, status in tasks
        ],
    )

    await db.commit()
    logger.info("🆕 Sample data inserted successfully")
    return True
