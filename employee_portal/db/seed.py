"""
Seed the login user and sample employees.

Usage:
    python -m employee_portal.db.seed [--create-tables]
"""
import argparse
import asyncio
import logging
from decimal import Decimal

from sqlalchemy import select, func
from sqlalchemy.ext.asyncio import AsyncSession

from employee_portal.core.config import settings
from employee_portal.core.security import get_password_hash
from employee_portal.db.session import AsyncSessionLocal, create_tables
from employee_portal.models.employee import Employee
from employee_portal.models.user import User

logger = logging.getLogger("employee_portal.seed")

SAMPLE_EMPLOYEES = [
    ("Alice Johnson", "alice.johnson@company.com", "Software Engineer", "85000.00", "active"),
    ("Bob Smith", "bob.smith@company.com", "Product Manager", "95000.00", "active"),
    ("Carol White", "carol.white@company.com", "UX Designer", "75000.00", "active"),
    ("David Brown", "david.brown@company.com", "DevOps Engineer", "90000.00", "inactive"),
    ("Emma Davis", "emma.davis@company.com", "Frontend Developer", "80000.00", "active"),
    ("Frank Miller", "frank.miller@company.com", "Backend Developer", "88000.00", "active"),
    ("Grace Lee", "grace.lee@company.com", "QA Engineer", "70000.00", "active"),
    ("Henry Wilson", "henry.wilson@company.com", "Data Analyst", "78000.00", "active"),
    ("Isabel Martinez", "isabel.martinez@company.com", "HR Manager", "82000.00", "active"),
    ("Jack Taylor", "jack.taylor@company.com", "Sales Representative", "65000.00", "inactive"),
    ("Karen Anderson", "karen.anderson@company.com", "Marketing Specialist", "72000.00", "active"),
    ("Liam Thomas", "liam.thomas@company.com", "System Administrator", "84000.00", "active"),
    ("Mia Jackson", "mia.jackson@company.com", "Business Analyst", "79000.00", "active"),
    ("Noah Harris", "noah.harris@company.com", "Mobile Developer", "87000.00", "active"),
    ("Olivia Clark", "olivia.clark@company.com", "Scrum Master", "92000.00", "inactive"),
]


async def seed_user(
    db: AsyncSession,
    name: str | None = None,
    email: str | None = None,
    password: str | None = None,
) -> User:
    """Create the login user, or reset its password if it already exists."""
    name = name or settings.SEED_USER_NAME
    email = email or settings.SEED_USER_EMAIL
    password = password or settings.SEED_USER_PASSWORD

    result = await db.execute(select(User).where(User.email == email))
    user = result.scalar_one_or_none()

    if user:
        user.hashed_password = get_password_hash(password)
        await db.commit()
        logger.info(f"Reset password for existing user {email}")
        return user

    user = User(name=name, email=email, hashed_password=get_password_hash(password))
    db.add(user)
    await db.commit()
    await db.refresh(user)
    logger.info(f"Created user {email}")
    return user


async def seed_employees(db: AsyncSession) -> int:
    """Insert the sample employees when the table is empty. Returns rows inserted."""
    existing = await db.scalar(select(func.count()).select_from(Employee))
    if existing:
        logger.info(f"Employees table already has {existing} rows, skipping")
        return 0

    db.add_all([
        Employee(name=name, email=email, position=position, salary=Decimal(salary), status=status)
        for name, email, position, salary, status in SAMPLE_EMPLOYEES
    ])
    await db.commit()
    logger.info(f"Seeded {len(SAMPLE_EMPLOYEES)} employees")
    return len(SAMPLE_EMPLOYEES)


async def run(create: bool = False) -> None:
    if create:
        await create_tables()
    async with AsyncSessionLocal() as db:
        await seed_user(db)
        await seed_employees(db)


def main() -> None:
    from employee_portal.core.logging_config import setup_logging

    parser = argparse.ArgumentParser(description="Seed the Employee Portal database")
    parser.add_argument(
        "--create-tables",
        action="store_true",
        help="Create missing tables before seeding (instead of running Alembic)",
    )
    args = parser.parse_args()

    setup_logging()
    asyncio.run(run(create=args.create_tables))


if __name__ == "__main__":
    main()
