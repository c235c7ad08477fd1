"""
Database initialization script
Run this to create tables and seed reference and sample data
"""
from datetime import date, datetime, timezone
from decimal import Decimal

from benefitpoint.core.config import settings
from benefitpoint.core.database import Base, create_db_engine, create_session_factory
from benefitpoint.main import seed_reference_data
from benefitpoint.models import Account, Plan


def init_db(engine):
    """Initialize database with tables"""
    print("Creating database tables...")
    Base.metadata.create_all(bind=engine)
    print("✓ Tables created successfully")


def seed_data(session_factory):
    """Seed plan types, carriers and one sample account"""
    db = session_factory()

    try:
        print("\nSeeding initial data...")

        seed_reference_data(db)
        print("✓ Plan types and carriers seeded")

        account = db.query(Account).filter(Account.account == "The Daily Grind").first()
        if not account:
            account = Account(
                account="The Daily Grind",
                state="CA",
                sba=1,
                commission_1_basis="Per Employee Per Month",
                flat_fee=Decimal("25.00"),
                percentage=Decimal("4.500"),
                created_date=datetime.now(timezone.utc),
            )
            db.add(account)
            db.flush()
            print("✓ Sample account created (The Daily Grind)")

        if not db.query(Plan).filter(Plan.account_id == account.account_id).first():
            db.add(Plan(
                account_id=account.account_id,
                carrier="Blue Shield of California",
                plan_type="Medical PPO",
                commission_paid_by_carrier="Yes",
                billing="List Bill",
                policy_group_number="W0051234",
                effective_date=date(2024, 1, 1),
                renewal_date=date(2025, 1, 1),
                status="active",
                created_date=datetime.now(timezone.utc),
            ))
            print("✓ Sample plan created (Blue Shield of California Medical PPO)")

        db.commit()
        print("\n✓ Database initialization complete!")

    except Exception as e:
        print(f"\n✗ Error seeding data: {e}")
        db.rollback()
        raise
    finally:
        db.close()


if __name__ == "__main__":
    engine = create_db_engine(settings.DATABASE_URL)
    init_db(engine)
    seed_data(create_session_factory(engine))
