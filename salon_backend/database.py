import os
from dotenv import load_dotenv
from threading import Lock
from uuid import uuid4

from sqlalchemy import create_engine, inspect, text
from sqlalchemy.orm import declarative_base, sessionmaker

from salon_backend.core import config


load_dotenv()
DATABASE_URL = os.getenv("DATABASE_URL")


def engine_options(database_url: str) -> dict:
    options: dict = {"echo": config.SQL_ECHO}
    if database_url.startswith("sqlite"):
        options["connect_args"] = {
            "check_same_thread": False,
            "timeout": config.SQLITE_BUSY_TIMEOUT_SECONDS,
        }
    else:
        options["pool_pre_ping"] = True
    return options


engine = create_engine(DATABASE_URL, **engine_options(DATABASE_URL or ""))

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
)

Base = declarative_base()

_schema_lock = Lock()
_slot_schema_checked = False
_appointment_schema_checked = False


def ensure_slot_schema() -> None:
    global _slot_schema_checked

    if _slot_schema_checked:
        return

    with _schema_lock:
        if _slot_schema_checked:
            return

        inspector = inspect(engine)

        if 'schedule_slots' not in inspector.get_table_names():
            _slot_schema_checked = True
            return

        existing_columns = {column['name'] for column in inspector.get_columns('schedule_slots')}
        migration_steps = [
            ('day_of_week', 'ALTER TABLE schedule_slots ADD COLUMN day_of_week VARCHAR'),
            ('appointment_id', 'ALTER TABLE schedule_slots ADD COLUMN appointment_id VARCHAR'),
            ('created_at', 'ALTER TABLE schedule_slots ADD COLUMN created_at TIMESTAMP'),
        ]

        with engine.begin() as connection:
            for column_name, statement in migration_steps:
                if column_name not in existing_columns:
                    connection.execute(text(statement))
            connection.execute(
                text(
                    'CREATE UNIQUE INDEX IF NOT EXISTS uq_schedule_slot_key '
                    'ON schedule_slots(barber_id, salon_id, date, start_time)'
                )
            )
            connection.execute(
                text('CREATE INDEX IF NOT EXISTS idx_schedule_slots_salon_date ON schedule_slots(salon_id, date, is_booked)')
            )
            connection.execute(
                text('CREATE INDEX IF NOT EXISTS idx_schedule_slots_orphans ON schedule_slots(is_booked, appointment_id)')
            )

        _slot_schema_checked = True


def ensure_appointment_schema() -> None:
    global _appointment_schema_checked

    if _appointment_schema_checked:
        return

    with _schema_lock:
        if _appointment_schema_checked:
            return

        inspector = inspect(engine)

        if 'appointments' not in inspector.get_table_names():
            _appointment_schema_checked = True
            return

        existing_columns = {column['name'] for column in inspector.get_columns('appointments')}
        migration_steps = [
            ('payment_status', "ALTER TABLE appointments ADD COLUMN payment_status VARCHAR DEFAULT 'pending'"),
            ('notes', 'ALTER TABLE appointments ADD COLUMN notes VARCHAR'),
            ('created_at', 'ALTER TABLE appointments ADD COLUMN created_at TIMESTAMP'),
        ]

        with engine.begin() as connection:
            for column_name, statement in migration_steps:
                if column_name not in existing_columns:
                    connection.execute(text(statement))
            connection.execute(
                text('CREATE INDEX IF NOT EXISTS idx_appointments_customer ON appointments(customer_id, appointment_date_time)')
            )
            connection.execute(
                text('CREATE INDEX IF NOT EXISTS idx_appointments_slot ON appointments(schedule_slot_id)')
            )

        _appointment_schema_checked = True


def generate_id() -> str:
    return uuid4().hex
