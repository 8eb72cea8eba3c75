import os
from types import SimpleNamespace

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

os.environ.setdefault('DATABASE_URL', 'sqlite:///./test.db')

from salon_backend.database import Base, engine_options  # noqa: E402
from salon_backend.models import appointment, review, schedule_slot, service, staff  # noqa: E402,F401
from salon_backend.models.salon import Salon  # noqa: E402
from salon_backend.models.service import Service  # noqa: E402
from salon_backend.models.staff import Barber, SalonStaff  # noqa: E402


@pytest.fixture
def booking_db():
    engine = create_engine('sqlite:///:memory:')
    testing_session_local = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.create_all(bind=engine)

    db = testing_session_local()
    try:
        yield db
    finally:
        db.close()
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture
def shared_session_factory(tmp_path):
    """Sessions on a file-backed database, one connection per session, for cross-session races."""
    database_url = f'sqlite:///{tmp_path / "booking.db"}'
    engine = create_engine(database_url, **engine_options(database_url))
    Base.metadata.create_all(bind=engine)

    try:
        yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


def _seed_salon(db, opening_time: str | None = '09:00', closing_time: str | None = '21:00') -> SimpleNamespace:
    salon = Salon(name='Glam Studio', city='Dhaka', opening_time=opening_time, closing_time=closing_time)
    other_salon = Salon(name='Other Studio', city='Dhaka', opening_time='10:00', closing_time='18:00')
    db.add_all([salon, other_salon])
    db.flush()

    barber = Barber(
        user_id='user-barber',
        salon_id=salon.id,
        first_name='Rafi',
        last_name='Ahmed',
        specialty='Fades',
        experience_years=6,
        rating=4.5,
    )
    other_barber = Barber(
        user_id='user-other-barber',
        salon_id=other_salon.id,
        first_name='Nadia',
        last_name='Karim',
        specialty='Color',
    )
    db.add_all([barber, other_barber])
    db.flush()

    stylist = SalonStaff(
        user_id='user-stylist',
        salon_id=salon.id,
        first_name='Tania',
        last_name='Islam',
        shift='Full Day',
        is_active=True,
    )
    service = Service(salon_id=salon.id, name='Haircut', category='Haircut', price=25.0, duration_minutes=60)
    other_service = Service(salon_id=other_salon.id, name='Color', category='Hair Color', price=60.0)
    db.add_all([stylist, service, other_service])
    db.commit()

    return SimpleNamespace(
        salon=salon,
        other_salon=other_salon,
        barber=barber,
        other_barber=other_barber,
        stylist=stylist,
        service=service,
        other_service=other_service,
        ids=SimpleNamespace(
            salon=salon.id,
            other_salon=other_salon.id,
            barber=barber.id,
            other_barber=other_barber.id,
            stylist=stylist.id,
            service=service.id,
            other_service=other_service.id,
        ),
    )


@pytest.fixture
def seed_salon():
    return _seed_salon
