from threading import Lock

from sqlalchemy import create_engine, inspect, text
from sqlalchemy.orm import declarative_base, sessionmaker

from dental_backend.core import config


engine = create_engine(config.DATABASE_URL, echo=config.DATABASE_ECHO)

SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine,
)

Base = declarative_base()

_schema_lock = Lock()
_scheduling_indexes_checked = False

SCHEDULING_INDEXES = {
    'doctor_availability': [
        'CREATE INDEX IF NOT EXISTS idx_doctor_availability_recurring '
        'ON doctor_availability(doctor_id, branch, recurring, day_of_week)',
        'CREATE INDEX IF NOT EXISTS idx_doctor_availability_specific '
        'ON doctor_availability(doctor_id, branch, specific_date)',
    ],
    'appointments': [
        'CREATE INDEX IF NOT EXISTS idx_appointments_doctor_date '
        'ON appointments(doctor_id, appointment_date)',
    ],
}


def ensure_scheduling_indexes(bind=None) -> None:
    """Create the lookup indexes used by availability queries, once per process."""
    global _scheduling_indexes_checked

    if _scheduling_indexes_checked:
        return

    with _schema_lock:
        if _scheduling_indexes_checked:
            return

        target = bind or engine
        existing_tables = set(inspect(target).get_table_names())

        with target.begin() as connection:
            for table_name, statements in SCHEDULING_INDEXES.items():
                if table_name not in existing_tables:
                    continue
                for statement in statements:
                    connection.execute(text(statement))

        _scheduling_indexes_checked = True
