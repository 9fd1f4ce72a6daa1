# import every model so Base.metadata knows all tables (used by init_db, alembic and tests)
from app.db.base_class import Base  # noqa: F401
from app.models import (  # noqa: F401
    enrollment,
    grade,
    grade_override,
    subject,
    submission,
    task,
    user,
)
