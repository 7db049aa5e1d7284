"""
Alembic environment for the Listkeeper schema.

Run from the project root (alembic.ini puts backend/ on sys.path):
    alembic upgrade head

The connection string comes from core.config (environment or etc/app.conf),
never from alembic.ini.
"""

from alembic import context
from sqlalchemy import create_engine

from core.config import settings
from database import Base

# Register every table on Base.metadata
import models.user       # noqa: F401, E402
import models.checklist  # noqa: F401, E402
import models.preset     # noqa: F401, E402
import models.note       # noqa: F401, E402


def run_migrations_offline():
    """Emit SQL to stdout instead of executing it (``alembic upgrade --sql``)."""
    context.configure(
        url=settings.database_url,
        target_metadata=Base.metadata,
        literal_binds=True,
    )
    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online():
    engine = create_engine(settings.database_url)
    with engine.connect() as conn:
        context.configure(connection=conn, target_metadata=Base.metadata)
        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
