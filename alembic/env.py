from logging.config import fileConfig
from quizcraft.core.config import settings
from quizcraft.core.database import Base, enable_sqlite_foreign_keys
from quizcraft.models.user_db.user_db import User  # noqa: F401
from quizcraft.models.quiz_db.quiz_db import Quiz  # noqa: F401
from quizcraft.models.quiz_db.personality_type_db import PersonalityType  # noqa: F401
from quizcraft.models.quiz_db.question_db import Question  # noqa: F401
from quizcraft.models.quiz_db.quiz_answer_db import QuizAnswer  # noqa: F401
from sqlalchemy import engine_from_config, pool
from alembic import context

config = context.config
config.set_main_option("sqlalchemy.url", settings.DATABASE_URL)

if config.config_file_name is not None:
    fileConfig(config.config_file_name)

target_metadata = Base.metadata


def run_migrations_offline() -> None:
    url = config.get_main_option("sqlalchemy.url")
    context.configure(
        url=url,
        target_metadata=target_metadata,
        compare_type=True,
        literal_binds=True,
        dialect_opts={"paramstyle": "named"},
    )

    with context.begin_transaction():
        context.run_migrations()


def run_migrations_online() -> None:
    connectable = engine_from_config(
        config.get_section(config.config_ini_section),
        prefix="sqlalchemy.",
        poolclass=pool.NullPool,
    )
    # cascading deletes in data migrations need the pragma on SQLite
    enable_sqlite_foreign_keys(connectable)

    with connectable.connect() as connection:
        context.configure(
            connection=connection,
            target_metadata=target_metadata,
            compare_type=True,
            render_as_batch=connection.dialect.name == "sqlite",
        )

        with context.begin_transaction():
            context.run_migrations()


if context.is_offline_mode():
    run_migrations_offline()
else:
    run_migrations_online()
