from lms_api.config import create_db, settings
from lms_api.dependencies import open_store
from lms_api.repositories.base import Store
from lms_api.services.quiz_service import QuizService
from lms_api.services.role_service import RoleService
from lms_api.utils.logger import configure_logging

logger = configure_logging()


def seed_store(store: Store, admin_usernames: list[str]) -> None:
    """Seed the quiz bank when empty and make sure configured admins hold their grant."""
    QuizService(store).seed()
    RoleService(store).sync_admins(admin_usernames)


def bootstrap() -> None:
    if settings.storage_backend != "json":
        create_db()
    store = open_store()
    try:
        seed_store(store, settings.admin_username_list)
    finally:
        store.close()
    logger.info("storage ready backend=%s", settings.storage_backend)
