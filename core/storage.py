from core.config import PAGES_DIR, UPLOADS_DIR
from services.page import PageStore

store = PageStore(PAGES_DIR, UPLOADS_DIR)


def get_store() -> PageStore:
    return store
