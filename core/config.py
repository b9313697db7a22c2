import os
import pathlib

from dotenv import load_dotenv

load_dotenv()

BASE_DIR = pathlib.Path(__file__).parent.parent

# Storage configuration
PAGES_DIR = pathlib.Path(os.getenv("PAGES_DIR", BASE_DIR / "pages"))
UPLOADS_DIR = pathlib.Path(os.getenv("UPLOADS_DIR", BASE_DIR / "uploads"))
STATIC_DIR = BASE_DIR / "static"

# Public URL prefix for uploaded images
UPLOADS_URL = "/uploads"

# Web service configuration
WEB_HOST = os.getenv("WEB_HOST", "0.0.0.0")
WEB_PORT = int(os.getenv("PORT", 3000))

# Logging configuration
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
