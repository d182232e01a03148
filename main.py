# main.py
# Entry point for the FastAPI application

import logging

import uvicorn
from dotenv import load_dotenv

from useraccounts.config import load_settings
from useraccounts.server import create_app

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s %(levelname)s: %(message)s",
    handlers=[logging.FileHandler("backend.log"), logging.StreamHandler()],
)
logger = logging.getLogger(__name__)

# Suppress pymongo debug logs
logging.getLogger("pymongo").setLevel(logging.WARNING)

# Load environment variables
load_dotenv()
logger.info("Environment variables loaded from .env")

# Fails fast on missing or invalid configuration
settings = load_settings()

app = create_app(settings)


if __name__ == "__main__":
    logger.info(f"Server running on port {settings.port}")
    uvicorn.run(app, host="0.0.0.0", port=settings.port)
