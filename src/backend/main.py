"""USLex API main entry point."""

import logging
import os

import uvicorn
from dotenv import load_dotenv

load_dotenv()

from backend.api.app import create_app
from uslex.core.utils import set_logging_level

set_logging_level(
    logging.INFO,
    service_name="api",
    environment=os.getenv("ENVIRONMENT", "localhost"),
)

# Create the application
app = create_app()

if __name__ == "__main__":
    uvicorn.run("backend.main:app", host="0.0.0.0", port=8000, reload=True)
