import os

VERSION = "0.1.0"

DATABASE_URL = os.getenv("SALESBOARD_DATABASE_URL", "sqlite:///salesboard.db")

# Fixed third-party dataset loaded by /api/initialize.
SEED_URL = os.getenv(
    "SALESBOARD_SEED_URL",
    "https://s3.amazonaws.com/roxiler.com/product_transaction.json",
)

CORS_ORIGINS = [
    o.strip() for o in os.getenv("SALESBOARD_CORS_ORIGINS", "*").split(",") if o.strip()
]

# Where the dashboard client finds the API.
API_URL = os.getenv("SALESBOARD_API_URL", "http://localhost:5000")

HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "5000"))
