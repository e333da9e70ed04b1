import os

from dotenv import load_dotenv

load_dotenv()

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
DEBUG = LOG_LEVEL == "DEBUG"

DATABASE_URL = os.getenv("DATABASE_URL")
if not DATABASE_URL:
    raise ValueError("DATABASE_URL must be set in the environment")

ALLOWED_ORIGINS: list[str] = [
    origin.strip() for origin in os.getenv("ALLOWED_ORIGINS", "*").split(",")
]

# Booking authority (service of record that turns a hold into a reservation)
BOOKING_AUTHORITY_URL = os.getenv("BOOKING_AUTHORITY_URL", "http://localhost:8081")
BOOKING_AUTHORITY_TIMEOUT = float(os.getenv("BOOKING_AUTHORITY_TIMEOUT", "10"))

DEFAULT_HOLD_SECONDS = int(os.getenv("DEFAULT_HOLD_SECONDS", "900"))

# Payment defaults for reservations confirmed through the integration flow
DEFAULT_PAYMENT_METHOD_ID = int(os.getenv("DEFAULT_PAYMENT_METHOD_ID", "2"))  # card
PAYMENT_DESTINATION_ACCOUNT = int(os.getenv("PAYMENT_DESTINATION_ACCOUNT", "707001310"))
