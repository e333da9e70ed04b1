# hotel_booking/main.py

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from hotel_booking.config import ALLOWED_ORIGINS
from hotel_booking.logging_config import setup_logging
from hotel_booking.middleware import RequestIDMiddleware
from hotel_booking.routes.availability import router as availability_router
from hotel_booking.routes.health import router as health_router
from hotel_booking.routes.holds import router as holds_router
from hotel_booking.routes.integration import router as integration_router
from hotel_booking.routes.metrics import router as metrics_router
from hotel_booking.routes.reservations import router as reservations_router

# Initialize structured logging
setup_logging()
logger = structlog.get_logger(__name__)

app = FastAPI(
    title="Hotel Booking API",
    description="Room holds, reservations, confirmation/cancellation and availability",
    version="1.0.0",
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=ALLOWED_ORIGINS if "*" not in ALLOWED_ORIGINS else ["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(RequestIDMiddleware)

# Register routers
app.include_router(health_router, tags=["Health"])
app.include_router(metrics_router, tags=["Metrics"])
app.include_router(holds_router, tags=["Holds"])
app.include_router(reservations_router, tags=["Reservations"])
app.include_router(availability_router, tags=["Availability"])
app.include_router(integration_router, prefix="/integration", tags=["Integration"])
