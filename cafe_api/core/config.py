import os
from decimal import Decimal

# Database Configuration
# Uses default credentials for local Docker Compose setup
DB_URL = os.getenv("DATABASE_URL", "postgres://user:password@db:5432/tambayan_db")

# Application Metadata
PROJECT_NAME = "Tambayan Cafe API"
VERSION = "1.0.0"
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

# CORS: the single frontend allowed to call the API
FRONTEND_URL = os.getenv("FRONTEND_URL", "http://localhost:5173").strip()

# JWT Configuration
JWT_SECRET = os.getenv("JWT_SECRET", "ThisIsYourVerySecureSecretKey123!@#")
JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
JWT_EXPIRE_MINUTES = int(os.getenv("JWT_EXPIRE_MINUTES", 480))  # 8 hours

# Ordering rules
TOTAL_TOLERANCE = Decimal(os.getenv("TOTAL_TOLERANCE", "0.01"))  # Max accepted drift between claimed and computed total
DEFAULT_DELIVERY_FEE = Decimal(os.getenv("DEFAULT_DELIVERY_FEE", "80.00"))  # Out-of-coverage delivery fee

# Walk-in sentinel used when an order has no authenticated customer
WALK_IN_CUSTOMER_ID = "walk-in"
WALK_IN_CUSTOMER_EMAIL = "walkin@tambayan.cafe"
WALK_IN_CUSTOMER_NAME = "Walk-in Customer"

# Auto-Reorder Poller Configuration
REORDER_ENABLED = os.getenv("REORDER_ENABLED", "true").lower() == "true"
REORDER_INTERVAL = int(os.getenv("REORDER_INTERVAL", 120))  # Poller sweeps inventory every N seconds
REORDER_AMOUNT = int(os.getenv("REORDER_AMOUNT", 10))  # Units added per replenishment
