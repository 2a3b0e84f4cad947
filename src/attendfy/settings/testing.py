import os

SECRET_KEY = "test-secret"

JWT_SECRET = "test-jwt-secret"
JWT_ALGORITHM = "HS256"
TOKEN_TTL_HOURS = 24
PASSWORD_CHECK_TIMEOUT = 5.0

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "attendfy_test"),
}
DB_CONNECT_TIMEOUT = 2

CORS_ORIGINS = ["http://localhost:3000"]

LOGIN_RATE_LIMIT = "5 per 15 minutes"
RATELIMIT_STORAGE_URI = "memory://"

LOG_LEVEL = "WARNING"
DEBUG = False
TESTING = True

AUTO_INIT_DB = False
AUTO_SEED_DB = False

SUPER_ADMIN_EMAIL = ""
SUPER_ADMIN_PASSWORD = ""
SUPER_ADMIN_EMPLOYEE_ID = "SA000001"
