import os
from pathlib import Path
from dotenv import load_dotenv

# Load environment variables (only in development)
# In containers, environment variables are set directly
if os.getenv("ENVIRONMENT") != "production":
    load_dotenv()

ENVIRONMENT = os.getenv("ENVIRONMENT", "development")
IS_PRODUCTION = ENVIRONMENT == "production"

BASE_DIR = Path(__file__).resolve().parent.parent.parent

# Storage root - department folders live under <UPLOAD_DIR>/documents/
UPLOAD_DIR = Path(os.getenv("UPLOAD_DIR", str(BASE_DIR / "uploads")))

# Database configuration
DATABASE_TYPE = os.getenv("DATABASE_TYPE", "sql")  # Options: 'sql', 'memory'
DB_DIR = Path(os.getenv("DB_DIR", str(BASE_DIR / "data")))
DATABASE_URL = os.getenv("DATABASE_URL", f"sqlite+aiosqlite:///{DB_DIR / 'docvault.db'}")
DATABASE_ECHO = os.getenv("DATABASE_ECHO", "false").lower() == "true"

# External ML service
AI_PROVIDER = os.getenv("AI_PROVIDER", "remote")  # Options: 'remote', 'heuristic', 'demo'
ML_SERVICE_URL = os.getenv("PYTHON_ML_SERVICE_URL", os.getenv("ML_SERVICE_URL", "http://localhost:8000")).rstrip("/")
ML_CLASSIFICATION_API = os.getenv("ML_CLASSIFICATION_API", f"{ML_SERVICE_URL}/api/classify")
ML_SUMMARY_API = os.getenv("ML_SUMMARY_API", f"{ML_SERVICE_URL}/api/summarize")
ML_OCR_API = os.getenv("ML_OCR_API", f"{ML_SERVICE_URL}/api/process/document")
ML_REQUEST_TIMEOUT = float(os.getenv("ML_REQUEST_TIMEOUT", "60"))
ML_OCR_TIMEOUT = float(os.getenv("ML_OCR_TIMEOUT", "300"))
ML_HEALTH_TIMEOUT = float(os.getenv("ML_HEALTH_TIMEOUT", "5"))
# A record left in processing longer than this may be reprocessed
PROCESSING_STALE_AFTER = float(os.getenv(
    "PROCESSING_STALE_AFTER", str(ML_OCR_TIMEOUT + 2 * ML_REQUEST_TIMEOUT + 60)
))
MAX_SUMMARY_LENGTH = int(os.getenv("MAX_SUMMARY_LENGTH", "500"))
CLASSIFICATION_CONFIDENCE_THRESHOLD = float(os.getenv("CLASSIFICATION_CONFIDENCE_THRESHOLD", "0.7"))
OCR_CONFIDENCE_THRESHOLD = float(os.getenv("OCR_CONFIDENCE_THRESHOLD", "0.6"))
NORMALIZE_LEGACY_LABELS = os.getenv("NORMALIZE_LEGACY_LABELS", "true").lower() == "true"

# Authentication
JWT_SECRET = os.getenv("JWT_SECRET", "change-me-in-production")
JWT_ALGORITHM = os.getenv("JWT_ALGORITHM", "HS256")
JWT_EXPIRES_HOURS = int(os.getenv("JWT_EXPIRES_HOURS", "8"))
ELEVATED_ROLES = [
    role.strip().lower()
    for role in os.getenv("ELEVATED_ROLES", "admin,director").split(",")
    if role.strip()
]

# Upload limits
MAX_FILE_SIZE = int(os.getenv("MAX_FILE_SIZE", str(20 * 1024 * 1024)))  # 20MB
MAX_FILES_PER_UPLOAD = int(os.getenv("MAX_FILES_PER_UPLOAD", "10"))
SUPPORTED_FORMATS = [
    ext.strip().lower()
    for ext in os.getenv(
        "SUPPORTED_FORMATS",
        ".pdf,.doc,.docx,.jpg,.jpeg,.png,.xlsx,.dwg,.dxf,.bmp,.tiff,.txt"
    ).split(",")
    if ext.strip()
]

# Listing and search
DEFAULT_PAGE_SIZE = int(os.getenv("DEFAULT_PAGE_SIZE", "20"))
MAX_PAGE_SIZE = int(os.getenv("MAX_PAGE_SIZE", "100"))
SEARCH_CANDIDATE_LIMIT = int(os.getenv("SEARCH_CANDIDATE_LIMIT", "1000"))

# Rate Limiting
RATE_LIMIT_ENABLED = os.getenv("RATE_LIMIT_ENABLED", "true").lower() == "true"
RATE_LIMIT_PER_MINUTE = int(os.getenv("RATE_LIMIT_PER_MINUTE", "100"))
UPLOAD_RATE_LIMIT_PER_MINUTE = int(os.getenv("UPLOAD_RATE_LIMIT_PER_MINUTE", "20"))

# CORS
CORS_ORIGINS = os.getenv("CORS_ORIGINS", "http://localhost:3000,http://localhost:5173").split(",")

# Logging
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
LOG_FILE_ENABLED = os.getenv("LOG_FILE_ENABLED", "true").lower() == "true"
LOG_DIR = Path(os.getenv("LOG_DIR", "logs"))
