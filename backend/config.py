"""
Configuration module for Fixing Maritime backend.
Handles environment variables and application settings.
"""
import os
from pathlib import Path
from dotenv import load_dotenv

# Load environment variables
ROOT_DIR = Path(__file__).parent
load_dotenv(ROOT_DIR / '.env')

# MongoDB Configuration (unset MONGO_URL runs the service in demo mode)
MONGO_URL = os.environ.get('MONGO_URL', '').strip()
DB_NAME = os.environ.get('DB_NAME', 'fixing_maritime')
DB_CONNECT_RETRIES = int(os.environ.get('DB_CONNECT_RETRIES', '5'))

# Application Settings
APP_TITLE = "Fixing Maritime API"
APP_VERSION = "1.0.0"
APP_ENV = os.environ.get('APP_ENV', 'development').strip().lower()
IS_PRODUCTION = APP_ENV == 'production'

# Auth Settings
JWT_SECRET = os.environ.get('JWT_SECRET', 'change-me-secret')
JWT_ALGORITHM = "HS256"
ADMIN_TOKEN_HOURS = int(os.environ.get('ADMIN_TOKEN_HOURS', '8'))
ADMIN_COOKIE_NAME = "admin-token"
SESSION_DAYS = int(os.environ.get('SESSION_DAYS', '30'))
SESSION_COOKIE_NAME = "session_token"
BCRYPT_ROUNDS = int(os.environ.get('BCRYPT_ROUNDS', '12'))
VERIFICATION_TOKEN_HOURS = 24
MIN_PASSWORD_LENGTH = 8

# Demo mode admin (only seeded into the in-memory store)
DEMO_ADMIN_EMAIL = os.environ.get('DEMO_ADMIN_EMAIL', 'admin@fixingmaritime.com')
DEMO_ADMIN_PASSWORD = os.environ.get('DEMO_ADMIN_PASSWORD', 'admin123')

# Alternate content datastore (Supabase-style REST endpoint)
CONTENT_FALLBACK_URL = os.environ.get('CONTENT_FALLBACK_URL', '').rstrip('/')
CONTENT_FALLBACK_KEY = os.environ.get('CONTENT_FALLBACK_KEY', '')
CONTENT_FALLBACK_TIMEOUT = float(os.environ.get('CONTENT_FALLBACK_TIMEOUT', '5'))

# Billing defaults
DEFAULT_CURRENCY = "NGN"
DEFAULT_PAYMENT_TERMS_DAYS = 30
QUOTE_INVOICE_VAT_RATE = 0.075

# CORS Settings
ALLOWED_ORIGINS = [
    origin.strip()
    for origin in os.environ.get(
        'ALLOWED_ORIGINS', 'http://localhost:3000,http://localhost:3001'
    ).split(',')
    if origin.strip()
]
