import os

SECRET_KEY = os.getenv("SECRET_KEY", "dev-secret-key")

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "school_admin"),
}

DEBUG = True
LOG_LEVEL = os.getenv("LOG_LEVEL", "DEBUG")

# 'local' keeps identities in MySQL, 'supabase' uses the hosted Auth admin API
IDENTITY_BACKEND = os.getenv("IDENTITY_BACKEND", "local")
SUPABASE_CONFIG = {
    "url": os.getenv("SUPABASE_URL", ""),
    "service_role_key": os.getenv("SUPABASE_SERVICE_ROLE_KEY", ""),
    "anon_key": os.getenv("SUPABASE_ANON_KEY", ""),
}

# 'show_once' returns the generated password to the approving admin,
# 'reset_required' discards it and the applicant resets their password
REGISTRATION_SECRET_POLICY = os.getenv("REGISTRATION_SECRET_POLICY", "show_once")
PENDING_LIST_LIMIT = int(os.getenv("PENDING_LIST_LIMIT", "200"))

# If enabled, app will apply schema.sql on startup (idempotent: CREATE IF NOT EXISTS)
AUTO_INIT_DB = bool(int(os.getenv("AUTO_INIT_DB", "1")))
# Optional: also create the admin account on startup
AUTO_SEED_DB = bool(int(os.getenv("AUTO_SEED_DB", "0")))
ADMIN_NAME = os.getenv("ADMIN_NAME", "Administrator")
ADMIN_EMAIL = os.getenv("ADMIN_EMAIL", "admin@school.test")
ADMIN_PASSWORD = os.getenv("ADMIN_PASSWORD", "admin123")
