import os

SECRET_KEY = "test-secret"

SUPABASE_URL = os.getenv("SUPABASE_URL", "http://localhost:54321")
SUPABASE_ANON_KEY = os.getenv("SUPABASE_ANON_KEY", "test-anon-key")
SUPABASE_SERVICE_ROLE_KEY = None

DEBUG = False
TESTING = True
LOG_LEVEL = "WARNING"
