from dotenv import load_dotenv
load_dotenv()
import os


LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
API_PREFIX = os.getenv("API_PREFIX", "/api")
CORS_ORIGINS = [origin.strip() for origin in os.getenv("CORS_ORIGINS", "*").split(",") if origin.strip()]

# "reject" answers a duplicate email on create with 409.
# "reset" reuses the existing user and wipes its tags and busy slots.
DUPLICATE_EMAIL_POLICY = os.getenv("DUPLICATE_EMAIL_POLICY", "reject").lower()
if DUPLICATE_EMAIL_POLICY not in ("reject", "reset"):
    raise ValueError("DUPLICATE_EMAIL_POLICY must be 'reject' or 'reset'.")
