import os

from dotenv import load_dotenv

# Load environment variables
load_dotenv()

SECRET_KEY = os.getenv('SECRET_KEY', 'astroname-secret-key')
PORT = int(os.getenv('PORT', 5000))

# Gemini settings. The API key itself is read lazily by LLMManager so that a
# missing key degrades to fallback results instead of failing at import.
GEMINI_MODEL = os.getenv('GEMINI_MODEL', 'gemini-2.0-flash')
GENERATION_TEMPERATURE = float(os.getenv('GENERATION_TEMPERATURE', 0.9))
CHAT_TEMPERATURE = float(os.getenv('CHAT_TEMPERATURE', 0.7))

LOG_FILE = os.getenv('LOG_FILE', 'baby_names_app.log')
LOG_LEVEL = os.getenv('LOG_LEVEL', 'INFO')

RATELIMIT_STORAGE_URI = os.getenv('REDIS_URL', 'memory://')
DEFAULT_LIMITS = ["200 per day", "50 per hour"]

# Pipeline limits
REQUESTED_NAME_COUNT = 12
MAX_BLENDED_NAMES = 3
MAX_RESULTS = 15
MAX_CHAT_SUGGESTIONS = 3
