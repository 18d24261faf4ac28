import os

from dotenv import load_dotenv

load_dotenv()


def _origins(value):
    if not value or value == "*":
        return "*"
    return [o.strip() for o in value.split(",") if o.strip()]


class Config:
    SECRET_KEY = os.environ.get('SECRET_KEY') or 'dev_secret_key'
    TESTING = False
    # Optional Socket.IO message queue (multi-instance deployments)
    REDIS_URL = os.environ.get('REDIS_URL')
    CORS_ALLOWED_ORIGINS = _origins(os.environ.get('CORS_ALLOWED_ORIGINS', '*'))
    # Finished rooms are kept this long so clients can show the result screen
    CLEANUP_DELAY_SEC = float(os.environ.get('CLEANUP_DELAY_SEC', '30'))
    CHAT_HISTORY_LIMIT = int(os.environ.get('CHAT_HISTORY_LIMIT', '100'))
    CHAT_MESSAGE_MAX_LEN = int(os.environ.get('CHAT_MESSAGE_MAX_LEN', '500'))
    # Firestore service account key; unset disables coin persistence
    FIREBASE_CREDENTIALS = os.environ.get('FIREBASE_CREDENTIALS')
