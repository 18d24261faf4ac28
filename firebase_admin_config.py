import os

import firebase_admin
from firebase_admin import credentials, firestore

from config import Config

_db_client = None


def get_db(credentials_path: str = None):
    """Firestore client with lazy initialization.

    Returns None when no service account key is configured, which disables
    coin persistence without affecting games.
    """
    global _db_client

    if _db_client is not None:
        return _db_client

    path = credentials_path or Config.FIREBASE_CREDENTIALS
    if not path:
        return None
    if not os.path.exists(path):
        print(f"⚠️ Service account key not found: {path}")
        return None

    try:
        if not firebase_admin._apps:
            print("🔥 Firebase initializing (lazy)...")
            firebase_admin.initialize_app(credentials.Certificate(path))
        _db_client = firestore.client()
        print("✅ Firebase initialized successfully")
    except Exception as e:
        print(f"❌ Firebase initialization failed: {e}")
        return None
    return _db_client
