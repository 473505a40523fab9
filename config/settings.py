"""
Configuration settings for the StayNest vacation rental marketplace.
"""
import os
from typing import Dict, Any, Tuple
from dataclasses import dataclass
from dotenv import load_dotenv

# Load environment variables
load_dotenv()


@dataclass
class FirebaseConfig:
    """Firebase Admin SDK configuration settings."""
    project_id: str = os.getenv("FIREBASE_PROJECT_ID", "")
    private_key_id: str = os.getenv("FIREBASE_PRIVATE_KEY_ID", "")
    private_key: str = os.getenv("FIREBASE_PRIVATE_KEY", "")
    client_email: str = os.getenv("FIREBASE_CLIENT_EMAIL", "")
    client_id: str = os.getenv("FIREBASE_CLIENT_ID", "")
    token_uri: str = os.getenv("FIREBASE_TOKEN_URI", "https://oauth2.googleapis.com/token")

    def is_configured(self) -> bool:
        """Whether enough credentials are present to talk to Firestore."""
        return bool(self.project_id and self.private_key and self.client_email)

    def get_credentials_dict(self) -> Dict[str, Any]:
        """Build the service account dictionary expected by firebase_admin."""
        return {
            "type": "service_account",
            "project_id": self.project_id,
            "private_key_id": self.private_key_id,
            # Keys pasted into .env files carry literal \n sequences
            "private_key": self.private_key.replace("\\n", "\n"),
            "client_email": self.client_email,
            "client_id": self.client_id,
            "token_uri": self.token_uri,
        }


@dataclass
class AppConfig:
    """Application configuration settings."""
    log_level: str = os.getenv("LOG_LEVEL", "INFO")
    log_file: str = os.getenv("LOG_FILE", "")

    # "firestore" or "memory"
    storage_backend: str = os.getenv("STORAGE_BACKEND", "firestore")

    # Document collection names
    users_collection: str = "users"
    properties_collection: str = "properties"
    bookings_collection: str = "bookings"
    inquiries_collection: str = "inquiries"

    super_admin_email: str = os.getenv("SUPER_ADMIN_EMAIL", "").strip().lower()
    seed_on_start: bool = os.getenv("SEED_ON_START", "true").lower() == "true"

    # Pricing
    service_fee_rate: float = float(os.getenv("SERVICE_FEE_RATE", "0.10"))
    weekend_days: Tuple[int, ...] = (4, 5)  # Friday and Saturday nights

    # Review limits
    min_rating: int = 1
    max_rating: int = 5

    avatar_placeholder: str = "https://placehold.co/100x100.png?text={initial}"


@dataclass
class StorageConfig:
    """Local key-value store used for the session pointer and preferences."""
    local_store_path: str = os.getenv("LOCAL_STORE_PATH", ".staynest/local_store.json")
    session_key: str = "currentUserId"
    language_key: str = "appLanguage"
    currency_key: str = "appCurrency"


@dataclass
class SecurityConfig:
    """Credential hashing and session token settings."""
    token_secret: str = os.getenv("SESSION_TOKEN_SECRET", "change-me")
    token_ttl_seconds: int = int(os.getenv("SESSION_TOKEN_TTL_SECONDS", "86400"))
    password_iterations: int = int(os.getenv("PASSWORD_HASH_ITERATIONS", "390000"))
    min_password_length: int = 6


@dataclass
class RecommendationConfig:
    """AI recommendation endpoint settings."""
    endpoint_url: str = os.getenv("RECOMMENDATION_API_URL", "")
    api_key: str = os.getenv("RECOMMENDATION_API_KEY", "")
    timeout_seconds: float = float(os.getenv("RECOMMENDATION_TIMEOUT_SECONDS", "15"))
    max_results: int = int(os.getenv("RECOMMENDATION_MAX_RESULTS", "6"))


firebase_config = FirebaseConfig()
app_config = AppConfig()
storage_config = StorageConfig()
security_config = SecurityConfig()
recommendation_config = RecommendationConfig()
