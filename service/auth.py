import logging
from datetime import datetime, timedelta
from typing import Optional, Dict, Any
from config.setting import settings
import error
import json
from fastapi.security import HTTPBearer
from fastapi import Depends
from jose import jwe
from jose.constants import ALGORITHMS
import time
from uuid import UUID
from util.gen import derive_key_from_string
from service.redis import Redis

logger = logging.getLogger(__name__)

bearerschema = HTTPBearer()


def json_default_serializer(obj):
    """
    Custom JSON serializer for objects not serializable by default json code.
    Specifically handles UUID and datetime objects.
    """
    if isinstance(obj, UUID):
        return str(obj)
    if isinstance(obj, datetime):
        return obj.isoformat()
    raise TypeError(f"Object of type {obj.__class__.__name__} is not JSON serializable")


class TokenManager:
    @staticmethod
    def create_access_token(
        data: Dict[str, Any], expires_in_minutes: Optional[int] = None
    ) -> str:
        """
        Create an encrypted access token carrying the given claims
        """
        if expires_in_minutes is None:
            expires_in_minutes = settings.ACCESS_TOKEN_EXPIRE_MINUTES
        try:
            payload = data.copy()
            expiration_dt = datetime.now() + timedelta(minutes=expires_in_minutes)
            payload.update({"exp": int(expiration_dt.timestamp())})
            # Convert dict payload to JSON string, then encode to bytes
            payload_bytes = json.dumps(payload, default=json_default_serializer).encode(
                "utf-8"
            )
            key_value = derive_key_from_string(settings.SECRET_KEY, 16)
            encrypted_jwe_bytes = jwe.encrypt(
                plaintext=payload_bytes,
                key=key_value,
                algorithm=ALGORITHMS.A128KW,
                encryption=ALGORITHMS.A128CBC_HS256,
            )

            return encrypted_jwe_bytes.decode("utf-8")

        except Exception as e:
            logger.error(f"Encryption failed: {e}")
            raise error.ServerError("Could not issue access token")

    @staticmethod
    def decode_token(token: str, check_expiry: bool = True) -> Dict[str, Any]:
        """
        Decrypts a JWE compact token string and returns the original Python dictionary.
        Optionally checks the 'exp' field against the current time.
        """
        try:
            key_value = derive_key_from_string(settings.SECRET_KEY, 16)
            decrypted_bytes = jwe.decrypt(token, key_value)
            decrypted_data = json.loads(decrypted_bytes.decode("utf-8"))
        except Exception as e:
            logger.warning(f"Decryption failed or token tampered: {e}")
            raise error.AuthenticationError("Invalid token")

        if check_expiry and "exp" in decrypted_data:
            current_time = int(time.time())
            expiry_time = decrypted_data["exp"]

            if current_time > expiry_time:
                raise error.AuthenticationError(
                    f"Token expired at {datetime.fromtimestamp(expiry_time)}"
                )

        return decrypted_data


def verify_access_token(token: str = Depends(bearerschema)) -> Dict[str, Any]:
    """
    Verify the access token and return the payload with caching
    """
    token_string = token.credentials

    # Create cache key from token (using hash for security)
    cache_key = f"token_payload:{hash(token_string)}"

    redis_instance = Redis()
    cached_payload = redis_instance.get_json(cache_key)

    if cached_payload:
        return cached_payload

    payload = TokenManager.decode_token(token_string)

    # Cache the payload for 5 minutes (shorter than token expiry)
    redis_instance.set_json(cache_key, payload, expiry=300)

    return payload


def current_user_id(auth_data: Dict[str, Any]) -> UUID:
    """The user id carried by a verified token payload."""
    user_id = auth_data.get("user_id")
    if not user_id:
        raise error.AuthenticationError("Invalid authentication token")
    try:
        return UUID(str(user_id))
    except ValueError:
        raise error.AuthenticationError("Invalid user id in authentication token")
