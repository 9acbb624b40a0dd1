import json
import boto3
import os
import time
from functools import wraps
from typing import Dict, Any
import logging

logger = logging.getLogger(__name__)

class SecretsManager:
    """
    Retrieves database credentials and the token signing secret from
    AWS Secrets Manager, caching each value for a short TTL so rotated
    secrets are picked up without a restart.
    """

    def __init__(self, region_name: str = None):
        """
        Initialize the secrets manager.

        Args:
            region_name: AWS region name, defaults to the AWS_REGION env variable
        """
        self.region_name = region_name or os.environ.get('AWS_REGION', 'us-east-1')
        self._client = None
        self._cache = {}
        self._cache_timestamps = {}
        self._cache_ttl = 300  # 5 minutes

    @property
    def client(self):
        """Lazy-loaded Secrets Manager client"""
        if self._client is None:
            session = boto3.session.Session()
            self._client = session.client(
                service_name='secretsmanager',
                region_name=self.region_name
            )
        return self._client

    def _time_based_cache(self, func):
        """Decorator for time-based caching with TTL."""
        @wraps(func)
        def wrapper(secret_id: str) -> str:
            current_time = time.time()
            cache_key = f"{func.__name__}:{secret_id}"

            if (cache_key in self._cache and
                cache_key in self._cache_timestamps and
                current_time - self._cache_timestamps[cache_key] < self._cache_ttl):
                logger.debug(f"Returning cached secret for {secret_id}")
                return self._cache[cache_key]

            logger.info(f"Fetching fresh secret for {secret_id}")
            try:
                result = func(secret_id)
                self._cache[cache_key] = result
                self._cache_timestamps[cache_key] = current_time
                return result
            except Exception as e:
                # Stale data beats no data while Secrets Manager is unreachable
                if cache_key in self._cache:
                    logger.warning(f"Fresh secret fetch failed for {secret_id}, using stale cache: {e}")
                    return self._cache[cache_key]
                raise
        return wrapper

    def clear_cache(self):
        """Clear the secrets cache to force fresh retrieval."""
        logger.info("Clearing secrets cache")
        self._cache.clear()
        self._cache_timestamps.clear()

    def get_secret(self, secret_id: str) -> str:
        """
        Get a secret value from Secrets Manager with TTL-based caching.

        Args:
            secret_id: The secret ID or ARN

        Returns:
            The secret value as a string
        """
        @self._time_based_cache
        def _fetch_secret(secret_id: str) -> str:
            try:
                response = self.client.get_secret_value(SecretId=secret_id)
                if 'SecretBinary' in response:
                    return response['SecretBinary']
                return response['SecretString']
            except Exception as e:
                logger.error(f"Failed to get secret {secret_id}: {e}")
                raise

        return _fetch_secret(secret_id)

    def get_json_secret(self, secret_id: str) -> Dict[str, Any]:
        value = self.get_secret(secret_id)
        return json.loads(value)

    def get_db_credentials(self) -> Dict[str, str]:
        """
        Get PostgreSQL database credentials from Secrets Manager.
        RDS-managed secrets include username, password, host, port and dbname.
        """
        return self.get_json_secret(os.environ.get('DATABASE_SECRETS_NAME', 'event-management/admin-db'))

    def get_jwt_secret(self) -> str:
        """Get the HMAC key used to sign admin session tokens."""
        return self.get_secret(os.environ.get('JWT_SECRET_NAME', 'event-management/admin-jwt'))
