import threading
from typing import Callable, Optional

from supabase import Client, ClientOptions, create_client

from cognovain.config import settings
from cognovain.errors import ConfigurationError
from cognovain.utils.logger import logger


class SupabaseClients:
    """
    Lazily creates and caches the two Supabase handles used by the app.

    The admin client uses the service role key and bypasses Row Level Security;
    it is reserved for writes that must not be lost to RLS. The restricted
    client uses the anon key and is used for reads. Both are created at most
    once, even when the first requests arrive concurrently.
    """
    def __init__(
        self,
        url: Optional[str] = None,
        service_role_key: Optional[str] = None,
        anon_key: Optional[str] = None,
        client_factory: Callable[..., Client] = create_client,
    ):
        self.url = url if url is not None else settings.SUPABASE_URL
        self.service_role_key = service_role_key if service_role_key is not None else settings.SUPABASE_SERVICE_ROLE_KEY
        self.anon_key = anon_key if anon_key is not None else settings.SUPABASE_ANON_KEY
        self._client_factory = client_factory
        self._lock = threading.Lock()
        self._admin: Optional[Client] = None
        self._restricted: Optional[Client] = None
        self._fallback_warned = False

    def _create(self, key: str, kind: str) -> Client:
        if not self.url:
            raise ConfigurationError("Missing SUPABASE_URL environment variable.")
        try:
            client = self._client_factory(
                self.url,
                key,
                options=ClientOptions(auto_refresh_token=False, persist_session=False),
            )
        except Exception as e:
            logger.error(f"Could not initialize Supabase {kind} client: {str(e)}")
            raise ConfigurationError(f"Failed to initialize Supabase {kind} client: {str(e)}") from e
        logger.info(f"Supabase {kind} client initialized.")
        return client

    def admin(self) -> Client:
        if self._admin is None:
            with self._lock:
                if self._admin is None:
                    if not self.service_role_key:
                        raise ConfigurationError("Missing SUPABASE_SERVICE_ROLE_KEY environment variable.")
                    self._admin = self._create(self.service_role_key, "admin")
        return self._admin

    def restricted(self) -> Client:
        if not self.anon_key:
            if not self._fallback_warned:
                with self._lock:
                    warn = not self._fallback_warned
                    self._fallback_warned = True
                if warn:
                    logger.warning("Missing SUPABASE_ANON_KEY, falling back to service role key. This is not recommended for production.")
            return self.admin()

        if self._restricted is None:
            with self._lock:
                if self._restricted is None:
                    self._restricted = self._create(self.anon_key, "restricted")
        return self._restricted
