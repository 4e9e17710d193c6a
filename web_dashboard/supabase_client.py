#!/usr/bin/env python3
"""
Supabase client for the trade journal
Builds the authenticated client used by the repository and image storage
"""

import logging
from typing import Optional

from supabase import Client, create_client

from config.settings import Settings, get_settings

logger = logging.getLogger(__name__)


class SupabaseClient:
    """Client for interacting with the Supabase project"""

    def __init__(self, settings: Optional[Settings] = None, user_token: Optional[str] = None,
                 use_service_role: bool = False):
        """Initialize Supabase client

        Args:
            settings: Settings to read the URL and keys from (global settings by default)
            user_token: Optional JWT token from authenticated user (respects RLS)
            use_service_role: If True, use service role key (bypasses RLS, admin only)
        """
        settings = settings or get_settings()
        supabase_config = settings.get_supabase_config(use_service_role=use_service_role)
        self.url = supabase_config['url']
        self.key = supabase_config['key']

        logger.debug(f"SUPABASE_URL exists: {bool(self.url)}")
        logger.debug(f"Using key type: {'service_role' if use_service_role else 'publishable'}")
        logger.debug(f"User token provided: {bool(user_token)}")

        if not self.url or not self.key:
            logger.error(f"Missing Supabase configuration - URL: {bool(self.url)}, KEY: {bool(self.key)}")
            raise ValueError("SUPABASE_URL and appropriate key must be set")

        self.supabase: Client = create_client(self.url, self.key)

        if user_token and not use_service_role:
            # Row level security keys off the Authorization header on PostgREST requests
            self.supabase.postgrest.auth(user_token)
            logger.debug("User token set on postgrest client")

    def test_connection(self, table: str = "trades") -> bool:
        """Test database connection"""
        try:
            self.supabase.table(table).select("id").limit(1).execute()
            logger.info("Supabase connection successful")
            return True
        except Exception as e:
            logger.error(f"Supabase connection failed: {e}")
            return False
