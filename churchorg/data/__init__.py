"""data module"""

from .base import StoreAdapter, StoreError
from .supabase import SupabaseAdapter, create_supabase_adapter, create_supabase_client
