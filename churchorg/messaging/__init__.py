"""Module for realtime change notifications"""
from .base import ChangeFeed, Subscription
from .supabase_realtime import SupabaseChangeFeed
