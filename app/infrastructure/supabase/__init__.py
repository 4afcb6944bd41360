"""Supabase integration: PostgREST relational store and GoTrue identity provider."""

from app.infrastructure.supabase.auth_admin import SupabaseAuthAdmin
from app.infrastructure.supabase.client import (
    close_supabase,
    get_supabase_client,
    init_supabase,
)
from app.infrastructure.supabase.postgrest_store import PostgrestStore

__all__ = [
    "PostgrestStore",
    "SupabaseAuthAdmin",
    "close_supabase",
    "get_supabase_client",
    "init_supabase",
]
