"""Supabase REST backend: tables (PostgREST) and object storage."""
