# Supabase table: profiles
# This file documents the expected database schema
# Rows are created by the on_auth_user_created trigger (see taklifnoma/database/schema.py)

"""
Expected Supabase table structure:
- id: uuid (primary key, references auth.users.id, cascade delete)
- first_name, last_name: text - copied from sign-up metadata
- email: text
- avatar_url, phone, company_name: text (nullable)
- is_active: boolean (default true)
- settings, metadata: jsonb
- created_at / updated_at: timestamptz (updated_at maintained by trigger)

Row-level security: a user can only select, insert and update their own row.
"""
