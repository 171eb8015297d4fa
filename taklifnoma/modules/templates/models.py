# Supabase table: custom_templates
# This file documents the expected database schema
# The DDL lives in taklifnoma/database/schema.py; operations go through the Supabase SDK in service.py

"""
Expected Supabase table structure:
- id: uuid (primary key, default gen_random_uuid())
- user_id: uuid (foreign key to profiles.id, cascade delete)
- name: text (not null)
- description: text (nullable)
- category: text (default: 'custom')
- is_public / is_featured / is_active: boolean
- config: jsonb (not null) - full TemplateConfig (colors, fonts, layout, animations)
- colors / fonts / layout: jsonb - copies of the config sections for querying
- custom_css, preview_image: text (nullable)
- usage_count: integer (default 0)
- tags: text[]
- metadata: jsonb
- created_at / updated_at: timestamptz (updated_at maintained by trigger)

Row-level security: owners read/insert/update/delete their rows; anyone can
read rows with is_public and is_active set.

Local fallback copies (LocalTemplateStore) carry the same keys plus
is_local, pending_sync and fallback_reason, with an id of the form local_<epoch ms>.
"""
