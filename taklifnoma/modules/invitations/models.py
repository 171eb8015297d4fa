# Supabase table: invitations
# This file documents the expected database schema
# The DDL lives in taklifnoma/database/schema.py

"""
Expected Supabase table structure:
- id: uuid (primary key)
- user_id: uuid (foreign key to profiles.id, cascade delete)
- groom_name, bride_name, venue, address: text (not null)
- wedding_date: date (not null), wedding_time: time (nullable)
- city, state, zip_code, custom_message, image_url: text (nullable)
- template_id: text (default: 'classic') - built-in template key
- custom_template_id: uuid (foreign key to custom_templates.id, set null on delete)
- rsvp_deadline: date (nullable)
- is_active: boolean (default true)
- slug: text (unique, not null) - public link /i/<slug>
- view_count: integer (default 0)
- settings, metadata: jsonb
- created_at / updated_at: timestamptz

Row-level security: owners manage their rows; anyone can read active invitations.
Deleting an invitation cascades to guests and rsvps.
"""
