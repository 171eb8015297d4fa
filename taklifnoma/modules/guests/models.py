# Supabase table: guests
# One row per invited guest, owned through invitations.user_id

"""
Expected Supabase table structure:
- id: uuid (primary key)
- invitation_id: uuid (foreign key to invitations.id, cascade delete)
- name: text (not null)
- email, phone, group_name, notes: text (nullable)
- plus_one, is_vip: boolean (default false)
- metadata: jsonb
- created_at / updated_at: timestamptz
"""
