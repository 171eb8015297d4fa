# Supabase table: rsvps
# Guest answers; anonymous inserts are allowed while the invitation is active

"""
Expected Supabase table structure:
- id: uuid (primary key)
- invitation_id: uuid (foreign key to invitations.id, cascade delete)
- guest_name: text (not null)
- will_attend: boolean (not null)
- plus_one_attending: boolean (nullable)
- message, email, phone, dietary_requirements, song_request: text (nullable)
- metadata: jsonb
- created_at / updated_at: timestamptz
"""
