"""
Schema catalogue
Ordered provisioning steps for the Supabase Postgres backend.
Every statement is safe to re-run: tables and indexes use IF NOT EXISTS,
policies and triggers are dropped before being recreated and functions use
CREATE OR REPLACE.
"""

from dataclasses import dataclass
from typing import List


@dataclass(frozen=True)
class SchemaStep:
    name: str
    description: str
    sql: str


# Tables in foreign-key dependency order
REQUIRED_TABLES = [
    "profiles",
    "custom_templates",
    "invitations",
    "guests",
    "rsvps",
]


PROFILES_SQL = """
CREATE TABLE IF NOT EXISTS public.profiles (
  id UUID REFERENCES auth.users(id) ON DELETE CASCADE PRIMARY KEY,
  created_at TIMESTAMP WITH TIME ZONE DEFAULT NOW(),
  updated_at TIMESTAMP WITH TIME ZONE DEFAULT NOW(),
  first_name TEXT,
  last_name TEXT,
  email TEXT,
  avatar_url TEXT,
  phone TEXT,
  company_name TEXT,
  is_active BOOLEAN DEFAULT TRUE,
  settings JSONB DEFAULT '{}'::jsonb,
  metadata JSONB DEFAULT '{}'::jsonb
);

ALTER TABLE public.profiles ENABLE ROW LEVEL SECURITY;

DROP POLICY IF EXISTS "Users can view own profile" ON public.profiles;
CREATE POLICY "Users can view own profile" ON public.profiles
  FOR SELECT USING (auth.uid() = id);

DROP POLICY IF EXISTS "Users can update own profile" ON public.profiles;
CREATE POLICY "Users can update own profile" ON public.profiles
  FOR UPDATE USING (auth.uid() = id);

DROP POLICY IF EXISTS "Users can insert own profile" ON public.profiles;
CREATE POLICY "Users can insert own profile" ON public.profiles
  FOR INSERT WITH CHECK (auth.uid() = id);
"""

CUSTOM_TEMPLATES_SQL = """
CREATE TABLE IF NOT EXISTS public.custom_templates (
  id UUID DEFAULT gen_random_uuid() PRIMARY KEY,
  created_at TIMESTAMP WITH TIME ZONE DEFAULT NOW(),
  updated_at TIMESTAMP WITH TIME ZONE DEFAULT NOW(),
  user_id UUID REFERENCES public.profiles(id) ON DELETE CASCADE,
  name TEXT NOT NULL,
  description TEXT,
  category TEXT DEFAULT 'custom',
  is_public BOOLEAN DEFAULT FALSE,
  is_featured BOOLEAN DEFAULT FALSE,
  config JSONB NOT NULL DEFAULT '{}'::jsonb,
  colors JSONB DEFAULT '{}'::jsonb,
  fonts JSONB DEFAULT '{}'::jsonb,
  layout JSONB DEFAULT '{}'::jsonb,
  custom_css TEXT,
  preview_image TEXT,
  usage_count INTEGER DEFAULT 0,
  is_active BOOLEAN DEFAULT TRUE,
  tags TEXT[] DEFAULT ARRAY[]::TEXT[],
  metadata JSONB DEFAULT '{}'::jsonb
);

ALTER TABLE public.custom_templates ENABLE ROW LEVEL SECURITY;

DROP POLICY IF EXISTS "Users can view own templates" ON public.custom_templates;
CREATE POLICY "Users can view own templates" ON public.custom_templates
  FOR SELECT USING (auth.uid() = user_id);

DROP POLICY IF EXISTS "Users can insert own templates" ON public.custom_templates;
CREATE POLICY "Users can insert own templates" ON public.custom_templates
  FOR INSERT WITH CHECK (auth.uid() = user_id);

DROP POLICY IF EXISTS "Users can update own templates" ON public.custom_templates;
CREATE POLICY "Users can update own templates" ON public.custom_templates
  FOR UPDATE USING (auth.uid() = user_id);

DROP POLICY IF EXISTS "Users can delete own templates" ON public.custom_templates;
CREATE POLICY "Users can delete own templates" ON public.custom_templates
  FOR DELETE USING (auth.uid() = user_id);

DROP POLICY IF EXISTS "Public can view public templates" ON public.custom_templates;
CREATE POLICY "Public can view public templates" ON public.custom_templates
  FOR SELECT USING (is_public = true AND is_active = true);
"""

INVITATIONS_SQL = """
CREATE TABLE IF NOT EXISTS public.invitations (
  id UUID DEFAULT gen_random_uuid() PRIMARY KEY,
  created_at TIMESTAMP WITH TIME ZONE DEFAULT NOW(),
  updated_at TIMESTAMP WITH TIME ZONE DEFAULT NOW(),
  user_id UUID REFERENCES public.profiles(id) ON DELETE CASCADE,
  groom_name TEXT NOT NULL,
  bride_name TEXT NOT NULL,
  wedding_date DATE NOT NULL,
  wedding_time TIME,
  venue TEXT NOT NULL,
  address TEXT NOT NULL,
  city TEXT,
  state TEXT,
  zip_code TEXT,
  custom_message TEXT,
  template_id TEXT NOT NULL DEFAULT 'classic',
  custom_template_id UUID REFERENCES public.custom_templates(id) ON DELETE SET NULL,
  image_url TEXT,
  rsvp_deadline DATE,
  is_active BOOLEAN DEFAULT TRUE,
  slug TEXT UNIQUE NOT NULL,
  view_count INTEGER DEFAULT 0,
  settings JSONB DEFAULT '{}'::jsonb,
  metadata JSONB DEFAULT '{}'::jsonb
);

ALTER TABLE public.invitations ENABLE ROW LEVEL SECURITY;

DROP POLICY IF EXISTS "Users can view own invitations" ON public.invitations;
CREATE POLICY "Users can view own invitations" ON public.invitations
  FOR SELECT USING (auth.uid() = user_id);

DROP POLICY IF EXISTS "Users can insert own invitations" ON public.invitations;
CREATE POLICY "Users can insert own invitations" ON public.invitations
  FOR INSERT WITH CHECK (auth.uid() = user_id);

DROP POLICY IF EXISTS "Users can update own invitations" ON public.invitations;
CREATE POLICY "Users can update own invitations" ON public.invitations
  FOR UPDATE USING (auth.uid() = user_id);

DROP POLICY IF EXISTS "Users can delete own invitations" ON public.invitations;
CREATE POLICY "Users can delete own invitations" ON public.invitations
  FOR DELETE USING (auth.uid() = user_id);

DROP POLICY IF EXISTS "Public can view active invitations" ON public.invitations;
CREATE POLICY "Public can view active invitations" ON public.invitations
  FOR SELECT USING (is_active = true);
"""

GUESTS_SQL = """
CREATE TABLE IF NOT EXISTS public.guests (
  id UUID DEFAULT gen_random_uuid() PRIMARY KEY,
  created_at TIMESTAMP WITH TIME ZONE DEFAULT NOW(),
  updated_at TIMESTAMP WITH TIME ZONE DEFAULT NOW(),
  invitation_id UUID REFERENCES public.invitations(id) ON DELETE CASCADE,
  name TEXT NOT NULL,
  email TEXT,
  phone TEXT,
  plus_one BOOLEAN DEFAULT FALSE,
  group_name TEXT,
  notes TEXT,
  is_vip BOOLEAN DEFAULT FALSE,
  metadata JSONB DEFAULT '{}'::jsonb
);

ALTER TABLE public.guests ENABLE ROW LEVEL SECURITY;

DROP POLICY IF EXISTS "Users can manage guests" ON public.guests;
CREATE POLICY "Users can manage guests" ON public.guests
  FOR ALL USING (
    EXISTS (
      SELECT 1 FROM public.invitations
      WHERE id = guests.invitation_id
      AND user_id = auth.uid()
    )
  );
"""

RSVPS_SQL = """
CREATE TABLE IF NOT EXISTS public.rsvps (
  id UUID DEFAULT gen_random_uuid() PRIMARY KEY,
  created_at TIMESTAMP WITH TIME ZONE DEFAULT NOW(),
  updated_at TIMESTAMP WITH TIME ZONE DEFAULT NOW(),
  invitation_id UUID REFERENCES public.invitations(id) ON DELETE CASCADE,
  guest_name TEXT NOT NULL,
  will_attend BOOLEAN NOT NULL,
  plus_one_attending BOOLEAN,
  message TEXT,
  email TEXT,
  phone TEXT,
  dietary_requirements TEXT,
  song_request TEXT,
  metadata JSONB DEFAULT '{}'::jsonb
);

ALTER TABLE public.rsvps ENABLE ROW LEVEL SECURITY;

DROP POLICY IF EXISTS "Users can manage rsvps" ON public.rsvps;
CREATE POLICY "Users can manage rsvps" ON public.rsvps
  FOR ALL USING (
    EXISTS (
      SELECT 1 FROM public.invitations
      WHERE id = rsvps.invitation_id
      AND user_id = auth.uid()
    )
  );

DROP POLICY IF EXISTS "Public can insert rsvps" ON public.rsvps;
CREATE POLICY "Public can insert rsvps" ON public.rsvps
  FOR INSERT WITH CHECK (
    EXISTS (
      SELECT 1 FROM public.invitations
      WHERE id = invitation_id
      AND is_active = true
    )
  );
"""

INDEXES_SQL = """
CREATE INDEX IF NOT EXISTS idx_profiles_email ON public.profiles(email);
CREATE INDEX IF NOT EXISTS idx_custom_templates_user_id ON public.custom_templates(user_id);
CREATE INDEX IF NOT EXISTS idx_custom_templates_public ON public.custom_templates(is_public) WHERE is_public = true;
CREATE INDEX IF NOT EXISTS idx_invitations_user_id ON public.invitations(user_id);
CREATE INDEX IF NOT EXISTS idx_invitations_slug ON public.invitations(slug);
CREATE INDEX IF NOT EXISTS idx_invitations_active ON public.invitations(is_active) WHERE is_active = true;
CREATE INDEX IF NOT EXISTS idx_guests_invitation_id ON public.guests(invitation_id);
CREATE INDEX IF NOT EXISTS idx_rsvps_invitation_id ON public.rsvps(invitation_id);
"""


def _updated_at_trigger(table: str) -> str:
    return (
        f"DROP TRIGGER IF EXISTS update_{table}_updated_at ON public.{table};\n"
        f"CREATE TRIGGER update_{table}_updated_at\n"
        f"  BEFORE UPDATE ON public.{table}\n"
        f"  FOR EACH ROW EXECUTE FUNCTION update_updated_at_column();\n"
    )


UPDATED_AT_TRIGGERS_SQL = """
CREATE OR REPLACE FUNCTION update_updated_at_column()
RETURNS TRIGGER AS $$
BEGIN
  NEW.updated_at = NOW();
  RETURN NEW;
END;
$$ LANGUAGE plpgsql;
""" + "\n".join(_updated_at_trigger(t) for t in REQUIRED_TABLES)

NEW_USER_TRIGGER_SQL = """
CREATE OR REPLACE FUNCTION public.handle_new_user()
RETURNS TRIGGER AS $$
BEGIN
  INSERT INTO public.profiles (id, email, first_name, last_name)
  VALUES (
    NEW.id,
    NEW.email,
    COALESCE(NEW.raw_user_meta_data->>'first_name', ''),
    COALESCE(NEW.raw_user_meta_data->>'last_name', '')
  );
  RETURN NEW;
END;
$$ LANGUAGE plpgsql SECURITY DEFINER;

DROP TRIGGER IF EXISTS on_auth_user_created ON auth.users;
CREATE TRIGGER on_auth_user_created
  AFTER INSERT ON auth.users
  FOR EACH ROW EXECUTE FUNCTION public.handle_new_user();
"""


SCHEMA_STEPS: List[SchemaStep] = [
    SchemaStep("profiles", "Profiles table", PROFILES_SQL),
    SchemaStep("custom_templates", "Custom templates table", CUSTOM_TEMPLATES_SQL),
    SchemaStep("invitations", "Invitations table", INVITATIONS_SQL),
    SchemaStep("guests", "Guests table", GUESTS_SQL),
    SchemaStep("rsvps", "RSVPs table", RSVPS_SQL),
    SchemaStep("indexes", "Indexes", INDEXES_SQL),
    SchemaStep("updated_at_triggers", "updated_at triggers", UPDATED_AT_TRIGGERS_SQL),
    SchemaStep("new_user_trigger", "Profile creation trigger", NEW_USER_TRIGGER_SQL),
]


# exec_sql is the only RPC the provisioning routine calls. It has to be created
# once by hand (SQL editor) before the schema can be provisioned remotely.
EXEC_SQL_FUNCTION_SQL = """
CREATE OR REPLACE FUNCTION public.exec_sql(sql_query TEXT)
RETURNS VOID AS $$
BEGIN
  EXECUTE sql_query;
END;
$$ LANGUAGE plpgsql SECURITY DEFINER;

REVOKE ALL ON FUNCTION public.exec_sql(TEXT) FROM PUBLIC, anon, authenticated;
"""
