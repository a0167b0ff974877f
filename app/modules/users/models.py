# Supabase tables: users, auth.users
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py
# Authentication is handled by Supabase Auth (auth.users table)

"""
Expected Supabase table structure:

users:
- id: uuid (primary key, references auth.users.id)
- email: text (not null)
- full_name: text (nullable)
- username: text (unique, nullable)
- role: text (nullable)
- created_at: timestamp (default: now())
- updated_at: timestamp (nullable)

Note: passwords and tokens live in auth.users, managed by Supabase Auth.
Project-level roles are not stored here but in user_roles (see projects).
"""
