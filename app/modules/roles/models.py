# Supabase table: roles
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

roles:
- id: uuid (primary key)
- name: text (not null, unique) - e.g., "admin", "member", "viewer"
- description: text (nullable)
- created_at: timestamp (default: now())

Roles are seeded from app/config/roles_config.py by app/scripts/seed_roles.py.
Project memberships reference roles through user_roles.role_id.
"""
