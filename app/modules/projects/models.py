# Supabase tables: projects, user_roles
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:

projects:
- id: uuid (primary key)
- name: text (not null)
- description: text (nullable)
- status: text (not null, default: 'active')
- created_at: timestamp (default: now())
- updated_at: timestamp (default: now())

user_roles (project membership):
- id: uuid (primary key)
- user_id: uuid (foreign key to users.id, not null)
- project_id: uuid (foreign key to projects.id, not null)
- role_id: uuid (foreign key to roles.id, not null)
- created_at: timestamp (default: now())

The creator of a project always gets a user_roles row with the admin role.
"""
