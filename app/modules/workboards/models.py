# Supabase table: workboards
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:
- id: uuid (primary key)
- project_id: uuid (foreign key to projects.id, not null)
- name: text (not null)
- description: text (nullable)
- created_at: timestamp (default: now())
- updated_at: timestamp (default: now())
"""
