# Supabase table: tasks
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py

"""
Expected Supabase table structure:
- id: uuid (primary key)
- workboard_id: uuid (foreign key to workboards.id, not null)
- title: text (not null)
- description: text (nullable)
- due_date: timestamptz (not null)
- created_at: timestamp (default: now())
- updated_at: timestamp (default: now())
"""
