"""
Seed Roles Script
Populates the roles table from app/config/roles_config.py so that project
creation can always resolve the admin role.

Run with: python -m app.scripts.seed_roles
"""

import sys
import logging

from app.config.roles_config import ROLE_MATRIX
from app.database.supabase_client import get_service_supabase
from supabase import Client

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def seed_roles(supabase: Client, roles=None):
    """Create missing roles and refresh descriptions of existing ones. Returns (created, updated)."""
    logger.info("Seeding roles...")

    roles = ROLE_MATRIX if roles is None else roles
    created_count = 0
    updated_count = 0

    for role in roles:
        try:
            existing = supabase.table("roles")\
                .select("id")\
                .eq("name", role["name"])\
                .execute()

            if existing.data:
                supabase.table("roles")\
                    .update({
                        "description": role["description"]
                    })\
                    .eq("name", role["name"])\
                    .execute()
                updated_count += 1
                logger.debug(f"Updated role: {role['name']}")
            else:
                supabase.table("roles").insert({
                    "name": role["name"],
                    "description": role["description"]
                }).execute()
                created_count += 1
                logger.debug(f"Created role: {role['name']}")
        except Exception as e:
            logger.error(f"Error processing role {role['name']}: {e}")

    logger.info(f"Roles seeded: {created_count} created, {updated_count} updated")
    return created_count, updated_count


def main():
    try:
        supabase = get_service_supabase()
        created, updated = seed_roles(supabase)
        logger.info(f"Seeding completed: {created + updated} roles processed")
    except Exception as e:
        logger.error(f"Error during seeding: {e}")
        sys.exit(1)


if __name__ == "__main__":
    main()
