"""
Seed Roles and Permissions Script
This script provisions the roles, permissions and role_permissions tables from the config.
Safe to re-run: existing rows are updated and grants are reconciled with the config.

    python -m access_control.scripts.seed_roles
"""

import sys
from typing import Dict, List

from access_control.config.roles_config import PERMISSION_MATRIX
from access_control.database.supabase_client import get_supabase_service
from supabase import Client
import logging

logger = logging.getLogger(__name__)


class SeedError(Exception):
    pass


def seed_permissions(supabase: Client, permissions: List[Dict] = None) -> Dict[str, int]:
    """Seed permissions from config"""
    logger.info("Seeding permissions...")

    permissions = PERMISSION_MATRIX["permissions"] if permissions is None else permissions
    counts = {"created": 0, "updated": 0, "failed": 0}

    for perm in permissions:
        try:
            existing = supabase.table("permissions")\
                .select("id")\
                .eq("name", perm["name"])\
                .execute()

            if existing.data:
                supabase.table("permissions")\
                    .update({
                        "resource": perm["resource"],
                        "action": perm["action"],
                        "description": perm["description"]
                    })\
                    .eq("name", perm["name"])\
                    .execute()
                counts["updated"] += 1
                logger.debug(f"Updated permission: {perm['name']}")
            else:
                supabase.table("permissions").insert({
                    "name": perm["name"],
                    "resource": perm["resource"],
                    "action": perm["action"],
                    "description": perm["description"]
                }).execute()
                counts["created"] += 1
                logger.debug(f"Created permission: {perm['name']}")
        except Exception as e:
            counts["failed"] += 1
            logger.error(f"Error processing permission {perm['name']}: {e}")

    logger.info(f"Permissions seeded: {counts['created']} created, {counts['updated']} updated")
    return counts


def seed_roles(supabase: Client, roles: List[Dict] = None) -> Dict[str, int]:
    """Seed roles from config and reconcile their grants"""
    logger.info("Seeding roles...")

    roles = PERMISSION_MATRIX["roles"] if roles is None else roles
    counts = {"created": 0, "updated": 0, "failed": 0}

    for role in roles:
        try:
            existing = supabase.table("roles")\
                .select("id")\
                .eq("name", role["name"])\
                .execute()

            if existing.data:
                supabase.table("roles")\
                    .update({"description": role["description"]})\
                    .eq("name", role["name"])\
                    .execute()
                role_id = existing.data[0]["id"]
                counts["updated"] += 1
                logger.debug(f"Updated role: {role['name']}")
            else:
                result = supabase.table("roles").insert({
                    "name": role["name"],
                    "description": role["description"]
                }).execute()
                role_id = result.data[0]["id"]
                counts["created"] += 1
                logger.debug(f"Created role: {role['name']}")

            sync_role_permissions(supabase, role_id, role["name"], role["permissions"])
        except Exception as e:
            counts["failed"] += 1
            logger.error(f"Error processing role {role['name']}: {e}")

    logger.info(f"Roles seeded: {counts['created']} created, {counts['updated']} updated")
    return counts


def sync_role_permissions(supabase: Client, role_id: str, role_name: str, permission_names: List[str]):
    """Make the role's grants match permission_names exactly"""
    permission_ids = set()
    if permission_names:
        permission_result = supabase.table("permissions")\
            .select("id, name")\
            .in_("name", permission_names)\
            .execute()
        found = {p["name"]: p["id"] for p in permission_result.data or []}
        missing = set(permission_names) - set(found)
        if missing:
            raise SeedError(f"Unknown permissions for role {role_name}: {sorted(missing)}")
        permission_ids = set(found.values())

    existing_result = supabase.table("role_permissions")\
        .select("permission_id")\
        .eq("role_id", role_id)\
        .execute()
    existing_permission_ids = {p["permission_id"] for p in existing_result.data} if existing_result.data else set()

    new_assignments = [
        {"role_id": role_id, "permission_id": pid}
        for pid in sorted(permission_ids - existing_permission_ids)
    ]
    if new_assignments:
        supabase.table("role_permissions").insert(new_assignments).execute()
        logger.debug(f"Assigned {len(new_assignments)} permissions to role {role_name}")

    permissions_to_remove = existing_permission_ids - permission_ids
    if permissions_to_remove:
        supabase.table("role_permissions")\
            .delete()\
            .eq("role_id", role_id)\
            .in_("permission_id", sorted(permissions_to_remove))\
            .execute()
        logger.debug(f"Removed {len(permissions_to_remove)} permissions from role {role_name}")


def main():
    """Main function to seed roles and permissions"""
    logging.basicConfig(level=logging.INFO)
    try:
        supabase = get_supabase_service()

        logger.info("Starting roles and permissions seeding...")

        # Permissions first; grants reference them
        perm_counts = seed_permissions(supabase)
        role_counts = seed_roles(supabase)
    except Exception as e:
        logger.error(f"Error during seeding: {e}")
        sys.exit(1)

    failed = perm_counts["failed"] + role_counts["failed"]
    if failed:
        logger.error(f"Seeding finished with {failed} failures")
        sys.exit(1)
    logger.info("Seeding completed successfully!")


if __name__ == "__main__":
    main()
