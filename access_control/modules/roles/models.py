# Supabase tables: roles, permissions, role_permissions, user_roles
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in service.py and core/store.py

"""
Expected Supabase table structure:

roles:
- id: text (primary key)
- name: text (not null, unique) - e.g., "super_admin", "editor", "content_manager", "customer"
- description: text (nullable)
- created_at: timestamp (default: now())
- updated_at: timestamp (default: now())

permissions:
- id: text (primary key)
- name: text (not null, unique) - "resource.action", e.g., "cms.pages.create", "products.update"
- resource: text (not null) - e.g., "cms.pages", "products"
- action: text (not null) - e.g., "create", "update"
- description: text (nullable)
- created_at: timestamp (default: now())

role_permissions:
- role_id: text (foreign key to roles.id, on delete cascade)
- permission_id: text (foreign key to permissions.id, on delete cascade)
- created_at: timestamp (default: now())
- primary key (role_id, permission_id)

user_roles:
- user_id: text (foreign key to auth.users.id, on delete cascade)
- role_id: text (foreign key to roles.id, on delete cascade)
- created_at: timestamp (default: now())
- primary key (user_id, role_id)
"""
