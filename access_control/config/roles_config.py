"""
Roles and Permissions Configuration
Named role constants used by access decisions, plus the default permission matrix.
The matrix is consumed by the seed script to provision roles, permissions and grants.
"""

# Role names - reference these constants instead of string literals
SUPER_ADMIN = "super_admin"
EDITOR = "editor"
CONTENT_MANAGER = "content_manager"
CUSTOMER = "customer"

# Holders of this role pass every permission check, with or without grants
SUPERUSER_ROLE = SUPER_ADMIN

# Holders of any of these roles may enter the admin area
ADMIN_ROLES = frozenset({SUPER_ADMIN, EDITOR, CONTENT_MANAGER})

ROLE_DESCRIPTIONS = {
    SUPER_ADMIN: "Unrestricted access to every admin feature",
    EDITOR: "Creates and edits CMS content and the product catalog",
    CONTENT_MANAGER: "Manages and publishes CMS content",
    CUSTOMER: "Storefront customer without admin access",
}

# Resources and the actions they support; permission name = "<resource>.<action>"
RESOURCES = {
    "cms.pages": {
        "actions": ["create", "read", "update", "delete", "publish"],
        "description": "CMS pages"
    },
    "cms.posts": {
        "actions": ["create", "read", "update", "delete", "publish"],
        "description": "CMS blog posts"
    },
    "cms.media": {
        "actions": ["upload", "read", "delete"],
        "description": "CMS media library"
    },
    "products": {
        "actions": ["create", "read", "update", "delete"],
        "description": "Product catalog"
    },
    "orders": {
        "actions": ["read", "update"],
        "description": "Customer orders"
    },
    "roles": {
        "actions": ["read", "assign"],
        "description": "Role assignments"
    },
}

# Explicit grants per role. super_admin is intentionally absent: it bypasses checks.
ROLE_GRANTS = {
    EDITOR: [
        "cms.pages.create", "cms.pages.read", "cms.pages.update",
        "cms.posts.create", "cms.posts.read", "cms.posts.update",
        "cms.media.upload", "cms.media.read",
        "products.create", "products.read", "products.update",
    ],
    CONTENT_MANAGER: [
        "cms.pages.create", "cms.pages.read", "cms.pages.update", "cms.pages.delete", "cms.pages.publish",
        "cms.posts.create", "cms.posts.read", "cms.posts.update", "cms.posts.delete", "cms.posts.publish",
        "cms.media.upload", "cms.media.read", "cms.media.delete",
        "orders.read",
    ],
    SUPER_ADMIN: [],
    CUSTOMER: [],
}


def get_permission_matrix():
    """
    Returns a dictionary with all permissions and the default roles
    Format: {
        "permissions": [
            {"name": "cms.pages.create", "resource": "cms.pages", "action": "create", "description": "..."},
            ...
        ],
        "roles": [
            {"name": "editor", "description": "...", "permissions": ["cms.pages.create", ...]},
            ...
        ]
    }
    """
    permissions = []
    for resource, resource_config in RESOURCES.items():
        for action in resource_config["actions"]:
            permissions.append({
                "name": f"{resource}.{action}",
                "resource": resource,
                "action": action,
                "description": f"{action.capitalize()} {resource_config['description'].lower()}"
            })

    roles = []
    for role_name, description in ROLE_DESCRIPTIONS.items():
        roles.append({
            "name": role_name,
            "description": description,
            "permissions": sorted(ROLE_GRANTS.get(role_name, []))
        })

    return {
        "permissions": permissions,
        "roles": roles
    }


PERMISSION_MATRIX = get_permission_matrix()
