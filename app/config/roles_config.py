"""
Project Roles Configuration
Defines the roles a user can hold inside a project and what each role may do.
Used by the seed script to populate the roles table and by the project
capability checks in app.core.dependencies.
"""

# Actions that can be performed inside a project
CAPABILITIES = {
    "read": "View the project, its workboards and tasks",
    "write": "Create workboards and tasks",
    "manage_members": "Add members to the project and assign their role",
}

# Role definitions (name must match roles.name in the database)
ROLES = {
    "admin": {
        "capabilities": ["read", "write", "manage_members"],
        "description": "Full access to the project; granted to the project creator"
    },
    "member": {
        "capabilities": ["read", "write"],
        "description": "Can create workboards and tasks"
    },
    "viewer": {
        "capabilities": ["read"],
        "description": "Read-only access to the project"
    },
}


def get_role_capabilities(role_name: str) -> list:
    """Return the capabilities of a role, or an empty list for unknown roles."""
    role = ROLES.get(role_name)
    if not role:
        return []
    return list(role["capabilities"])


def get_role_matrix():
    """
    Returns the role catalogue in seedable form.
    Format: [
        {"name": "admin", "description": "...", "capabilities": ["read", ...]},
        ...
    ]
    """
    return [
        {
            "name": name,
            "description": config["description"],
            "capabilities": sorted(config["capabilities"])
        }
        for name, config in ROLES.items()
    ]


ROLE_MATRIX = get_role_matrix()
