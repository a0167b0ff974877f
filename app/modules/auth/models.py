# Supabase Auth
# Identities live in Supabase's auth.users table; each one gets a matching
# row in the public users table on registration (see app/modules/users/models.py).

"""
Supabase Auth provides:
- auth.sign_up() - Register new users
- auth.sign_in_with_password() - Authenticate users
- auth.get_user() - Get current user from JWT token
- auth.sign_out() - Logout users

The access token returned by login is sent back as a Bearer token and turned
into a SessionContext (app/core/session.py) on every request.
"""
