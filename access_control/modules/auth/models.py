# Supabase Auth
# Sessions are issued and stored by Supabase Auth (auth.users table).
# This service only reads them:
#   auth.get_user(jwt=...) - resolve a bearer token to the user it was issued for

"""
Principal fields are taken from the Supabase user:
- id: auth.users.id
- email: auth.users.email
- name: user_metadata.full_name (falls back to user_metadata.name)

user_roles.user_id references auth.users.id.
"""
