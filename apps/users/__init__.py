"""Users app package.

Defines the custom user model (email login) and the user directory the
booking engine reads tenants and owners from. Use
``apps.users.models.CustomUser`` as the AUTH_USER_MODEL throughout the
project.
"""
