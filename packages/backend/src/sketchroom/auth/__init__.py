"""Authentication and authorization.

Learn: Users log in with email/password and receive a signed JWT carrying
their id, email and role. Every authenticated request decodes that token
into a CurrentIdentity; room-scoped routes then ask the access policy
whether the identity may touch the room.
"""
