# ywd_admin/core/__init__.py
"""
Core application modules.
Contains essential infrastructure components:
- bootstrap: Reference data seeding and default admin creation
- db: Tortoise ORM configuration and connection management
- errors: Application error taxonomy rendered as JSON error payloads
- gateway: Graph-style access (nodes + relations) over the ORM
- phone: Phone number normalization
- security: Session tokens and password hashing
"""
