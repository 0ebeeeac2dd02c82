"""
Lifecycle Modules.

Concrete entity kinds built on the lifecycle kernel.  Each module contains:
- Workflows (the lifecycle definition: states and transition rules)
- Guards (the predicates bound to its actions)
- Entities (domain objects with one method per action)

Modules:
- publishing: Articles moving through draft, moderation and publication
- registration: Account registrations checked against existing records

Wiring lives in ``lifecycle_modules.wiring`` (code) and
``lifecycle_modules.catalog`` (guards named by YAML configuration).
"""

from lifecycle_modules import publishing, registration

__all__ = ["publishing", "registration"]
