"""
Guard catalog for the shipped modules.

Maps the guard names used in ``lifecycle_config/sets/*.yaml`` to the guard
classes of the publishing and registration modules.  Lookup-backed guards
are bound to the ``lookup`` passed in; YAML ``params`` become keyword
arguments.
"""

from __future__ import annotations

from functools import partial

from lifecycle_config.catalog import GuardCatalog
from lifecycle_kernel.db.lookup import ExistenceLookup
from lifecycle_modules.publishing.guards import ModeratorRoleGuard, NonEmptyBodyGuard
from lifecycle_modules.registration.guards import (
    EmailExistsGuard,
    PasswordGuard,
    ReferralGuard,
)

NON_EMPTY_BODY = "non_empty_body"
MODERATOR_ROLE = "moderator_role"
EMAIL_NOT_TAKEN = "email_not_taken"
PASSWORD_LENGTH = "password_length"
REFERRAL_CODE = "referral_code"


def default_guard_catalog(lookup: ExistenceLookup) -> GuardCatalog:
    catalog = GuardCatalog()
    catalog.register(NON_EMPTY_BODY, NonEmptyBodyGuard)
    catalog.register(MODERATOR_ROLE, ModeratorRoleGuard)
    catalog.register(EMAIL_NOT_TAKEN, partial(EmailExistsGuard, lookup))
    catalog.register(PASSWORD_LENGTH, PasswordGuard)
    catalog.register(REFERRAL_CODE, partial(ReferralGuard, lookup))
    return catalog
