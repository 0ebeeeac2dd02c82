"""
Typed Exception Hierarchy for the Lifecycle Kernel.

===============================================================================
WHAT RAISES AND WHAT RETURNS
===============================================================================

The engine distinguishes two families of failure:

  1. Domain rejections -- a structurally illegal move, a guard veto, or a
     lost race on the same entity.  These are ordinary outcomes of request
     handling and are RETURNED as ``TransitionResult`` values.  They never
     appear in this module.

  2. Faults -- a broken configuration, or a caller handing the engine a
     context built for a different request.  These are RAISED, and every
     one of them is a ``LifecycleKernelError`` with a machine-readable
     ``code`` class attribute and structured attributes.

Example - handling a startup fault:

    try:
        registry = build_registry(config, catalog)
    except ConfigurationError as e:
        log.critical("bad lifecycle config", extra={"code": e.code})
        raise SystemExit(1)

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

    LifecycleKernelError (base)
    |
    +-- ConfigurationError
    |   +-- DuplicateTransitionError
    |   +-- DuplicateEntityKindError
    |   +-- UnknownEntityKindError
    |   +-- UnknownStateError
    |   +-- InvalidInitialStateError
    |   +-- UnboundGuardActionError
    |   +-- DuplicateGuardError
    |   +-- GuardNotFoundError
    |   +-- GuardPositionError
    |   +-- ConfigurationFrozenError
    |   +-- UnknownGuardError
    |   +-- ConfigValidationError
    |
    +-- ContextMismatchError
    |
    +-- UnknownLookupFieldError

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Category        | Code                        | When Raised
----------------|-----------------------------|-----------------------------------------
Configuration   | DUPLICATE_TRANSITION        | Second rule for (from_state, action)
                | DUPLICATE_ENTITY_KIND       | Entity kind defined twice
                | UNKNOWN_ENTITY_KIND         | Kind used before define_kind()
                | UNKNOWN_STATE               | State not in the kind's declared set
                | INVALID_INITIAL_STATE       | Missing or undeclared initial state
                | UNBOUND_GUARD_ACTION        | Guard bound to an action with no rule
                | DUPLICATE_GUARD             | Guard name already in the chain
                | GUARD_NOT_FOUND             | Remove/move of an absent guard
                | INVALID_GUARD_POSITION      | Position not "append" or in range
                | CONFIGURATION_FROZEN        | Transition registered after freeze()
                | UNKNOWN_GUARD               | Config names a guard not in the catalog
                | CONFIG_VALIDATION_FAILED    | YAML lifecycle set failed validation
----------------|-----------------------------|-----------------------------------------
Request         | CONTEXT_MISMATCH            | Context built for another entity/action
----------------|-----------------------------|-----------------------------------------
Lookup          | UNKNOWN_LOOKUP_FIELD        | Lookup asked about an unmapped field
"""


class LifecycleKernelError(Exception):
    """
    Base exception for all lifecycle kernel errors.

    All subclasses must have a `code` class attribute for machine-readable
    error identification.
    """

    code: str = "LIFECYCLE_KERNEL_ERROR"


# Configuration-time exceptions


class ConfigurationError(LifecycleKernelError):
    """Base exception for setup-time faults. Fatal to startup."""

    code: str = "CONFIGURATION_ERROR"


class DuplicateTransitionError(ConfigurationError):
    """A rule for (from_state, action) is already registered."""

    code: str = "DUPLICATE_TRANSITION"

    def __init__(
        self,
        entity_kind: str,
        from_state: str,
        action: str,
        existing_to_state: str,
        new_to_state: str,
    ):
        self.entity_kind = entity_kind
        self.from_state = from_state
        self.action = action
        self.existing_to_state = existing_to_state
        self.new_to_state = new_to_state
        super().__init__(
            f"Duplicate transition for {entity_kind}: ({from_state!r}, {action!r}) "
            f"already leads to {existing_to_state!r}, cannot also lead to {new_to_state!r}"
        )


class DuplicateEntityKindError(ConfigurationError):
    """Entity kind was already defined."""

    code: str = "DUPLICATE_ENTITY_KIND"

    def __init__(self, entity_kind: str):
        self.entity_kind = entity_kind
        super().__init__(f"Entity kind already defined: {entity_kind}")


class UnknownEntityKindError(ConfigurationError):
    """Entity kind has not been defined."""

    code: str = "UNKNOWN_ENTITY_KIND"

    def __init__(self, entity_kind: str):
        self.entity_kind = entity_kind
        super().__init__(f"Unknown entity kind: {entity_kind}")


class UnknownStateError(ConfigurationError):
    """State is not a member of the kind's declared state set."""

    code: str = "UNKNOWN_STATE"

    def __init__(self, entity_kind: str, state: str):
        self.entity_kind = entity_kind
        self.state = state
        super().__init__(f"Unknown state {state!r} for entity kind {entity_kind}")


class InvalidInitialStateError(ConfigurationError):
    """Initial state is missing or not a declared state."""

    code: str = "INVALID_INITIAL_STATE"

    def __init__(self, entity_kind: str, state: str | None):
        self.entity_kind = entity_kind
        self.state = state
        super().__init__(
            f"Invalid initial state {state!r} for entity kind {entity_kind}"
        )


class UnboundGuardActionError(ConfigurationError):
    """Guard bound to an action that no transition rule of the kind uses."""

    code: str = "UNBOUND_GUARD_ACTION"

    def __init__(self, entity_kind: str, action: str, guard_name: str):
        self.entity_kind = entity_kind
        self.action = action
        self.guard_name = guard_name
        super().__init__(
            f"Cannot bind guard {guard_name} to {entity_kind}.{action}: "
            f"no transition rule uses action {action!r}"
        )


class DuplicateGuardError(ConfigurationError):
    """A guard with the same name is already in the chain."""

    code: str = "DUPLICATE_GUARD"

    def __init__(self, chain_name: str, guard_name: str):
        self.chain_name = chain_name
        self.guard_name = guard_name
        super().__init__(f"Guard {guard_name} already in chain {chain_name}")


class GuardNotFoundError(ConfigurationError):
    """Named guard is not in the chain."""

    code: str = "GUARD_NOT_FOUND"

    def __init__(self, chain_name: str, guard_name: str):
        self.chain_name = chain_name
        self.guard_name = guard_name
        super().__init__(f"Guard {guard_name} not found in chain {chain_name}")


class GuardPositionError(ConfigurationError):
    """Position is neither "append" nor a valid index."""

    code: str = "INVALID_GUARD_POSITION"

    def __init__(self, chain_name: str, position: object, length: int):
        self.chain_name = chain_name
        self.position = position
        self.length = length
        super().__init__(
            f"Invalid position {position!r} for chain {chain_name} of length {length}"
        )


class ReservedActionError(ConfigurationError):
    """Transition uses an action name the registry reserves for itself."""

    code: str = "RESERVED_ACTION"

    def __init__(self, entity_kind: str, action: str):
        self.entity_kind = entity_kind
        self.action = action
        super().__init__(
            f"Action {action!r} is reserved for kind-wide guards ({entity_kind})"
        )


class ConfigurationFrozenError(ConfigurationError):
    """Transition table was sealed by freeze()."""

    code: str = "CONFIGURATION_FROZEN"

    def __init__(self, entity_kind: str):
        self.entity_kind = entity_kind
        super().__init__(
            f"Transition table for {entity_kind} is frozen; "
            "transitions can only be registered at configuration time"
        )


class UnknownGuardError(ConfigurationError):
    """Configuration references a guard name the catalog does not provide."""

    code: str = "UNKNOWN_GUARD"

    def __init__(self, guard_name: str):
        self.guard_name = guard_name
        super().__init__(f"Unknown guard: {guard_name}")


class ConfigValidationError(ConfigurationError):
    """A lifecycle configuration set failed validation."""

    code: str = "CONFIG_VALIDATION_FAILED"

    def __init__(self, config_id: str, errors: list[str]):
        self.config_id = config_id
        self.errors = list(errors)
        super().__init__(
            f"Lifecycle configuration {config_id!r} is invalid: "
            f"{len(self.errors)} error(s): " + "; ".join(self.errors)
        )


# Request-time programming errors


class ContextMismatchError(LifecycleKernelError):
    """Context was built for a different entity or action than requested."""

    code: str = "CONTEXT_MISMATCH"

    def __init__(self, field: str, expected: str, actual: str | None):
        self.field = field
        self.expected = expected
        self.actual = actual
        super().__init__(
            f"Context {field} is {actual!r}, request is for {expected!r}"
        )


# Lookup collaborator


class UnknownLookupFieldError(LifecycleKernelError):
    """Existence lookup has no mapping for the requested field."""

    code: str = "UNKNOWN_LOOKUP_FIELD"

    def __init__(self, field: str):
        self.field = field
        super().__init__(f"No lookup registered for field: {field}")
