class ResetWorkflowError(Exception):
    """Base exception for data reset workflow errors."""
    pass


class ResetLockedError(ResetWorkflowError):
    """Raised when a reset operation is attempted without super admin access."""
    pass


class InvalidStateTransitionError(ResetWorkflowError):
    """Raised when a workflow operation is called from the wrong state."""

    def __init__(self, operation: str, state: str, allowed: tuple[str, ...]) -> None:
        super().__init__(
            f"Cannot {operation} from state '{state}'. "
            f"Allowed from: {', '.join(allowed) or 'none'}"
        )
        self.operation = operation
        self.state = state
        self.allowed = allowed


class DirectoryBindingError(ValueError):
    """Raised when the caller's directory record cannot become an application user."""
    pass
