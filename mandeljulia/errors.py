class UnknownFormula(ValueError):
    pass

class UnknownColormap(ValueError):
    pass

class BackendUnavailable(RuntimeError):
    """Raised when the accelerated backend cannot run; callers fall back to the CPU renderer."""
