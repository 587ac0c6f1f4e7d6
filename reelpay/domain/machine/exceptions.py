# reelpay/domain/machine/exceptions.py


class MachineConfigurationError(ValueError):
    """Base class for machine data that cannot be spun or evaluated correctly."""
    pass


class StripConfigurationError(MachineConfigurationError):
    """Raised when a reel strip catalog cannot produce a symbol."""
    def __init__(self, reel_id, message):
        self.reel_id = reel_id
        self.message = f"Reel strip '{reel_id}': {message}" if reel_id else message
        super().__init__(self.message)


class PatternConfigurationError(MachineConfigurationError):
    """Raised when a payline pattern does not fit the grid it was built for."""
    def __init__(self, pattern, message):
        self.pattern = pattern
        self.message = f"Invalid payline pattern {pattern}: {message}"
        super().__init__(self.message)
