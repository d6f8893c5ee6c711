"""Exception types raised while parsing or rolling dice notation."""


class DiceError(ValueError):
    """Raised when a dice notation is invalid."""


class OptionsError(DiceError):
    """Raised when a roll-options suffix cannot be parsed."""


class FormulaError(DiceError):
    """Raised when the assembled arithmetic formula cannot be evaluated."""
