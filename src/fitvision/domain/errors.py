"""Error types raised by the FitVision core."""


class FitVisionError(Exception):
    """Base class for application errors."""


class ValidationError(FitVisionError, ValueError):
    """Profile input is malformed or out of range."""


class ClassificationError(FitVisionError):
    """The dish classifier could not produce a label."""


class UnknownDishError(FitVisionError):
    """No nutrition facts are known for a dish label."""

    def __init__(self, dish_name: str) -> None:
        super().__init__(f"No nutritional data available for {dish_name}")
        self.dish_name = dish_name


class AuthError(FitVisionError):
    """Credentials did not match a known account."""

    def __init__(self) -> None:
        super().__init__("Invalid email or password")


class EmailInUseError(FitVisionError):
    """An account already exists for the email."""
