from usercss.validation.validator import validate

__all__ = ["validate"]
