from usercss.pipeline.processor import UserStyleProcessor

__all__ = ["UserStyleProcessor"]
