from .presentation_controller import PresentationController, WARNING_COLOR, WARNING_PAUSE_SECONDS

__all__ = ["PresentationController", "WARNING_COLOR", "WARNING_PAUSE_SECONDS"]
