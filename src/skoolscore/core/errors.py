class ConfigurationError(ValueError):
    """Raised when a school-level assessment or grading config is unusable."""


class GradeResolutionError(ConfigurationError):
    def __init__(self, percentage: float) -> None:
        super().__init__(f"No grade boundary matches percentage {percentage}")
        self.percentage = percentage
