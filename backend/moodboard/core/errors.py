"""Configuration errors raised by the moodboard core.

These signal inconsistent static tables or programmer mistakes. They are
raised immediately and never swallowed; degraded user input and external
service failures are handled with fallbacks instead.
"""


class ConfigurationError(ValueError):
    """Static moodboard data is inconsistent or a primitive was misused."""


class UnknownCategoryError(ConfigurationError):
    """A category key has no definition in the category table."""

    def __init__(self, category: object) -> None:
        super().__init__(f"Unknown category: {category}")
        self.category = category


class TemplateNotFoundError(ConfigurationError):
    """No prompt template is registered for a category."""

    def __init__(self, category: object) -> None:
        super().__init__(f"No template found for category: {category}")
        self.category = category
