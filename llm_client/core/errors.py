"""Fatal error taxonomy for the request pipeline.

Architectural role:
    Configuration and payload-construction failures are raised as exceptions
    from the registry, prompt acquisition, and payload builder. The orchestrator
    (`llm_client.core.engine.run`) is the only place that catches them, logs
    them, and maps them to a non-zero exit code.

Not covered here:
    HTTP call failures are returned as `CallOutcome` values and extraction
    failures as `ExtractionResult` values; neither is raised.
"""


class LLMClientError(Exception):
    """Base class for fatal client errors."""


# =========================================================
# CONFIGURATION
# =========================================================

class ConfigError(LLMClientError):
    """Invalid or incomplete configuration or CLI input."""


class ConfigNotFoundError(ConfigError):
    def __init__(self, path: str) -> None:
        super().__init__(f"Configuration file not found at '{path}'.")
        self.path = path


class ConfigUnreadableError(ConfigError):
    def __init__(self, path: str, reason: str) -> None:
        super().__init__(f"Configuration file '{path}' could not be read: {reason}")
        self.path = path


class MissingModeError(ConfigError):
    def __init__(self) -> None:
        super().__init__("LLM mode not specified. Use -m or set DEFAULT_LLM_MODE in config.")


class UnsupportedModeError(ConfigError):
    def __init__(self, mode: str) -> None:
        super().__init__(f"Unsupported LLM mode '{mode}'.")
        self.mode = mode


class MissingCredentialError(ConfigError):
    """API key or URL missing, or key still set to a placeholder."""

    def __init__(self, mode: str, config_key: str, what: str) -> None:
        super().__init__(
            f"{what} for mode '{mode}' is missing or not configured correctly. "
            f"Please set {config_key} in config."
        )
        self.mode = mode
        self.config_key = config_key


class EmptyPromptError(ConfigError):
    def __init__(self) -> None:
        super().__init__("No prompt provided. Use -p, -f, or pipe input.")


class PromptFileNotFoundError(ConfigError):
    def __init__(self, path: str) -> None:
        super().__init__(f"Prompt file '{path}' not found.")
        self.path = path


class PromptDecodeError(ConfigError):
    """Prompt bytes are not valid UTF-8."""

    def __init__(self, source: str) -> None:
        super().__init__(f"Prompt from {source} is not valid UTF-8 text.")
        self.source = source


# =========================================================
# PAYLOAD CONSTRUCTION
# =========================================================

class BuildError(LLMClientError):
    """Request payload could not be constructed."""


class InvalidTokenLimitError(BuildError):
    def __init__(self, value: object) -> None:
        super().__init__(f"Max tokens value ('{value}') must be a positive integer.")
        self.value = value


class UnsupportedShapeError(BuildError):
    def __init__(self, shape: object) -> None:
        super().__init__(f"Unsupported payload shape '{shape}'.")
        self.shape = shape
