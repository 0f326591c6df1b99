class LinkPulseError(Exception):
    """Base exception for all application-specific errors."""

    error_code = 'app:linkpulse_error'


class ConfigurationError(LinkPulseError):
    """Base exception for all configuration errors."""

    error_code = 'config:configuration_error'


class MissingEnvironmentVariableError(ConfigurationError):
    """Raised when a required environment variable is missing."""

    error_code = 'config:missing_environment_variable_error'


class BadConfigurationError(ConfigurationError):
    """Raised when the application is configured with invalid parameters."""

    error_code = 'config:bad_configuration_error'


class LinkError(LinkPulseError):
    """Base exception for link management errors."""

    error_code = 'link:link_error'


class InvalidTargetURLError(LinkError):
    """Raised when a target URL is not an absolute http(s) URL."""

    error_code = 'link:invalid_target_url_error'


class LinkCreationError(LinkError):
    """Raised when no unique shortcode could be allocated for a new link."""

    error_code = 'link:link_creation_error'
