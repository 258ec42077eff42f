# Author : Eshan Roy <eshanized@proton.me>
# SPDX-License-Identifier: MIT

"""
Custom exceptions for the configuration system.

We keep these separate so that CLI and other layers can catch config-specific
failures without importing the entire config machinery.
"""


class ConfigError(Exception):
    """Base for all configuration errors."""


class ConfigLoadError(ConfigError):
    """Raised when a harness config file cannot be read from disk or parsed as YAML."""


class ConfigValidationError(ConfigError):
    """
    Raised when a harness config file parses fine but fails schema validation.
    This covers missing required fields, type mismatches, out-of-range values,
    and unknown keys.
    """


class OptionError(ConfigError):
    """Raised when a `key=value` run option has a malformed or out-of-range value."""


class HelpRequested(Exception):
    """
    Raised by the option resolver when a help token is present.

    Not an error: the CLI prints usage and exits with SUCCESS.
    """
