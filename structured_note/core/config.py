"""
Configuration for the Structured Note Editor

Configuration is:
    1. Loaded from environment variables (with .env support)
    2. Validated at startup to fail fast on misconfiguration
    3. Plain data after creation; the session reads it once

Configuration Hierarchy:
    EditorConfiguration
    ├── Abbreviation Settings (snapshot source)
    ├── Text Settings (template expansion, control-char filtering)
    ├── Dispatcher Settings (serial queue vs. owned worker thread)
    └── Logging Settings (level, optional file sink)

Usage:
    from structured_note.core.config import EditorConfiguration

    # Load from environment
    config = EditorConfiguration.from_environment()

    # Or configure programmatically
    config = EditorConfiguration(dispatcher_mode=DispatcherMode.THREADED)
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

from structured_note.core.constants import ENV_PREFIX
from structured_note.core.enums import DispatcherMode
from structured_note.core.exceptions import ConfigurationError


# =============================================================================
# STAGE 1: DEFAULT VALUES
# =============================================================================


class ConfigDefaults:
    """Default configuration values."""

    DEFAULT_LOG_LEVEL = "INFO"
    DEFAULT_DISPATCHER_MODE = DispatcherMode.SERIAL
    DEFAULT_DISPATCHER_THREAD_NAME = "note-document-owner"
    DEFAULT_EXPAND_TEMPLATES = True
    DEFAULT_STRIP_CONTROL_CHARACTERS = True

    VALID_LOG_LEVELS = ("TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL")


def _env(name: str, default: Optional[str] = None) -> Optional[str]:
    return os.getenv(f"{ENV_PREFIX}{name}", default)


def _env_bool(name: str, default: bool) -> bool:
    value = _env(name)
    if value is None or value == "":
        return default
    return value.strip().lower() in {"1", "true", "t", "yes", "y", "on"}


# =============================================================================
# STAGE 2: CONFIGURATION DATACLASS
# =============================================================================


@dataclass
class EditorConfiguration:
    """
    Configuration for a note editing session.

    What it does:
        Collects the handful of knobs a NoteEditorSession needs: where the
        abbreviation snapshot comes from, whether template text is expanded,
        how bridge calls are marshalled, and how logging is set up.

    Example:
        >>> config = EditorConfiguration.from_environment()
        >>> config.dispatcher_mode
        <DispatcherMode.SERIAL: 'serial'>
    """

    # -------------------------------------------------------------------------
    # 2.1 Abbreviation Configuration
    # -------------------------------------------------------------------------
    abbreviations_path: Optional[str] = None
    """JSON file with the abbreviation table. None = built-in defaults."""

    # -------------------------------------------------------------------------
    # 2.2 Text Configuration
    # -------------------------------------------------------------------------
    expand_templates: bool = ConfigDefaults.DEFAULT_EXPAND_TEMPLATES
    """Expand ':key' shorthands in template-driven insertions."""

    strip_control_characters: bool = ConfigDefaults.DEFAULT_STRIP_CONTROL_CHARACTERS
    """Drop ASCII control characters (except TAB/LF) before storing text."""

    # -------------------------------------------------------------------------
    # 2.3 Dispatcher Configuration
    # -------------------------------------------------------------------------
    dispatcher_mode: DispatcherMode = ConfigDefaults.DEFAULT_DISPATCHER_MODE
    """SERIAL: caller drains the queue. THREADED: a worker thread owns the document."""

    dispatcher_thread_name: str = ConfigDefaults.DEFAULT_DISPATCHER_THREAD_NAME
    """Thread name used in THREADED mode."""

    # -------------------------------------------------------------------------
    # 2.4 Logging Configuration
    # -------------------------------------------------------------------------
    log_level: str = ConfigDefaults.DEFAULT_LOG_LEVEL
    """Minimum loguru level for the stderr sink."""

    log_file: Optional[str] = None
    """Optional file sink path."""

    # -------------------------------------------------------------------------
    # 2.5 Validation Methods
    # -------------------------------------------------------------------------

    def validate(self) -> None:
        """
        Validate configuration parameters.

        Raises:
            ConfigurationError: If configuration is invalid
        """
        if self.abbreviations_path and not Path(self.abbreviations_path).exists():
            raise ConfigurationError(
                f"Abbreviation file not found: {self.abbreviations_path}",
                context={"setting": f"{ENV_PREFIX}ABBREVIATIONS_PATH"},
            )

        if self.log_level.upper() not in ConfigDefaults.VALID_LOG_LEVELS:
            raise ConfigurationError(
                f"Invalid log level: {self.log_level}",
                context={"valid": list(ConfigDefaults.VALID_LOG_LEVELS)},
            )

        if not isinstance(self.dispatcher_mode, DispatcherMode):
            raise ConfigurationError(
                f"Invalid dispatcher mode: {self.dispatcher_mode!r}",
                context={"valid": [mode.value for mode in DispatcherMode]},
            )

        if not self.dispatcher_thread_name.strip():
            raise ConfigurationError(
                "Dispatcher thread name cannot be empty",
                context={"setting": f"{ENV_PREFIX}DISPATCHER_THREAD_NAME"},
            )

    # -------------------------------------------------------------------------
    # 2.6 Factory Methods
    # -------------------------------------------------------------------------

    @classmethod
    def from_environment(
        cls, env_file: Optional[str] = None, validate_on_load: bool = True
    ) -> "EditorConfiguration":
        """
        Load configuration from environment variables.

        STAGE 1: Load .env file (if specified or found in the working directory)
        STAGE 2: Read NOTE_EDITOR_* variables
        STAGE 3: Convert to typed configuration
        STAGE 4: Validate configuration (optional)

        Args:
            env_file: Path to .env file (optional)
            validate_on_load: Whether to validate after loading

        Raises:
            ConfigurationError: If settings are invalid
        """
        # STAGE 1: Load .env file
        if env_file:
            load_dotenv(env_file)
        else:
            default_env = Path.cwd() / ".env"
            if default_env.exists():
                load_dotenv(default_env)

        # STAGE 2-3: Read and convert
        raw_mode = _env("DISPATCHER_MODE", ConfigDefaults.DEFAULT_DISPATCHER_MODE.value)
        try:
            dispatcher_mode = DispatcherMode.from_string(raw_mode)
        except ValueError as e:
            raise ConfigurationError(str(e), context={"setting": f"{ENV_PREFIX}DISPATCHER_MODE"})

        config = cls(
            abbreviations_path=_env("ABBREVIATIONS_PATH") or None,
            expand_templates=_env_bool("EXPAND_TEMPLATES", ConfigDefaults.DEFAULT_EXPAND_TEMPLATES),
            strip_control_characters=_env_bool(
                "STRIP_CONTROL_CHARACTERS", ConfigDefaults.DEFAULT_STRIP_CONTROL_CHARACTERS
            ),
            dispatcher_mode=dispatcher_mode,
            dispatcher_thread_name=_env(
                "DISPATCHER_THREAD_NAME", ConfigDefaults.DEFAULT_DISPATCHER_THREAD_NAME
            ),
            log_level=_env("LOG_LEVEL", ConfigDefaults.DEFAULT_LOG_LEVEL).upper(),
            log_file=_env("LOG_FILE") or None,
        )

        # STAGE 4: Validate
        if validate_on_load:
            config.validate()

        return config

    def to_dict(self) -> dict:
        """Convert configuration to dictionary (for logging/debugging)."""
        return {
            "abbreviations_path": self.abbreviations_path,
            "expand_templates": self.expand_templates,
            "strip_control_characters": self.strip_control_characters,
            "dispatcher_mode": self.dispatcher_mode.value,
            "dispatcher_thread_name": self.dispatcher_thread_name,
            "log_level": self.log_level,
            "log_file": self.log_file,
        }
