# -*- coding: utf-8 -*-

# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2025 Ziggiz Inc.
#
# This file is part of the ziggiz-courier-core-data-processing and is licensed under the
# Business Source License 1.1. You may not use this file except in
# compliance with the License. You may obtain a copy of the License at:
# https://github.com/ziggiz-courier/ziggiz-courier-core-data-processing/blob/main/LICENSE
# Configuration module for loading and parsing configuration files

# Standard library imports
import logging

from pathlib import Path
from typing import List, Optional, Union

# Third-party imports
import yaml

from pydantic import BaseModel, Field, field_validator


class LoggerConfig(BaseModel):
    """
    Configuration for individual loggers.

    Attributes:
        name (str): Logger name.
        level (str): Logging level (default: "INFO").
        propagate (bool): Whether to propagate logs to parent (default: True).
    """

    name: str
    level: str = "INFO"
    propagate: bool = True


class Config(BaseModel):
    """
    Configuration for RFC 5424 conformance validation.

    Covers validation strictness, how batch input files are framed and read,
    tracing and logging.
    """

    # Validation configuration
    strict_structured_data: bool = (
        False  # Reject stray bytes before SD-ELEMENTs and unterminated elements
    )

    # Batch input configuration
    framing_mode: str = "non_transparent"  # "auto", "transparent", or "non_transparent"
    max_workers: int = Field(default=1, ge=1)  # Threads used to validate batch lines
    read_chunk_size: int = Field(default=64 * 1024, gt=0)  # Bytes read per file read

    # Tracing configuration
    enable_tracing: bool = False
    tracing_console_export: bool = False

    # Logging configuration
    log_level: str = "INFO"
    log_format: str = "%(asctime)s %(levelname)s %(name)s %(message)s"
    log_date_format: str = "%Y-%m-%d %H:%M:%S"
    loggers: List[LoggerConfig] = Field(default_factory=list)

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, v: str) -> str:
        """Validate that the log level is a valid Python logging level."""
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        v = v.upper()
        if v not in valid_levels:
            raise ValueError(f"Invalid log level: {v}. Must be one of {valid_levels}")
        return v

    @field_validator("framing_mode")
    @classmethod
    def validate_framing_mode(cls, v: str) -> str:
        """Validate that the framing mode is valid."""
        valid_modes = ["auto", "transparent", "non_transparent"]
        v = v.lower()
        if v not in valid_modes:
            raise ValueError(f"Invalid framing mode: {v}. Must be one of {valid_modes}")
        return v


def load_config(config_path: Optional[Union[str, Path]] = None) -> Config:
    """
    Load configuration from a YAML file.

    Args:
        config_path: Path to the configuration file. If None, will look for config.yaml
                   in the current directory and default directories.

    Returns:
        A Config object containing the loaded configuration.

    Raises:
        FileNotFoundError: If the configuration file cannot be found.
        yaml.YAMLError: If the configuration file contains invalid YAML.
    """
    search_paths = [
        Path.cwd() / "conformance.yaml",
        Path.cwd() / "conformance.yml",
        Path("/etc/ziggiz-courier-syslog-conformance/config.yaml"),
        Path("/etc/ziggiz-courier-syslog-conformance/config.yml"),
    ]

    if config_path:
        config_file = Path(config_path)
        if not config_file.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_file}")
    else:
        for path in search_paths:
            if path.exists():
                config_file = path
                break
        else:
            logging.debug("No configuration file found, using default configuration")
            return Config()

    with open(config_file, "r") as f:
        try:
            config_data = yaml.safe_load(f)
        except yaml.YAMLError as e:
            logging.error("Error parsing configuration file", extra={"error": e})
            raise

    # An empty file yields None
    return Config(**(config_data or {}))


class SafeExtraFormatter(logging.Formatter):
    """
    Custom formatter that substitutes missing extra fields with a blank string.
    """

    def format(self, record: logging.LogRecord) -> str:
        if not hasattr(record, "violation_count"):
            record.violation_count = ""
        return super().format(record)


def configure_logging(config: Config) -> None:
    """
    Configure logging based on the provided configuration.

    Args:
        config: The loaded configuration object.
    """
    for handler in logging.root.handlers[:]:
        logging.root.removeHandler(handler)

    level = getattr(logging, config.log_level, logging.INFO)
    formatter = SafeExtraFormatter(config.log_format, datefmt=config.log_date_format)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    logging.root.setLevel(level)
    logging.root.addHandler(console_handler)

    for logger_config in config.loggers:
        logger = logging.getLogger(logger_config.name)
        logger.setLevel(getattr(logging, logger_config.level, logging.INFO))
        logger.propagate = logger_config.propagate
