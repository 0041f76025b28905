# -*- coding: utf-8 -*-
# SPDX-License-Identifier: BSL-1.1
# Copyright (c) 2025 Ziggiz Inc.
#
# This file is part of the ziggiz-courier-core-data-processing and is licensed under the
# Business Source License 1.1. You may not use this file except in
# compliance with the License. You may obtain a copy of the License at:
# https://github.com/ziggiz-courier/ziggiz-courier-core-data-processing/blob/main/LICENSE
# OpenTelemetry setup for Ziggiz Courier Syslog Conformance
#
# Validation runs inside spans obtained from get_tracer(). Until configure_tracing() is
# called the OpenTelemetry default (no-op) tracer provider is in effect, so using the
# validators as a library never produces span output on its own.

# Standard library imports
from typing import TYPE_CHECKING, Optional

# Third-party imports
from opentelemetry import trace
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter
from opentelemetry.trace import Tracer

if TYPE_CHECKING:
    from ziggiz_courier_syslog_conformance.config import Config

SERVICE_NAME = "ziggiz-courier-syslog-conformance"


def configure_tracing(config: "Config") -> Optional[TracerProvider]:
    """
    Install a tracer provider based on the configuration.

    Args:
        config: The loaded configuration object.

    Returns:
        The installed TracerProvider, or None if tracing is disabled.
    """
    if not config.enable_tracing:
        return None

    resource = Resource.create({"service.name": SERVICE_NAME})
    tracer_provider = TracerProvider(resource=resource)

    # For demo/dev: export to console. Configure an OTLP exporter for production.
    if config.tracing_console_export:
        tracer_provider.add_span_processor(BatchSpanProcessor(ConsoleSpanExporter()))

    trace.set_tracer_provider(tracer_provider)
    return tracer_provider


def get_tracer() -> Tracer:
    return trace.get_tracer(SERVICE_NAME)
