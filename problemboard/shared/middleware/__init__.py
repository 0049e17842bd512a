# SPDX-License-Identifier: Apache-2.0
# Copyright 2025 Vova Orig

from .error_handler import configure_error_handling
from .identity import IdentityMiddleware, current_identity, extract_bearer_token
from .request_logger import configure_request_logging

__all__ = [
    "IdentityMiddleware",
    "configure_error_handling",
    "configure_request_logging",
    "current_identity",
    "extract_bearer_token",
]
