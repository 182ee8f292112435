#!/usr/bin/env python3

"""Runtime defaults for the analyzer with environment overrides."""

import os
from typing import Any

ENV_PREFIX = "STRUCTSIGHT_"

# Default configuration values
DEFAULT_CONFIG: dict[str, Any] = {
    # Result cache
    "RESULT_CACHE_SIZE": 128,
    "RESULT_CACHE_TTL_SECONDS": 30.0,

    # Toolchain
    "COMPILE_TIMEOUT_SECONDS": 60,
    "CXX_STANDARD": "c++17",
    "GCC_EXECUTABLE": "g++",
    "CLANG_EXECUTABLE": "clang++",
}


def get_config() -> dict[str, Any]:
    """Get configuration with environment variable overrides.

    Each key can be overridden by ``STRUCTSIGHT_<KEY>``; the value is
    converted to the default's type and ignored if it does not convert.

    Returns:
        Configuration dictionary
    """
    config = DEFAULT_CONFIG.copy()

    for key, default in DEFAULT_CONFIG.items():
        env_value = os.getenv(f"{ENV_PREFIX}{key}")
        if env_value is None:
            continue

        if isinstance(default, bool):
            config[key] = env_value.lower() in ("true", "1", "yes", "on")
        elif isinstance(default, int):
            try:
                config[key] = int(env_value)
            except ValueError:
                pass
        elif isinstance(default, float):
            try:
                config[key] = float(env_value)
            except ValueError:
                pass
        else:
            config[key] = env_value

    return config
