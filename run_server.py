"""
Run the service with uvicorn, keeping monitoring requests out of the
access log.
"""

import copy

import uvicorn
from uvicorn.config import LOGGING_CONFIG


def log_config() -> dict:
    config = copy.deepcopy(LOGGING_CONFIG)
    config["filters"] = {
        "exclude_metrics": {
            "()": "marketplace.uvicorn_filters.ExcludeMetricsFilter"
        }
    }
    config["handlers"]["access"]["filters"] = ["exclude_metrics"]
    return config


if __name__ == "__main__":
    uvicorn.run(
        "marketplace:application",
        factory=True,
        host="0.0.0.0",
        port=8000,
        log_config=log_config(),
    )
