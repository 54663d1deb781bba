# This file defines runtime configuration for the pricing matrix editor page.
# It exists so the API location and request timeout can be tuned through environment variables.

from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv


@dataclass(frozen=True)
class EditorConfig:
    api_base_url: str
    request_timeout_seconds: int


def load_editor_config(*, load_env: bool = True) -> EditorConfig:
    if load_env:
        load_dotenv()

    api_base_url = os.getenv("EDITOR_API_BASE_URL")
    if not api_base_url:
        api_host = os.getenv("API_HOST", "localhost")
        api_port = os.getenv("API_PORT", "8000")
        api_version_path = os.getenv("API_VERSION_PATH", "/api/v1")
        api_base_url = f"http://{api_host}:{api_port}{api_version_path}"

    return EditorConfig(
        api_base_url=api_base_url.rstrip("/"),
        request_timeout_seconds=int(os.getenv("EDITOR_REQUEST_TIMEOUT_SECONDS", "8")),
    )
