"""
Shared utilities for the lesson pipeline.

- llm_client.py: OpenAI-SDK chat-completion client for DeepSeek-compatible APIs
- credentials.py: API key lookup (environment, key file, .env.local)
- file_io.py: JSON input, Markdown output and front matter splitting
- logging_config.py: Console/JSON logging and stage timing
"""

__all__ = [
    "llm_client",
    "credentials",
    "file_io",
    "logging_config",
]
