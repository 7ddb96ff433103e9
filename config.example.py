# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
Do NOT commit real secrets. Keep them in .env (local, gitignored).

This file exists to make the repo self-documenting even without opening .env.example.
"""

ENV_VARS = {
    # App / logging
    "VELOCE_APP_NAME": "App display name, also sent as the X-Title header (default: veloce).",
    "VELOCE_LOG_LEVEL": "Console logging level (default: INFO).",
    "VELOCE_DATA_DIR": "Local data directory; veloce.log is written here (default: .local/veloce).",
    # Preload cache
    "VELOCE_PRELOAD_CAPACITY": "Max completed entries kept before oldest-inserted eviction (default: 10).",
    "VELOCE_PRELOAD_BATCH_WIDTH": "Max loads started by one preload_batch call (default: 3).",
    "VELOCE_PRELOAD_LOAD_TIMEOUT_SECONDS": "Per-load timeout in seconds (default: 8.0).",
    # Task card
    "VELOCE_AI_STRATEGY_ENABLED": "Ask the LLM for card strategies (true/false, default: true).",
    # LLM / OpenRouter
    "VELOCE_OPENROUTER_API_KEY": "OpenRouter API key (required only when using LLM). OPENROUTER_API_KEY also works.",
    "VELOCE_OPENROUTER_BASE_URL": "OpenRouter base URL (default: https://openrouter.ai/api/v1).",
    "VELOCE_LLM_MODELS": "Comma/space separated list of models to try in order.",
    "VELOCE_HTTP_REFERER": "Optional OpenRouter metadata header.",
    "VELOCE_LLM_CONNECT_TIMEOUT_SECONDS": "HTTP connect timeout (default: 5.0).",
    "VELOCE_LLM_READ_TIMEOUT_SECONDS": "HTTP read timeout, never below the first-token timeout (default: 25.0).",
    "VELOCE_LLM_FIRST_TOKEN_TIMEOUT_SECONDS": "Abandon a model that sends no token in time (default: 20.0).",
}
