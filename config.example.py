# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
Nothing secret is required: every variable has a local default.

This file exists to make the repo self-documenting even without opening .env.
"""

ENV_VARS = {
    # App / logging
    "TASKPAD_APP_NAME": "App display name (default: taskpad).",
    "TASKPAD_LOG_LEVEL": "Logging level (default: INFO).",
    # Storage (gitignored)
    "TASKPAD_DATA_DIR": "Local data directory (default: .local/taskpad).",
    "TASKPAD_STORE_PATH": "Key-value store SQLite path (default: <data_dir>/store.sqlite3).",
    "TASKPAD_STORE_BACKEND": "sqlite | memory (default: sqlite; memory forgets everything on exit).",
    "TASKPAD_EXPORT_PATH": "Default /export target (default: <data_dir>/tasks.json).",
    # Switches
    "TASKPAD_ANONYMOUS_MODE": (
        "Allow task commands without signing in; uses the legacy unscoped keys (true/false)."
    ),
    # Simulated latency (seconds, 0 disables)
    "TASKPAD_LOADING_SECONDS": "Startup loading screen (default: 2.0).",
    "TASKPAD_SIGNUP_DELAY_SECONDS": "Sign-up processing delay (default: 1.0).",
    "TASKPAD_LOGIN_DELAY_SECONDS": "Login processing delay (default: 0.8).",
    "TASKPAD_REDIRECT_DELAY_SECONDS": "Pause before opening the dashboard (default: 1.5).",
    "TASKPAD_FADE_SECONDS": "Page fade-out duration (default: 0.25).",
}
