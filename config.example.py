# config.example.py

"""
Documentation-only module (safe to commit).

The real configuration is loaded from environment variables (optionally via a local .env file).
Do NOT commit real secrets. Use .env (local, gitignored).

This file exists to make the repo self-documenting even without opening .env.example.
"""

ENV_VARS = {
    # App / logging
    "SEATWATCH_APP_NAME": "App display name (default: seat-watch).",
    "SEATWATCH_LOG_LEVEL": "Console logging level (default: INFO).",
    "SEATWATCH_DATA_DIR": "Local data directory for the log file (default: .local/seat_watch).",
    # Connectors
    "SEATWATCH_CONSOLE_ENABLED": "Enable console connector (true/false, default: true).",
    "SEATWATCH_MATRIX_ENABLED": "Enable Matrix connector (true/false, default: false).",
    # Registration platform
    "SEATWATCH_BANNER_BASE_URL": (
        "StudentRegistrationSsb root "
        "(default: https://banner9-registration.kfupm.edu.sa/StudentRegistrationSsb)."
    ),
    "SEATWATCH_QUERY_TIMEOUT_SECONDS": "Deadline for one term-declare + search exchange (default: 20).",
    "SEATWATCH_PAGE_MAX_SIZE": "Search page size, capped at 50 (default: 50).",
    # Polling
    "SEATWATCH_POLL_INTERVAL_SECONDS": "Seconds between sweeps (default: 300).",
    "SEATWATCH_POLL_MAX_CONCURRENCY": "Max parallel platform queries within a sweep (default: 4).",
    # Matrix
    "SEATWATCH_MATRIX_HOMESERVER": "Matrix homeserver URL.",
    "SEATWATCH_MATRIX_USER_ID": "Matrix user ID (bot).",
    "SEATWATCH_MATRIX_PASSWORD": "Password login (used when no access token is set).",
    "SEATWATCH_MATRIX_ACCESS_TOKEN": "Access token (skips password login).",
    "SEATWATCH_MATRIX_DEVICE_ID": "Device ID to pair with the access token.",
    "SEATWATCH_MATRIX_ROOMS": "Optional allowlist of room IDs (empty => all rooms).",
}
