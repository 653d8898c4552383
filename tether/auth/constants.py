# ── Credential rules ──────────────────────────────────────────────────────────
PASSWORD_MIN_LENGTH: int = 6
PASSWORD_MAX_LENGTH: int = 128
USERNAME_MAX_LENGTH: int = 50
