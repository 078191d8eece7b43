"""
Exit codes for the DailyVault CLI.

Scripts can branch on these to tell a bad secret from a network problem.
Code 2 is left to Click, which uses it for command-line usage errors.
"""

# Success
SUCCESS = 0

# General error (unspecified)
ERROR_GENERAL = 1

# No secret available (not logged in and none supplied)
ERROR_MISSING_SECRET = 3

# Network or API error (server unreachable, timeout, etc.)
ERROR_NETWORK = 4

# Invalid arguments or validation error
ERROR_INVALID_ARGS = 5

# A sealed package could not be opened (wrong secret, corrupted, tampered)
ERROR_DECRYPTION = 6


def get_exit_code_name(code: int) -> str:
    """Get the name of an exit code for display purposes."""
    code_names = {
        SUCCESS: "SUCCESS",
        ERROR_GENERAL: "ERROR_GENERAL",
        ERROR_MISSING_SECRET: "ERROR_MISSING_SECRET",
        ERROR_NETWORK: "ERROR_NETWORK",
        ERROR_INVALID_ARGS: "ERROR_INVALID_ARGS",
        ERROR_DECRYPTION: "ERROR_DECRYPTION",
    }
    return code_names.get(code, f"UNKNOWN({code})")
