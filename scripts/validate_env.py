#!/usr/bin/env python3
"""
Environment validation script for API Vault.
Validates that all required environment variables are set correctly.

Usage:
    python scripts/validate_env.py              # check backend/.env or the environment
    python scripts/validate_env.py --generate-key
"""

import os
import secrets
import string
import sys

from dotenv import load_dotenv

KEY_SIZE = 32
BCRYPT_MIN_COST = 4
BCRYPT_MAX_COST = 31
DEFAULT_JWT_SECRET = "changeme"

OPTIONAL_VARS = [
    "BCRYPT_COST",
    "MAX_REFRESH_MINUTES",
    "LOG_FILE",
]

KEY_ALPHABET = string.ascii_letters + string.digits


def generate_key() -> str:
    """Return a random 32-character key usable as DATA_ENCRYPTION_KEY."""
    return "".join(secrets.choice(KEY_ALPHABET) for _ in range(KEY_SIZE))


def valid_bcrypt_cost(value: str) -> bool:
    try:
        cost = int(value)
    except ValueError:
        return False
    return BCRYPT_MIN_COST <= cost <= BCRYPT_MAX_COST


REQUIRED_VARS = {
    "DATABASE_URL": {
        "required": True,
        "validate": lambda v: v.startswith(("postgresql://", "postgresql+asyncpg://", "sqlite://", "sqlite+aiosqlite://")),
        "error": "DATABASE_URL must start with postgresql:// or sqlite://",
    },
    "DATA_ENCRYPTION_KEY": {
        "required": True,
        "validate": lambda v: len(v.encode("utf-8")) == KEY_SIZE,
        "error": f"DATA_ENCRYPTION_KEY must be exactly {KEY_SIZE} bytes (try --generate-key)",
    },
    "JWT_SECRET": {
        "required": True,
        "validate": lambda v: v != DEFAULT_JWT_SECRET,
        "error": "JWT_SECRET must not be the default value",
    },
}


def main(argv=None):
    """Main validation function."""
    argv = sys.argv[1:] if argv is None else argv
    if "--generate-key" in argv:
        print(generate_key())
        return 0

    print("🔍 Validating Environment Configuration")
    print("=" * 50)
    print()

    # Load environment from .env file if it exists
    env_file = os.path.join("backend", ".env")
    if os.path.exists(env_file):
        print(f"📄 Loading environment from {env_file}")
        load_dotenv(env_file)
    else:
        print(f"⚠️  {env_file} not found. Using system environment variables.")
    print()

    errors = []
    warnings = []

    print("Checking required environment variables...")
    for var_name, config in REQUIRED_VARS.items():
        value = os.getenv(var_name)

        if not value:
            if config["required"]:
                errors.append(f"❌ {var_name}: Not set (required)")
            continue

        if not config["validate"](value):
            errors.append(f"❌ {var_name}: {config['error']}")
        else:
            print(f"✅ {var_name}: Set and valid")

    print()

    print("Checking optional environment variables...")
    for var_name in OPTIONAL_VARS:
        value = os.getenv(var_name)
        if value:
            print(f"✅ {var_name}: Set")
        else:
            print(f"⚪ {var_name}: Not set (optional)")

    cost = os.getenv("BCRYPT_COST")
    if cost and not valid_bcrypt_cost(cost):
        warnings.append(
            f"⚠️  BCRYPT_COST={cost} is outside [{BCRYPT_MIN_COST}, {BCRYPT_MAX_COST}]; the default will be used"
        )

    print()

    # Summary
    print("=" * 50)
    if errors:
        print("❌ Validation failed with the following errors:")
        for error in errors:
            print(f"  {error}")
        print()
        return 1

    if warnings:
        print("⚠️  Validation passed with warnings:")
        for warning in warnings:
            print(f"  {warning}")
        print()

    print("✅ Environment validation passed!")
    return 0


if __name__ == "__main__":
    sys.exit(main())
