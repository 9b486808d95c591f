#!/usr/bin/env python3
"""Print the .env settings as shell export statements.

Usage: eval "$(python load_env.py)" before running shell scripts that need
API_BASE_URL and friends.
"""
import sys
from pathlib import Path
from typing import Dict, List, Optional

from dotenv import dotenv_values


def shell_quote(value: str) -> str:
    """Escape a value for use inside double quotes."""
    return value.replace('\\', '\\\\').replace('$', '\\$').replace('`', '\\`').replace('"', '\\"')


def export_lines(values: Dict[str, Optional[str]]) -> List[str]:
    return [f'export {key}="{shell_quote(value)}"' for key, value in values.items() if value]


def main(env_path: Path = Path('.env')) -> int:
    if not env_path.exists():
        return 0
    try:
        values = dotenv_values(env_path)
    except OSError as e:
        sys.stderr.write(f"Warning: Could not load .env file: {e}\n")
        return 1
    for line in export_lines(values):
        print(line)
    return 0


if __name__ == '__main__':
    sys.exit(main())
