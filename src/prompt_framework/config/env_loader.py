import os
from pathlib import Path
from typing import Optional


def _find_env_file(file_path: str) -> Optional[Path]:
    """Look for the file in the working directory, then in its parents."""
    candidate = Path(file_path)
    if candidate.is_absolute():
        return candidate if candidate.exists() else None

    current = Path.cwd()
    for directory in [current, *current.parents]:
        path = directory / file_path
        if path.exists():
            return path
    return None


def load_env(file_path: str = ".env") -> bool:
    """
    Load environment variables from a .env file.

    Values already present in the environment win, so shell exports
    override the file.

    Args:
        file_path: Path to the .env file. Defaults to ".env" found in the
            current directory or the nearest parent.

    Returns:
        True if a file was found and read, False otherwise
    """
    path = _find_env_file(file_path)
    if path is None:
        # Optional config
        return False

    try:
        with open(path, 'r', encoding='utf-8') as f:
            for line in f:
                line = line.strip()
                if not line or line.startswith('#'):
                    continue
                if line.startswith('export '):
                    line = line[len('export '):]

                if '=' in line:
                    key, value = line.split('=', 1)
                    key = key.strip()
                    value = value.strip()

                    if (value.startswith('"') and value.endswith('"')) or \
                       (value.startswith("'") and value.endswith("'")):
                        value = value[1:-1]

                    if key not in os.environ:
                        os.environ[key] = value
    except OSError as e:
        print(f"Warning: Failed to load .env file: {e}")
        return False

    return True
