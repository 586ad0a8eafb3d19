"""Application settings file holding a static access key pair.

The file lives at ``~/.config/credchain/settings.json`` with permissions
restricted to the owner (0o600).  It is written by ``credchain settings
setup`` and read by the ``environment`` credential source.
"""

import json
from pathlib import Path

_CONFIG_DIR = Path.home() / ".config" / "credchain"
_SETTINGS_FILE = _CONFIG_DIR / "settings.json"


def save(
    access_key_id: str,
    secret_access_key: str,
    session_token: str | None = None,
) -> None:
    """Persist an access key pair to the settings file.

    Creates the config directory if it does not already exist and restricts
    file permissions to the owner only.

    Args:
        access_key_id: The AWS access key ID.
        secret_access_key: The AWS secret access key.
        session_token: Optional session token for temporary credentials.
    """
    data = {
        "access_key_id": access_key_id,
        "secret_access_key": secret_access_key,
    }
    if session_token:
        data["session_token"] = session_token
    _SETTINGS_FILE.parent.mkdir(parents=True, exist_ok=True)
    _SETTINGS_FILE.write_text(json.dumps(data, indent=2), encoding="utf-8")
    _SETTINGS_FILE.chmod(0o600)


def load() -> dict[str, str]:
    """Load settings from the settings file.

    Returns:
        The stored settings, or an empty dictionary if the file does not
        exist or cannot be parsed.
    """
    if not _SETTINGS_FILE.exists():
        return {}
    try:
        data = json.loads(_SETTINGS_FILE.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, OSError):
        return {}
    return data if isinstance(data, dict) else {}


def clear() -> bool:
    """Remove the settings file.

    Returns:
        ``True`` if the file was deleted, ``False`` if it did not exist.
    """
    if _SETTINGS_FILE.exists():
        _SETTINGS_FILE.unlink()
        return True
    return False


def settings_path() -> Path:
    """Return the path to the settings file."""
    return _SETTINGS_FILE
