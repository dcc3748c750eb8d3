"""
Persisted session token for the Library CLI.
Stores a single opaque token under a fixed key in a small JSON file.
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional, Union

from config import settings

logger = logging.getLogger(__name__)

TOKEN_KEY = "token"
# bearer credential: owner read/write only
FILE_MODE = 0o600


class TokenStore:
    """Reads and writes the session token across process restarts."""

    def __init__(self, path: Optional[Union[str, Path]] = None) -> None:
        self.token_file = Path(path or settings.token_file).expanduser()

    def _read(self) -> Dict[str, Any]:
        if not self.token_file.exists():
            return {}
        try:
            with open(self.token_file, "r", encoding="utf-8") as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.warning("Could not load session file %s: %s", self.token_file, e)
            return {}
        return data if isinstance(data, dict) else {}

    def load(self) -> Optional[str]:
        """Return the persisted token, or None if there is none."""
        token = self._read().get(TOKEN_KEY)
        return token if isinstance(token, str) and token else None

    def save(self, token: str) -> None:
        data = self._read()
        data[TOKEN_KEY] = token
        self.token_file.parent.mkdir(parents=True, exist_ok=True)
        self._write(data)

    def clear(self) -> None:
        """Remove the persisted token; safe to call when nothing is stored."""
        data = self._read()
        if TOKEN_KEY not in data:
            return
        del data[TOKEN_KEY]
        if data:
            self._write(data)
        else:
            self.token_file.unlink(missing_ok=True)

    def _write(self, data: Dict[str, Any]) -> None:
        fd = os.open(self.token_file, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, FILE_MODE)
        with open(fd, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2)
        # a file created earlier may still carry umask permissions
        os.chmod(self.token_file, FILE_MODE)
