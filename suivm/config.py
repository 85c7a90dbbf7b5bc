"""Runtime settings for suivm."""

import os
from pathlib import Path
from typing import Dict, Optional

from pydantic import BaseModel

from . import __version__

ENV_VARS = {
    "home": "SUIVM_HOME",
    "releases_url": "SUIVM_RELEASES_URL",
    "commit_url": "SUIVM_COMMIT_URL",
    "asset_url": "SUIVM_ASSET_URL",
    "repo_url": "SUIVM_REPO_URL",
    "github_token": "GITHUB_TOKEN",
}


class Settings(BaseModel):
    home: Path = Path.home() / ".suivm"
    releases_url: str = "https://api.github.com/repos/MystenLabs/sui/releases?per_page=100"
    commit_url: str = "https://api.github.com/repos/MystenLabs/sui/commits/{ref}"
    asset_url: str = "https://github.com/MystenLabs/sui/releases/download/{version}/sui-{version}-{platform}.tgz"
    repo_url: str = "https://github.com/MystenLabs/sui"
    github_token: Optional[str] = None
    user_agent: str = f"suivm/{__version__} https://github.com/MystenLabs/sui"
    chunk_size: int = 64 * 1024
    timeout: float = 300.0

    @classmethod
    def from_env(cls, environ: Optional[Dict[str, str]] = None, **overrides) -> "Settings":
        """Build settings from SUIVM_* environment variables."""
        environ = os.environ if environ is None else environ
        values = {}
        for field, var in ENV_VARS.items():
            if environ.get(var):
                values[field] = environ[var]
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)

    def request_headers(self) -> Dict[str, str]:
        headers = {"User-Agent": self.user_agent}
        if self.github_token:
            headers["Authorization"] = f"Bearer {self.github_token}"
        return headers
