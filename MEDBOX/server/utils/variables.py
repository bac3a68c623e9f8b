from __future__ import annotations

import os

from dotenv import load_dotenv

from MEDBOX.server.utils.constants import ENV_FILE_PATH
from MEDBOX.server.utils.logger import logger


###############################################################################
class EnvironmentVariables:
    def __init__(self, env_path: str = ENV_FILE_PATH) -> None:
        self.env_path = env_path
        if os.path.exists(self.env_path):
            load_dotenv(dotenv_path=self.env_path, override=True)
        else:
            logger.debug(".env file not found at: %s", self.env_path)

    # -------------------------------------------------------------------------
    def get(self, key: str, default: str | None = None) -> str | None:
        value = os.environ.get(key)
        if value is None:
            return default
        value = value.strip()
        return value or default

    # -------------------------------------------------------------------------
    def get_environment_variables(self) -> dict[str, str]:
        return dict(os.environ)


env_variables = EnvironmentVariables()
