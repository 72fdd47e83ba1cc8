"""
.env file discovery for Delcom Client.

Environment files are searched upward from the working directory so that a
project-local `.delcom/.env` can carry credentials and the API base URL.
"""

from pathlib import Path
from typing import Optional, Dict, List
import logging

from dotenv import load_dotenv, dotenv_values

logger = logging.getLogger(__name__)


class EnvFileLoader:
    """
    .env file loader with hierarchical search.

    Search order (stops at first file found):
    1. Current directory: .delcom/.env → .env
    2. Parent directories (up to git root or home): .delcom/.env → .env
    3. Home directory: ~/.delcom/.env → ~/.env
    """

    CONFIG_DIR_NAME = ".delcom"
    ENV_FILE_NAME = ".env"

    def __init__(self, working_directory: Optional[Path] = None, home_directory: Optional[Path] = None):
        """Initialize env file loader.

        Args:
            working_directory: Starting directory for search
            home_directory: Directory treated as the user's home
        """
        self.working_directory = Path(working_directory or Path.cwd()).resolve()
        self.home_directory = Path(home_directory or Path.home()).resolve()
        self._loaded_file: Optional[Path] = None
        self._loaded_vars: Dict[str, str] = {}

    def load_env_file(self) -> Optional[Path]:
        """Load environment variables from the first .env file found.

        Variables already present in the environment are not overridden.

        Returns:
            Path to loaded .env file or None if none found
        """
        env_file_path = self._find_env_file()

        if env_file_path is None:
            logger.debug("No .env file found in search path")
            return None

        load_dotenv(env_file_path, override=False)
        self._loaded_file = env_file_path
        self._loaded_vars = {
            key: value
            for key, value in dotenv_values(env_file_path).items()
            if value is not None
        }
        logger.info(f"Loaded environment variables from: {env_file_path}")
        return env_file_path

    def get_loaded_file(self) -> Optional[Path]:
        """Get path to the loaded .env file."""
        return self._loaded_file

    def get_loaded_vars(self) -> Dict[str, str]:
        """Get variables loaded from .env file."""
        return self._loaded_vars.copy()

    def get_search_paths(self) -> List[Path]:
        """Get list of all paths that would be searched for .env files, in order."""
        search_paths = []

        current_dir = self.working_directory
        while current_dir != current_dir.parent:
            search_paths.append(current_dir / self.CONFIG_DIR_NAME / self.ENV_FILE_NAME)
            search_paths.append(current_dir / self.ENV_FILE_NAME)

            if self._should_stop_search(current_dir):
                break
            current_dir = current_dir.parent

        home_paths = [
            self.home_directory / self.CONFIG_DIR_NAME / self.ENV_FILE_NAME,
            self.home_directory / self.ENV_FILE_NAME,
        ]
        for path in home_paths:
            if path not in search_paths:
                search_paths.append(path)

        return search_paths

    def _find_env_file(self) -> Optional[Path]:
        for candidate in self.get_search_paths():
            if candidate.is_file():
                return candidate
        return None

    def _should_stop_search(self, directory: Path) -> bool:
        # Stop at Git repository root
        if (directory / ".git").exists():
            return True

        # Stop at home directory
        if directory == self.home_directory:
            return True

        return False


def load_env_with_hierarchy(working_directory: Optional[Path] = None) -> Optional[Path]:
    """Convenience function to load .env file with hierarchical search."""
    loader = EnvFileLoader(working_directory)
    return loader.load_env_file()
