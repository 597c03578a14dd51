# chat_image_parser/delegates/file_manager_delegate.py
import logging
from pathlib import Path
from typing import Any, List, Sequence

import json5

from .. import config
from ..errors import FolderNotFound, NoImagesFound, ParseError

logger = logging.getLogger(__name__)


class FileManagerDelegate:
    """Handles all file system interactions for one image folder."""
    def __init__(self, folder: Path, image_extensions: Sequence[str] = config.IMAGE_EXTENSIONS):
        self.folder = Path(folder).expanduser().resolve()
        self.image_extensions = tuple(ext.lower() for ext in image_extensions)

    @property
    def merged_path(self) -> Path:
        return self.folder / config.MERGED_FILENAME

    def ensure_folder(self):
        if not self.folder.is_dir():
            raise FolderNotFound(f"Folder {self.folder} does not exist.")
        logger.debug("Working folder: %s", self.folder)

    def list_images(self) -> List[Path]:
        """Returns the image files directly inside the folder, sorted by name."""
        images = sorted(
            p for p in self.folder.iterdir()
            if p.is_file() and p.suffix.lower() in self.image_extensions
        )
        if not images:
            raise NoImagesFound(f"No image files found in {self.folder}.")
        logger.info("Found %d image files in %s", len(images), self.folder)
        return images

    def save_result(self, image_path: Path, result_name: str, content: str) -> Path:
        """Writes the analysis text for one image next to it as ``<result_name>.json``."""
        file_path = Path(image_path).parent / f"{result_name}.json"
        file_path.write_text(content, encoding="utf-8")
        logger.info("Saved result to: %s", file_path)
        return file_path

    def list_result_files(self) -> List[Path]:
        return sorted(
            p for p in self.folder.iterdir()
            if p.is_file() and p.suffix.lower() == ".json"
        )

    def load_result(self, file_path: Path) -> Any:
        """Parses one result file. Model output is loose, so JSON5 relaxations are accepted."""
        try:
            return json5.loads(file_path.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            raise ParseError(f"Could not parse {file_path.name}: {e}") from e
