"""Local JSON results file that accumulates polled image details."""

import json
import logging
import os
from typing import Any, Dict, List

from ..config.settings import DEFAULT_OUTPUT_PATH, DEFAULT_PERMISSION_MODE
from ..exceptions import OutputIOError
from ..models.image_details import ImageDetailsDocument, json_default


logger = logging.getLogger(__name__)


class ResultsFile:
    """Reads, appends to and rewrites the results document at a fixed path.

    Every write replaces the whole file in place. There is no locking or
    atomic rename, so two processes writing the same path concurrently can
    corrupt it.
    """

    def __init__(self, path: str = DEFAULT_OUTPUT_PATH,
                 permission_mode: int = DEFAULT_PERMISSION_MODE):
        self.path = path
        self.permission_mode = permission_mode

    def exists(self) -> bool:
        try:
            os.stat(self.path)
            return True
        except FileNotFoundError:
            return False
        except OSError as e:
            raise OutputIOError(f"Cannot check results file {self.path}: {e}") from e

    def load(self) -> ImageDetailsDocument:
        """Load and parse the existing results document."""
        try:
            with open(self.path, 'r') as f:
                data = json.load(f)
        except OSError as e:
            raise OutputIOError(f"Failed to read results file {self.path}: {e}") from e
        except ValueError as e:
            raise OutputIOError(f"Results file {self.path} is not valid JSON: {e}") from e

        try:
            return ImageDetailsDocument.from_dict(data)
        except ValueError as e:
            raise OutputIOError(f"Unexpected results file layout in {self.path}: {e}") from e

    def save(self, document: ImageDetailsDocument):
        """Write the document, creating the parent directory when missing."""
        try:
            content = json.dumps(document.to_dict(), indent=1, default=json_default)
        except (TypeError, ValueError) as e:
            raise OutputIOError(f"Failed to serialize results for {self.path}: {e}") from e

        directory = os.path.dirname(self.path)
        try:
            if directory:
                os.makedirs(directory, exist_ok=True)
            fd = os.open(self.path, os.O_WRONLY | os.O_CREAT | os.O_TRUNC, self.permission_mode)
            with os.fdopen(fd, 'w') as f:
                f.write(content)
        except OSError as e:
            raise OutputIOError(f"Failed to write results file {self.path}: {e}") from e

        logger.debug(f"Wrote {self.path} (mode {oct(self.permission_mode)})")

    def merge(self, images: List[Dict[str, Any]], region: str) -> ImageDetailsDocument:
        """Append images to the existing document, or create it with region.

        The region of an existing document is left untouched.
        """
        if self.exists():
            document = self.load()
            before = len(document.image_details)
            document.append(images)
            logger.info(f"Appending {len(images)} images to {self.path} ({before} already present)")
        else:
            document = ImageDetailsDocument(image_details=list(images), region=region)
            logger.info(f"Creating {self.path} with {len(images)} images")

        self.save(document)
        return document
