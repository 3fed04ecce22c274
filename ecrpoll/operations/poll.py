"""Poll operation: fetch new images from ECR repositories into the results file."""

import logging
from typing import Any, Dict, List, Optional

from ..config.settings import Config
from ..exceptions import PollerError
from ..filters.images import select_new_images
from ..registry.ecr_client import (
    create_ecr_client,
    extract_registry_id,
    get_host_url_for_ecr,
    list_all_images,
)
from ..storage.results_file import ResultsFile
from ..utils.progress import ProgressReporter


logger = logging.getLogger(__name__)


class PollOperation:
    """Polls each configured repository in turn and appends new images."""

    def __init__(self, config: Config, output_path: Optional[str] = None):
        self.config = config
        self.registry_id = extract_registry_id(config.registry_url)
        self.results_file = ResultsFile(
            output_path or config.output_path,
            config.permission_mode
        )

    def poll_repository(self, repository_name: str) -> Dict[str, Any]:
        """Poll a single repository and merge its new images into the results file."""
        logger.info(f"Polling repository: {repository_name}")

        client = create_ecr_client(
            self.config.access_key,
            self.config.secret_key,
            self.config.region
        )

        all_images = list_all_images(client, self.registry_id, repository_name)

        if self.config.is_cold_start:
            logger.info(f"No last fetched time, taking the {self.config.cold_start_count} latest images")
        else:
            logger.info(f"Taking images pushed after {self.config.last_fetched_time.isoformat()}")

        new_images = select_new_images(
            all_images,
            self.config.last_fetched_time,
            self.config.cold_start_count
        )
        logger.info(f"Selected {len(new_images)} of {len(all_images)} images from {repository_name}")

        document = self.results_file.merge(new_images, self.config.region)

        return {
            'repository': repository_name,
            'images_found': len(all_images),
            'images_appended': len(new_images),
            'total_images': len(document.image_details)
        }

    def poll_repositories(self, continue_on_error: bool = False,
                          show_progress: bool = True) -> Dict[str, Any]:
        """Poll every configured repository, sequentially.

        By default the first failure propagates and later repositories are
        not polled. With continue_on_error the failure is recorded and
        polling moves on to the next repository.
        """
        repositories = self.config.repositories
        logger.info(f"Polling {len(repositories)} repositories from registry {self.registry_id}")

        results: List[Dict[str, Any]] = []
        errors: List[Dict[str, str]] = []

        with ProgressReporter(len(repositories), disable=not show_progress) as progress:
            for repository_name in repositories:
                try:
                    results.append(self.poll_repository(repository_name))
                    progress.update(True, repository_name)
                except PollerError as e:
                    progress.update(False, repository_name)
                    if not continue_on_error:
                        raise
                    logger.error(f"Polling {repository_name} failed, continuing: {e}")
                    errors.append({'repository': repository_name, 'error': str(e)})

        if not errors:
            logger.info("Polling from container registry succeeded")

        return {
            'registry': get_host_url_for_ecr(self.registry_id, self.config.region),
            'output_path': self.results_file.path,
            'cold_start': self.config.is_cold_start,
            'repositories': results,
            'errors': errors
        }
