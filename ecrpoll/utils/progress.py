"""Progress reporting over polled repositories."""

import sys
from typing import Optional

from tqdm import tqdm


class ProgressReporter:
    """tqdm progress bar counting polled and failed repositories."""

    def __init__(self, total: int, description: str = "Polling", unit: str = "repo",
                 disable: bool = False):
        self.total = total
        self.description = description
        self.unit = unit
        self.disable = disable
        self.progress_bar = None
        self.polled = 0
        self.errors = 0

    def start(self):
        self.progress_bar = tqdm(
            total=self.total,
            desc=self.description,
            unit=self.unit,
            file=sys.stdout,
            disable=self.disable
        )

    def update(self, success: bool, repository: Optional[str] = None):
        """Record one finished repository."""
        if success:
            self.polled += 1
        else:
            self.errors += 1

        if self.progress_bar:
            postfix = {'polled': self.polled, 'errors': self.errors}
            if repository:
                postfix['last'] = repository
            self.progress_bar.set_postfix(postfix)
            self.progress_bar.update(1)

    def finish(self):
        if self.progress_bar:
            self.progress_bar.close()

    def __enter__(self):
        self.start()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.finish()
