"""Deployment swapper - replaces the live component directory with staged content.

The swap is not crash-safe: a process killed between deleting the old
deployment and moving in the new content leaves an empty or partial
destination. The next successful sync repopulates it.
"""

import shutil
from pathlib import Path
from typing import assert_never

from hacccli.core.exceptions.errors import FetchError
from hacccli.core.logger.logger import get_logger
from hacccli.models.component import BranchPolicy, Component, ReleasePolicy, TrackingPolicy
from hacccli.models.sync import StagedArtifact

logger = get_logger(__name__)


def base_path_of(policy: TrackingPolicy) -> str:
    """Return the sub-path of the component files inside the staged artifact."""
    if isinstance(policy, BranchPolicy):
        return policy.base_path
    if isinstance(policy, ReleasePolicy):
        return policy.base_path
    assert_never(policy)


def deployment_path(component: Component) -> Path:
    """Return the directory the component is deployed to."""
    return Path(component.local_path) / component.name


def resolve_source(staged: Path, base_path: str) -> Path:
    """Narrow a staged directory to the configured sub-path.

    Raises:
        FetchError: If the sub-path is missing from the staged content.
    """
    if not base_path:
        return staged

    source = staged / base_path
    if not source.exists():
        raise FetchError(
            f"Path '{base_path}' not found in downloaded content",
            source_path=str(staged),
        )
    return source


class DeploymentSwapper:
    """Moves staged artifacts into their deployment directory."""

    def swap(self, artifact: StagedArtifact, component: Component) -> Path:
        """Replace the deployment of a component with a staged artifact.

        Directory artifacts have their contents moved into the destination
        and the staging root removed afterwards. Single files are moved into
        the destination as they are.

        Args:
            artifact: Staged download.
            component: Component whose deployment is replaced.

        Returns:
            The deployment directory.
        """
        staging_root = artifact.path
        source = resolve_source(staging_root, base_path_of(component.policy))
        destination = deployment_path(component)

        if destination.exists():
            shutil.rmtree(destination)
        destination.mkdir(parents=True, exist_ok=True)

        if source.is_dir():
            for child in list(source.iterdir()):
                shutil.move(str(child), str(destination / child.name))
            shutil.rmtree(staging_root)
        else:
            shutil.move(str(source), str(destination / source.name))

        logger.info(f"{component.name} deployed to {destination}")
        return destination
