"""Staging workspaces for downloads and extraction."""

import shutil
import uuid
from collections.abc import Generator
from contextlib import contextmanager
from pathlib import Path

from hacccli.core.config.settings import get_settings
from hacccli.core.exceptions.errors import WorkspaceError
from hacccli.core.logger.logger import get_logger
from hacccli.models.workspace import WorkspaceConfig, WorkspaceInfo, WorkspaceStatus

logger = get_logger(__name__)


class WorkspaceManager:
    """Hands out staging directories for component syncs.

    Isolated workspaces are fresh, empty directories removed after use.
    Shared workspaces reuse the base directory itself and are never
    removed; leftovers of an interrupted run are cleaned up by the
    fetcher before it reuses a staging name.
    """

    def __init__(self, config: WorkspaceConfig | None = None) -> None:
        """Initialize the workspace manager.

        Args:
            config: Workspace configuration. Uses global settings if not provided.
        """
        if config is None:
            settings = get_settings()
            config = WorkspaceConfig(
                base_dir=settings.staging.base_dir,
                isolated=settings.staging.isolated,
                prefix=settings.staging.prefix,
            )

        self.config = config
        self._workspaces: dict[str, WorkspaceInfo] = {}

    def _get_base_dir(self) -> Path:
        """Get the base directory for workspaces.

        Returns:
            Base directory path.
        """
        if self.config.base_dir:
            base_dir = self.config.base_dir
            base_dir.mkdir(parents=True, exist_ok=True)
            return base_dir.resolve()
        return Path.cwd()

    def create(self) -> WorkspaceInfo:
        """Create a staging workspace.

        Returns:
            WorkspaceInfo for the created workspace.

        Raises:
            WorkspaceError: If workspace cannot be created.
        """
        base_dir = self._get_base_dir()

        if not self.config.isolated:
            info = WorkspaceInfo(name=f"shared-{uuid.uuid4().hex[:8]}", path=base_dir, owned=False)
            self._workspaces[info.name] = info
            return info

        workspace_name = f"{self.config.prefix}{uuid.uuid4().hex[:8]}"
        workspace_path = base_dir / workspace_name

        try:
            workspace_path.mkdir(parents=True, exist_ok=False)
        except OSError as e:
            raise WorkspaceError(
                f"Failed to create workspace directory: {workspace_path}",
                workspace_name=workspace_name,
                workspace_path=str(workspace_path),
                details={"error": str(e)},
            ) from e

        info = WorkspaceInfo(name=workspace_name, path=workspace_path)
        self._workspaces[workspace_name] = info
        logger.debug(f"Created workspace: {workspace_name} at {workspace_path}")

        return info

    def cleanup(self, name: str) -> bool:
        """Clean up a workspace.

        Args:
            name: Workspace name to clean up.

        Returns:
            True if cleanup succeeded.

        Raises:
            WorkspaceError: If workspace not found.
        """
        info = self._workspaces.get(name)
        if not info:
            raise WorkspaceError(f"Workspace not found: {name}", workspace_name=name)

        if info.status == WorkspaceStatus.DISPOSED:
            return True

        info.mark_cleanup()

        try:
            if info.owned and info.path.exists():
                shutil.rmtree(info.path)
                logger.debug(f"Removed workspace directory: {info.path}")
        except OSError as e:
            logger.warning(f"Failed to remove workspace directory: {info.path} - {e}")
        finally:
            info.mark_disposed()
            del self._workspaces[name]

        return True

    @contextmanager
    def workspace(self) -> Generator[WorkspaceInfo, None, None]:
        """Context manager for automatic workspace cleanup.

        Yields:
            WorkspaceInfo for the created workspace.
        """
        info = self.create()
        try:
            yield info
        finally:
            self.cleanup(info.name)
