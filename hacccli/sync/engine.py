"""Sync engine - brings every tracked component to its newest permitted version."""

import asyncio
from collections.abc import Callable
from dataclasses import dataclass, field

from hacccli.core.config.settings import Settings, get_settings
from hacccli.core.exceptions.errors import FetchError, HacccliError
from hacccli.core.logger.logger import get_logger
from hacccli.models.component import Component
from hacccli.models.sync import (
    BatchReport,
    ResolutionStatus,
    SyncOutcome,
    SyncStatus,
)
from hacccli.models.workspace import WorkspaceConfig
from hacccli.sync.catalog.base import ReleaseCatalog
from hacccli.sync.deployment import DeploymentSwapper
from hacccli.sync.fetcher import ArchiveFetcher
from hacccli.sync.resolver import DecisionCallback, VersionResolver, skip_decision
from hacccli.sync.source import parse_source_url
from hacccli.sync.store import ComponentStore
from hacccli.sync.workspace import WorkspaceManager

logger = get_logger(__name__)

OutcomeCallback = Callable[[SyncOutcome], None]


@dataclass
class SyncContext:
    """Collaborators a sync runs against."""

    store: ComponentStore
    catalog: ReleaseCatalog
    settings: Settings = field(default_factory=get_settings)
    decide: DecisionCallback = skip_decision
    workspaces: WorkspaceManager = field(init=False)

    def __post_init__(self) -> None:
        self.workspaces = WorkspaceManager(
            WorkspaceConfig(
                base_dir=self.settings.staging.base_dir,
                isolated=self.settings.staging.isolated,
                prefix=self.settings.staging.prefix,
            )
        )


class SyncEngine:
    """Resolves, fetches and deploys components one at a time.

    Components share the staging base directory, so syncs never run
    concurrently.
    """

    def __init__(self, context: SyncContext) -> None:
        """Initialize the engine.

        Args:
            context: Store, catalog and settings to work with.
        """
        self.context = context
        web_url = context.settings.github.web_url
        self.resolver = VersionResolver(context.catalog, context.decide, web_url)
        self.fetcher = ArchiveFetcher(context.catalog, web_url)
        self.swapper = DeploymentSwapper()

    async def sync_component(self, component: Component) -> SyncOutcome:
        """Update a single component if a newer permitted version exists.

        Args:
            component: Registered component.

        Returns:
            Outcome describing what happened.

        Raises:
            HacccliError: If resolution, download or persistence fails.
        """
        logger.info(f"Start fetch component {component.name}")
        resolution = await self.resolver.resolve(component)

        if resolution.status == ResolutionStatus.UP_TO_DATE:
            return SyncOutcome(
                component=component,
                status=SyncStatus.UP_TO_DATE,
                previous_version=component.version,
                new_version=component.version,
            )

        if resolution.status == ResolutionStatus.DEFERRED:
            return SyncOutcome(
                component=component,
                status=SyncStatus.DEFERRED,
                previous_version=component.version,
                new_version=component.version,
                candidates=tuple(r.tag_name for r in resolution.candidates),
            )

        target = resolution.target
        if target is None:
            raise FetchError(
                f"No update target resolved for {component.name}",
                source_path=component.url,
            )

        source = parse_source_url(component.url, self.context.settings.github.web_url)
        with self.context.workspaces.workspace() as workspace:
            artifact = await self.fetcher.fetch(source, target, workspace.path)
            destination = await asyncio.to_thread(self.swapper.swap, artifact, component)

        updated = component.with_version(target.version)
        self.context.store.update(updated)

        return SyncOutcome(
            component=updated,
            status=SyncStatus.UPDATED if component.version else SyncStatus.DOWNLOADED,
            previous_version=component.version,
            new_version=updated.version,
            deployed_to=destination,
        )

    async def sync_all(self, on_outcome: OutcomeCallback | None = None) -> BatchReport:
        """Sync every registered component in registration order.

        A failing component is recorded and the remaining ones are still
        attempted.

        Args:
            on_outcome: Called after each component with its outcome.

        Returns:
            BatchReport with one outcome per component.
        """
        report = BatchReport()

        for component in self.context.store.list_all():
            try:
                outcome = await self.sync_component(component)
            except (HacccliError, OSError) as e:
                logger.error(f"Failed to sync {component.name}: {e}")
                outcome = SyncOutcome(
                    component=component,
                    status=SyncStatus.FAILED,
                    previous_version=component.version,
                    error=str(e),
                )

            report.outcomes.append(outcome)
            if on_outcome is not None:
                on_outcome(outcome)

        if report.failures:
            logger.warning(
                f"{len(report.failures)} of {len(report.outcomes)} component(s) failed to sync"
            )

        return report
