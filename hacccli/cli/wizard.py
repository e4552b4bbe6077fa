"""Interactive registration of a new custom component."""

from pathlib import Path

from hacccli.cli.display import console, create_progress, show_error, show_info, show_outcome
from hacccli.cli.prompts import (
    confirm_content,
    prompt_component_name,
    prompt_repository_url,
    select_asset,
    select_base_dir_manually,
    select_branch,
    select_location,
    select_tier,
    select_tracking_type,
)
from hacccli.core.exceptions.errors import HacccliError
from hacccli.core.logger.logger import get_logger
from hacccli.models.component import BranchPolicy, ReleasePolicy, TrackingPolicy
from hacccli.models.release import Release, SourceIdentifier
from hacccli.models.sync import BranchTarget, SyncOutcome, UpdateTarget
from hacccli.sync.engine import SyncEngine
from hacccli.sync.fetcher import remove_path
from hacccli.sync.registration import (
    find_content_base_dir,
    list_content,
    load_hacs_manifest,
    new_component,
    stage_preview,
)
from hacccli.sync.resolver import release_target
from hacccli.sync.source import normalize_source_url, parse_source_url

logger = get_logger(__name__)

RELEASE_PREVIEW_COUNT = 5


class WizardCancelled(Exception):
    """Raised when user aborts a prompt."""


def _answered(value):
    if value is None:
        raise WizardCancelled()
    return value


async def _choose_release_policy(latest: Release, manifest: dict | None) -> ReleasePolicy:
    asset_name = ""
    if latest.assets:
        default = (manifest or {}).get("filename")
        asset_name = _answered(await select_asset([a.name for a in latest.assets], default))
    tier = _answered(await select_tier())
    return ReleasePolicy(asset_name=asset_name, tier=tier)


async def _choose_base_path(staged: Path, manifest: dict | None, repo: str) -> str:
    if not staged.is_dir():
        return ""

    base_path = find_content_base_dir(staged, manifest)
    if base_path is not None:
        logger.info(f"Found component content in /{base_path}")
        return base_path

    if _answered(await confirm_content(list_content(staged), repo)):
        return ""
    return _answered(await select_base_dir_manually(staged))


async def _preview(
    engine: SyncEngine, source: SourceIdentifier, releases: list[Release], manifest: dict | None
) -> tuple[TrackingPolicy, str]:
    """Stage the current content once so user can point at the component directory."""
    catalog = engine.context.catalog
    tracking = "branch"
    if releases:
        tags = ", ".join(r.tag_name for r in releases[:RELEASE_PREVIEW_COUNT])
        console.print(f"[dim]Latest releases: {tags}[/]")
        tracking = _answered(await select_tracking_type())

    target: UpdateTarget
    if tracking == "releases":
        latest = await catalog.get_latest_release(source.owner, source.repo)
        release_policy = await _choose_release_policy(latest, manifest)
        policy: TrackingPolicy = release_policy
        target = release_target(latest, release_policy)
    else:
        branches = await catalog.list_branches(source.owner, source.repo)
        branch = _answered(await select_branch(branches))
        commit = await catalog.get_branch_head(source.owner, source.repo, branch)
        policy = BranchPolicy(branch_name=branch)
        target = BranchTarget(branch=branch, commit=commit)

    with engine.context.workspaces.workspace() as workspace:
        with create_progress() as progress:
            progress.add_task(f"[cyan]Downloading {source}...", total=None)
            artifact = await stage_preview(engine.fetcher, source, target, workspace.path)
        try:
            base_path = await _choose_base_path(artifact.path, manifest, source.repo)
        finally:
            remove_path(artifact.path)

    return policy, base_path


def _with_base_path(policy: TrackingPolicy, base_path: str) -> TrackingPolicy:
    return policy.model_copy(update={"base_path": base_path})


async def add_component(engine: SyncEngine, url: str | None = None) -> SyncOutcome | None:
    """Register a component interactively and download it right away.

    Args:
        engine: Sync engine bound to the store and catalog.
        url: Repository url; asked for when None.

    Returns:
        Outcome of the first sync, or None if registration was aborted.
    """
    store = engine.context.store
    web_url = engine.context.settings.github.web_url

    try:
        url = normalize_source_url(url or _answered(await prompt_repository_url()))
        source = parse_source_url(url, web_url)

        if store.exists(url):
            show_error("Already Registered", f"Component {url} is already registered.")
            return None

        releases = await engine.context.catalog.list_releases(source.owner, source.repo)
        manifest = await load_hacs_manifest(engine.context.catalog, source)

        policy, base_path = await _preview(engine, source, releases, manifest)
        local_path = _answered(await select_location())
        name = _answered(await prompt_component_name(source.repo)).strip()
    except WizardCancelled:
        show_info("Cancelled", "No component was added.")
        return None
    except HacccliError as e:
        show_error("Registration Failed", str(e))
        return None

    component = store.register(
        new_component(url, name, local_path, _with_base_path(policy, base_path))
    )
    logger.info(f"Registered {component.name} from {component.url}")

    try:
        outcome = await engine.sync_component(component)
    except (HacccliError, OSError) as e:
        show_error("Download Failed", str(e))
        return None

    show_outcome(outcome)
    return outcome
