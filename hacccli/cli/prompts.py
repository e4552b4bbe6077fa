"""Interactive prompts for CLI using questionary."""

import os
from pathlib import Path

import questionary
from questionary import Style

from hacccli.models.component import Component, UpdateTier
from hacccli.models.release import Release
from hacccli.sync.registration import DEPLOYMENT_LOCATIONS, list_subdirectories
from hacccli.sync.resolver import SKIP, Decision

SKIP_CHOICE = "<skip>"
DONE_CHOICE = "<done>"
PARENT_CHOICE = ".."

# Custom style for questionary prompts
CUSTOM_STYLE = Style(
    [
        ("qmark", "fg:cyan bold"),
        ("question", "bold"),
        ("answer", "fg:green bold"),
        ("pointer", "fg:cyan bold"),
        ("highlighted", "fg:cyan bold"),
        ("selected", "fg:green"),
        ("separator", "fg:gray"),
        ("instruction", "fg:gray"),
        ("text", ""),
    ]
)


def prompt_token() -> str | None:
    """Ask user for a GitHub personal access token.

    Returns:
        Token, or None if cancelled.
    """
    return questionary.password(
        "The GitHub API is rate limited. The rate limit is higher for authenticated "
        "requests. Please enter a personal access token "
        "(goto https://github.com/settings/tokens/new):",
        validate=lambda x: len(x) > 0 or "This field is required",
        style=CUSTOM_STYLE,
    ).ask()


def select_main_menu_action() -> str | None:
    """Ask user what to do.

    Returns:
        Selected action: 'add', 'fetch', 'list' or 'exit'.
    """
    return questionary.select(
        "What do you want to do?",
        choices=[
            questionary.Choice("Add a new custom component", value="add"),
            questionary.Choice("Fetch registered components", value="fetch"),
            questionary.Choice("List registered components", value="list"),
            questionary.Choice("Exit", value="exit"),
        ],
        style=CUSTOM_STYLE,
    ).ask()


async def prompt_repository_url() -> str | None:
    """Ask user for the GitHub URL of the component."""
    return await questionary.text(
        "Enter the GitHub URL of the custom component:",
        instruction="(e.g., https://github.com/user/repo)",
        validate=lambda x: len(x.strip()) > 0 or "This field is required",
        style=CUSTOM_STYLE,
    ).ask_async()


async def select_tracking_type() -> str | None:
    """Ask user whether to follow releases or a branch.

    Returns:
        'releases' or 'branch'.
    """
    return await questionary.select(
        "You can choose either to keep track of new releases by following a specific "
        "branch or by using the releases with semantic versioning. Please select your "
        "preferred way to keep the custom component up to date:",
        choices=[
            questionary.Choice("Releases", value="releases"),
            questionary.Choice("Branch", value="branch"),
        ],
        default="releases",
        style=CUSTOM_STYLE,
    ).ask_async()


async def select_asset(asset_names: list[str], default: str | None = None) -> str | None:
    """Ask user which release asset should be downloaded."""
    return await questionary.select(
        "Please select the asset which should be downloaded:",
        choices=asset_names,
        default=default if default in asset_names else None,
        style=CUSTOM_STYLE,
    ).ask_async()


async def select_tier() -> UpdateTier | None:
    """Ask user which versions are installed automatically."""
    return await questionary.select(
        "Please choose what versions you would like to automatically update:",
        choices=[
            questionary.Choice("patch", value=UpdateTier.PATCH),
            questionary.Choice("minor", value=UpdateTier.MINOR),
            questionary.Choice("major", value=UpdateTier.MAJOR),
        ],
        default=UpdateTier.PATCH,
        style=CUSTOM_STYLE,
    ).ask_async()


async def select_branch(branches: list[str]) -> str | None:
    """Ask user which branch should be tracked."""
    default = next((b for b in ("master", "main") if b in branches), None)
    return await questionary.select(
        "Please select the branch name you want to track:",
        choices=branches,
        default=default,
        style=CUSTOM_STYLE,
    ).ask_async()


async def confirm_content(entries: list[str], repo: str) -> bool | None:
    """Ask user whether the staged content is what should be deployed."""
    listing = "\n  ".join(entries)
    return await questionary.confirm(
        f"The download contains the following files:\n  {listing}\n"
        f"This is exactly the content which will be placed in your "
        f"'custom_components/{repo}'. Does this look good to you?",
        default=True,
        style=CUSTOM_STYLE,
    ).ask_async()


async def select_base_dir_manually(root: Path) -> str | None:
    """Let user walk the staged tree and pick the component directory.

    Args:
        root: Staged directory.

    Returns:
        Directory relative to root ("" for root), or None if cancelled.
    """
    base_dir = ""
    while True:
        choices = list_subdirectories(root, base_dir)
        if base_dir:
            choices.append(PARENT_CHOICE)
        choices.append(DONE_CHOICE)

        selected = await questionary.select(
            f"Select a path or select {DONE_CHOICE} if you are fine "
            f"(current: /{base_dir})",
            choices=choices,
            style=CUSTOM_STYLE,
        ).ask_async()

        if selected is None:
            return None
        if selected == DONE_CHOICE:
            return base_dir
        if selected == PARENT_CHOICE:
            parent = os.path.normpath(os.path.join(base_dir, ".."))
            base_dir = "" if parent == "." else Path(parent).as_posix()
        else:
            base_dir = Path(base_dir, selected).as_posix()


async def select_location() -> str | None:
    """Ask user where the component should be stored."""
    return await questionary.select(
        "Please select where the custom component should be stored:",
        choices=DEPLOYMENT_LOCATIONS,
        style=CUSTOM_STYLE,
    ).ask_async()


async def prompt_component_name(default: str) -> str | None:
    """Ask user for the directory name of the component."""
    return await questionary.text(
        "Please enter the name of the component:",
        default=default,
        validate=lambda x: len(x.strip()) > 0 or "This field is required",
        style=CUSTOM_STYLE,
    ).ask_async()


async def ask_version_choice(component: Component, candidates: list[Release]) -> Decision:
    """Decision callback: let user pick a release outside the update tier.

    Args:
        component: Component being synced.
        candidates: All newer releases, latest first.

    Returns:
        The chosen release, or SKIP.
    """
    tier = getattr(component.policy, "tier", None)
    tier_name = tier.value if tier is not None else "?"

    selected = await questionary.select(
        f"The following new releases are available, but none of these match your "
        f"constraint <{tier_name}> for current installed version '{component.version}'. "
        f"If you like to upgrade, select the version you like to install. "
        f"Otherwise, select {SKIP_CHOICE}:",
        choices=[*(r.tag_name for r in candidates), SKIP_CHOICE],
        default=SKIP_CHOICE,
        style=CUSTOM_STYLE,
    ).ask_async()

    for release in candidates:
        if release.tag_name == selected:
            return release
    return SKIP
