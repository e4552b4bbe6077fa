"""Durable store of tracked components and the GitHub credential."""

import json
import os
import tempfile
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError

from hacccli.core.exceptions.errors import DuplicateRegistration, StoreError, UnknownRegistration
from hacccli.core.logger.logger import get_logger
from hacccli.models.component import Component

logger = get_logger(__name__)


class StoreDocument(BaseModel):
    """On-disk layout of the store."""

    credentials: str | None = None
    registered_components: list[Component] = Field(default_factory=list)


class ComponentStore:
    """JSON file holding the credential and the ordered list of tracked components.

    Every read goes to disk, so edits made to the file between calls are
    picked up. The file is not locked; concurrent writers are unsupported.
    """

    def __init__(self, path: Path) -> None:
        """Initialize the store.

        Args:
            path: Location of the JSON document. Created on first write.
        """
        self.path = path

    def _load(self) -> StoreDocument:
        if not self.path.exists():
            return StoreDocument()

        try:
            raw = self.path.read_text(encoding="utf-8")
            if not raw.strip():
                return StoreDocument()
            return StoreDocument.model_validate(json.loads(raw))
        except (OSError, json.JSONDecodeError, ValidationError) as e:
            raise StoreError(f"Cannot read component store: {e}", path=str(self.path)) from e

    def _flush(self, document: StoreDocument) -> None:
        """Write the document to a sibling temp file and atomically replace the store."""
        directory = self.path.parent
        directory.mkdir(parents=True, exist_ok=True)
        payload = document.model_dump_json(indent=2)

        fd, tmp_name = tempfile.mkstemp(prefix=f".{self.path.name}.", dir=directory)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(payload)
                f.flush()
                os.fsync(f.fileno())
            os.replace(tmp_name, self.path)
        except OSError as e:
            Path(tmp_name).unlink(missing_ok=True)
            raise StoreError(f"Cannot write component store: {e}", path=str(self.path)) from e

    def has_credentials(self) -> bool:
        """Return True if a credential is stored."""
        return bool(self._load().credentials)

    def get_credentials(self) -> str | None:
        """Return the stored credential."""
        return self._load().credentials

    def set_credentials(self, credentials: str) -> None:
        """Store the credential, keeping all components."""
        document = self._load()
        document.credentials = credentials
        self._flush(document)

    def exists(self, url: str) -> bool:
        """Return True if a component with this url is registered."""
        return any(c.url == url for c in self.list_all())

    def get(self, url: str) -> Component | None:
        """Return the component registered under a url."""
        for component in self.list_all():
            if component.url == url:
                return component
        return None

    def register(self, component: Component) -> Component:
        """Append a new component with no installed version.

        Args:
            component: Component to track.

        Returns:
            The stored component.

        Raises:
            DuplicateRegistration: If the url is already registered.
        """
        document = self._load()
        if any(c.url == component.url for c in document.registered_components):
            raise DuplicateRegistration(component.url)

        stored = component.with_version(None)
        document.registered_components.append(stored)
        self._flush(document)

        logger.info(f"Registered component {component.name} ({component.url})")
        return stored

    def update(self, component: Component) -> None:
        """Replace the stored record of a component in place.

        Raises:
            UnknownRegistration: If the url is not registered.
        """
        document = self._load()

        for index, existing in enumerate(document.registered_components):
            if existing.url == component.url:
                document.registered_components[index] = component
                self._flush(document)
                return

        raise UnknownRegistration(component.url)

    def list_all(self) -> list[Component]:
        """Return all registered components in registration order, freshly read from disk."""
        return list(self._load().registered_components)
