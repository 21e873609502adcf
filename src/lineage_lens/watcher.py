"""
Manifest Watcher Module.

Keeps the project store in sync with dbt runs: whenever a project's
target/manifest.json is written the project's snapshot is rebuilt and
submitted to the update feed; when the manifest (or the project itself)
disappears the project is removed.

Key Components:
- ManifestEventHandler: watchdog handler mapping file events to feed updates.
- ManifestWatcher: Controller that performs the initial load and runs the observer.
"""

import logging
from pathlib import Path
from typing import Callable, Dict, Iterable, Optional

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from .config import PROJECT_FILE, LensConfig
from .core.feed import UpdateFeed
from .core.result import Err
from .parsing.manifest import load_snapshot
from .parsing.projects import discover_projects

logger = logging.getLogger(__name__)

Dispatcher = Callable[[Callable[[], None]], None]


def _call_now(fn: Callable[[], None]) -> None:
    fn()


class ManifestEventHandler(FileSystemEventHandler):
    """
    Translates file system events into project updates.

    Events arrive on the observer thread; every store update is handed to
    `dispatch` so the host can run it on its own thread.
    """

    def __init__(
        self,
        feed: UpdateFeed,
        project_roots: Iterable[Path],
        config: Optional[LensConfig] = None,
        dispatch: Optional[Dispatcher] = None,
    ):
        self.feed = feed
        self.config = config or LensConfig()
        self.dispatch = dispatch or _call_now
        self._manifests: Dict[Path, Path] = {}
        for root in project_roots:
            self.track(root)

    @property
    def project_roots(self):
        return sorted(self._manifests.values())

    def track(self, project_root: Path) -> None:
        """Start following a project's manifest."""
        project_root = project_root.resolve()
        self._manifests[self.config.manifest_path(project_root)] = project_root

    def untrack(self, project_root: Path) -> None:
        manifest = self.config.manifest_path(project_root.resolve())
        self._manifests.pop(manifest, None)

    def load(self, project_root: Path) -> None:
        """Build the project's snapshot and submit it (or log why not)."""
        result = load_snapshot(project_root, self.config)
        if isinstance(result, Err):
            logger.warning(f"Skipping {project_root.name}: {result.error}")
            return

        snapshot = result.unwrap()
        self.dispatch(lambda: self.feed.added(str(project_root), snapshot))

    def remove(self, project_root: Path) -> None:
        self.dispatch(lambda: self.feed.removed(str(project_root)))

    def on_created(self, event: FileSystemEvent) -> None:
        if event.is_directory:
            return
        path = Path(event.src_path)
        if path.name == PROJECT_FILE:
            project_root = path.parent.resolve()
            logger.info(f"New dbt project: {project_root}")
            self.track(project_root)
            # A project copied in with its target/ already compiled
            if self.config.manifest_path(project_root).is_file():
                self.load(project_root)
            return
        self._refresh(path)

    def on_modified(self, event: FileSystemEvent) -> None:
        if event.is_directory:
            return
        self._refresh(Path(event.src_path))

    def on_deleted(self, event: FileSystemEvent) -> None:
        if event.is_directory:
            return
        self._handle_deletion(Path(event.src_path))

    def on_moved(self, event: FileSystemEvent) -> None:
        if event.is_directory:
            return
        self._handle_deletion(Path(event.src_path))
        self._refresh(Path(event.dest_path))

    def _refresh(self, path: Path) -> None:
        project_root = self._manifests.get(path.resolve())
        if project_root is None:
            return
        logger.info(f"⚡ Manifest changed: {project_root.name}")
        self.load(project_root)

    def _handle_deletion(self, path: Path) -> None:
        path = path.resolve()
        if path.name == PROJECT_FILE:
            project_root = path.parent
            if self.config.manifest_path(project_root) in self._manifests:
                logger.info(f"🗑️  dbt project removed: {project_root}")
                self.untrack(project_root)
                self.remove(project_root)
            return

        project_root = self._manifests.get(path)
        if project_root is not None:
            logger.info(f"🗑️  Manifest deleted: {project_root.name}")
            self.remove(project_root)


class ManifestWatcher:
    """
    Main controller for manifest watching.

    `start()` returns immediately; the observer runs on its own thread until
    `stop()` is called.
    """

    def __init__(
        self,
        root_dir: Path,
        feed: UpdateFeed,
        config: Optional[LensConfig] = None,
        dispatch: Optional[Dispatcher] = None,
    ):
        self.root_dir = root_dir.resolve()
        self.feed = feed
        self.config = config or LensConfig()
        self.dispatch = dispatch
        self.handler: Optional[ManifestEventHandler] = None
        self.observer: Optional[Observer] = None

    def start(self) -> None:
        """Load every discovered project, then start watching."""
        logger.info(f"Initializing manifest watcher for {self.root_dir}...")

        projects = discover_projects(self.root_dir)
        self.handler = ManifestEventHandler(
            feed=self.feed,
            project_roots=projects,
            config=self.config,
            dispatch=self.dispatch,
        )
        for project_root in projects:
            self.handler.load(project_root)

        self.observer = Observer()
        self.observer.schedule(self.handler, str(self.root_dir), recursive=True)
        self.observer.start()

        logger.info(f"👀 Watching {len(projects)} dbt project(s) for manifest changes.")

    def stop(self) -> None:
        """Gracefully stop the watcher."""
        logger.info("Stopping manifest watcher...")
        if self.observer:
            self.observer.stop()
            self.observer.join()
            self.observer = None
