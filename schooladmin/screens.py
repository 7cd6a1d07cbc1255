"""Per-view state for list and detail screens.

A view state object is built per request with the gateway resource, the
notifier and its own ``RequestRunner``. Once ``unmount()`` is called every
late result is dropped instead of being written.
"""
import logging
from enum import Enum
from typing import Callable, Optional

from .entities import EntityKind, same_id
from .gateway import ApiError
from .runner import RequestRunner

logger = logging.getLogger(__name__)


class Phase(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    FAILED = "failed"


class ViewState:
    def __init__(self, notifier, runner: Optional[RequestRunner] = None):
        self.notifier = notifier
        self.runner = runner or RequestRunner()
        self.mounted = True
        self.phase = Phase.IDLE

    @property
    def loading(self):
        return self.runner.loading

    @property
    def error(self):
        return self.runner.error

    def unmount(self):
        self.mounted = False

    def _apply(self, **changes) -> bool:
        if not self.mounted:
            logger.debug("dropping late update of %s on unmounted %s",
                         ", ".join(sorted(changes)), type(self).__name__)
            return False
        for name, value in changes.items():
            setattr(self, name, value)
        return True

    def _notify(self, severity, message, duration_ms=None):
        if self.mounted:
            self.notifier.show(message, severity, duration_ms)

    def _fetch(self, func, *args, failure: Optional[str] = None):
        """Run ``func`` through the runner; returns ``(ok, data)``."""
        try:
            envelope = self.runner.execute(func, *args)
        except ApiError:
            if failure:
                self._notify("error", failure)
            return False, None
        return True, envelope.data


class ListScreen(ViewState):
    def __init__(self, resource, kind: EntityKind, notifier, runner=None,
                 matcher: Optional[Callable] = None):
        super().__init__(notifier, runner)
        self.resource = resource
        self.kind = kind
        self.matcher = matcher
        self.items = []

    def load(self) -> bool:
        self._apply(phase=Phase.LOADING)
        ok, data = self._fetch(self.resource.list,
                               failure=f"Could not load {self.kind.plural}")
        if ok:
            self._apply(items=list(data or []), phase=Phase.READY)
        else:
            self._apply(phase=Phase.FAILED)
        return ok

    def filtered(self, text="", **criteria):
        if self.matcher is None:
            return list(self.items)
        return self.matcher(self.items, text, **criteria)

    def find(self, entity_id):
        return next((e for e in self.items if same_id(e.get("id"), entity_id)), None)

    def delete_prompt(self, entity) -> str:
        return f"Delete {self.kind.name} {self.kind.display(entity)}?"

    def delete(self, entity_id, confirm: Callable[[str], bool]) -> bool:
        """Confirm, delete, then re-fetch the whole collection.

        Nothing is sent when the id is not in the loaded list or the
        confirmation is declined.
        """
        entity = self.find(entity_id)
        if entity is None:
            self._notify("error", f"{self.kind.title} {entity_id} is not in the list")
            return False
        if not confirm(self.delete_prompt(entity)):
            return False
        try:
            self.runner.execute(self.resource.delete, entity_id)
        except ApiError as e:
            self._delete_failed(e, entity)
            return False
        self._notify("success", f"{self.kind.display(entity)} was deleted")
        self.load()
        return True

    def _delete_failed(self, err: ApiError, entity):
        self._notify("error", f"Could not delete {self.kind.display(entity)}: {self.runner.error}")

    def empty_message(self, filtering: bool) -> str:
        if filtering:
            return f"No {self.kind.plural} match the search criteria."
        return f"There are no {self.kind.plural} yet."


class InstructorListScreen(ListScreen):
    def _delete_failed(self, err, entity):
        if err.status == 400:
            self._notify("warning",
                         f"{self.kind.display(entity)} still teaches active courses. "
                         "Reassign those courses before deleting.", 6000)
        else:
            super()._delete_failed(err, entity)


class DetailScreen(ViewState):
    """One entity plus, optionally, one related collection.

    The two fetches are independent: a failed entity fetch flags the
    screen as missing (the route then redirects to the list) while a
    failed related fetch only leaves the collection empty.
    """

    def __init__(self, resource, kind: EntityKind, entity_id, notifier, runner=None,
                 related: Optional[Callable] = None, related_label: str = ""):
        super().__init__(notifier, runner)
        self.resource = resource
        self.kind = kind
        self.entity_id = entity_id
        self.related_func = related
        self.related_label = related_label
        self.entity = None
        self.related = []

    @property
    def missing(self):
        return self.phase == Phase.FAILED

    def load(self) -> bool:
        self._apply(phase=Phase.LOADING)
        ok = self.load_entity()
        if self.related_func is not None:
            self.load_related()
        self._apply(phase=Phase.READY if ok else Phase.FAILED)
        return ok

    def load_entity(self) -> bool:
        ok, data = self._fetch(self.resource.get, self.entity_id,
                               failure=f"Could not load {self.kind.name} details")
        if ok:
            self._apply(entity=data)
        return ok

    def load_related(self) -> bool:
        ok, data = self._fetch(self.related_func, self.entity_id,
                               failure=f"Could not load {self.related_label or 'related records'}")
        self._apply(related=list(data or []) if ok else [])
        return ok
