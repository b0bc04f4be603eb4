"""Wire session tracking into a request action lifecycle."""

import logging
from collections.abc import Callable, Iterable, MutableMapping
from dataclasses import dataclass, field
from datetime import datetime, timedelta

from form_duration_tracker.domain.durations import coerce_duration
from form_duration_tracker.domain.tracking import (
    DEFAULT_SESSION_EXPIRY_TIME,
    SessionConfig,
)
from form_duration_tracker.services.params import ParamInjector, resolve_auto_params
from form_duration_tracker.services.session_timer import (
    SessionStore,
    SessionTimer,
    utc_now,
)

_logger = logging.getLogger(__name__)


@dataclass
class RequestContext:
    """The pieces of an inbound request the hooks operate on."""

    action: str | None
    session: SessionStore
    params: MutableMapping[str, object] = field(default_factory=dict)
    resource: str | None = None


ActionCallback = Callable[[RequestContext], None]


@dataclass
class ActionHooks:
    """Before-action callbacks restricted to named actions."""

    _callbacks: list[tuple[frozenset[str], ActionCallback]] = field(
        default_factory=list
    )

    def before_action(self, callback: ActionCallback, only: Iterable[str]) -> None:
        self._callbacks.append((frozenset(only), callback))

    def actions(self) -> list[frozenset[str]]:
        return [only for only, _ in self._callbacks]

    def run(self, context: RequestContext) -> None:
        """Run every callback registered for the context's action, in order."""
        for only, callback in self._callbacks:
            if context.action in only:
                callback(context)


@dataclass(frozen=True)
class FormDurationTracker:
    """Per-attribute session tracking operations."""

    timer: SessionTimer
    param_injector: ParamInjector | None = None

    @property
    def attribute(self) -> str:
        return self.timer.config.attribute

    def initialize_session(self, context: RequestContext) -> None:
        self.timer.initialize(context.session, context.action)

    def read_from_session(self, session: SessionStore) -> datetime | None:
        return self.timer.read(session)

    def cleanup_session(self, session: SessionStore) -> None:
        self.timer.cleanup(session)

    def preserve_in_session(self, session: SessionStore, value: datetime) -> None:
        self.timer.preserve(session, value)

    def session_config(self) -> SessionConfig:
        return self.timer.config


@dataclass(frozen=True)
class LifecycleCoordinator:
    """Registers initialization and injection hooks for one tracker."""

    tracker: FormDurationTracker

    def install(self, hooks: ActionHooks) -> None:
        config = self.tracker.session_config()
        if config.on_actions:
            hooks.before_action(self.tracker.initialize_session, only=config.on_actions)
        injector = self.tracker.param_injector
        if injector is not None and config.auto_params:
            hooks.before_action(injector.inject, only=config.auto_params)
        _logger.debug(
            "Installed form duration hooks: attribute=%s on=%s auto_params=%s",
            config.attribute,
            config.on_actions,
            config.auto_params,
        )


def track_form_duration(  # noqa: PLR0913
    attribute: str,
    *,
    hooks: ActionHooks | None = None,
    session_key: str | None = None,
    expirable: bool = True,
    expiry_time: timedelta | float | str = DEFAULT_SESSION_EXPIRY_TIME,
    on: Iterable[str] | str | None = None,
    auto_params: Iterable[str] | str | bool | None = None,
    param_key: str | None = None,
    auto_cleanup: bool = True,
    clock: Callable[[], datetime] = utc_now,
) -> FormDurationTracker:
    """Build a tracker for ``attribute`` and install its hooks when given."""
    on_actions = (on,) if isinstance(on, str) else tuple(on or ())
    resolved_key = str(session_key or f"{attribute}_timestamp")
    config = SessionConfig(
        attribute=attribute,
        session_key=resolved_key,
        expiry_key=f"{resolved_key}_expires_at",
        expirable=expirable,
        expiry_time=coerce_duration(expiry_time),
        on_actions=on_actions,
        auto_params=resolve_auto_params(auto_params, on_actions),
        param_key=param_key,
        auto_cleanup=auto_cleanup,
    )
    timer = SessionTimer(config=config, clock=clock)
    injector = ParamInjector(timer) if config.auto_params else None
    tracker = FormDurationTracker(timer=timer, param_injector=injector)
    if hooks is not None:
        LifecycleCoordinator(tracker).install(hooks)
    return tracker
