"""Copy session start times into inbound request params."""

import logging
from collections.abc import Iterable, MutableMapping
from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING

from form_duration_tracker.services.session_timer import SessionTimer, format_timestamp

if TYPE_CHECKING:
    from form_duration_tracker.services.lifecycle import RequestContext

_logger = logging.getLogger(__name__)

_INFERRED_ACTIONS = (("new", "create"), ("edit", "update"))


def resolve_auto_params(
    option: Iterable[str] | str | bool | None, on_actions: Iterable[str]
) -> tuple[str, ...]:
    """Resolve which actions receive the session timestamp in their params.

    ``False`` disables injection; ``None``, ``True`` or an empty list infer the
    actions from ``on_actions``.
    """
    if option is False:
        return ()
    if isinstance(option, str):
        return (option,)
    if option and option is not True:
        return tuple(option)
    actions = set(on_actions)
    return tuple(target for source, target in _INFERRED_ACTIONS if source in actions)


def inject_param(
    params: MutableMapping[str, object],
    target_key: str,
    attribute: str,
    timestamp: datetime | None,
) -> None:
    """Set ``params[target_key][attribute]`` unless a value is already there."""
    if timestamp is None:
        return
    bag = params.get(target_key)
    if not isinstance(bag, MutableMapping):
        return
    if bag.get(attribute) is None:
        bag[attribute] = format_timestamp(timestamp)


@dataclass(frozen=True)
class ParamInjector:
    """Injects one attribute's session timestamp into the request params."""

    timer: SessionTimer

    def inject(self, context: "RequestContext") -> None:
        config = self.timer.config
        target_key = config.param_key or context.resource
        if target_key is None:
            _logger.debug("No param key for %s; skipping injection", config.attribute)
            return
        inject_param(
            context.params,
            target_key,
            config.attribute,
            self.timer.read(context.session),
        )
