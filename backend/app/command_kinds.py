"""Lookup table for Maestro command kinds and their human-readable rendering."""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Mapping, Optional

logger = logging.getLogger(__name__)

RUN_FLOW_KIND = "runFlowCommand"
AUTOMATIC_SCREENSHOT_KIND = "automaticScreenshotCommand"


def _mapping(value: Any) -> Mapping[str, Any]:
    return value if isinstance(value, dict) else {}


def _text_regex(payload: Mapping[str, Any], key: str) -> str:
    return _mapping(payload.get(key)).get("textRegex") or "Unknown"


def _tap_name(payload: Mapping[str, Any]) -> str:
    return "Long Press" if payload.get("longPress") else "Tap"


def _tap_details(payload: Mapping[str, Any]) -> str:
    verb = "Long press" if payload.get("longPress") else "Tap"
    return f'{verb} on "{_text_regex(payload, "selector")}"'


def _assert_details(payload: Mapping[str, Any]) -> str:
    condition = _mapping(payload.get("condition"))
    if condition.get("visible"):
        return f'"{_mapping(condition["visible"]).get("textRegex")}" is visible'
    if condition.get("notVisible"):
        return f'"{_mapping(condition["notVisible"]).get("textRegex")}" is not visible'
    return "Unknown condition"


def _condition_text(condition: Any) -> Optional[str]:
    condition = _mapping(condition)
    if "scriptCondition" in condition:
        return condition["scriptCondition"]
    if condition.get("visible"):
        return f'Visible "{_mapping(condition["visible"]).get("textRegex")}"'
    if condition.get("notVisible"):
        return f'Not Visible "{_mapping(condition["notVisible"]).get("textRegex")}"'
    return None


def _run_flow_details(payload: Mapping[str, Any]) -> str:
    flow = payload.get("flow")
    source = payload.get("sourceDescription")
    condition = payload.get("condition")

    details = f": {flow}" if flow else ""
    if source:
        details = f"{details} ({source})" if details else f"Source: {source}"

    # Conditions are only shown for inline flows.
    if not flow and condition:
        text = _condition_text(condition)
        if text:
            details = f"{details} when: {text}" if details else f"when: {text}"

    return details or "Unknown flow"


def _screenshot_details(payload: Mapping[str, Any]) -> str:
    image_path = payload.get("imagePath") or ""
    filename = image_path.split("/")[-1] or "screenshot"
    return f"Captured: {filename}"


class CommandKind:
    """Display rules for one command kind."""

    def __init__(
        self,
        key: str,
        label: str,
        details: Callable[[Mapping[str, Any]], str],
        name: Optional[Callable[[Mapping[str, Any]], str]] = None,
    ) -> None:
        self.key = key
        self.label = label
        self._details = details
        self._name = name

    def name_for(self, payload: Mapping[str, Any]) -> str:
        if self._name is not None:
            return self._name(payload)
        return self.label

    def details_for(self, payload: Mapping[str, Any]) -> str:
        return self._details(payload)


COMMAND_KINDS: Dict[str, CommandKind] = {
    kind.key: kind
    for kind in (
        CommandKind("assertConditionCommand", "Assert", _assert_details),
        CommandKind(
            "swipeCommand",
            "Swipe",
            lambda p: f"Direction: {p.get('direction')}, Duration: {p.get('duration')}ms",
        ),
        CommandKind("tapOnElementCommand", "Tap", _tap_details, name=_tap_name),
        CommandKind(
            "applyConfigurationCommand",
            "Apply Configuration",
            lambda p: f"App ID: {(p.get('config') or {}).get('appId') or 'Unknown'}",
        ),
        CommandKind(RUN_FLOW_KIND, "Run Flow", _run_flow_details),
        CommandKind(
            "inputTextCommand",
            "Input Text",
            lambda p: f'Text: "{p.get("text") or "Empty"}"',
        ),
        CommandKind(
            "waitForAnimationCommand",
            "Wait for Animation",
            lambda p: "Waiting for animation to complete",
        ),
        CommandKind(
            "scrollUntilVisibleCommand",
            "Scroll Until Visible",
            lambda p: f'Scroll {p.get("direction")} until "{_text_regex(p, "element")}" is visible',
        ),
        CommandKind(
            "defineVariablesCommand",
            "Define Variables",
            lambda p: f"Variables: {', '.join((p.get('env') or {}).keys()) or 'None'}",
        ),
        CommandKind(
            "launchAppCommand",
            "Launch App",
            lambda p: f"App ID: {p.get('appId') or 'Unknown'}",
        ),
        CommandKind(
            "openLinkCommand",
            "Open Link",
            lambda p: f"Link: {p.get('link') or 'Unknown'}",
        ),
        CommandKind("tapOnElement", "Tap", _tap_details, name=_tap_name),
        CommandKind(
            "stopAppCommand",
            "Stop App",
            lambda p: f"App ID: {p.get('appId') or 'Unknown'}",
        ),
        CommandKind(
            "scrollUntilVisible",
            "Scroll Until Visible",
            lambda p: f'Scroll {p.get("direction")} until "{_text_regex(p, "selector")}" is visible',
        ),
        CommandKind(
            "setAirplaneModeCommand",
            "Set Airplane Mode",
            lambda p: f"Airplane Mode: {'Enabled' if p.get('value') == 'Enable' else 'Disabled'}",
        ),
        CommandKind(
            "waitForAnimationToEndCommand",
            "Wait for Animation to End",
            lambda p: "Waiting for animation to end",
        ),
        CommandKind(AUTOMATIC_SCREENSHOT_KIND, "Automatic Screenshot", _screenshot_details),
    )
}


def command_kind(command: Any) -> Optional[str]:
    """
    Return the discriminating key of a command mapping.

    Known kinds win over unknown keys; for an unknown command the first key
    is returned. None is returned for anything that is not a non-empty dict.
    """
    if not isinstance(command, dict) or not command:
        return None
    for key in command:
        if key in COMMAND_KINDS:
            return key
    return next(iter(command))


def command_payload(command: Any) -> Dict[str, Any]:
    kind = command_kind(command)
    if kind is None:
        return {}
    payload = command.get(kind)
    return payload if isinstance(payload, dict) else {}


def is_run_flow(command: Any) -> bool:
    return isinstance(command, dict) and isinstance(command.get(RUN_FLOW_KIND), dict)


def is_unknown_command(command: Any) -> bool:
    kind = command_kind(command)
    return kind is None or kind not in COMMAND_KINDS


def command_name(command: Any) -> str:
    kind = command_kind(command)
    if kind is None:
        return "Unknown Command"
    spec = COMMAND_KINDS.get(kind)
    if spec is None:
        logger.warning("Unknown command type: %s", kind)
        return f"Unknown: {kind}"
    return spec.name_for(command_payload(command))


def command_details(command: Any) -> str:
    kind = command_kind(command)
    if kind is None:
        return "No details available"
    spec = COMMAND_KINDS.get(kind)
    if spec is None:
        return "Unknown command type"
    return spec.details_for(command_payload(command))
