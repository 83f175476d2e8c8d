from backend.app.command_kinds import (
    command_details,
    command_kind,
    command_name,
    is_run_flow,
    is_unknown_command,
)


def test_command_name_uses_kind_table() -> None:
    assert command_name({"assertConditionCommand": {"condition": {}}}) == "Assert"
    assert command_name({"runFlowCommand": {"flow": "login.yaml"}}) == "Run Flow"
    assert command_name({"tapOnElementCommand": {"longPress": False}}) == "Tap"
    assert command_name({"tapOnElement": {"longPress": True}}) == "Long Press"
    assert command_name({"waitForAnimationToEndCommand": {}}) == "Wait for Animation to End"


def test_unknown_commands_are_reported_by_key() -> None:
    command = {"pressKeyCommand": {"code": "BACK"}}

    assert command_kind(command) == "pressKeyCommand"
    assert is_unknown_command(command) is True
    assert command_name(command) == "Unknown: pressKeyCommand"
    assert command_details(command) == "Unknown command type"


def test_invalid_commands() -> None:
    assert command_kind(None) is None
    assert command_kind({}) is None
    assert is_unknown_command("tap") is True
    assert command_name(None) == "Unknown Command"
    assert command_details([]) == "No details available"


def test_tap_and_assert_details() -> None:
    tap = {"tapOnElementCommand": {"selector": {"textRegex": "Sign in"}, "longPress": True}}
    visible = {"assertConditionCommand": {"condition": {"visible": {"textRegex": "Welcome"}}}}
    hidden = {"assertConditionCommand": {"condition": {"notVisible": {"textRegex": "Spinner"}}}}

    assert command_details(tap) == 'Long press on "Sign in"'
    assert command_details(visible) == '"Welcome" is visible'
    assert command_details(hidden) == '"Spinner" is not visible'
    assert command_details({"assertConditionCommand": {}}) == "Unknown condition"


def test_details_tolerate_non_mapping_selectors_and_conditions() -> None:
    assert command_details({"tapOnElementCommand": {"selector": "Sign in"}}) == 'Tap on "Unknown"'
    assert command_details({"assertConditionCommand": {"condition": {"visible": "Welcome"}}}) == '"None" is visible'
    assert (
        command_details({"assertConditionCommand": {"condition": {"notVisible": ["Spinner"]}}})
        == '"None" is not visible'
    )
    assert command_details({"assertConditionCommand": {"condition": "Welcome"}}) == "Unknown condition"
    inline = {"runFlowCommand": {"condition": {"visible": True}}}
    assert command_details(inline) == 'when: Visible "None"'
    assert command_details({"runFlowCommand": {"condition": "odd"}}) == "Unknown flow"


def test_run_flow_details() -> None:
    assert command_details({"runFlowCommand": {"flow": "login.yaml"}}) == ": login.yaml"
    assert (
        command_details({"runFlowCommand": {"flow": "login.yaml", "sourceDescription": "flows/login.yaml"}})
        == ": login.yaml (flows/login.yaml)"
    )
    assert (
        command_details({"runFlowCommand": {"condition": {"scriptCondition": "${output.ready}"}}})
        == "when: ${output.ready}"
    )
    assert (
        command_details(
            {
                "runFlowCommand": {
                    "sourceDescription": "inline",
                    "condition": {"visible": {"textRegex": "Cookies"}},
                }
            }
        )
        == 'Source: inline when: Visible "Cookies"'
    )
    assert command_details({"runFlowCommand": {}}) == "Unknown flow"


def test_other_details() -> None:
    assert command_details({"swipeCommand": {"direction": "LEFT", "duration": 400}}) == "Direction: LEFT, Duration: 400ms"
    assert command_details({"inputTextCommand": {"text": ""}}) == 'Text: "Empty"'
    assert command_details({"defineVariablesCommand": {"env": {"USER": "a", "PASS": "b"}}}) == "Variables: USER, PASS"
    assert command_details({"launchAppCommand": {"appId": "com.example"}}) == "App ID: com.example"
    assert command_details({"setAirplaneModeCommand": {"value": "Enable"}}) == "Airplane Mode: Enabled"
    assert (
        command_details({"automaticScreenshotCommand": {"imagePath": "/tmp/run/screenshot-1.png"}})
        == "Captured: screenshot-1.png"
    )


def test_is_run_flow() -> None:
    assert is_run_flow({"runFlowCommand": {"commands": []}}) is True
    assert is_run_flow({"runFlowCommand": None}) is False
    assert is_run_flow({"tapOnElementCommand": {}}) is False
