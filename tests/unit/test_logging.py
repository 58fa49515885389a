from alliswell.core.logging import drop_sensitive_fields


def test_sensitive_fields_are_redacted() -> None:
    event = drop_sensitive_fields(
        None,
        "info",
        {"event": "login_attempt", "name": "river", "password": "hunter22", "history": ["hi"]},
    )

    assert event["password"] == "[redacted]"
    assert event["history"] == "[redacted]"
    assert event["name"] == "river"
