from fastapi.testclient import TestClient

from campus_notify.core.constants import DEFAULT_NOTIFICATION_TYPES
from tests.helpers.asserts import api_call, data_of

def _by_type(items):
    return {item["notification_type"]: item for item in items}

def test_defaults_created_on_first_access(client: TestClient, make_student, auth_headers):
    headers = auth_headers(make_student())

    print("[1] Fetching settings for a new user")
    items = data_of(api_call(client, "GET", "/notifications/settings/", headers=headers))
    assert len(items) == len(DEFAULT_NOTIFICATION_TYPES)
    settings = _by_type(items)

    assert settings["assignment_due"]["email_enabled"] is True
    assert settings["assignment_posted"]["email_enabled"] is False
    assert settings["comment_posted"]["push_enabled"] is False
    assert settings["message_received"]["push_enabled"] is True
    assert all(item["sms_enabled"] is False for item in items)
    assert all(item["in_app_enabled"] is True for item in items)
    assert settings["assignment_due"]["enabled_channels"] == ["email", "push", "in_app"]

    print("[2] A second fetch does not duplicate rows")
    again = data_of(api_call(client, "GET", "/notifications/settings/", headers=headers))
    assert len(again) == len(DEFAULT_NOTIFICATION_TYPES)

def test_update_single_type_keeps_unspecified_channels(client: TestClient, make_student, auth_headers):
    headers = auth_headers(make_student())

    r = api_call(client, "PUT", "/notifications/settings/grade_posted", headers=headers, json={"sms_enabled": True})
    data = data_of(r)
    assert data["sms_enabled"] is True
    assert data["email_enabled"] is True
    assert data["push_enabled"] is True

def test_bulk_update(client: TestClient, make_teacher, auth_headers):
    headers = auth_headers(make_teacher())
    payload = {
        "settings": [
            {"notification_type": "announcement", "email_enabled": False},
            {"notification_type": "comment_posted", "push_enabled": True},
        ]
    }
    items = data_of(api_call(client, "PUT", "/notifications/settings/", headers=headers, json=payload))
    settings = _by_type(items)
    assert settings["announcement"]["email_enabled"] is False
    assert settings["comment_posted"]["push_enabled"] is True

def test_enable_disable_all_and_reset(client: TestClient, make_student, auth_headers):
    headers = auth_headers(make_student())

    print("[1] Disabling every channel")
    data = data_of(api_call(client, "POST", "/notifications/settings/test_graded/disable-all", headers=headers))
    assert data["enabled_channels"] == []

    print("[2] Enabling every channel")
    data = data_of(api_call(client, "POST", "/notifications/settings/test_graded/enable-all", headers=headers))
    assert data["enabled_channels"] == ["email", "push", "sms", "in_app"]

    print("[3] Reset restores defaults")
    items = data_of(api_call(client, "POST", "/notifications/settings/reset", headers=headers))
    assert len(items) == len(DEFAULT_NOTIFICATION_TYPES)
    assert _by_type(items)["test_graded"]["sms_enabled"] is False
    assert _by_type(items)["test_graded"]["email_enabled"] is True

def test_settings_are_per_user(client: TestClient, make_student, auth_headers):
    first = auth_headers(make_student())
    second = auth_headers(make_student())

    api_call(client, "POST", "/notifications/settings/announcement/disable-all", headers=first)
    items = data_of(api_call(client, "GET", "/notifications/settings/", headers=second))
    assert _by_type(items)["announcement"]["in_app_enabled"] is True
