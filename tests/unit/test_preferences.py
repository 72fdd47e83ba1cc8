"""Tests for the JSON-backed Preferences store."""

import json

from delcom_client.storage.preferences import Preferences


class TestPreferences:

    def test_put_and_get(self, preferences) -> None:
        preferences.put_string("phone", "+62811")

        assert preferences.get_string("phone") == "+62811"
        assert preferences.contains("phone")
        assert json.loads(preferences.path.read_text()) == {"phone": "+62811"}

    def test_values_survive_new_instance(self, tmp_path) -> None:
        Preferences.for_namespace(tmp_path, "ProfilePrefs").put_string("phone", "+62811")

        reopened = Preferences.for_namespace(tmp_path, "ProfilePrefs")

        assert reopened.get_string("phone") == "+62811"
        assert reopened.namespace == "ProfilePrefs"

    def test_missing_key_default(self, preferences) -> None:
        assert preferences.get_string("phone") is None
        assert preferences.get_string("phone", "n/a") == "n/a"

    def test_remove(self, preferences) -> None:
        preferences.put_string("phone", "+62811")
        preferences.remove("phone")
        preferences.remove("never-set")

        assert not preferences.contains("phone")

    def test_clear_wipes_file(self, preferences) -> None:
        preferences.put_string("phone", "+62811")

        preferences.clear()

        assert not preferences.path.exists()
        assert preferences.get_string("phone") is None

    def test_corrupt_file_is_ignored(self, tmp_path) -> None:
        path = tmp_path / "ProfilePrefs.json"
        path.write_text("{not json")

        assert Preferences(path).get_string("phone") is None

    def test_namespaces_are_separate(self, tmp_path) -> None:
        Preferences.for_namespace(tmp_path, "ProfilePrefs").put_string("phone", "1")

        assert Preferences.for_namespace(tmp_path, "Other").get_string("phone") is None
