"""Tests for notifications and the live notification store."""

import pytest

from fintrack.cli.main import cli
from fintrack.domain.entities import NotificationType
from fintrack.domain.errors import NotFoundError, ValidationError
from fintrack.domain.notification import NotificationStore


class TestNotificationService:
    def test_create_and_list_newest_first(self, notification_service):
        first = notification_service.create_notification("First")
        second = notification_service.create_notification(
            "Second", type=NotificationType.WARNING, body="Low balance"
        )

        notifications = notification_service.list_notifications()
        assert [n.id for n in notifications] == [second, first]
        assert notifications[0].type == NotificationType.WARNING
        assert notifications[0].body == "Low balance"
        assert notifications[0].is_read is False

    def test_title_required(self, notification_service):
        with pytest.raises(ValidationError):
            notification_service.create_notification("  ")

    def test_notify_does_not_raise(self, notification_service, caplog):
        assert notification_service.notify("") is None
        assert "Could not create notification" in caplog.text

    def test_mark_read_and_unread_filter(self, notification_service):
        first = notification_service.create_notification("First")
        notification_service.create_notification("Second")

        notification_service.mark_read(first)

        unread = notification_service.list_notifications(unread_only=True)
        assert [n.title for n in unread] == ["Second"]
        assert notification_service.mark_all_read() == 1
        assert notification_service.list_notifications(unread_only=True) == []

    def test_delete_and_clear(self, notification_service):
        first = notification_service.create_notification("First")
        notification_service.create_notification("Second")
        notification_service.create_notification("Third")

        notification_service.delete_notification(first)
        assert len(notification_service.list_notifications()) == 2
        assert notification_service.clear_all() == 2
        assert notification_service.list_notifications() == []

    def test_missing_notification(self, notification_service):
        with pytest.raises(NotFoundError):
            notification_service.mark_read(7)
        with pytest.raises(NotFoundError):
            notification_service.delete_notification(7)


class TestNotificationStore:
    def test_subscribed_store_follows_writes(self, temp_db, notification_service):
        store = NotificationStore(temp_db)
        store.start()
        assert store.is_subscribed
        assert store.notifications == []

        notification_service.create_notification("Hello")

        assert [n.title for n in store.notifications] == ["Hello"]
        assert store.unread_count == 1

    def test_listeners_called_on_refresh(self, temp_db, notification_service):
        store = NotificationStore(temp_db)
        seen = []
        remove = store.on_change(lambda s: seen.append(s.unread_count))
        store.start()

        notification_service.create_notification("One")
        notification_service.create_notification("Two")
        assert seen == [0, 1, 2]

        remove()
        notification_service.create_notification("Three")
        assert seen == [0, 1, 2]

    def test_stop_unsubscribes(self, temp_db, notification_service):
        store = NotificationStore(temp_db)
        store.start()
        store.stop()

        notification_service.create_notification("Ignored")

        assert not store.is_subscribed
        assert store.notifications == []

    def test_mutations_refresh_unsubscribed_store(self, temp_db, notification_service):
        notification_id = notification_service.create_notification("Hello")
        store = NotificationStore(temp_db)
        store.fetch()

        store.mark_read(notification_id)
        assert store.unread_count == 0

        store.clear_all()
        assert store.notifications == []

    def test_failed_mutation_sets_error(self, temp_db):
        store = NotificationStore(temp_db)

        with pytest.raises(NotFoundError):
            store.delete(42)
        assert store.error == "Notification 42 not found"

    def test_other_tables_do_not_refresh(self, temp_db, account_service):
        store = NotificationStore(temp_db)
        calls = []
        store.start()
        store.on_change(lambda s: calls.append(s))

        account_service.create_account(name="Wallet")

        assert calls == []


def test_notification_cli(cli_runner, temp_db, notification_service):
    notification_service.create_notification("Transfer completed", body="Moved $10.00")
    notification_service.create_notification("Budget warning", type=NotificationType.WARNING)
    base = ["--db-path", temp_db.database_path, "notification"]

    result = cli_runner.invoke(cli, base + ["list"])
    assert result.exit_code == 0
    assert "2 notification(s), 2 unread" in result.output
    assert "[warning] Budget warning" in result.output
    assert "Moved $10.00" in result.output

    result = cli_runner.invoke(cli, base + ["read-all"])
    assert "Marked 2 notification(s) as read" in result.output

    result = cli_runner.invoke(cli, base + ["list", "--unread"])
    assert "No notifications." in result.output

    result = cli_runner.invoke(cli, base + ["clear"])
    assert "Cleared 2 notification(s)" in result.output


def test_notification_cli_missing(cli_runner, temp_db):
    result = cli_runner.invoke(
        cli, ["--db-path", temp_db.database_path, "notification", "read", "3"]
    )

    assert result.exit_code == 1
    assert "Notification 3 not found" in result.output
