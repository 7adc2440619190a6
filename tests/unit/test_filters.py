"""Tests for filter construction and value helpers."""

from datetime import datetime, timedelta, timezone

from linear_node.transport.filters import (
    build_filter,
    build_notification_filter,
    clean_object,
    format_date_for_linear,
    parse_issue_identifier,
)


class TestBuildFilter:
    """Tests for build_filter()."""

    def test_id_filters(self):
        result = build_filter({"teamId": "t1", "assigneeId": "u1", "labelIds": ["l1", "l2"]})

        assert result == {
            "team": {"id": {"eq": "t1"}},
            "assignee": {"id": {"eq": "u1"}},
            "labels": {"id": {"in": ["l1", "l2"]}},
        }

    def test_team_ids_use_in(self):
        assert build_filter({"teamIds": ["a", "b"]}) == {"team": {"id": {"in": ["a", "b"]}}}

    def test_priority_range_merges(self):
        result = build_filter({"priorityGte": 1, "priorityLte": 3})

        assert result == {"priority": {"gte": 1, "lte": 3}}

    def test_later_priority_overwrites_range(self):
        result = build_filter({"priorityGte": 1, "priority": 2})

        assert result == {"priority": {"eq": 2}}

    def test_date_ranges(self):
        result = build_filter({
            "createdAfter": "2024-01-01",
            "createdBefore": "2024-02-01",
            "updatedAfter": "2024-03-01",
        })

        assert result["createdAt"] == {"gt": "2024-01-01", "lt": "2024-02-01"}
        assert result["updatedAt"] == {"gt": "2024-03-01"}

    def test_text_filters(self):
        result = build_filter({"searchQuery": "crash", "titleContains": "login"})

        assert result["searchableContent"] == {"contains": "crash"}
        assert result["title"] == {"containsIgnoreCase": "login"}

    def test_blank_values_and_include_archived_skipped(self):
        result = build_filter({"teamId": "", "assigneeId": None, "includeArchived": True})

        assert result == {}

    def test_unknown_keys_passed_through(self):
        result = build_filter({"estimate": 3, "state": {"type": {"eq": "started"}}})

        assert result == {"estimate": {"eq": 3}, "state": {"type": {"eq": "started"}}}

    def test_zero_priority_kept(self):
        assert build_filter({"priority": 0}) == {"priority": {"eq": 0}}


class TestCleanObject:
    def test_drops_none_and_empty_strings(self):
        result = clean_object({"a": None, "b": "", "c": 0, "d": False, "e": [], "f": "x"})

        assert result == {"c": 0, "d": False, "e": [], "f": "x"}

    def test_idempotent(self):
        obj = {"a": None, "b": "", "c": 0, "d": {"nested": None}, "e": "x"}

        assert clean_object(clean_object(obj)) == clean_object(obj)


class TestParseIssueIdentifier:
    def test_valid_identifier(self):
        assert parse_issue_identifier("ENG-123") == {"teamKey": "ENG", "issueNumber": 123}

    def test_lowercase_rejected(self):
        assert parse_issue_identifier("eng-123") is None

    def test_uuid_rejected(self):
        assert parse_issue_identifier("0f8e6a2c-1234-4d5e-9abc-def012345678") is None

    def test_missing_number_rejected(self):
        assert parse_issue_identifier("ENG-") is None


class TestFormatDate:
    def test_datetime(self):
        dt = datetime(2024, 1, 2, 3, 4, 5, 123456, tzinfo=timezone.utc)

        assert format_date_for_linear(dt) == "2024-01-02T03:04:05.123Z"

    def test_naive_datetime_is_utc(self):
        assert format_date_for_linear(datetime(2024, 1, 2)) == "2024-01-02T00:00:00.000Z"

    def test_offset_converted_to_utc(self):
        dt = datetime(2024, 1, 2, 5, 0, tzinfo=timezone(timedelta(hours=2)))

        assert format_date_for_linear(dt) == "2024-01-02T03:00:00.000Z"

    def test_iso_string_with_z(self):
        assert format_date_for_linear("2024-06-30T12:00:00Z") == "2024-06-30T12:00:00.000Z"

    def test_epoch_milliseconds(self):
        assert format_date_for_linear(1704067200000) == "2024-01-01T00:00:00.000Z"


class TestBuildNotificationFilter:
    def test_empty(self):
        assert build_notification_filter() == {}

    def test_all_statuses(self):
        result = build_notification_filter(
            types=["issueAssignedToYou"],
            read_status="unread",
            archived_status="archived",
            snoozed_status="notSnoozed",
        )

        assert result == {
            "type": {"in": ["issueAssignedToYou"]},
            "readAt": {"null": True},
            "archivedAt": {"null": False},
            "snoozedUntilAt": {"null": True},
        }

    def test_all_means_no_constraint(self):
        result = build_notification_filter(read_status="all", archived_status="all", snoozed_status="all")

        assert result == {}

    def test_read_and_snoozed(self):
        result = build_notification_filter(read_status="read", archived_status="active", snoozed_status="snoozed")

        assert result == {
            "readAt": {"null": False},
            "archivedAt": {"null": True},
            "snoozedUntilAt": {"null": False},
        }
