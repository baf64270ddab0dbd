"""Tests for Pydantic models."""

import random
from datetime import UTC, datetime, timedelta

import pytest
from pydantic import ValidationError

from pluginhealth.models import (
    Plugin,
    ProbeResult,
    ResultStatus,
    Score,
    ScoreResult,
    ScoringComponentResult,
    UpdateCenter,
    merge_details,
    round_half_up,
    weighted_mean,
)


class TestProbeResult:
    """Tests for ProbeResult model."""

    def test_equality_ignores_timestamp(self) -> None:
        """Test that results with same id, status, version and message are equal."""
        first = ProbeResult.success("scm", "The plugin SCM link is valid.")
        second = ProbeResult(
            id="scm",
            message="The plugin SCM link is valid.",
            status=ResultStatus.SUCCESS,
            timestamp=datetime(2020, 1, 1, tzinfo=UTC),
        )

        assert first == second
        assert hash(first) == hash(second)

    def test_status_version_and_message_distinguish_results(self) -> None:
        """Test that status, version and message are part of equality."""
        success = ProbeResult.success("scm", "ok")

        assert success != ProbeResult.error("scm", "ok")
        assert success != ProbeResult.success("scm", "ok", version=2)
        assert success != ProbeResult.success("jenkinsfile", "ok")
        assert success != ProbeResult.success("scm", "changed")

    def test_legacy_failure_status_read_as_error(self) -> None:
        """Test that persisted FAILURE results load as ERROR."""
        result = ProbeResult.model_validate(
            {"id": "dependabot", "message": "No configuration file", "status": "FAILURE", "version": 1}
        )

        assert result.status == ResultStatus.ERROR

    def test_is_immutable(self) -> None:
        """Test that ProbeResult cannot be modified."""
        result = ProbeResult.success("scm", "ok")

        with pytest.raises(ValidationError):
            result.message = "changed"

    def test_naive_timestamp_treated_as_utc(self) -> None:
        """Test that naive timestamps are normalized to UTC."""
        result = ProbeResult(id="scm", status="SUCCESS", timestamp=datetime(2024, 1, 1, 8, 0))

        assert result.timestamp.tzinfo is not None
        assert result.timestamp == datetime(2024, 1, 1, 8, 0, tzinfo=UTC)

    def test_json_roundtrip_keeps_status(self) -> None:
        """Test that serialization preserves status and timestamp."""
        result = ProbeResult.error("scm", "GitHub unreachable", version=3)

        restored = ProbeResult.model_validate(result.model_dump(mode="json"))

        assert restored == result
        assert restored.timestamp == result.timestamp
        assert restored.message == "GitHub unreachable"


class TestMergeDetails:
    """Tests for the conditional merge of probe results."""

    def test_adds_new_result(self) -> None:
        result = ProbeResult.success("scm", "ok")

        merged = merge_details({}, result)

        assert merged == {"scm": result}

    def test_equal_result_keeps_existing_record(self) -> None:
        """Test that merging an equal result is idempotent."""
        old_time = datetime(2023, 1, 1, tzinfo=UTC)
        existing = ProbeResult(id="scm", message="valid", status="SUCCESS", timestamp=old_time)
        details = {"scm": existing}

        merged = merge_details(details, ProbeResult.success("scm", "valid"))

        assert merged["scm"] is existing
        assert merged["scm"].timestamp == old_time

    def test_new_message_replaces_record(self) -> None:
        """Test that a changed conclusion with the same status is stored."""
        old_time = datetime(2023, 1, 1, tzinfo=UTC)
        existing = ProbeResult(
            id="deprecation", message="This plugin is NOT deprecated.", status="SUCCESS", timestamp=old_time
        )

        incoming = ProbeResult.success("deprecation", "This plugin is marked as deprecated.")
        merged = merge_details({"deprecation": existing}, incoming)

        assert merged["deprecation"] is incoming
        assert merged["deprecation"].timestamp > old_time

    def test_merge_twice_is_idempotent(self) -> None:
        result = ProbeResult.success("scm", "ok")

        once = merge_details({}, result)
        twice = merge_details(once, ProbeResult.success("scm", "ok"))

        assert twice == once
        assert twice["scm"] is result

    def test_different_version_replaces_record(self) -> None:
        existing = ProbeResult.success("scm", "old logic", version=1)
        incoming = ProbeResult.success("scm", "new logic", version=2)

        merged = merge_details({"scm": existing}, incoming)

        assert merged["scm"] is incoming

    def test_error_is_never_merged(self) -> None:
        """Test that ERROR results never enter the details."""
        existing = ProbeResult.success("scm", "ok")

        assert merge_details({}, ProbeResult.error("scm", "boom")) == {}
        merged = merge_details({"scm": existing}, ProbeResult.error("scm", "boom"))
        assert merged["scm"] is existing

    def test_input_mapping_not_modified(self) -> None:
        details: dict[str, ProbeResult] = {}

        merge_details(details, ProbeResult.success("scm", "ok"))

        assert details == {}


class TestPlugin:
    """Tests for Plugin model."""

    def test_add_details_merges_in_place(self, sample_plugin: Plugin) -> None:
        first = ProbeResult.success("scm", "ok")
        sample_plugin.add_details(first)
        sample_plugin.add_details(ProbeResult.success("scm", "ok"))
        sample_plugin.add_details(ProbeResult.error("jenkinsfile", "no clone"))

        assert sample_plugin.details == {"scm": first}
        assert sample_plugin.details["scm"] is first

    def test_with_details_returns_copy(self, sample_plugin: Plugin) -> None:
        result = ProbeResult.success("scm", "ok")

        updated = sample_plugin.with_details({"scm": result})

        assert updated.details == {"scm": result}
        assert sample_plugin.details == {}
        assert updated.name == sample_plugin.name

    def test_latest_result_timestamp(self, probed_plugin: Plugin) -> None:
        latest = max(r.timestamp for r in probed_plugin.details.values())

        assert probed_plugin.latest_result_timestamp() == latest
        assert Plugin(name="empty").latest_result_timestamp() is None


class TestAggregation:
    """Tests for weighted aggregation helpers."""

    def test_round_half_up(self) -> None:
        assert round_half_up(66.5) == 67
        assert round_half_up(0.5) == 1
        assert round_half_up(66.49) == 66

    def test_weighted_mean_zero_weight(self) -> None:
        """Test that a total weight of zero yields 0."""
        assert weighted_mean([]) == 0
        assert weighted_mean([(100, 0.0), (80, 0.0)]) == 0

    def test_weighted_mean_bounded(self) -> None:
        """Test that aggregates of values in [0, 100] stay in [0, 100]."""
        rng = random.Random(42)
        for _ in range(500):
            pairs = [(rng.randint(0, 100), rng.random()) for _ in range(rng.randint(1, 6))]
            assert 0 <= weighted_mean(pairs) <= 100


class TestScoreModels:
    """Tests for ScoreResult and Score models."""

    def test_score_result_rejects_weight_above_one(self) -> None:
        with pytest.raises(ValidationError):
            ScoreResult(key="adoption", value=100, weight=1.5)

    def test_score_result_equality_by_key(self) -> None:
        assert ScoreResult(key="adoption", value=100, weight=0.8) == ScoreResult(
            key="adoption", value=0, weight=0.1
        )
        assert len({ScoreResult(key="a", value=1, weight=1), ScoreResult(key="a", value=2, weight=1)}) == 1

    def test_component_result_bounds(self) -> None:
        with pytest.raises(ValidationError):
            ScoringComponentResult(value=101, weight=1.0)
        with pytest.raises(ValidationError):
            ScoringComponentResult(value=50, weight=-0.1)

    def test_incremental_aggregation_example(self) -> None:
        """Test the documented 100 -> 67 -> 78 aggregation sequence."""
        score = Score(plugin_name="mailer")

        score.add_detail(ScoreResult(key="a", value=100, weight=0.4))
        assert score.value == 100

        score.add_detail(ScoreResult(key="b", value=0, weight=0.2))
        assert score.value == 67

        score.add_detail(ScoreResult(key="c", value=100, weight=0.3))
        assert score.value == 78

    def test_zero_weight_scoring_contributes_nothing(self) -> None:
        score = Score(
            plugin_name="mailer",
            details=[
                ScoreResult(key="ignored", value=100, weight=0.0),
                ScoreResult(key="counted", value=40, weight=0.5),
            ],
        )

        assert score.value == 40
        assert len(score.details) == 2

    def test_all_zero_weights_give_zero(self) -> None:
        score = Score(plugin_name="mailer", details=[ScoreResult(key="a", value=100, weight=0.0)])

        assert score.value == 0

    def test_details_unique_by_key(self) -> None:
        score = Score(
            plugin_name="mailer",
            details=[
                ScoreResult(key="a", value=0, weight=1.0),
                ScoreResult(key="a", value=100, weight=1.0),
            ],
        )

        assert len(score.details) == 1
        assert score.get_detail("a").value == 100
        assert score.value == 100

    def test_add_detail_replaces_same_key(self) -> None:
        score = Score(plugin_name="mailer", details=[ScoreResult(key="a", value=0, weight=1.0)])

        score.add_detail(ScoreResult(key="a", value=90, weight=1.0))

        assert len(score.details) == 1
        assert score.value == 90

    def test_value_recomputed_on_load(self) -> None:
        """Test that a stored value is ignored in favour of the details."""
        data = {
            "plugin_name": "mailer",
            "computed_at": (datetime.now(UTC) - timedelta(days=1)).isoformat(),
            "value": 3,
            "details": [{"key": "a", "value": 80.0, "weight": 1.0, "components": [], "version": 1}],
        }

        score = Score.model_validate(data)

        assert score.value == 80
        assert score.get_detail("missing") is None


class TestUpdateCenter:
    """Tests for update-center parsing."""

    def test_parses_catalog_payload(self) -> None:
        payload = {
            "plugins": {
                "mailer": {
                    "name": "mailer",
                    "version": "1.2",
                    "scm": "https://github.com/jenkinsci/mailer-plugin",
                    "releaseTimestamp": "2024-05-01T10:00:00.00Z",
                    "labels": ["adopt-this-plugin"],
                    "popularity": 1000,
                    "requiredCore": "2.361",
                    "defaultBranch": "main",
                    "issueTrackers": [{"type": "github", "viewUrl": "https://x", "reportUrl": "https://y"}],
                    "dependencies": [],
                }
            },
            "deprecations": {"old": {"url": "https://example.com/old"}},
            "warnings": [
                {
                    "id": "SECURITY-1",
                    "name": "mailer",
                    "type": "plugin",
                    "url": "https://example.com/SECURITY-1",
                    "versions": [{"lastVersion": "1.1", "pattern": "1[.]1"}],
                }
            ],
            "core": {"version": "2.400"},
        }

        update_center = UpdateCenter.model_validate(payload)

        mailer = update_center.plugins["mailer"]
        assert mailer.release_timestamp == datetime(2024, 5, 1, 10, 0, tzinfo=UTC)
        assert mailer.default_branch == "main"
        assert mailer.issue_trackers[0].view_url == "https://x"
        assert update_center.deprecations["old"].url == "https://example.com/old"
        assert update_center.warnings_for("mailer")[0].versions[0].last_version == "1.1"

        plugin = mailer.to_plugin()
        assert plugin.name == "mailer"
        assert plugin.details == {}
