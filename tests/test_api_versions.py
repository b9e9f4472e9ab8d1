import pytest

from core import api_versions as av
from core.domain.version import GoVersion


def v(text: str) -> GoVersion:
    return GoVersion.parse(text)


@pytest.mark.parametrize(
    ("version", "expected"),
    [
        ("16.9.0", av.V3),
        ("16.10.0", av.V4),
        ("18.2.0", av.V4),
    ],
)
def test_agents_media_type_switches_at_16_10(version, expected):
    assert av.agents_media_type(v(version)) == expected


@pytest.mark.parametrize(
    ("version", "expected"),
    [
        ("16.6.9", av.V1),
        ("16.7.0", av.V2),
        ("16.9.0", av.V2),
        ("16.10.0", av.V3),
        ("17.3.0", av.V3),
        ("17.4.0", av.V4),
        ("17.11.0", av.V4),
        ("17.12.0", av.V5),
        ("18.2.0", av.V5),
    ],
)
def test_pipeline_media_type_tiers(version, expected):
    assert av.pipeline_media_type(v(version)) == expected


def test_pause_and_schedule_use_text_plain_before_18_2():
    old, new = v("18.1.0"), v("18.2.0")
    assert av.pause_media_type(old) == av.TEXT_PLAIN
    assert av.schedule_media_type(old) == av.TEXT_PLAIN
    assert av.pause_media_type(new) == av.V1
    assert av.schedule_media_type(new) == av.V1


def test_dashboard_missing_before_15_3():
    assert av.dashboard_media_type(v("15.2.0")) is None
    assert av.dashboard_media_type(v("15.3.0")) == av.V1


def test_feature_support_thresholds():
    assert not av.authorization_supported(v("17.4.0"))
    assert av.authorization_supported(v("17.5.0"))
    assert not av.elastic_agents_supported(v("18.1.0"))
    assert av.elastic_agents_supported(v("18.2.0"))
    assert av.analytics_supported(v("18.2.0"))


def test_media_types_bundle_renders_missing_as_dash():
    media = av.MediaTypes.for_version(v("15.1.0"))
    rows = dict(media.as_rows())
    assert rows["dashboard"] == "-"
    assert rows["agents"] == av.V3
    assert av.version_media_type() == av.V1


@pytest.mark.parametrize(
    ("version", "expected"),
    [
        ("16.6.0", None),
        ("16.7.0", av.V1),
        ("16.11.0", av.V1),
        ("16.12.0", av.V2),
        ("17.8.0", av.V2),
        ("17.9.0", av.V3),
        ("18.1.0", av.V3),
        ("18.2.0", av.V4),
        ("19.1.0", av.V4),
    ],
)
def test_plugin_info_media_type_tiers(version, expected):
    assert av.plugin_info_media_type(v(version)) == expected


@pytest.mark.parametrize(
    ("version", "expected"),
    [
        ("17.4.0", None),
        ("17.5.0", av.V1),
        ("18.2.0", av.V1),
    ],
)
def test_auth_config_media_type_tiers(version, expected):
    assert av.auth_config_media_type(v(version)) == expected
