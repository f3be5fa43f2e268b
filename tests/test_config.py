import pytest

from coursereg.config import EngineConfig


def test_defaults_and_keys() -> None:
    config = EngineConfig()
    assert (config.min_credits, config.max_credits) == (16, 27)
    assert config.draft_key == "course_reg_draft_v1"
    assert config.submission_key == "course_reg_draft_v1_submitted"


def test_equal_bounds_are_allowed() -> None:
    config = EngineConfig(min_credits=20, max_credits=20)
    assert config.min_credits == config.max_credits


@pytest.mark.parametrize(
    ("kwargs", "message"),
    [
        ({"min_credits": -1}, "non-negative"),
        ({"min_credits": 20, "max_credits": 10}, "at least min_credits"),
        ({"key_prefix": "  "}, "must not be empty"),
    ],
)
def test_invalid_config_raises(kwargs: dict[str, object], message: str) -> None:
    with pytest.raises(ValueError, match=message):
        EngineConfig(**kwargs)  # type: ignore[arg-type]
