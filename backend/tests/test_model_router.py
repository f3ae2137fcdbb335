import pytest

from appia.core.config import Settings
from appia.services.model_router import is_heavy_task, route_model, select_tier


@pytest.mark.parametrize(
    "prompt",
    ["", "hi", "make it blue", "build a dashboard with auth", "x" * 49],
)
def test_short_prompts_after_first_turn_are_cheap(prompt):
    assert select_tier(prompt, has_image=False, is_first_turn=False) == "cheap"


def test_first_turn_is_expensive():
    assert select_tier("hi", is_first_turn=True) == "expensive"


def test_long_heavy_prompt_is_expensive():
    prompt = "please create a comprehensive dashboard application with authentication for admins"
    assert select_tier(prompt) == "expensive"


def test_long_plain_prompt_under_threshold_is_cheap():
    prompt = "change the colour of the footer text to a softer grey"
    assert len(prompt) >= 50
    assert select_tier(prompt) == "cheap"


def test_simple_image_phrase_is_cheap():
    assert select_tier("put this logo in the header", has_image=True) == "cheap"


def test_simple_image_phrase_on_first_turn_is_expensive():
    assert select_tier("put this logo in the header", has_image=True, is_first_turn=True) == "expensive"


def test_other_image_requests_are_expensive():
    assert select_tier("recreate this screenshot", has_image=True) == "expensive"


def test_conjunctions_match_whole_words_only():
    assert is_heavy_task("a and b also c then d") is True
    assert is_heavy_task("standard branding alsoran thence") is False


def test_route_model_uses_patch_budgets():
    settings = Settings()
    expensive = route_model(settings, "hi", is_first_turn=True, patch_mode=True)
    cheap = route_model(settings, "hi", patch_mode=True)

    assert (expensive.tier, expensive.model, expensive.max_tokens) == (
        "expensive",
        settings.model_expensive,
        settings.patch_tokens_expensive,
    )
    assert (cheap.tier, cheap.model, cheap.max_tokens) == ("cheap", settings.model_cheap, settings.patch_tokens_cheap)


def test_route_model_generation_budgets():
    settings = Settings(max_tokens_expensive=1234, max_tokens_cheap=56)
    assert route_model(settings, "hi", is_first_turn=True).max_tokens == 1234
    assert route_model(settings, "hi").max_tokens == 56
