"""Built-in per-mode layout defaults."""

from __future__ import annotations

from aical.models.layout import AppMode, LabelStyle, ModeConfig

_BASE = ModeConfig(
    default_label_style=LabelStyle.DEFAULT,
    default_title_scale=7.6,
    default_card_scale=4.2,
    default_label_scale=1.0,
    default_title_y=0.08,
)

_MODE_DEFAULTS: dict[AppMode, ModeConfig] = {
    AppMode.SCAN: _BASE,
    AppMode.COLLAGE: _BASE,
    AppMode.NUTRITION: _BASE.model_copy(
        update={
            "default_label_style": LabelStyle.PILL,
            "default_card_scale": 1.0,
            "default_card_y": 0.8,
            "card_background_color": "#000000",
            "card_text_color": "#FFFFFF",
        }
    ),
}


def default_mode_config(mode: AppMode) -> ModeConfig:
    return _MODE_DEFAULTS[AppMode(mode)]


def merge_mode_config(mode: AppMode, overrides: ModeConfig | None) -> ModeConfig:
    """Mode defaults with every field explicitly set in ``overrides`` applied on top."""
    base = default_mode_config(mode)
    if overrides is None:
        return base
    return base.model_copy(update=overrides.model_dump(exclude_unset=True))
