from __future__ import annotations

from pathlib import Path

import pytest

from adoc_batch.core import config_templates
from adoc_batch.core.config_templates import (
    ConfigTemplate,
    ConfigTemplateError,
)
from adoc_batch.render import config as render_config


def test_render_template_round_trips(tmp_path: Path) -> None:
    template = config_templates.get_template("render")
    assert isinstance(template, ConfigTemplate)

    contents = template.read_text()
    assert "[paths]" in contents
    assert "[render]" in contents

    target = tmp_path / "render.toml"
    written = template.write(target)
    assert written == target
    assert target.read_text(encoding="utf-8") == contents

    with pytest.raises(ConfigTemplateError, match="already exists"):
        template.write(target)

    assert template.write(target, overwrite=True) == target


def test_render_template_loads_with_defaults(tmp_path: Path) -> None:
    target = config_templates.get_template("render").write(
        tmp_path / "render.toml"
    )

    result = render_config.load_config(
        config_path=target,
        overrides=render_config.ConfigOverrides(source_dir=tmp_path),
        env={},
        workspace_path=tmp_path / "ws",
    )

    assert result.config.backends == ("html5",)


def test_iter_templates_returns_registered_templates() -> None:
    names = {template.name for template in config_templates.iter_templates()}
    assert names == {"render"}


@pytest.mark.parametrize("unknown", ["missing", "", "convert_markdown"])
def test_get_template_unknown_raises(unknown: str) -> None:
    with pytest.raises(ConfigTemplateError):
        config_templates.get_template(unknown)
