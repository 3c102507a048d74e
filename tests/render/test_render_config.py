from __future__ import annotations

from pathlib import Path

import pytest

from adoc_batch.render import config as cfg
from adoc_batch.render.options import SafeMode


def _write_config(path: Path, body: str) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(body.strip() + "\n", encoding="utf-8")
    return path


def test_defaults_use_workspace_output(tmp_path):
    workspace_root = tmp_path / "ws"
    source = tmp_path / "docs"

    result = cfg.load_config(
        overrides=cfg.ConfigOverrides(source_dir=source),
        env={},
        workspace_path=workspace_root,
    )

    config = result.config
    assert result.config_path is None
    assert config.source_dir == source.resolve()
    assert config.output_dir == result.layout.path_for("rendered")
    assert config.backends == ("html5",)
    assert config.extensions == ("adoc", "asciidoc", "ad", "asc")
    assert config.safe_mode is SafeMode.UNSAFE
    assert config.base_dir_strategy is cfg.BaseDirStrategy.SOURCE_DIR
    assert config.fail_fast is True
    assert config.log_level == "INFO"


def test_source_dir_is_required(tmp_path):
    with pytest.raises(cfg.RenderConfigError, match="source directory"):
        cfg.load_config(env={}, workspace_path=tmp_path / "ws")


def test_reads_config_file_relative_to_its_directory(tmp_path):
    config_file = _write_config(
        tmp_path / "project" / "render.toml",
        """
        [paths]
        source_dir = "src/docs/asciidoc"
        output_dir = "build/docs"

        [render]
        backends = ["HTML5", "docbook"]
        extensions = [".ADOC"]
        safe_mode = "server"
        base_dir = "source-file"
        sources = ["*.adoc"]
        fail_fast = false
        log_documents = true

        [attributes]
        toc = "left"
        icons = "font"

        [resources]
        include = ["images/**"]
        backends = ["html5"]

        [logging]
        level = "debug"
        """,
    )

    result = cfg.load_config(
        config_path=config_file, env={}, workspace_path=tmp_path / "ws"
    )

    config = result.config
    project = (tmp_path / "project").resolve()
    assert result.config_path == config_file
    assert config.source_dir == project / "src" / "docs" / "asciidoc"
    assert config.output_dir == project / "build" / "docs"
    assert config.backends == ("html5", "docbook")
    assert config.extensions == ("adoc",)
    assert config.safe_mode is SafeMode.SERVER
    assert config.base_dir_strategy is cfg.BaseDirStrategy.SOURCE_FILE
    assert config.sources == ("*.adoc",)
    assert config.fail_fast is False
    assert config.log_documents is True
    assert dict(config.attributes) == {"toc": "left", "icons": "font"}
    assert config.resources == ("images/**",)
    assert config.resource_backends == ("html5",)
    assert config.log_level == "DEBUG"


def test_precedence_cli_over_env_over_file(tmp_path):
    workspace_root = tmp_path / "ws"
    _write_config(
        workspace_root / "config" / cfg.CONFIG_FILENAME,
        """
        [paths]
        source_dir = "/file/src"
        output_dir = "/file/out"

        [render]
        backends = ["docbook"]
        safe_mode = "secure"

        [attributes]
        toc = "left"
        """,
    )
    env = {
        "ADOC_BATCH_RENDER_SOURCE_DIR": "/env/src",
        "ADOC_BATCH_RENDER_BACKENDS": "xhtml11, html5",
        "ADOC_BATCH_RENDER_SAFE_MODE": "safe",
    }

    result = cfg.load_config(
        overrides=cfg.ConfigOverrides(
            output_dir=Path("/cli/out"),
            attributes={"toc": "right", "sectnums": ""},
        ),
        env=env,
        workspace_path=workspace_root,
    )

    config = result.config
    assert config.source_dir == Path("/env/src")
    assert config.output_dir == Path("/cli/out")
    assert config.backends == ("xhtml11", "html5")
    assert config.safe_mode is SafeMode.SAFE
    assert dict(config.attributes) == {"toc": "right", "sectnums": ""}


def test_explicit_base_dir_path(tmp_path):
    config_file = _write_config(
        tmp_path / "render.toml",
        """
        [paths]
        source_dir = "src"

        [render]
        base_dir = "shared"
        """,
    )

    config = cfg.load_config(
        config_path=config_file, env={}, workspace_path=tmp_path / "ws"
    ).config

    assert config.base_dir_strategy is cfg.BaseDirStrategy.EXPLICIT
    assert config.base_dir == (tmp_path / "shared").resolve()
    assert config.base_dir_for(tmp_path / "src" / "a.adoc") == config.base_dir


def test_unknown_key_is_rejected(tmp_path):
    config_file = _write_config(
        tmp_path / "render.toml",
        """
        [render]
        colour = "blue"
        """,
    )

    with pytest.raises(cfg.RenderConfigError, match="render.colour"):
        cfg.load_config(
            config_path=config_file, env={}, workspace_path=tmp_path / "ws"
        )


def test_invalid_safe_mode_is_rejected(tmp_path):
    with pytest.raises(cfg.RenderConfigError, match="Unknown safe mode"):
        cfg.load_config(
            overrides=cfg.ConfigOverrides(source_dir=tmp_path),
            env={"ADOC_BATCH_RENDER_SAFE_MODE": "paranoid"},
            workspace_path=tmp_path / "ws",
        )


def test_missing_explicit_config_file(tmp_path):
    with pytest.raises(cfg.RenderConfigError, match="not found"):
        cfg.load_config(
            config_path=tmp_path / "absent.toml",
            env={},
            workspace_path=tmp_path / "ws",
        )


def test_config_env_pointing_nowhere_fails(tmp_path):
    with pytest.raises(cfg.RenderConfigError, match="not found"):
        cfg.load_config(
            env={"ADOC_BATCH_RENDER_CONFIG": str(tmp_path / "nope.toml")},
            workspace_path=tmp_path / "ws",
        )


def test_backends_must_be_a_list(tmp_path):
    config_file = _write_config(
        tmp_path / "render.toml",
        """
        [paths]
        source_dir = "src"

        [render]
        backends = "html5"
        """,
    )

    with pytest.raises(cfg.RenderConfigError, match="list of strings"):
        cfg.load_config(
            config_path=config_file, env={}, workspace_path=tmp_path / "ws"
        )


def test_output_dir_for_single_and_multiple_backends(tmp_path):
    single = cfg.RenderConfig(source_dir=tmp_path, output_dir=tmp_path / "o")
    multi = cfg.RenderConfig(
        source_dir=tmp_path,
        output_dir=tmp_path / "o",
        backends=("html5", "docbook"),
    )
    forced = cfg.RenderConfig(
        source_dir=tmp_path,
        output_dir=tmp_path / "o",
        separate_output_dirs=True,
    )

    assert single.output_dir_for("html5") == tmp_path / "o"
    assert multi.output_dir_for("docbook") == tmp_path / "o" / "docbook"
    assert forced.output_dir_for("html5") == tmp_path / "o" / "html5"


def test_languages_from_file_env_and_cli(tmp_path):
    config_file = _write_config(
        tmp_path / "render.toml",
        """
        [paths]
        source_dir = "src"

        [render]
        languages = ["en", "es", "en"]
        """,
    )

    from_file = cfg.load_config(
        config_path=config_file, env={}, workspace_path=tmp_path / "ws"
    ).config
    from_env = cfg.load_config(
        config_path=config_file,
        env={"ADOC_BATCH_RENDER_LANGUAGES": "fr, de"},
        workspace_path=tmp_path / "ws",
    ).config
    from_cli = cfg.load_config(
        config_path=config_file,
        overrides=cfg.ConfigOverrides(languages=["pt_BR"]),
        env={"ADOC_BATCH_RENDER_LANGUAGES": "fr"},
        workspace_path=tmp_path / "ws",
    ).config

    assert from_file.languages == ("en", "es")
    assert from_env.languages == ("fr", "de")
    assert from_cli.languages == ("pt_BR",)


@pytest.mark.parametrize("bad", ["..", "en/us", "."])
def test_language_must_be_a_plain_directory_name(tmp_path, bad):
    with pytest.raises(cfg.RenderConfigError, match="plain directory name"):
        cfg.load_config(
            overrides=cfg.ConfigOverrides(source_dir=tmp_path, languages=[bad]),
            env={},
            workspace_path=tmp_path / "ws",
        )


def test_language_aware_directories(tmp_path):
    config = cfg.RenderConfig(
        source_dir=tmp_path / "src",
        output_dir=tmp_path / "o",
        backends=("html5", "docbook"),
        languages=("en",),
    )

    assert config.source_root_for("en") == tmp_path / "src" / "en"
    assert config.source_root_for() == tmp_path / "src"
    assert config.output_dir_for("docbook", "en") == (
        tmp_path / "o" / "docbook" / "en"
    )
    assert config.base_dir_for(tmp_path / "src" / "en" / "a.adoc", "en") == (
        tmp_path / "src" / "en"
    )
